"""Collector that runs one analysis pass over an entry file."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from declbundle.core.boundary import get_external_star_exports
from declbundle.core.exceptions import EntryModuleError
from declbundle.core.exports import WarningCallback, discover_exports
from declbundle.core.globals import get_global_symbols
from declbundle.core.models import CollectionResult, ExportEntry
from declbundle.core.references import ReferenceExtractor, resolve_terminal

if TYPE_CHECKING:
    from declbundle.program.base import TypeOracle
    from declbundle.program.models import SourceFile, Symbol

logger = logging.getLogger(__name__)


class SymbolCollector:
    """Decides which symbols a bundled declaration file needs, and in what order."""

    def __init__(self, oracle: TypeOracle, on_warning: WarningCallback | None = None) -> None:
        """Initialize with a type oracle and an optional warning sink.

        Without a sink, warnings go to this module's logger.
        """
        self._oracle = oracle
        self._on_warning = on_warning or logger.warning
        self._references = ReferenceExtractor(oracle)

    def collect(self, entry_file: SourceFile) -> CollectionResult:
        """Collect exports, their reference trees, external modules and globals.

        Runs in this order:
        1. External boundary: what ``export *`` pulls in from libraries
        2. Export discovery: entry exports in source order, minus the boundary
        3. Alias resolution and reference extraction, once per export
        4. Global scope symbols, for later collision checks

        Raises:
            EntryModuleError: the entry file has no module symbol
            ModuleSpecifierError, ModuleResolutionError: a wildcard re-export
                cannot be followed
        """
        warnings: list[str] = []

        def warn(message: str) -> None:
            warnings.append(message)
            self._on_warning(message)

        entry_symbol = self._oracle.symbol_at(entry_file)
        if entry_symbol is None:
            raise EntryModuleError(f"No module symbol for entry file {entry_file.file_name}")

        external = get_external_star_exports(self._oracle, entry_symbol)
        entry_exports = discover_exports(
            self._oracle, entry_file, entry_symbol, external.symbols, warn
        )
        export_symbols = self._get_export_symbols(entry_exports, warn)

        return CollectionResult(
            entry_file=entry_file,
            external_star_module_names=external.module_names,
            export_symbols=export_symbols,
            global_symbols=get_global_symbols(self._oracle),
            warnings=warnings,
        )

    def collect_file(self, file_name: str) -> CollectionResult:
        """Collect for an entry file looked up by name."""
        entry_file = self._oracle.get_source_file(file_name)
        if entry_file is None:
            raise EntryModuleError(f"Entry file '{file_name}' is not part of the program")
        return self.collect(entry_file)

    def _get_export_symbols(
        self, module_exports: list[Symbol], warn: WarningCallback
    ) -> dict[Symbol, ExportEntry]:
        export_symbols: dict[Symbol, ExportEntry] = {}

        for export_symbol in module_exports:
            orig_symbol = resolve_terminal(self._oracle, export_symbol)

            if not orig_symbol.declarations:
                warn(f"Symbol {export_symbol.name} does not have any declaration")
                continue

            export_symbols[export_symbol] = (
                orig_symbol,
                self._references.get_references(orig_symbol),
            )

        return export_symbols
