"""Data models for a collection pass."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from declbundle.program.models import DEFAULT_EXPORT, Node, NodeKind, SourceFile, Symbol


@dataclass
class Reference:
    """A type-level mention inside one declaration of a symbol."""

    # Merged symbols keep separate references per declaration.
    declaration_index: int
    ref: Node
    subrefs: list[Reference] = field(default_factory=list)

    @property
    def is_import_type(self) -> bool:
        return self.ref.kind == NodeKind.IMPORT_TYPE

    @property
    def label(self) -> str:
        return self.ref.text or self.ref.kind.value

    def __iter__(self) -> Iterator[Reference]:
        """Pre-order traversal."""
        yield self
        for subref in self.subrefs:
            yield from subref

    def __len__(self) -> int:
        """Total references in subtree."""
        return 1 + sum(len(s) for s in self.subrefs)


@dataclass
class ResolvedModule:
    """Target of a wildcard re-export."""

    module_name: str
    file_name: str
    source_file: SourceFile
    module_symbol: Symbol
    is_external_library_import: bool


@dataclass
class ExternalStarExports:
    """Symbols and module names reached through external wildcard re-exports."""

    symbols: set[Symbol] = field(default_factory=set)
    module_names: set[str] = field(default_factory=set)


ExportEntry = tuple[Symbol, list[Reference]]


@dataclass
class CollectionResult:
    """Everything one collection pass found for an entry file."""

    entry_file: SourceFile
    external_star_module_names: set[str]
    export_symbols: dict[Symbol, ExportEntry]
    global_symbols: list[Symbol]
    warnings: list[str] = field(default_factory=list)

    orig_symbols: set[Symbol] = field(init=False)
    exports_by_original: dict[Symbol, list[Symbol]] = field(init=False)
    export_names: set[str] = field(init=False)
    global_names: list[str] = field(init=False)

    def __post_init__(self) -> None:
        self.orig_symbols = set()
        self.exports_by_original = {}
        for export_symbol, (orig_symbol, _) in self.export_symbols.items():
            self.orig_symbols.add(orig_symbol)
            self.exports_by_original.setdefault(orig_symbol, []).append(export_symbol)

        self.export_names = {
            s.name for s in self.export_symbols if s.name != DEFAULT_EXPORT
        }
        self.global_names = [s.name for s in self.global_symbols]

    def ordered_exports(self) -> list[Symbol]:
        return list(self.export_symbols)

    def original_of(self, export_symbol: Symbol) -> Symbol:
        return self.export_symbols[export_symbol][0]

    def references_of(self, export_symbol: Symbol) -> list[Reference]:
        return self.export_symbols[export_symbol][1]

    def find_export(self, name: str) -> Symbol | None:
        """Export symbol with the given name, if any."""
        for symbol in self.export_symbols:
            if symbol.name == name:
                return symbol
        return None

    def __repr__(self) -> str:
        return (
            f"CollectionResult(entry={self.entry_file.file_name}, "
            f"exports={len(self.export_symbols)}, "
            f"external_modules={len(self.external_star_module_names)}, "
            f"globals={len(self.global_symbols)}, warnings={len(self.warnings)})"
        )
