"""Export discovery in original declaration order."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from declbundle.core.modules import iter_star_export_declarations, resolve_star_export_module
from declbundle.program.models import EXPORT_STAR, GLOBAL_THIS

if TYPE_CHECKING:
    from declbundle.program.base import TypeOracle
    from declbundle.program.models import Node, SourceFile, Symbol

WarningCallback = Callable[[str], None]


def get_exports_positions(oracle: TypeOracle, entry_symbol: Symbol) -> dict[Symbol, int]:
    """Map each export of the entry module to a text offset in the entry file.

    The oracle lists wildcard-derived exports last, so this index is what
    restores source order. Own and aliased exports use the offset of their
    first declaration. Symbols exposed through an internal ``export *`` use
    the offset of the entry-file statement that started the chain, however
    deep the nesting goes.
    """
    positions: dict[Symbol, int] = {}

    if entry_symbol.exports:
        for name, symbol in entry_symbol.exports.items():
            if name == EXPORT_STAR or not symbol.declarations:
                continue
            positions[symbol] = symbol.declarations[0].start

    visited: set[Symbol] = set()

    def internal_star_exports(module_symbol: Symbol, anchor: Node | None) -> None:
        if module_symbol in visited:
            return
        visited.add(module_symbol)

        for declaration in iter_star_export_declarations(module_symbol):
            resolved = resolve_star_export_module(oracle, declaration)
            if resolved.is_external_library_import:
                continue

            entry_declaration = anchor or declaration
            for symbol in oracle.exports_of(resolved.module_symbol):
                positions[symbol] = entry_declaration.start

            internal_star_exports(resolved.module_symbol, entry_declaration)

    internal_star_exports(entry_symbol, None)
    return positions


def discover_exports(
    oracle: TypeOracle,
    entry_file: SourceFile,
    entry_symbol: Symbol,
    excludes: set[Symbol],
    on_warning: WarningCallback,
) -> list[Symbol]:
    """Exports of the entry module in source order, minus ``excludes``.

    A non-module entry file is the global scope: everything visible there
    is returned as-is.
    """
    if entry_symbol.name == GLOBAL_THIS:
        return oracle.scope_symbols_at(entry_file)

    symbols = [s for s in oracle.exports_of(entry_symbol) if s not in excludes]
    positions = get_exports_positions(oracle, entry_symbol)

    for symbol in symbols:
        # Symbols without declarations are reported once, when the collector skips them.
        if symbol not in positions and symbol.declarations:
            on_warning(f"export position not found for {symbol.name}")

    # Unpositioned exports go last, keeping the oracle's relative order.
    return sorted(
        symbols,
        key=lambda s: (0, positions[s]) if s in positions else (1, 0),
    )
