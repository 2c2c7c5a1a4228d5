"""Alias resolution and type-level reference extraction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from declbundle.core.models import Reference
from declbundle.program.models import MENTION_KINDS, NodeKind
from declbundle.program.syntax import find_first_child

if TYPE_CHECKING:
    from declbundle.program.base import TypeOracle
    from declbundle.program.models import Node, Symbol


def resolve_terminal(oracle: TypeOracle, symbol: Symbol) -> Symbol:
    """Resolve an alias to its terminal symbol. Terminal symbols map to themselves."""
    if symbol.is_alias:
        return oracle.resolve_alias(symbol)
    return symbol


class ReferenceExtractor:
    """Finds the symbols an exported symbol's declarations mention, recursively."""

    def __init__(self, oracle: TypeOracle) -> None:
        self._oracle = oracle

    def get_references(self, symbol: Symbol) -> list[Reference]:
        """Reference tree of a terminal symbol.

        Declarations from external or default libraries are never expanded.
        Cycles of any length stop at the first repeated symbol on the
        current path, which yields an empty subreference list.
        """
        return self._references(symbol, set())

    def _references(self, symbol: Symbol, in_progress: set[Symbol]) -> list[Reference]:
        if not symbol.declarations:
            return []

        # Merged and overloaded declarations share a file.
        source_file = symbol.declarations[0].get_source_file()
        if self._oracle.is_external_library_file(
            source_file
        ) or self._oracle.is_default_library_file(source_file):
            return []

        in_progress.add(symbol)
        refs: list[Reference] = []

        for declaration_index, declaration in enumerate(symbol.declarations):
            if declaration.kind == NodeKind.SOURCE_FILE:
                continue

            for node in declaration.iter_descendants():
                if node.kind in MENTION_KINDS:
                    identifier = find_first_child(node, NodeKind.IDENTIFIER)
                    if identifier is not None:
                        refs.append(
                            Reference(
                                declaration_index=declaration_index,
                                ref=identifier,
                                subrefs=self._subreferences(identifier, in_progress),
                            )
                        )
                elif node.kind == NodeKind.IMPORT_TYPE:
                    refs.append(Reference(declaration_index=declaration_index, ref=node))

        in_progress.discard(symbol)
        return refs

    def _subreferences(self, identifier: Node, in_progress: set[Symbol]) -> list[Reference]:
        ref_symbol = self._oracle.symbol_at(identifier)

        if ref_symbol is None or ref_symbol in in_progress:
            return []

        ref_symbol = resolve_terminal(self._oracle, ref_symbol)

        if ref_symbol in in_progress or not ref_symbol.declarations:
            return []

        return self._references(ref_symbol, in_progress)
