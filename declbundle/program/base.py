"""Protocol for type-checking oracles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from declbundle.program.models import Node, ResolvedModuleName, SourceFile, Symbol


class TypeOracle(Protocol):
    """Query capabilities the collector needs from a checked program."""

    def symbol_at(self, node: Node) -> Symbol | None:
        """Symbol a node (identifier, file, module specifier) refers to."""
        ...

    def resolve_alias(self, symbol: Symbol) -> Symbol:
        """Follow an alias chain to its terminal symbol."""
        ...

    def exports_of(self, module_symbol: Symbol) -> list[Symbol]:
        """Exports of a module, wildcard-derived exports last."""
        ...

    def scope_symbols_at(self, source_file: SourceFile) -> list[Symbol]:
        """Every symbol visible in scope at a file, unfiltered."""
        ...

    def resolve_module_name(
        self, module_name: str, containing_file: SourceFile
    ) -> ResolvedModuleName | None:
        """Resolve a module specifier as written in a file."""
        ...

    def get_source_file(self, file_name: str) -> SourceFile | None:
        """Look up a program file by name."""
        ...

    def source_files(self) -> list[SourceFile]:
        """All files of the program, in program order."""
        ...

    def is_external_library_file(self, source_file: SourceFile) -> bool:
        """Whether a file comes from an installed third-party package."""
        ...

    def is_default_library_file(self, source_file: SourceFile) -> bool:
        """Whether a file is part of the built-in standard library."""
        ...
