"""Module resolution for wildcard re-exports."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from declbundle.core.exceptions import (
    ModuleResolutionError,
    ModuleSpecifierError,
    NotAModuleError,
)
from declbundle.core.models import ResolvedModule
from declbundle.program.models import EXPORT_STAR, Node, NodeKind, Symbol
from declbundle.program.syntax import get_module_specifier, is_relative_module_name

if TYPE_CHECKING:
    from declbundle.program.base import TypeOracle


def iter_star_export_declarations(module_symbol: Symbol) -> Iterator[Node]:
    """Yield the ``export * from "..."`` declarations of a module."""
    if not module_symbol.exports:
        return
    star = module_symbol.exports.get(EXPORT_STAR)
    if star is None:
        return
    for declaration in star.declarations:
        if declaration.kind == NodeKind.EXPORT_DECLARATION:
            yield declaration


def resolve_star_export_module(oracle: TypeOracle, declaration: Node) -> ResolvedModule:
    """Resolve the module a wildcard re-export points at.

    Raises:
        ModuleSpecifierError: the declaration has no module specifier
        ModuleResolutionError: the specifier cannot be resolved
        NotAModuleError: the specifier names something that is not a module
    """
    specifier = get_module_specifier(declaration)
    if specifier is None or specifier.text is None:
        raise ModuleSpecifierError(
            f"Could not get module specifier from export declaration at "
            f"{declaration.get_source_file().file_name}:{declaration.start}"
        )
    module_name = specifier.text

    resolved = oracle.resolve_module_name(module_name, declaration.get_source_file())
    if resolved is not None:
        source_file = oracle.get_source_file(resolved.resolved_file_name)
        if source_file is None:
            raise ModuleResolutionError(f"Could not locate file: {resolved.resolved_file_name}")
        module_symbol = oracle.symbol_at(source_file)
        if module_symbol is None:
            raise NotAModuleError(f"File is not a module: {resolved.resolved_file_name}")

        return ResolvedModule(
            module_name=module_name,
            file_name=resolved.resolved_file_name,
            source_file=source_file,
            module_symbol=module_symbol,
            is_external_library_import=resolved.is_external_library_import,
        )

    # Ambient ``declare module "name"`` blocks (one library file may declare
    # several) have no file-level resolution.
    if is_relative_module_name(module_name):
        raise ModuleResolutionError(f"Could not resolve module: {module_name}")

    module_symbol = oracle.symbol_at(specifier)
    if module_symbol is None or not module_symbol.is_value_module or not module_symbol.declarations:
        raise NotAModuleError(f"Could not resolve symbol of module: {module_name}")

    source_file = module_symbol.declarations[0].get_source_file()
    return ResolvedModule(
        module_name=module_name,
        file_name=source_file.file_name,
        source_file=source_file,
        module_symbol=module_symbol,
        is_external_library_import=oracle.is_external_library_file(source_file),
    )
