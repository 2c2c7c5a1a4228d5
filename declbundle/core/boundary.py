"""External boundary: symbols wildcard re-exported from outside the project."""

from __future__ import annotations

from typing import TYPE_CHECKING

from declbundle.core.models import ExternalStarExports
from declbundle.core.modules import iter_star_export_declarations, resolve_star_export_module

if TYPE_CHECKING:
    from declbundle.program.base import TypeOracle
    from declbundle.program.models import Symbol


def get_external_star_exports(oracle: TypeOracle, entry_symbol: Symbol) -> ExternalStarExports:
    """Collect what the entry module wildcard re-exports from external libraries.

    Internal wildcard re-exports are followed, since they get flattened into
    the bundle. External ones are recorded so the bundle can emit them as
    ``export * from "lib"`` and leave their symbols alone.
    """
    result = ExternalStarExports()
    visited: set[Symbol] = set()

    def recurse(module_symbol: Symbol) -> None:
        if module_symbol in visited:
            return
        visited.add(module_symbol)

        for declaration in iter_star_export_declarations(module_symbol):
            resolved = resolve_star_export_module(oracle, declaration)

            if resolved.is_external_library_import:
                result.module_names.add(resolved.module_name)
                result.symbols.update(oracle.exports_of(resolved.module_symbol))
            else:
                recurse(resolved.module_symbol)

    recurse(entry_symbol)
    return result
