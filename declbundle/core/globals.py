"""Symbols of the implicit global scope."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from declbundle.program.base import TypeOracle
    from declbundle.program.models import Symbol


def get_global_symbols(oracle: TypeOracle) -> list[Symbol]:
    """Everything visible in the global scope, for name-collision checks.

    The scope is read at the first file without an implicit default library,
    or else the first script (non-module) file. Not fully reliable: globals
    injected by test runners or runtime typings show up too.
    """
    source_files = oracle.source_files()
    global_file = next((sf for sf in source_files if sf.has_no_default_lib), None)
    if global_file is None:
        global_file = next((sf for sf in source_files if not sf.is_external_module), None)
    if global_file is None:
        return []
    return oracle.scope_symbols_at(global_file)
