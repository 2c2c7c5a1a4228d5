"""JSON-serializable views of collection results."""

from __future__ import annotations

from typing import Any

from declbundle.core.models import CollectionResult, Reference
from declbundle.program.models import Symbol, SymbolFlags


def flag_names(flags: SymbolFlags) -> list[str]:
    return [f.name.lower() for f in SymbolFlags if f.name and f.value and f in flags]


def symbol_to_dict(symbol: Symbol) -> dict[str, Any]:
    """Convert a Symbol to a JSON-serializable dict."""
    location: dict[str, Any] = {"file": None, "start": None}
    if symbol.declarations:
        declaration = symbol.declarations[0]
        location = {"file": declaration.get_source_file().file_name, "start": declaration.start}
    return {
        "name": symbol.name,
        "flags": flag_names(symbol.flags),
        "declarations": len(symbol.declarations),
        **location,
    }


def is_depth_limited(depth: int, max_depth: int | None) -> bool:
    """Whether a reference at ``depth`` (0 for top level) is the last level shown.

    ``max_depth`` counts levels, so ``max_depth=1`` shows only top-level references.
    """
    return max_depth is not None and depth + 1 >= max_depth


def reference_to_dict(ref: Reference, depth: int = 0, max_depth: int | None = None) -> dict[str, Any]:
    """Convert a Reference subtree to a JSON-serializable dict."""
    truncated = is_depth_limited(depth, max_depth)
    return {
        "name": ref.label,
        "kind": "import_type" if ref.is_import_type else "identifier",
        "declaration_index": ref.declaration_index,
        "file": ref.ref.get_source_file().file_name,
        "start": ref.ref.start,
        "depth": depth,
        "truncated": truncated and bool(ref.subrefs),
        "children": (
            []
            if truncated
            else [reference_to_dict(s, depth + 1, max_depth) for s in ref.subrefs]
        ),
    }


def export_to_dict(
    result: CollectionResult, export_symbol: Symbol, max_depth: int | None = None
) -> dict[str, Any]:
    orig_symbol, refs = result.export_symbols[export_symbol]
    return {
        "export": export_symbol.name,
        "original": symbol_to_dict(orig_symbol),
        "is_alias": orig_symbol is not export_symbol,
        "references": [reference_to_dict(r, 0, max_depth) for r in refs],
    }


def result_to_dict(result: CollectionResult, max_depth: int | None = None) -> dict[str, Any]:
    """Convert a whole CollectionResult to a JSON-serializable dict."""
    return {
        "entry": result.entry_file.file_name,
        "exports": [export_to_dict(result, s, max_depth) for s in result.export_symbols],
        "external_modules": sorted(result.external_star_module_names),
        "globals": result.global_names,
        "warnings": result.warnings,
    }
