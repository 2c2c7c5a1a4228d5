"""Load a program snapshot (JSON) into an in-memory oracle.

A snapshot is what a compiler plugin dumps after type checking:

    {
      "files": [
        {
          "fileName": "src/index.ts",
          "module": true,
          "externalLibrary": false,
          "defaultLibrary": false,
          "noDefaultLib": false,
          "statements": [NODE, ...],
          "exports": {"Name": "symbol-id", ...},
          "locals": ["symbol-id", ...]
        }
      ],
      "symbols": [
        {
          "id": "s1",
          "name": "Name",
          "flags": ["interface"],
          "declarations": ["node-id", ...],
          "aliasOf": "symbol-id",
          "exports": {"Name": "symbol-id"}
        }
      ],
      "globals": ["symbol-id", ...],
      "resolutions": [
        {"from": "src/index.ts", "module": "./a", "fileName": "src/a.ts", "external": false}
      ]
    }

NODE is ``{"id", "kind", "start", "text", "symbol", "children",
"moduleSpecifier", "moduleSymbol"}``; only ``kind`` is required.
``symbol`` binds the node for symbol-at-location queries. An
``export_declaration`` with a ``moduleSpecifier`` and no named
specifiers is a wildcard re-export of its file's module.

``globals`` lists the symbols of the ``globalThis`` scope, in lookup order.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from declbundle.core.exceptions import SnapshotError
from declbundle.program.memory import InMemoryProgram
from declbundle.program.models import Node, NodeKind, SourceFile, Symbol, SymbolFlags


def load_snapshot(path: Path) -> InMemoryProgram:
    """Read a snapshot file and build the program it describes."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot {path} must be a JSON object")
    return load_snapshot_data(data)


def load_snapshot_data(data: dict[str, Any]) -> InMemoryProgram:
    """Build a program from an already-decoded snapshot."""
    return _SnapshotBuilder(data).build()


class _SnapshotBuilder:
    """Two-pass builder: symbols first, then nodes that bind to them."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data
        self._program = InMemoryProgram()
        self._symbols: dict[str, Symbol] = {}
        self._nodes: dict[str, Node] = {}

    def build(self) -> InMemoryProgram:
        symbol_entries = self._data.get("symbols", [])
        file_entries = self._data.get("files", [])

        for entry in symbol_entries:
            self._create_symbol(entry)

        files: list[tuple[SourceFile, dict[str, Any]]] = []
        for entry in file_entries:
            files.append((self._create_file(entry), entry))

        for entry in symbol_entries:
            self._link_symbol(entry)

        for source_file, entry in files:
            for name, symbol_id in entry.get("exports", {}).items():
                self._program.add_export(source_file, self._symbol(symbol_id), name)
            for symbol_id in entry.get("locals", []):
                self._program.add_local(source_file, self._symbol(symbol_id))

        for symbol_id in self._data.get("globals", []):
            self._program.add_global(self._symbol(symbol_id))

        for resolution in self._data.get("resolutions", []):
            try:
                self._program.add_resolution(
                    resolution["from"],
                    resolution["module"],
                    resolution["fileName"],
                    external=bool(resolution.get("external", False)),
                )
            except KeyError as e:
                raise SnapshotError(f"Resolution entry is missing {e}") from e

        return self._program

    def _symbol(self, symbol_id: str) -> Symbol:
        try:
            return self._symbols[symbol_id]
        except KeyError:
            raise SnapshotError(f"Unknown symbol id '{symbol_id}'") from None

    def _create_symbol(self, entry: dict[str, Any]) -> None:
        try:
            symbol_id = entry["id"]
            name = entry["name"]
        except KeyError as e:
            raise SnapshotError(f"Symbol entry is missing {e}") from e
        if symbol_id in self._symbols:
            raise SnapshotError(f"Duplicate symbol id '{symbol_id}'")

        flags = SymbolFlags.NONE
        for flag in entry.get("flags", []):
            try:
                flags |= SymbolFlags[flag.upper()]
            except KeyError:
                raise SnapshotError(f"Unknown flag '{flag}' on symbol '{name}'") from None
        self._symbols[symbol_id] = self._program.add_symbol(name, flags)

    def _link_symbol(self, entry: dict[str, Any]) -> None:
        symbol = self._symbols[entry["id"]]
        for node_id in entry.get("declarations", []):
            try:
                symbol.declarations.append(self._nodes[node_id])
            except KeyError:
                raise SnapshotError(
                    f"Symbol '{symbol.name}' declares unknown node '{node_id}'"
                ) from None
        if "aliasOf" in entry:
            self._program.set_alias_target(symbol, self._symbol(entry["aliasOf"]))
        for name, symbol_id in entry.get("exports", {}).items():
            self._program.add_export(symbol, self._symbol(symbol_id), name)

    def _create_file(self, entry: dict[str, Any]) -> SourceFile:
        try:
            file_name = entry["fileName"]
        except KeyError as e:
            raise SnapshotError(f"File entry is missing {e}") from e

        source_file = self._program.add_file(
            file_name,
            is_module=bool(entry.get("module", True)),
            external_library=bool(entry.get("externalLibrary", False)),
            default_library=bool(entry.get("defaultLibrary", False)),
            no_default_lib=bool(entry.get("noDefaultLib", False)),
        )
        for statement in entry.get("statements", []):
            self._create_node(source_file, statement, source_file)
        return source_file

    def _create_node(self, parent: Node, entry: dict[str, Any], source_file: SourceFile) -> Node:
        try:
            kind = NodeKind(entry["kind"])
        except KeyError:
            raise SnapshotError(f"Node in {source_file.file_name} has no kind") from None
        except ValueError:
            raise SnapshotError(
                f"Unknown node kind '{entry['kind']}' in {source_file.file_name}"
            ) from None

        node = self._program.add_node(parent, kind, start=entry.get("start"), text=entry.get("text"))
        if "id" in entry:
            self._nodes[entry["id"]] = node
        if "symbol" in entry:
            self._program.bind(node, self._symbol(entry["symbol"]))

        children = entry.get("children", [])
        for child in children:
            self._create_node(node, child, source_file)

        module_name = entry.get("moduleSpecifier")
        if module_name is not None:
            specifier = self._program.add_node(node, NodeKind.STRING_LITERAL, text=module_name)
            node.module_specifier = specifier
            if "moduleSymbol" in entry:
                self._program.bind(specifier, self._symbol(entry["moduleSymbol"]))
            if kind == NodeKind.EXPORT_DECLARATION and not children:
                self._register_star_export(parent, node, source_file)
        return node

    def _register_star_export(self, parent: Node, node: Node, source_file: SourceFile) -> None:
        owner = self._program.symbol_at(parent) if parent is not source_file else None
        if owner is None:
            owner = self._program.symbol_at(source_file)
        if owner is None:
            raise SnapshotError(f"No module owns the wildcard re-export in {source_file.file_name}")
        self._program.register_star_export(owner, node)
