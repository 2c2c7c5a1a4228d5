"""MCP server implementation for Declbundle."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from declbundle.core import BundlerError, CollectionResult, SymbolCollector
from declbundle.core.globals import get_global_symbols
from declbundle.program import InMemoryProgram, load_snapshot
from declbundle.report import export_to_dict, result_to_dict

server = Server("declbundle")

_SNAPSHOT_PROPERTY = {
    "type": "string",
    "description": "Path to the program snapshot (JSON)",
}
_ENTRY_PROPERTY = {
    "type": "string",
    "description": "Entry file name as it appears in the snapshot",
}


def _load_program(snapshot: str) -> InMemoryProgram:
    """Load a snapshot relative to the current directory."""
    path = Path(snapshot)
    if not path.is_absolute():
        path = Path.cwd() / path
    if not path.exists():
        raise FileNotFoundError(f"No program snapshot found at {path}")
    return load_snapshot(path)


def _collect(snapshot: str, entry: str) -> CollectionResult:
    program = _load_program(snapshot)
    return SymbolCollector(program, on_warning=lambda _: None).collect_file(entry)


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="declbundle_exports",
            description=(
                "List the exports a bundled declaration file needs, in source order, "
                "with their reference trees and external pass-through modules."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "snapshot": _SNAPSHOT_PROPERTY,
                    "entry": _ENTRY_PROPERTY,
                    "max_depth": {
                        "type": "integer",
                        "description": "Maximum reference depth (default: 5)",
                        "default": 5,
                    },
                },
                "required": ["snapshot", "entry"],
            },
        ),
        Tool(
            name="declbundle_references",
            description=(
                "Show the type references of one export, followed transitively "
                "through the declarations they point to."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "snapshot": _SNAPSHOT_PROPERTY,
                    "entry": _ENTRY_PROPERTY,
                    "name": {
                        "type": "string",
                        "description": "Export name",
                    },
                },
                "required": ["snapshot", "entry", "name"],
            },
        ),
        Tool(
            name="declbundle_globals",
            description="List global-scope symbol names, used to avoid name collisions.",
            inputSchema={
                "type": "object",
                "properties": {
                    "snapshot": _SNAPSHOT_PROPERTY,
                },
                "required": ["snapshot"],
            },
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "declbundle_exports":
            result = _handle_exports(
                arguments["snapshot"],
                arguments["entry"],
                arguments.get("max_depth", 5),
            )
        elif name == "declbundle_references":
            result = _handle_references(
                arguments["snapshot"],
                arguments["entry"],
                arguments["name"],
            )
        elif name == "declbundle_globals":
            result = _handle_globals(arguments["snapshot"])
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except (FileNotFoundError, BundlerError) as e:
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]


def _handle_exports(snapshot: str, entry: str, max_depth: int) -> dict[str, Any]:
    """Handle declbundle_exports tool."""
    return result_to_dict(_collect(snapshot, entry), max_depth)


def _handle_references(snapshot: str, entry: str, name: str) -> dict[str, Any]:
    """Handle declbundle_references tool."""
    result = _collect(snapshot, entry)
    export_symbol = result.find_export(name)
    if export_symbol is None:
        return {"error": f"No export named '{name}'"}
    return export_to_dict(result, export_symbol)


def _handle_globals(snapshot: str) -> dict[str, Any]:
    """Handle declbundle_globals tool."""
    symbols = get_global_symbols(_load_program(snapshot))
    return {"globals": [s.name for s in symbols]}


async def serve() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
