"""
MCP server for Declbundle.

Exposes symbol collection to LLMs via the Model Context Protocol.

Tools:
    - declbundle_exports: Ordered exports with reference trees
    - declbundle_references: Reference tree of one export
    - declbundle_globals: Global-scope symbol names

Usage:
    Run: mcp-server-declbundle
"""

import asyncio

from declbundle.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
