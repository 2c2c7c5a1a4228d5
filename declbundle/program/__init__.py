"""
Program layer: the checked program the collector queries.

Components:
    - TypeOracle: Protocol for symbol, alias, export, scope, and module queries
    - Symbol/Node/SourceFile: Opaque program entities, compared by identity
    - InMemoryProgram: TypeOracle over a literal graph, with builder methods
    - load_snapshot(): Build an InMemoryProgram from a JSON program dump

Adding a new oracle:
    1. Implement the TypeOracle protocol over your compiler's checker
    2. Map its syntax kinds onto NodeKind
    3. Pass it to SymbolCollector
"""

from declbundle.program.base import TypeOracle
from declbundle.program.loader import load_snapshot, load_snapshot_data
from declbundle.program.memory import InMemoryProgram
from declbundle.program.models import (
    DEFAULT_EXPORT,
    EXPORT_STAR,
    GLOBAL_THIS,
    Node,
    NodeKind,
    ResolvedModuleName,
    SourceFile,
    Symbol,
    SymbolFlags,
)

__all__ = [
    "TypeOracle",
    "InMemoryProgram",
    "load_snapshot",
    "load_snapshot_data",
    "Node",
    "NodeKind",
    "SourceFile",
    "Symbol",
    "SymbolFlags",
    "ResolvedModuleName",
    "DEFAULT_EXPORT",
    "EXPORT_STAR",
    "GLOBAL_THIS",
]
