"""
Core module: the collection pass, its result models, and exceptions.

Collection (collector.py):
    - SymbolCollector: Runs boundary, discovery, reference and global passes

Passes:
    - boundary.py: Symbols wildcard re-exported from external libraries
    - exports.py: Entry exports restored to source order
    - references.py: Alias resolution and recursive type references
    - globals.py: Global scope symbols for collision checks

Models (models.py):
    - Reference: A type-level mention with its own subreferences
    - CollectionResult: Ordered export map plus external modules and globals

Exceptions (exceptions.py):
    - BundlerError: Base exception for all declbundle errors
    - ModuleSpecifierError/ModuleResolutionError/NotAModuleError: Broken
      wildcard re-exports, fatal for the pass
"""

from declbundle.core.exceptions import (
    BundlerError,
    EntryModuleError,
    ModuleResolutionError,
    ModuleSpecifierError,
    NotAModuleError,
    SnapshotError,
)
from declbundle.core.collector import SymbolCollector
from declbundle.core.models import CollectionResult, ExternalStarExports, Reference, ResolvedModule

__all__ = [
    # Collection
    "SymbolCollector",
    # Models
    "CollectionResult",
    "ExternalStarExports",
    "Reference",
    "ResolvedModule",
    # Exceptions
    "BundlerError",
    "EntryModuleError",
    "ModuleResolutionError",
    "ModuleSpecifierError",
    "NotAModuleError",
    "SnapshotError",
]
