"""Declbundle custom exceptions."""


class BundlerError(Exception):
    """Base exception for declbundle errors."""


class SnapshotError(BundlerError):
    """Program snapshot could not be read or is malformed."""


class EntryModuleError(BundlerError):
    """Entry file is unknown to the oracle or has no module symbol."""


class ModuleSpecifierError(BundlerError):
    """Wildcard re-export has no module specifier."""


class ModuleResolutionError(BundlerError):
    """Module specifier could not be resolved."""


class NotAModuleError(ModuleResolutionError):
    """Specifier resolved to something that is not an importable module."""
