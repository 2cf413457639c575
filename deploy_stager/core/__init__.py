"""Core functionality for deploy-stager"""

from .exclusion import ExclusionRules
from .staging import CopyCache, CopyStats, EntryKind, classify
from .builder import BuildRunner
from .revision import write_revision_file, read_revision_file
from .compression import CompressionProfile, Packager, resolve_profile
from .rollback import RollbackManager, RollbackResult
from .validation_engine import ValidationEngine, ValidationResult

__all__ = [
    "ExclusionRules",
    "CopyCache",
    "CopyStats",
    "EntryKind",
    "classify",
    "BuildRunner",
    "write_revision_file",
    "read_revision_file",
    "CompressionProfile",
    "Packager",
    "resolve_profile",
    "RollbackManager",
    "RollbackResult",
    "ValidationEngine",
    "ValidationResult",
]
