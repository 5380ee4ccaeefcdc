"""
hardlinker — replaces identical files in a directory tree with hardlinks.

Core features:
- One pass: inventory → candidate groups → content hash → hardlink merge
- Files are only merged when device, permission bits, owner and group match
- Crash-safe swap: originals are staged under a temporary name and restored if linking fails
- Optional dry run and trash mode (via send2trash)
- CLI interface for headless/server usage
"""

from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("hardlinker")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API — only what users should import directly
from hardlinker.commands import DeduplicationCommand, deduplicate
from hardlinker.core import (
    DeduplicationParams, FileRecord, ContentGroup, MergeOutcome, OutcomeKind, Report,
    FailureKind, NotADirectory, InaccessibleRoot)
from hardlinker.utils.convert_utils import ConvertUtils
from hardlinker.services.file_service import FileService

__all__ = [
    "DeduplicationCommand",
    "deduplicate",
    "DeduplicationParams",
    "FileRecord",
    "ContentGroup",
    "MergeOutcome",
    "OutcomeKind",
    "Report",
    "FailureKind",
    "NotADirectory",
    "InaccessibleRoot",
    "ConvertUtils",
    "FileService",
    "__version__",
]
