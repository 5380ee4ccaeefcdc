"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy and failure taxonomy for the deduplication engine.

Fatal errors (raised, abort the run before anything is touched):
- NotADirectory: root path exists but is not a directory
- InaccessibleRoot: root path cannot be stat'ed
- WalkError: the directory walk itself cannot continue

Per-file failures are never raised out of the engine. They are recorded
as MergeOutcome entries tagged with a FailureKind.
"""

from enum import Enum


class DeduplicationError(RuntimeError):
    """Base class for all engine errors."""


class NotADirectory(DeduplicationError):
    def __init__(self, path: str):
        super().__init__(f"Not a directory: {path}")
        self.path = path


class InaccessibleRoot(DeduplicationError):
    def __init__(self, path: str, reason: str = ""):
        message = f"Cannot access directory: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.path = path


class WalkError(DeduplicationError):
    """Directory traversal aborted because the walk cannot continue."""


class SuffixCollisionError(DeduplicationError):
    """Every generated staging name was already taken."""

    def __init__(self, path: str, attempts: int):
        super().__init__(f"No free staging name for {path} after {attempts} attempts")
        self.path = path
        self.attempts = attempts


class FailureKind(str, Enum):
    STAT_FAILED = "stat-failed"
    HASH_FAILED = "hash-failed"
    SUFFIX_COLLISION = "suffix-collision"
    STAGE_FAILED = "stage-failed"
    LINK_FAILED = "link-failed"
    RESTORE_FAILED = "restore-failed"
    CLEANUP_FAILED = "cleanup-failed"

    @property
    def description(self) -> str:
        """Human-readable description for CLI output."""
        mapping = {
            FailureKind.STAT_FAILED: "could not read file metadata",
            FailureKind.HASH_FAILED: "could not read file content",
            FailureKind.SUFFIX_COLLISION: "no free temporary name",
            FailureKind.STAGE_FAILED: "could not move original aside, file untouched",
            FailureKind.LINK_FAILED: "hardlink failed, original restored",
            FailureKind.RESTORE_FAILED: "hardlink failed and original could NOT be restored",
            FailureKind.CLEANUP_FAILED: "linked, but staged original could not be removed",
        }
        return mapping.get(self, self.value)
