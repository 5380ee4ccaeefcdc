"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deduplication engine.
These protocols use structural typing via `typing.Protocol` so that stages
can be swapped for fakes in tests without inheritance.

Key Components:
---------------
- HashAlgorithm: Standardized interface for hash functions (SHA-256, xxHash).
- Hasher: Computes and caches per-file digests.
- FileScanner: Walks a directory tree and produces the run's Inventory.
- FileGrouper: Partitions records by candidate key or digest.
- CandidateStage / RefineStage / MatchStage: steps of the grouping pipeline.
- Merger: Replaces confirmed duplicates with hardlinks.
"""

from typing import Protocol, List, Dict, Optional, Callable
from hardlinker.core.models import (
    FileRecord,
    CandidateKey,
    CandidateGroup,
    ContentGroup,
    Inventory,
    MergeOutcome,
)

StoppedFlag = Callable[[], bool]
ProgressCallback = Callable[[str, int, Optional[int]], None]
ErrorCallback = Callable[[FileRecord, OSError], None]


class HashAlgorithm(Protocol):
    """Incremental hash object factory (hashlib-compatible)."""

    def new(self):
        """Return a fresh object with update() and digest()."""
        ...


class Hasher(Protocol):
    """Interface for hashing files, caching the result on the record."""
    def compute_front_hash(self, record: FileRecord) -> bytes: ...
    def compute_content_hash(self, record: FileRecord) -> bytes: ...


class FileScanner(Protocol):
    def scan(
        self,
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> Inventory:
        """
        Scan the configured directory.

        Args:
            stopped_flag: Function that returns True if operation should be canceled.
            progress_callback: Optional callback for reporting progress.

        Returns:
            Inventory with one FileRecord per distinct (device, inode) pair.
        """
        ...


class FileGrouper(Protocol):
    def group_by_candidate_key(self, records: List[FileRecord]) -> Dict[CandidateKey, List[FileRecord]]:
        """Group records by (device, permission bits, owner, group, size)."""
        ...

    def group_by_front_hash(
        self, records: List[FileRecord], on_error: Optional[ErrorCallback] = None
    ) -> Dict[bytes, List[FileRecord]]:
        ...

    def group_by_content_hash(
        self, records: List[FileRecord], on_error: Optional[ErrorCallback] = None
    ) -> Dict[str, List[FileRecord]]:
        ...


class CandidateStage(Protocol):
    """First step: metadata-only grouping of the inventory."""
    def process(
        self,
        records: List[FileRecord],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[CandidateGroup]:
        ...


class RefineStage(Protocol):
    """
    Optional refinement step of the content matcher.

    Splits candidate groups further and appends per-file failures to the
    shared failures list. Never confirms duplicates on its own.
    """
    def process(
        self,
        groups: List[CandidateGroup],
        failures: List[MergeOutcome],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[CandidateGroup]:
        ...


class MatchStage(Protocol):
    """Final matcher step: turns candidate groups into verified content groups."""
    def process(
        self,
        groups: List[CandidateGroup],
        failures: List[MergeOutcome],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[ContentGroup]:
        ...


class Merger(Protocol):
    def merge(
        self,
        groups: List[ContentGroup],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[MergeOutcome]:
        """Link every non-representative member of each group to its representative."""
        ...
