"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Partitions FileRecords into equivalence classes.

- group_by_candidate_key: pure metadata grouping, no I/O
- group_by_front_hash / group_by_content_hash: digest grouping via an injected Hasher

Every method keeps discovery order inside a group and drops groups with
fewer than two members.
"""

import logging
from typing import List, Dict, Any, Callable, Optional
from collections import defaultdict

from hardlinker.core.interfaces import ErrorCallback, FileGrouper, Hasher
from hardlinker.core.models import FileRecord, CandidateKey
from hardlinker.core.hasher import HasherImpl

logger = logging.getLogger(__name__)


class FileGrouperImpl(FileGrouper):
    """
    A concrete implementation of FileGrouper.
    Uses an injected Hasher instance for flexibility and testability.
    """

    def __init__(self, hasher: Hasher = None):
        self.hasher = hasher or HasherImpl()

    def group_by_candidate_key(self, records: List[FileRecord]) -> Dict[CandidateKey, List[FileRecord]]:
        """Groups records by (device, permission bits, owner, group, size)."""
        return self._group_by(records, CandidateKey.of)

    def group_by_front_hash(
        self, records: List[FileRecord], on_error: Optional[ErrorCallback] = None
    ) -> Dict[bytes, List[FileRecord]]:
        """Groups records by the pre-filter digest of their first bytes."""
        return self._group_by(records, self.hasher.compute_front_hash, on_error)

    def group_by_content_hash(
        self, records: List[FileRecord], on_error: Optional[ErrorCallback] = None
    ) -> Dict[str, List[FileRecord]]:
        """Groups records by hex-encoded full content digest."""
        return self._group_by(records, lambda r: self.hasher.compute_content_hash(r).hex(), on_error)

    @staticmethod
    def _group_by(
        records: List[FileRecord],
        key_func: Callable[[FileRecord], Any],
        on_error: Optional[ErrorCallback] = None,
    ) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group records by any computed key.
        Args:
            records: Records to group, in discovery order
            key_func: Function that computes a hashable key from a FileRecord
            on_error: Called with (record, error) when key_func raises OSError;
                      the record is left out of every group
        Returns:
            Dict[key, List[FileRecord]] holding only groups of 2+ records
        """
        groups = defaultdict(list)
        skipped = 0
        for record in records:
            try:
                key = key_func(record)
            except OSError as e:
                logger.warning(f"Could not read {record.path}: {e}")
                skipped += 1
                if on_error:
                    on_error(record, e)
                continue
            groups[key].append(record)

        if skipped:
            logger.warning(f"Skipped {skipped} files due to read errors")

        return {key: group for key, group in groups.items() if len(group) >= 2}
