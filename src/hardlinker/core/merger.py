"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/merger.py
Replaces confirmed duplicates with hardlinks to one representative file.

MERGE PROTOCOL
--------------
A hardlink cannot be created over an existing path, so each member is
swapped in three steps:
  1. pick a free staging name: member.path + random alphanumeric suffix
     (bounded number of attempts)
  2. rename member -> staging name (original content still on disk)
  3. link representative -> member
       success: discard the staged original
       failure: rename staging name -> member, restoring the original

At every point member.path resolves to a file with the original content,
or the path is momentarily absent between steps 2 and 3 with the content
held under the staging name. A failed restore is reported with the staging
path so it can be recovered by hand.

Every other name of the member's inode found during the walk goes through
the same swap, so no path in the tree is left on the old inode.
"""

import logging
import secrets
import string
from typing import List, Optional

from hardlinker.core.errors import FailureKind, SuffixCollisionError
from hardlinker.core.interfaces import Merger, StoppedFlag, ProgressCallback
from hardlinker.core.models import (
    ContentGroup, FileRecord, MergeOutcome, OutcomeKind, Stage, MAX_SUFFIX_ATTEMPTS)
from hardlinker.services.file_service import FileService

logger = logging.getLogger(__name__)

SUFFIX_ALPHABET = string.ascii_letters + string.digits
SUFFIX_MIN_LENGTH = 6
SUFFIX_MAX_LENGTH = 11


class HardlinkMerger(Merger):
    """
    Links every non-representative member of a ContentGroup to the
    group's first record.

    Args:
        file_service: filesystem primitives (FileService by default)
        dry_run: decide everything but touch nothing; outcomes are PLANNED
        use_trash: send staged originals to the system trash instead of unlinking
        max_suffix_attempts: staging names to try before giving up on a member
    """

    def __init__(
        self,
        file_service=None,
        dry_run: bool = False,
        use_trash: bool = False,
        max_suffix_attempts: int = MAX_SUFFIX_ATTEMPTS,
    ):
        self.file_service = file_service or FileService
        self.dry_run = dry_run
        self.use_trash = use_trash
        self.max_suffix_attempts = max_suffix_attempts

    def merge(
        self,
        groups: List[ContentGroup],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[MergeOutcome]:
        outcomes = []
        total = sum(len(g.members) for g in groups)
        processed = 0

        for group in groups:
            representative = group.representative
            for member in group.members:
                if stopped_flag and stopped_flag():
                    logger.debug("Merge interrupted by user")
                    return outcomes

                outcomes.extend(self.merge_member(representative, member))

                processed += 1
                if progress_callback:
                    progress_callback(Stage.MERGE.value, processed, total)

        return outcomes

    def merge_member(self, representative: FileRecord, member: FileRecord) -> List[MergeOutcome]:
        """
        Replace member, and every other name of its inode found in the tree,
        with hardlinks to representative.
        Returns one outcome per path; never raises for per-file problems.
        """
        if member.device_id != representative.device_id:
            logger.debug(f"Skipping {member.path}: on a different device than {representative.path}")
            return [MergeOutcome(OutcomeKind.SKIPPED_CROSS_DEVICE, member.path, representative.path)]

        if member.inode_number == representative.inode_number:
            logger.debug(f"Skipping {member.path}: already linked to {representative.path}")
            return [MergeOutcome(OutcomeKind.SKIPPED_ALREADY_LINKED, member.path, representative.path)]

        outcomes = []
        for path in member.all_paths:
            if self.dry_run:
                logger.info(f"Would link {path} -> {representative.path}")
                outcome = MergeOutcome(
                    OutcomeKind.PLANNED, path, representative.path,
                    freed_inode=member.inode_number,
                    shared_inode=representative.inode_number,
                )
            else:
                outcome = self._swap(representative, member, path)
            outcomes.append(outcome)

        # the old inode is freed only when no name of it is left, inside or outside the tree
        if member.hardlink_count == len(member.all_paths) and not any(o.is_failure for o in outcomes):
            outcomes[-1].bytes_reclaimed = member.size_bytes
        return outcomes

    def _swap(self, representative: FileRecord, member: FileRecord, path: str) -> MergeOutcome:
        """Stage path aside, link it to representative, then discard or restore the original."""
        try:
            staged = self._staging_path(path)
        except SuffixCollisionError as e:
            logger.warning(str(e))
            return MergeOutcome.failed(FailureKind.SUFFIX_COLLISION, path, e,
                                       representative=representative.path)

        try:
            self.file_service.rename(path, staged)
        except OSError as e:
            logger.warning(f"Could not stage {path}: {e}")
            return MergeOutcome.failed(FailureKind.STAGE_FAILED, path, e,
                                       representative=representative.path)

        try:
            self.file_service.link(representative.path, path)
        except OSError as e:
            return self._restore(representative, path, staged, e)

        try:
            self.file_service.discard(staged, use_trash=self.use_trash)
        except (OSError, RuntimeError) as e:
            logger.warning(f"Linked {path} but could not remove {staged}: {e}")
            return MergeOutcome.failed(FailureKind.CLEANUP_FAILED, path, e,
                                       representative=representative.path, staged_path=staged)

        logger.info(f"Linked {path} -> {representative.path}")
        return MergeOutcome(
            OutcomeKind.MERGED, path, representative.path,
            freed_inode=member.inode_number,
            shared_inode=representative.inode_number,
        )

    def _restore(self, representative: FileRecord, path: str, staged: str,
                 link_error: OSError) -> MergeOutcome:
        """Put the staged original back after a failed link."""
        logger.warning(f"Could not link {path} -> {representative.path}: {link_error}")
        try:
            self.file_service.rename(staged, path)
        except OSError as e:
            logger.error(f"Could not restore {path} from {staged}: {e}")
            return MergeOutcome.failed(
                FailureKind.RESTORE_FAILED, path, f"{link_error}; restore: {e}",
                representative=representative.path, staged_path=staged)

        return MergeOutcome.failed(FailureKind.LINK_FAILED, path, link_error,
                                   representative=representative.path)

    def _staging_path(self, path: str) -> str:
        """
        Returns path + a random suffix that does not exist yet.

        Raises:
            SuffixCollisionError: every attempt produced an existing name
        """
        for _ in range(self.max_suffix_attempts):
            candidate = path + self._new_suffix()
            if not self.file_service.exists(candidate):
                return candidate
        raise SuffixCollisionError(path, self.max_suffix_attempts)

    @staticmethod
    def _new_suffix() -> str:
        length = SUFFIX_MIN_LENGTH + secrets.randbelow(SUFFIX_MAX_LENGTH - SUFFIX_MIN_LENGTH + 1)
        return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))
