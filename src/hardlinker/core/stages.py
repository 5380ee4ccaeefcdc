"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Grouping pipeline stages: inventory -> candidate groups -> content groups.

CLASS HIERARCHY
---------------
CandidateStageImpl : Metadata grouping by (device, permission bits, owner, group, size)
FrontHashStage     : Optional xxHash64 front-chunk split of large candidate groups
ContentHashStage   : SHA-256 full-content partition into ContentGroups

STAGE CONTRACTS
---------------
Each stage implements a consistent `process()` interface that:
  • Accepts groups from the previous stage
  • Returns refined groups for the next stage, singletons dropped
  • Appends per-file read failures to the shared failures list
  • Reports progress via callback (stage name, processed count, total count)
  • Respects cancellation via stopped_flag between groups
"""

from typing import List, Optional

from hardlinker.core.errors import FailureKind
from hardlinker.core.grouper import FileGrouperImpl
from hardlinker.core.hasher import FRONT_CHUNK_SIZE
from hardlinker.core.interfaces import (
    CandidateStage, RefineStage, MatchStage, StoppedFlag, ProgressCallback)
from hardlinker.core.models import (
    FileRecord, CandidateGroup, ContentGroup, MergeOutcome, Stage)


class CandidateStageImpl(CandidateStage):
    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def process(
            self,
            records: List[FileRecord],
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> List[CandidateGroup]:
        """
        Returns list of CandidateGroups with 2+ records sharing a CandidateKey.
        """
        if stopped_flag and stopped_flag():
            return []

        groups = [
            CandidateGroup(key=key, records=members)
            for key, members in self.grouper.group_by_candidate_key(records).items()
        ]

        if progress_callback:
            progress_callback(Stage.CANDIDATE.value, len(records), len(records))

        return groups


class _HashStageBase:
    """Shared plumbing for stages that read file content."""

    stage = None

    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def get_stage_name(self) -> str:
        return self.stage.value

    @staticmethod
    def _failure_recorder(failures: List[MergeOutcome]):
        def record(record: FileRecord, error: OSError) -> None:
            failures.append(MergeOutcome.failed(FailureKind.HASH_FAILED, record.path, error))
        return record


class FrontHashStage(_HashStageBase, RefineStage):
    """
    Splits candidate groups by a cheap digest of the first bytes.
    Groups whose files fit entirely in the front chunk pass through untouched,
    the full hash would read exactly the same bytes.
    """

    stage = Stage.FRONT

    def __init__(self, grouper: FileGrouperImpl, min_size: int = FRONT_CHUNK_SIZE):
        super().__init__(grouper)
        self.min_size = min_size

    def process(
            self,
            groups: List[CandidateGroup],
            failures: List[MergeOutcome],
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> List[CandidateGroup]:
        refined = []
        total_files = sum(len(g.records) for g in groups)
        processed_files = 0
        on_error = self._failure_recorder(failures)

        for group in groups:
            if stopped_flag and stopped_flag():
                return []

            if group.size <= self.min_size:
                refined.append(group)
            else:
                for members in self.grouper.group_by_front_hash(group.records, on_error).values():
                    refined.append(CandidateGroup(key=group.key, records=members))

            processed_files += len(group.records)
            if progress_callback:
                progress_callback(self.get_stage_name(), processed_files, total_files)

        return refined


class ContentHashStage(_HashStageBase, MatchStage):
    """
    Confirms duplicates by full-content digest.
    Every member of a candidate group is hashed before its content groups are emitted.
    """

    stage = Stage.CONTENT

    def process(
            self,
            groups: List[CandidateGroup],
            failures: List[MergeOutcome],
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> List[ContentGroup]:
        confirmed = []
        total_files = sum(len(g.records) for g in groups)
        processed_files = 0
        on_error = self._failure_recorder(failures)

        for group in groups:
            if stopped_flag and stopped_flag():
                return []

            for digest, members in self.grouper.group_by_content_hash(group.records, on_error).items():
                confirmed.append(ContentGroup(digest=digest, records=members))

            processed_files += len(group.records)
            if progress_callback:
                progress_callback(self.get_stage_name(), processed_files, total_files)

        return confirmed
