"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for inventory collection, grouping, and hardlink merging.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union, NamedTuple, Tuple
import os
import stat
from enum import Enum

from hardlinker.core.errors import FailureKind
from hardlinker.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class OutcomeKind(Enum):
    MERGED = "merged"
    PLANNED = "planned"
    SKIPPED_ALREADY_LINKED = "already-linked"
    SKIPPED_CROSS_DEVICE = "cross-device"
    FAILED = "failed"

    @property
    def display_name(self) -> str:
        """Human-readable name for CLI output."""
        mapping = {
            OutcomeKind.MERGED: "Linked",
            OutcomeKind.PLANNED: "Would link",
            OutcomeKind.SKIPPED_ALREADY_LINKED: "Already linked",
            OutcomeKind.SKIPPED_CROSS_DEVICE: "Other device",
            OutcomeKind.FAILED: "Failed",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    SCAN = "Inventory scan"
    CANDIDATE = "Candidate grouping"
    FRONT = "Front-chunk Hash"
    CONTENT = "Content Hash"
    MERGE = "Hardlink merge"


# ======================
#  Core Data Models
# ======================

@dataclass
class FileRecord:
    """
    One regular file discovered during the walk.

    Identity and access metadata are read once from lstat() and never change.
    Other names of the same inode found later in the walk are kept in
    alias_paths so the merger can relink every one of them.
    front_hash and content_hash are filled lazily by the hasher and are
    never overwritten once set.
    """
    path: str
    device_id: int
    inode_number: int
    hardlink_count: int
    permission_bits: int
    owner_id: int
    group_id: int
    size_bytes: int
    alias_paths: List[str] = field(default_factory=list)
    front_hash: Optional[bytes] = None
    content_hash: Optional[bytes] = None

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> "FileRecord":
        return cls(
            path=path,
            device_id=st.st_dev,
            inode_number=st.st_ino,
            hardlink_count=st.st_nlink,
            permission_bits=stat.S_IMODE(st.st_mode),
            owner_id=st.st_uid,
            group_id=st.st_gid,
            size_bytes=st.st_size,
        )

    @property
    def identity(self) -> Tuple[int, int]:
        """(device, inode) pair identifying the on-disk file."""
        return self.device_id, self.inode_number

    @property
    def all_paths(self) -> List[str]:
        """Every name of this inode seen in the tree, discovery order."""
        return [self.path] + self.alias_paths

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size_bytes}, inode={self.inode_number}>"


class CandidateKey(NamedTuple):
    """Attributes two files must share before they may ever be merged."""
    device_id: int
    permission_bits: int
    owner_id: int
    group_id: int
    size_bytes: int

    @classmethod
    def of(cls, record: FileRecord) -> "CandidateKey":
        return cls(
            record.device_id,
            record.permission_bits,
            record.owner_id,
            record.group_id,
            record.size_bytes,
        )


@dataclass
class CandidateGroup:
    """
    Files that might be duplicates, pending content verification.
    All members share the same CandidateKey.
    """
    key: CandidateKey
    records: List[FileRecord]

    @property
    def size(self) -> int:
        return self.key.size_bytes

    def __repr__(self):
        return f"<CandidateGroup size={self.size}, count={len(self.records)}>"


@dataclass
class ContentGroup:
    """
    Files with byte-identical content, confirmed by hashing.
    The first record is the representative every other member is linked to.
    """
    digest: str
    records: List[FileRecord]

    @property
    def representative(self) -> FileRecord:
        return self.records[0]

    @property
    def members(self) -> List[FileRecord]:
        """Every record except the representative."""
        return self.records[1:]

    def __repr__(self):
        return f"<ContentGroup digest={self.digest[:12]}, count={len(self.records)}>"


@dataclass
class MergeOutcome:
    """
    Result of processing one file: a merge, a skip, or a failure.
    Failures carry the FailureKind and the error text.
    """
    kind: OutcomeKind
    path: str
    representative: Optional[str] = None
    failure: Optional[FailureKind] = None
    error: Optional[str] = None
    staged_path: Optional[str] = None
    freed_inode: Optional[int] = None
    shared_inode: Optional[int] = None
    bytes_reclaimed: int = 0

    @classmethod
    def failed(cls, failure: FailureKind, path: str, error: Union[str, BaseException],
               **kwargs) -> "MergeOutcome":
        return cls(kind=OutcomeKind.FAILED, path=path, failure=failure, error=str(error), **kwargs)

    @property
    def is_failure(self) -> bool:
        return self.kind == OutcomeKind.FAILED

    def describe(self) -> str:
        if self.is_failure:
            text = f"{self.path}: {self.failure.description}"
            if self.error:
                text += f" ({self.error})"
            if self.staged_path:
                text += f" [staged copy: {self.staged_path}]"
            return text
        if self.representative:
            return f"{self.kind.display_name}: {self.path} -> {self.representative}"
        return f"{self.kind.display_name}: {self.path}"


@dataclass
class Inventory:
    """
    The per-run catalog produced by the scanner and passed through every stage.
    """
    root_dir: str
    records: List[FileRecord] = field(default_factory=list)
    failures: List[MergeOutcome] = field(default_factory=list)
    cancelled: bool = False

    def __len__(self) -> int:
        return len(self.records)


class DeduplicationStats:
    """
    Statistics collected during the deduplication process.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def print_summary(self) -> str:
        lines = [
            "Deduplication Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            lines.append(f"{stage}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


@dataclass
class Report:
    """
    Everything one run produced: per-file outcomes in pipeline order,
    stage statistics, and whether the run was cancelled early.
    """
    root_dir: str
    outcomes: List[MergeOutcome] = field(default_factory=list)
    stats: DeduplicationStats = field(default_factory=DeduplicationStats)
    files_scanned: int = 0
    cancelled: bool = False

    @property
    def merged(self) -> List[MergeOutcome]:
        return [o for o in self.outcomes if o.kind in (OutcomeKind.MERGED, OutcomeKind.PLANNED)]

    @property
    def failures(self) -> List[MergeOutcome]:
        return [o for o in self.outcomes if o.is_failure]

    @property
    def skipped(self) -> List[MergeOutcome]:
        return [o for o in self.outcomes if o.kind in (
            OutcomeKind.SKIPPED_ALREADY_LINKED, OutcomeKind.SKIPPED_CROSS_DEVICE)]

    @property
    def bytes_reclaimed(self) -> int:
        return sum(o.bytes_reclaimed for o in self.merged)

    @property
    def has_failures(self) -> bool:
        return any(o.is_failure for o in self.outcomes)


# =============================
# Parameters
# =============================

MAX_SUFFIX_ATTEMPTS = 16


@dataclass
class DeduplicationParams:
    """Parameters for a deduplication run with validation."""
    root_dir: str
    min_size_bytes: int = 0
    excluded_dirs: List[str] = field(default_factory=list)
    prefilter: bool = True
    dry_run: bool = False
    use_trash: bool = False
    max_suffix_attempts: int = MAX_SUFFIX_ATTEMPTS

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.max_suffix_attempts < 1:
            raise ValueError("Suffix attempts must be at least 1")

    @staticmethod
    def from_human_readable(
            root_dir: str,
            min_size_str: str = "0",
            excluded_dirs: Optional[List[str]] = None,
            prefilter: bool = True,
            dry_run: bool = False,
            use_trash: bool = False,
    ) -> 'DeduplicationParams':
        """
        Factory method to create params from human-readable inputs.
        Used by the CLI to convert argument strings.
        """
        return DeduplicationParams(
            root_dir=root_dir,
            min_size_bytes=ConvertUtils.human_to_bytes(min_size_str),
            excluded_dirs=excluded_dirs or [],
            prefilter=prefilter,
            dry_run=dry_run,
            use_trash=use_trash,
        )
