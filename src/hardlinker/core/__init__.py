"""
Core deduplication engine — scanner, grouper, hasher, stages and merger.

This package contains the whole engine:
- FileScannerImpl: recursive walk producing one FileRecord per inode
- FileGrouperImpl: candidate-key and digest grouping with singleton filtering
- HasherImpl: SHA-256 content hash + xxHash64 front-chunk pre-hash
- CandidateStageImpl / FrontHashStage / ContentHashStage: grouping pipeline
- HardlinkMerger: crash-safe replacement of duplicates with hardlinks
- Models: FileRecord, CandidateGroup, ContentGroup, MergeOutcome, Report

No CLI dependencies — suitable for embedding.
"""

from .errors import (
    DeduplicationError, NotADirectory, InaccessibleRoot, WalkError,
    SuffixCollisionError, FailureKind)
from .models import (
    FileRecord, CandidateKey, CandidateGroup, ContentGroup, Inventory,
    MergeOutcome, OutcomeKind, Report, DeduplicationParams, DeduplicationStats, Stage)
from .scanner import FileScannerImpl
from .hasher import HasherImpl, Sha256AlgorithmImpl, XXHashAlgorithmImpl
from .grouper import FileGrouperImpl
from .stages import CandidateStageImpl, FrontHashStage, ContentHashStage
from .merger import HardlinkMerger

__all__ = [
    "DeduplicationError",
    "NotADirectory",
    "InaccessibleRoot",
    "WalkError",
    "SuffixCollisionError",
    "FailureKind",
    "FileRecord",
    "CandidateKey",
    "CandidateGroup",
    "ContentGroup",
    "Inventory",
    "MergeOutcome",
    "OutcomeKind",
    "Report",
    "DeduplicationParams",
    "DeduplicationStats",
    "Stage",
    "FileScannerImpl",
    "HasherImpl",
    "Sha256AlgorithmImpl",
    "XXHashAlgorithmImpl",
    "FileGrouperImpl",
    "CandidateStageImpl",
    "FrontHashStage",
    "ContentHashStage",
    "HardlinkMerger",
]
