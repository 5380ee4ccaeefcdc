"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

commands.py
Unified command orchestrator for deduplication.
This is the single entry point into the engine — the CLI only parses
arguments and prints the Report.
"""
import logging
import time
from typing import List, Optional, Callable

from hardlinker.core.models import (
    DeduplicationParams, DeduplicationStats, Report, Inventory, Stage)
from hardlinker.core.scanner import FileScannerImpl
from hardlinker.core.grouper import FileGrouperImpl
from hardlinker.core.stages import CandidateStageImpl, FrontHashStage, ContentHashStage
from hardlinker.core.merger import HardlinkMerger

logger = logging.getLogger(__name__)


class DeduplicationCommand:
    """
    Orchestrates the whole run, strictly in this order:
    1. Collect the inventory of regular files under root_dir
    2. Group by (device, permission bits, owner, group, size)
    3. Confirm identical content by hashing
    4. Replace duplicates with hardlinks

    Usage:
        params = DeduplicationParams(root_dir="/srv/data")
        report = DeduplicationCommand().execute(params)
        for outcome in report.failures:
            print(outcome.describe())
    """

    def __init__(self, grouper: FileGrouperImpl = None, file_service=None):
        self._grouper = grouper or FileGrouperImpl()
        self._file_service = file_service
        self._inventory: Optional[Inventory] = None

    def execute(
            self,
            params: DeduplicationParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Report:
        """
        Run one deduplication pass.

        Args:
            params: Validated deduplication parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)

        Returns:
            Report with every merge, skip and per-file failure

        Raises:
            NotADirectory / InaccessibleRoot: root_dir is unusable
            WalkError: the root directory could not be listed
        """
        stats = DeduplicationStats()
        total_start = time.time()

        # Step 1: inventory
        start = time.time()
        scanner = FileScannerImpl(
            root_dir=params.root_dir,
            min_size=params.min_size_bytes or None,
            excluded_dirs=params.excluded_dirs,
        )
        inventory = scanner.scan(stopped_flag=stopped_flag, progress_callback=progress_callback)
        self._inventory = inventory
        stats.update_stage(Stage.SCAN.value, 0, len(inventory.records), time.time() - start)

        report = Report(root_dir=params.root_dir, stats=stats, files_scanned=len(inventory.records))
        report.outcomes.extend(inventory.failures)

        if inventory.cancelled or self._stopped(stopped_flag):
            return self._finish(report, total_start, cancelled=True)

        # Step 2: candidate groups
        start = time.time()
        groups = CandidateStageImpl(self._grouper).process(
            inventory.records, stopped_flag=stopped_flag, progress_callback=progress_callback)
        self._update_stats(stats, Stage.CANDIDATE, time.time() - start, groups)

        # Step 3: content matching
        failures = []
        if params.prefilter:
            start = time.time()
            groups = FrontHashStage(self._grouper).process(
                groups, failures, stopped_flag=stopped_flag, progress_callback=progress_callback)
            self._update_stats(stats, Stage.FRONT, time.time() - start, groups)

        start = time.time()
        content_groups = ContentHashStage(self._grouper).process(
            groups, failures, stopped_flag=stopped_flag, progress_callback=progress_callback)
        self._update_stats(stats, Stage.CONTENT, time.time() - start, content_groups)
        report.outcomes.extend(failures)

        if self._stopped(stopped_flag):
            return self._finish(report, total_start, cancelled=True)

        # Step 4: merge
        start = time.time()
        merger = HardlinkMerger(
            file_service=self._file_service,
            dry_run=params.dry_run,
            use_trash=params.use_trash,
            max_suffix_attempts=params.max_suffix_attempts,
        )
        report.outcomes.extend(
            merger.merge(content_groups, stopped_flag=stopped_flag, progress_callback=progress_callback))
        self._update_stats(stats, Stage.MERGE, time.time() - start, content_groups)

        return self._finish(report, total_start, cancelled=self._stopped(stopped_flag))

    def get_inventory(self) -> Optional[Inventory]:
        """Inventory of the last execution."""
        return self._inventory

    @staticmethod
    def _stopped(stopped_flag: Optional[Callable[[], bool]]) -> bool:
        return bool(stopped_flag and stopped_flag())

    @staticmethod
    def _finish(report: Report, total_start: float, cancelled: bool) -> Report:
        report.cancelled = cancelled
        report.stats.total_time = time.time() - total_start
        logger.info(
            f"Run finished: {len(report.merged)} merged, {len(report.failures)} failed"
            + (" (cancelled)" if cancelled else "")
        )
        return report

    @staticmethod
    def _update_stats(stats: DeduplicationStats, stage: Stage, duration: float, groups: List) -> None:
        stats.update_stage(
            stage_name=stage.value,
            groups_found=len(groups),
            files_processed=sum(len(g.records) for g in groups),
            duration=duration,
        )


def deduplicate(root_path: str, **options) -> Report:
    """
    Deduplicate root_path in one pass and return the Report.

    Keyword options are DeduplicationParams fields (dry_run, use_trash, ...).
    """
    params = DeduplicationParams(root_dir=root_path, **options)
    return DeduplicationCommand().execute(params)
