"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Inventory collection: walks a directory tree and records every regular file.
Features:
- Validates the root before walking (NotADirectory / InaccessibleRoot)
- Records one FileRecord per (device, inode) pair; further names of the inode
  become alias_paths of that record
- Skips symlinks, devices, sockets and FIFOs without error
- Per-file lstat failures are recorded, never fatal
- Optional minimum size and excluded directory filters
"""

import os
import stat
import time
import logging
from typing import Dict, List, Optional, Tuple

from hardlinker.core.errors import NotADirectory, InaccessibleRoot, WalkError, FailureKind
from hardlinker.core.interfaces import FileScanner, StoppedFlag, ProgressCallback
from hardlinker.core.models import FileRecord, Inventory, MergeOutcome

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 5000


class FileScannerImpl(FileScanner):
    """
    Scans a directory tree recursively and builds the run's Inventory.

    Attributes:
        root_dir: Root directory to scan
        min_size: Minimum file size in bytes (optional)
        excluded_dirs: Directories pruned before descent (optional)
    """

    def __init__(
        self,
        root_dir: str,
        min_size: Optional[int] = None,
        excluded_dirs: Optional[List[str]] = None
    ):
        self.root_dir = root_dir
        self.min_size = min_size
        self.excluded_dirs = [os.path.realpath(d) for d in excluded_dirs] if excluded_dirs else []

    def scan(self,
             stopped_flag: Optional[StoppedFlag] = None,
             progress_callback: Optional[ProgressCallback] = None) -> Inventory:
        """
        Single-pass walk over the tree.

        Raises:
            InaccessibleRoot: the root cannot be stat'ed
            NotADirectory: the root is not a directory
            WalkError: the root directory itself cannot be listed
        """
        self._validate_root()

        inventory = Inventory(root_dir=self.root_dir)
        seen: Dict[Tuple[int, int], FileRecord] = {}
        processed = 0
        start_time = time.time()

        logger.debug(f"Scanning {self.root_dir} (min_size={self.min_size}, excluded={self.excluded_dirs})")

        def on_walk_error(error: OSError) -> None:
            if self._is_root(error.filename):
                raise WalkError(f"Cannot list {self.root_dir}: {error}") from error
            logger.warning(f"Cannot list directory {error.filename}: {error}")
            inventory.failures.append(
                MergeOutcome.failed(FailureKind.STAT_FAILED, str(error.filename), error)
            )

        for root, dirs, files in os.walk(self.root_dir, onerror=on_walk_error):
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                inventory.cancelled = True
                break

            dirs[:] = sorted(d for d in dirs if not self._is_excluded(os.path.join(root, d)))

            for name in sorted(files):
                if stopped_flag and stopped_flag():
                    inventory.cancelled = True
                    break

                record = self._process_file(os.path.join(root, name), seen, inventory)
                if record is not None:
                    inventory.records.append(record)

                processed += 1
                if progress_callback and processed % PROGRESS_INTERVAL == 0:
                    progress_callback("scanning", processed, None)

            if inventory.cancelled:
                break

        if progress_callback:
            progress_callback("scanning", processed, None)

        logger.debug(
            f"Scan finished in {time.time() - start_time:.2f}s: "
            f"{len(inventory.records)} records from {processed} entries"
        )
        return inventory

    def _validate_root(self) -> None:
        try:
            st = os.stat(self.root_dir)
        except OSError as e:
            logger.error(f"Cannot stat root {self.root_dir}: {e}")
            raise InaccessibleRoot(self.root_dir, e.strerror or str(e)) from e

        if not stat.S_ISDIR(st.st_mode):
            logger.error(f"Not a directory: {self.root_dir}")
            raise NotADirectory(self.root_dir)

    def _is_root(self, path) -> bool:
        return path is not None and os.path.normpath(str(path)) == os.path.normpath(self.root_dir)

    def _is_excluded(self, path: str) -> bool:
        """Check if path is within an excluded directory."""
        if not self.excluded_dirs:
            return False
        real = os.path.realpath(path)
        for excluded in self.excluded_dirs:
            if real == excluded or real.startswith(excluded + os.sep):
                logger.debug(f"Skipping excluded directory: {path}")
                return True
        return False

    def _process_file(
        self,
        path: str,
        seen: Dict[Tuple[int, int], FileRecord],
        inventory: Inventory
    ) -> Optional[FileRecord]:
        """
        lstat one walk entry and turn it into a FileRecord.
        Returns None for non-regular files, filtered files and further names
        of an inode already recorded (added to its alias_paths instead).
        """
        try:
            st = os.lstat(path)
        except OSError as e:
            logger.warning(f"Could not stat {path}: {e}")
            inventory.failures.append(MergeOutcome.failed(FailureKind.STAT_FAILED, path, e))
            return None

        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        if self.min_size is not None and st.st_size < self.min_size:
            logger.debug(f"Skipping {path} (size {st.st_size} below minimum)")
            return None

        identity = (st.st_dev, st.st_ino)
        if identity in seen:
            logger.debug(f"{path}: another name of {seen[identity].path}")
            seen[identity].alias_paths.append(path)
            return None

        record = FileRecord.from_stat(path, st)
        seen[record.identity] = record
        return record
