"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Filesystem primitives used by the hardlink merger.
Kept behind one class so tests can patch a single seam to induce failures.
"""
import os
import logging
from pathlib import Path
from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    Thin wrappers over the OS calls the merge protocol needs.
    rename/link raise OSError unchanged; the merger classifies them.
    """

    @staticmethod
    def exists(path: str) -> bool:
        """True if anything (including a dangling symlink) occupies path."""
        return os.path.lexists(path)

    @staticmethod
    def rename(src: str, dst: str) -> None:
        os.rename(src, dst)

    @staticmethod
    def link(src: str, dst: str) -> None:
        """Create dst as a hardlink to src."""
        os.link(src, dst)

    @staticmethod
    def remove(path: str) -> None:
        os.remove(path)

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @classmethod
    def discard(cls, path: str, use_trash: bool = False) -> None:
        """
        Get rid of a staged original after a successful link.

        Raises:
            OSError: unlink failed
            RuntimeError: trash move failed
        """
        if use_trash:
            logger.debug(f"Moving {path} to trash")
            cls.move_to_trash(path)
        else:
            cls.remove(path)
