"""
Shared fixtures for deduplication engine tests.
Creates isolated temporary directories with controlled test files.
"""
import itertools
import os
import pytest
import tempfile
from pathlib import Path
from typing import Dict, Callable

from hardlinker.core.models import FileRecord


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_file(temp_dir) -> Callable[..., Path]:
    """
    Factory writing a file under temp_dir with explicit permission bits,
    so tests do not depend on the process umask.
    """
    def _make(relative: str, content: bytes, mode: int = 0o644) -> Path:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        os.chmod(path, mode)
        return path
    return _make


@pytest.fixture
def test_files(make_file) -> Dict[str, Path]:
    """
    Creates controlled test files for deduplication scenarios:
    - 2 identical files + 1 identical copy in a subdirectory
    - 2 identical larger files
    - 2 unique files of the same size as a duplicate pair
    - 1 empty file
    """
    content_a = b"A" * 1024
    content_b = b"B" * 2048
    return {
        "dup1_a": make_file("dup1_a.txt", content_a),
        "dup1_b": make_file("dup1_b.txt", content_a),
        "sub_dup": make_file("subdir/dup_in_subdir.txt", content_a),
        "dup2_a": make_file("dup2_a.bin", content_b),
        "dup2_b": make_file("dup2_b.bin", content_b),
        "unique1": make_file("unique1.txt", b"C" * 1024),
        "unique2": make_file("unique2.txt", b"D" * 2048),
        "empty": make_file("empty.txt", b""),
    }


_inodes = itertools.count(1000)


def make_record(path: str, size: int = 1024, device: int = 1, inode: int = None,
                mode: int = 0o644, uid: int = 1000, gid: int = 1000, nlink: int = 1) -> FileRecord:
    """In-memory FileRecord for tests that never touch the disk."""
    return FileRecord(
        path=path,
        device_id=device,
        inode_number=inode if inode is not None else next(_inodes),
        hardlink_count=nlink,
        permission_bits=mode,
        owner_id=uid,
        group_id=gid,
        size_bytes=size,
    )


def snapshot(root: Path) -> Dict[str, bytes]:
    """Relative path -> content for every regular file under root."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file() and not p.is_symlink()
    }
