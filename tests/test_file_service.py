"""
Tests for FileService — the filesystem seam the merger goes through.
Trash behaviour is verified with send2trash patched, so no real trash is touched.
"""
import os
import pytest
from unittest import mock

from hardlinker.services.file_service import FileService


class TestPrimitives:

    def test_exists_sees_dangling_symlink(self, temp_dir):
        """A dangling symlink still occupies the name, so it must count as taken."""
        link = temp_dir / "dangling"
        os.symlink(temp_dir / "missing", link)
        assert FileService.exists(str(link))
        assert not FileService.exists(str(temp_dir / "free"))

    def test_link_creates_shared_inode(self, make_file, temp_dir):
        src = make_file("src", b"x")
        dst = temp_dir / "dst"
        FileService.link(str(src), str(dst))
        assert os.stat(src).st_ino == os.stat(dst).st_ino

    def test_link_refuses_existing_target(self, make_file):
        src = make_file("src", b"x")
        dst = make_file("dst", b"y")
        with pytest.raises(FileExistsError):
            FileService.link(str(src), str(dst))

    def test_rename_and_remove(self, make_file, temp_dir):
        src = make_file("a", b"x")
        moved = temp_dir / "b"
        FileService.rename(str(src), str(moved))
        assert not src.exists()
        FileService.remove(str(moved))
        assert not moved.exists()


class TestDiscard:

    def test_unlinks_by_default(self, make_file):
        path = make_file("staged", b"x")
        with mock.patch("hardlinker.services.file_service.send2trash") as trash:
            FileService.discard(str(path))
        assert not path.exists()
        trash.assert_not_called()

    def test_trash_mode_uses_send2trash(self, make_file):
        path = make_file("staged", b"x")
        with mock.patch("hardlinker.services.file_service.send2trash") as trash:
            FileService.discard(str(path), use_trash=True)
        trash.assert_called_once_with(str(path))

    def test_missing_file_raises(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            FileService.discard(str(temp_dir / "gone"))
        with pytest.raises(FileNotFoundError, match="File not found"):
            FileService.discard(str(temp_dir / "gone"), use_trash=True)


class TestMoveToTrash:

    def test_send2trash_errors_wrapped(self, make_file):
        path = make_file("f", b"x")
        with mock.patch("hardlinker.services.file_service.send2trash", side_effect=OSError("no trash")):
            with pytest.raises(RuntimeError, match="Failed to move to trash"):
                FileService.move_to_trash(str(path))
        assert path.exists()
