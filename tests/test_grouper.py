"""
Unit tests for FileGrouperImpl.
Verifies candidate-key grouping and digest grouping with proper filtering.
"""
from unittest import mock

from hardlinker.core import FileGrouperImpl, CandidateKey
from conftest import make_record


class TestCandidateGrouping:
    """Metadata-only grouping: (device, permission bits, owner, group, size)."""

    def test_filters_single_files(self):
        """Only groups with 2+ records are returned."""
        records = [
            make_record("/a.txt", size=1024),
            make_record("/b.txt", size=1024),
            make_record("/c.txt", size=2048),
        ]
        groups = FileGrouperImpl().group_by_candidate_key(records)

        assert len(groups) == 1
        key, members = next(iter(groups.items()))
        assert key.size_bytes == 1024
        assert [r.path for r in members] == ["/a.txt", "/b.txt"]

    def test_different_sizes_never_grouped(self):
        records = [make_record("/a", size=1), make_record("/b", size=2)]
        assert FileGrouperImpl().group_by_candidate_key(records) == {}

    def test_different_devices_never_grouped(self):
        """A candidate group never mixes device ids."""
        records = [
            make_record("/mnt/a/x", device=1),
            make_record("/mnt/b/x", device=2),
            make_record("/mnt/a/y", device=1),
        ]
        groups = FileGrouperImpl().group_by_candidate_key(records)

        assert len(groups) == 1
        members = next(iter(groups.values()))
        assert {r.device_id for r in members} == {1}

    def test_permission_owner_group_must_match(self):
        """Files differing in mode, uid or gid land in separate (singleton) groups."""
        records = [
            make_record("/base"),
            make_record("/mode", mode=0o600),
            make_record("/uid", uid=0),
            make_record("/gid", gid=0),
        ]
        assert FileGrouperImpl().group_by_candidate_key(records) == {}

    def test_preserves_discovery_order(self):
        records = [make_record(f"/f{i}") for i in (3, 1, 2)]
        members = next(iter(FileGrouperImpl().group_by_candidate_key(records).values()))
        assert [r.path for r in members] == ["/f3", "/f1", "/f2"]

    def test_key_built_from_record(self):
        record = make_record("/a", size=10, device=7, mode=0o755, uid=1, gid=2)
        assert CandidateKey.of(record) == CandidateKey(7, 0o755, 1, 2, 10)

    def test_does_not_touch_the_disk(self):
        """Candidate grouping is pure: records for nonexistent paths group fine."""
        records = [make_record("/does/not/exist/1"), make_record("/does/not/exist/2")]
        hasher = mock.Mock()
        groups = FileGrouperImpl(hasher).group_by_candidate_key(records)
        assert len(groups) == 1
        assert hasher.method_calls == []


class TestDigestGrouping:
    """Grouping through the injected hasher."""

    def test_groups_by_content_hash_hex(self):
        """Content groups are keyed by hex digest and singletons are dropped."""
        records = [make_record("/dup1"), make_record("/dup2"), make_record("/unique")]
        records[0].content_hash = b"\x01" * 32
        records[1].content_hash = b"\x01" * 32
        records[2].content_hash = b"\x02" * 32

        groups = FileGrouperImpl().group_by_content_hash(records)

        assert list(groups) == ["01" * 32]
        assert [r.path for r in groups["01" * 32]] == ["/dup1", "/dup2"]

    def test_read_errors_reported_and_excluded(self):
        """A record whose hash fails is left out and passed to on_error."""
        records = [make_record("/ok1"), make_record("/ok2"), make_record("/gone")]
        hasher = mock.Mock()

        def front(record):
            if record.path == "/gone":
                raise FileNotFoundError(2, "No such file", record.path)
            return b"same"

        hasher.compute_front_hash.side_effect = front
        errors = []

        groups = FileGrouperImpl(hasher).group_by_front_hash(
            records, on_error=lambda r, e: errors.append((r.path, type(e))))

        assert [r.path for r in groups[b"same"]] == ["/ok1", "/ok2"]
        assert errors == [("/gone", FileNotFoundError)]

    def test_sibling_failure_drops_group(self):
        """If one of two files fails to hash, the survivor has nobody to merge with."""
        records = [make_record("/ok"), make_record("/bad")]
        hasher = mock.Mock()
        hasher.compute_content_hash.side_effect = [b"\x00" * 32, PermissionError("denied")]

        assert FileGrouperImpl(hasher).group_by_content_hash(records) == {}
