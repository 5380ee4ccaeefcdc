"""
Unit tests for HasherImpl.
Verifies SHA-256 content hashing, xxHash64 front hashing and per-record caching.
"""
import hashlib
import pytest
import xxhash
from unittest import mock

from hardlinker.core.hasher import HasherImpl, FRONT_CHUNK_SIZE
from conftest import make_record


def record_for(path, content):
    return make_record(str(path), size=len(content))


class TestContentHash:

    def test_matches_sha256_of_whole_file(self, make_file):
        """Content hash is a 32-byte SHA-256 digest over every byte."""
        content = b"test content " * 1000
        path = make_file("f.bin", content)

        digest = HasherImpl().compute_content_hash(record_for(path, content))

        assert digest == hashlib.sha256(content).digest()
        assert len(digest) == 32

    def test_reads_in_chunks(self, make_file):
        """Small read buffers still hash the full stream."""
        content = bytes(range(256)) * 50
        path = make_file("f.bin", content)

        digest = HasherImpl(read_chunk_size=7).compute_content_hash(record_for(path, content))
        assert digest == hashlib.sha256(content).digest()

    def test_empty_file(self, make_file):
        path = make_file("empty", b"")
        assert HasherImpl().compute_content_hash(record_for(path, b"")) == hashlib.sha256(b"").digest()

    def test_same_content_same_hash_different_content_different_hash(self, make_file):
        a = make_file("a", b"A" * 1024)
        b = make_file("b", b"A" * 1024)
        c = make_file("c", b"B" * 1024)
        hasher = HasherImpl()

        ha, hb, hc = (hasher.compute_content_hash(record_for(p, b"x" * 1024)) for p in (a, b, c))
        assert ha == hb
        assert ha != hc

    def test_result_cached_on_record(self, make_file):
        """A file is read at most once per run; later calls reuse record.content_hash."""
        path = make_file("f", b"data")
        record = record_for(path, b"data")
        hasher = HasherImpl()

        first = hasher.compute_content_hash(record)
        assert record.content_hash == first

        with mock.patch("builtins.open", side_effect=AssertionError("file re-read")):
            assert hasher.compute_content_hash(record) == first

    def test_missing_file_raises_oserror(self, temp_dir):
        record = make_record(str(temp_dir / "gone"))
        with pytest.raises(FileNotFoundError):
            HasherImpl().compute_content_hash(record)
        assert record.content_hash is None


class TestFrontHash:

    def test_only_first_chunk_counts(self, make_file):
        """Files sharing their first FRONT_CHUNK_SIZE bytes share a front hash."""
        head = b"H" * FRONT_CHUNK_SIZE
        a = make_file("a", head + b"tail-one")
        b = make_file("b", head + b"tail-two")
        hasher = HasherImpl()

        front_a = hasher.compute_front_hash(record_for(a, head + b"tail-one"))
        front_b = hasher.compute_front_hash(record_for(b, head + b"tail-two"))

        assert front_a == front_b
        assert front_a == xxhash.xxh64(head).digest()
        assert len(front_a) == 8

    def test_front_hash_does_not_set_content_hash(self, make_file):
        path = make_file("f", b"abc")
        record = record_for(path, b"abc")
        HasherImpl().compute_front_hash(record)
        assert record.front_hash is not None
        assert record.content_hash is None
