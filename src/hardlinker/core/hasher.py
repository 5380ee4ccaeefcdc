"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/hasher.py
Implements file hashing for the content matcher.

- Content identity: SHA-256 over the whole file, read sequentially.
- Pre-filter: xxHash64 over the first FRONT_CHUNK_SIZE bytes. Only ever
  used to split candidate groups, never to confirm duplicates.

Both digests are cached on the FileRecord, so each is computed at most
once per run. Read errors propagate as OSError; the caller decides how
to record them.
"""

import hashlib
import logging

import xxhash

from hardlinker.core.models import FileRecord
from hardlinker.core.interfaces import HashAlgorithm, Hasher

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024  # 1MB
FRONT_CHUNK_SIZE = 64 * 1024


class Sha256AlgorithmImpl(HashAlgorithm):
    """256-bit cryptographic digest used to decide content identity."""

    @staticmethod
    def new():
        return hashlib.sha256()


class XXHashAlgorithmImpl(HashAlgorithm):
    """Fast non-cryptographic digest used only for the front-chunk pre-filter."""

    @staticmethod
    def new():
        return xxhash.xxh64()


class HasherImpl(Hasher):
    """
    Computes and caches digests on FileRecord objects.

    Args:
        content_algorithm: algorithm for whole-file identity (SHA-256 by default)
        front_algorithm: algorithm for the front-chunk pre-hash (xxHash64 by default)
        read_chunk_size: buffer size for sequential reads
    """

    def __init__(
        self,
        content_algorithm: HashAlgorithm = None,
        front_algorithm: HashAlgorithm = None,
        read_chunk_size: int = READ_CHUNK_SIZE,
    ):
        self.content_algorithm = content_algorithm or Sha256AlgorithmImpl()
        self.front_algorithm = front_algorithm or XXHashAlgorithmImpl()
        self.read_chunk_size = read_chunk_size

    def compute_content_hash(self, record: FileRecord) -> bytes:
        """
        Full-content digest of the file. Result is cached in record.content_hash.
        """
        if record.content_hash is not None:
            return record.content_hash

        logger.debug(f"Hashing {record.path}")
        digest = self.content_algorithm.new()
        with open(record.path, "rb") as f:
            while True:
                data = f.read(self.read_chunk_size)
                if not data:
                    break
                digest.update(data)

        record.content_hash = digest.digest()
        return record.content_hash

    def compute_front_hash(self, record: FileRecord) -> bytes:
        """
        Digest of the first FRONT_CHUNK_SIZE bytes. Result is cached in record.front_hash.
        """
        if record.front_hash is not None:
            return record.front_hash

        digest = self.front_algorithm.new()
        with open(record.path, "rb") as f:
            digest.update(f.read(FRONT_CHUNK_SIZE))

        record.front_hash = digest.digest()
        return record.front_hash
