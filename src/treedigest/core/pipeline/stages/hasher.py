from __future__ import annotations

"""
Streaming Content Hasher.

Computes the fingerprint of a single file incrementally: each chunk read
from disk is fed to a per-file accumulator, the build permutation is fed
last, and the lowercase hex digest is returned. The default algorithm is
MD5, whose 32-character digest is what consumers of the manifest expect.
"""

import hashlib
import logging
from typing import List, Optional

from treedigest.core.pipeline.components.reader import stream_file_chunks
from treedigest.domain.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_HASH_ALGORITHM,
    DEFAULT_PERMUTATION,
)
from treedigest.domain.errors import ConfigError, FilesystemError

logger = logging.getLogger(__name__)


def supported_algorithms() -> List[str]:
    """
    List the hashlib algorithms usable for fingerprints.

    Variable-length SHAKE digests are excluded since hexdigest() needs an
    explicit length for them.

    Returns:
        List[str]: Sorted algorithm names.
    """
    return sorted(a for a in hashlib.algorithms_guaranteed if not a.startswith("shake_"))


class HashAccumulator:
    """
    Incremental hash state owned by the task processing one file.

    The accumulator accepts chunks until finalize() is called exactly once.
    """

    def __init__(self, file_path: str, algorithm: str = DEFAULT_HASH_ALGORITHM) -> None:
        self.file_path = file_path
        self._state = hashlib.new(algorithm)
        self.finalized = False

    def update(self, chunk: bytes) -> None:
        if self.finalized:
            raise RuntimeError(f"Accumulator for '{self.file_path}' already finalized.")
        self._state.update(chunk)

    def finalize(self, permutation: str = DEFAULT_PERMUTATION) -> str:
        """
        Mix in the permutation and extract the digest.

        Args:
            permutation: Salt appended after the file content (UTF-8).

        Returns:
            str: Lowercase hexadecimal digest.
        """
        if self.finalized:
            raise RuntimeError(f"Accumulator for '{self.file_path}' already finalized.")
        self._state.update(permutation.encode("utf-8"))
        self.finalized = True
        return self._state.hexdigest()


class StreamingHasher:
    """
    Produces salted content digests for files.

    Attributes:
        permutation: Salt appended to every file's content.
        algorithm: hashlib algorithm name.
        chunk_size: Read buffer size in bytes.
    """

    def __init__(
            self,
            permutation: str = DEFAULT_PERMUTATION,
            algorithm: str = DEFAULT_HASH_ALGORITHM,
            chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if algorithm not in supported_algorithms():
            raise ConfigError(f"Unsupported hash algorithm: '{algorithm}'")
        if chunk_size <= 0:
            raise ConfigError(f"Chunk size must be positive, got {chunk_size}")

        self.permutation = permutation or ""
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def hash_file(self, file_path: str, accumulator: Optional[HashAccumulator] = None) -> str:
        """
        Compute the fingerprint digest of a file.

        Args:
            file_path: Absolute path of the file to hash.
            accumulator: Fresh accumulator to use; one is created when omitted.

        Returns:
            str: Lowercase hexadecimal digest.

        Raises:
            FilesystemError: If the file cannot be opened or read.
        """
        acc = accumulator or HashAccumulator(file_path, self.algorithm)

        try:
            for chunk in stream_file_chunks(file_path, self.chunk_size):
                acc.update(chunk)
        except OSError as e:
            raise FilesystemError(f"Failed to read '{file_path}': {e}", path=file_path) from e

        digest = acc.finalize(self.permutation)
        logger.debug(f"Hashed {file_path}: {digest}")
        return digest
