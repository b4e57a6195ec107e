from __future__ import annotations

"""
Unit tests for the Streaming Hasher stage.

Verifies:
1. Digest equals hash(content + permutation) for every supported algorithm.
2. Sensitivity to content and permutation.
3. Accumulator single-finalization contract.
4. Read failures surface as FilesystemError.
"""

import hashlib
from pathlib import Path
from unittest.mock import patch

import pytest

from treedigest.core.pipeline.stages.hasher import (
    HashAccumulator,
    StreamingHasher,
    supported_algorithms,
)
from treedigest.domain.errors import ConfigError, FilesystemError


def test_md5_of_content_and_permutation(tmp_path: Path) -> None:
    """TC-01: Verify the default digest is MD5 over content followed by the salt."""
    f = tmp_path / "app.js"
    f.write_bytes(b"console.log(1)")

    digest = StreamingHasher(permutation="v2").hash_file(str(f))

    assert digest == hashlib.md5(b"console.log(1)v2").hexdigest()
    assert len(digest) == 32
    assert digest == digest.lower()


def test_empty_file_and_empty_permutation(tmp_path: Path) -> None:
    """TC-02: Verify that an empty file with no salt hashes the empty string."""
    f = tmp_path / "empty.js"
    f.write_bytes(b"")

    assert StreamingHasher().hash_file(str(f)) == hashlib.md5(b"").hexdigest()


def test_permutation_is_utf8_encoded(tmp_path: Path) -> None:
    """TC-03: Verify that non-ASCII salts are fed as UTF-8 bytes."""
    f = tmp_path / "a.js"
    f.write_bytes(b"x")

    digest = StreamingHasher(permutation="ñ").hash_file(str(f))

    assert digest == hashlib.md5(b"x" + "ñ".encode("utf-8")).hexdigest()


def test_chunking_does_not_change_digest(tmp_path: Path) -> None:
    """TC-04: Verify that the read buffer size has no influence on the result."""
    f = tmp_path / "big.js"
    f.write_bytes(b"abcdefghij" * 1000)

    small = StreamingHasher(permutation="p", chunk_size=7).hash_file(str(f))
    large = StreamingHasher(permutation="p", chunk_size=1 << 20).hash_file(str(f))

    assert small == large


def test_digest_sensitivity(tmp_path: Path) -> None:
    """TC-05: Verify that a one-byte or salt change alters the digest."""
    f = tmp_path / "a.js"
    f.write_bytes(b"var a = 1;")
    base = StreamingHasher().hash_file(str(f))

    assert StreamingHasher(permutation="x").hash_file(str(f)) != base

    f.write_bytes(b"var a = 2;")
    assert StreamingHasher().hash_file(str(f)) != base


def test_alternative_algorithm(tmp_path: Path) -> None:
    """TC-06: Verify that a configured algorithm is honored."""
    f = tmp_path / "a.js"
    f.write_bytes(b"data")

    digest = StreamingHasher(permutation="s", algorithm="sha256").hash_file(str(f))

    assert digest == hashlib.sha256(b"datas").hexdigest()


def test_supported_algorithms_excludes_shake() -> None:
    """TC-07: Verify that variable-length digests are not offered."""
    algos = supported_algorithms()

    assert "md5" in algos
    assert "sha256" in algos
    assert not any(a.startswith("shake_") for a in algos)
    assert algos == sorted(algos)


def test_invalid_hasher_parameters() -> None:
    """TC-08: Verify unsupported algorithm and chunk size raise ConfigError."""
    with pytest.raises(ConfigError):
        StreamingHasher(algorithm="crc32")
    with pytest.raises(ConfigError):
        StreamingHasher(algorithm="shake_128")
    with pytest.raises(ConfigError):
        StreamingHasher(chunk_size=0)


def test_accumulator_finalizes_once() -> None:
    """TC-09: Verify that updates and finalize after finalization are rejected."""
    acc = HashAccumulator("/virtual/a.js")
    acc.update(b"abc")

    assert acc.finalize("") == hashlib.md5(b"abc").hexdigest()
    assert acc.finalized is True

    with pytest.raises(RuntimeError):
        acc.update(b"more")
    with pytest.raises(RuntimeError):
        acc.finalize("")


def test_read_failure_raises_filesystem_error(tmp_path: Path) -> None:
    """TC-10: Verify that an I/O error mid-stream is wrapped with the file path."""
    f = tmp_path / "a.js"
    f.write_bytes(b"content")

    def _broken(*_args, **_kwargs):
        yield b"partial"
        raise OSError("device error")

    with patch(
        "treedigest.core.pipeline.stages.hasher.stream_file_chunks",
        side_effect=_broken,
    ):
        with pytest.raises(FilesystemError) as exc:
            StreamingHasher().hash_file(str(f))

    assert exc.value.path == str(f)
    assert "device error" in str(exc.value)


def test_missing_file_raises_filesystem_error(tmp_path: Path) -> None:
    """TC-11: Verify that opening a vanished file fails the hash."""
    with pytest.raises(FilesystemError):
        StreamingHasher().hash_file(str(tmp_path / "gone.js"))
