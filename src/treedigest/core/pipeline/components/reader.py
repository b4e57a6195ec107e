from __future__ import annotations

"""
Streaming File Reader.

Yields the raw bytes of a file in fixed-size chunks so that arbitrarily
large assets can be hashed without loading them into memory.
"""

from typing import Iterator

from treedigest.domain.constants import DEFAULT_CHUNK_SIZE

# -----------------------------------------------------------------------------
# STREAM READING OPERATIONS
# -----------------------------------------------------------------------------

def stream_file_chunks(file_path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Generate the content of a file as sequential binary chunks.

    Reads strictly forward: no seeking, no re-reads. OSError propagates to
    the caller.

    Args:
        file_path: Absolute path to the target file.
        chunk_size: Maximum number of bytes per chunk.

    Yields:
        bytes: Non-empty chunks in file order.
    """
    with open(file_path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            yield chunk
