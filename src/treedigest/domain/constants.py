from __future__ import annotations

"""
Domain Constants.

Centralizes the defaults shared by the configuration layer, the hashing
stage and the CLI.
"""

from typing import List

DEFAULT_OUTPUT_NAME = "digest.json"
DEFAULT_PERMUTATION = ""
DEFAULT_HASH_ALGORITHM = "md5"

# 64 KiB read buffer for the streaming hasher
DEFAULT_CHUNK_SIZE = 64 * 1024

# Separates the logical name from the digest in fingerprinted names
FINGERPRINT_SEPARATOR = "-"

TEMP_DIR_PREFIX = "treedigest-"


def default_extensions() -> List[str]:
    """
    Get the default list of eligible file extensions.

    Returns:
        List[str]: Extensions without a leading dot.
    """
    return ["js"]
