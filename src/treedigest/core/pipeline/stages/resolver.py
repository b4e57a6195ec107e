from __future__ import annotations

"""
Manifest Name Resolution.

Turns an absolute file path and its digest into the manifest's logical key
and fingerprinted value, both relative to the tree root.
"""

import os

from treedigest.domain.constants import FINGERPRINT_SEPARATOR
from treedigest.domain.digest_models import ManifestEntry


def logical_name_for(absolute_path: str, root_path: str) -> str:
    """
    Compute the root-relative, extension-stripped name of a file.

    Files directly under the root have no directory prefix. Trailing
    separators on root_path are ignored. Filename bytes that are not valid
    UTF-8 become U+FFFD in the logical name.

    Args:
        absolute_path: Path of the file.
        root_path: Root of the walked tree.

    Returns:
        str: Logical name using the platform separator.

    Raises:
        ValueError: If absolute_path is not inside root_path.
    """
    root = os.path.abspath(root_path)
    file_path = os.path.abspath(absolute_path)

    relative_dir = os.path.relpath(os.path.dirname(file_path), root)
    if relative_dir == os.curdir:
        relative_dir = ""
    elif relative_dir == os.pardir or relative_dir.startswith(os.pardir + os.sep):
        raise ValueError(f"'{absolute_path}' is not inside '{root_path}'")

    base_no_ext, _ = os.path.splitext(os.path.basename(file_path))
    return _printable_name(os.path.join(relative_dir, base_no_ext))


def _printable_name(name: str) -> str:
    """Replace undecodable filename bytes with U+FFFD so the name encodes as UTF-8."""
    return os.fsencode(name).decode("utf-8", "replace")


def resolve_entry(absolute_path: str, root_path: str, digest_hex: str) -> ManifestEntry:
    """
    Build the manifest entry for a hashed file.

    Args:
        absolute_path: Path of the hashed file.
        root_path: Root of the walked tree.
        digest_hex: Hex digest of the file content and permutation.

    Returns:
        ManifestEntry: The logical / fingerprinted pair.
    """
    logical_name = logical_name_for(absolute_path, root_path)
    return ManifestEntry(
        logical_name=logical_name,
        fingerprinted_name=f"{logical_name}{FINGERPRINT_SEPARATOR}{digest_hex}",
        source_path=os.path.abspath(absolute_path),
    )
