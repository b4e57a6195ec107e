from __future__ import annotations

"""
Digest Domain Data Models.

Defines the transient structures produced while walking a source tree and
the entries that end up in the manifest.
"""

from dataclasses import dataclass
from enum import Enum


# -----------------------------------------------------------------------------
# TRAVERSAL MODELS
# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"


@dataclass(frozen=True)
class TreeNode:
    """
    Filesystem entry visited during the walk.

    Attributes:
        path: Absolute filesystem path.
        kind: Directory, regular file, or anything else (sockets, fifos).
        eligible: Whether the file passed the extension filter. Always False
                  for directories.
    """
    path: str
    kind: NodeKind
    eligible: bool = False


# -----------------------------------------------------------------------------
# MANIFEST MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ManifestEntry:
    """
    One logical-name to fingerprinted-name pair.

    Attributes:
        logical_name: Root-relative path with the extension stripped.
        fingerprinted_name: logical_name + "-" + hex digest.
        source_path: Absolute path of the file that produced the entry.
                     Not serialized.
    """
    logical_name: str
    fingerprinted_name: str
    source_path: str = ""
