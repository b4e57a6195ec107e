from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, directory creation and atomic file replacement
helpers shared by the setup stage and the manifest writer.
"""

import os
import shutil
import tempfile
from typing import Optional, Tuple

from treedigest.domain.constants import TEMP_DIR_PREFIX

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Trailing separators are dropped. Reverts to fallback if
    the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = os.fspath(path) if path is not None else ""
    p = p.strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def create_temp_output_dir() -> str:
    """
    Create a fresh destination directory under the system temp location.

    Returns:
        str: Absolute path of the new directory.
    """
    return os.path.abspath(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))


def discard_temp_output_dir(path: str) -> None:
    """
    Remove a destination created by create_temp_output_dir() after a failed build.

    Only directories carrying the temp prefix are touched. Removal errors are
    ignored; the build failure being reported takes precedence.

    Args:
        path: Directory returned by create_temp_output_dir().
    """
    if not os.path.basename(path).startswith(TEMP_DIR_PREFIX):
        return
    shutil.rmtree(path, ignore_errors=True)

# -----------------------------------------------------------------------------
# FILESYSTEM OPERATIONS API
# -----------------------------------------------------------------------------

def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)


def atomic_write_bytes(path: str, data: bytes) -> None:
    """
    Replace the content of a file in a single rename.

    The payload is written to a temporary sibling and moved over the target
    with os.replace, so readers never observe a partially written file.

    Args:
        path: Target file path. Parent directories are created as needed.
        data: Complete file content.

    Raises:
        OSError: If any step fails. The temporary file is removed first.
    """
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", dir=parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def copy_tree(source_dir: str, dest_dir: str) -> None:
    """
    Copy every entry of source_dir into dest_dir, merging with existing content.

    Args:
        source_dir: Directory to copy from.
        dest_dir: Directory to copy into (created if missing).

    Raises:
        OSError: If any entry cannot be copied.
    """
    shutil.copytree(source_dir, dest_dir, dirs_exist_ok=True)
