from __future__ import annotations

"""
Build Setup & Environment Preparation Stage.

Handles the path-resolution phase of a build:
1. Materialization of the source directory handle supplied by the host.
2. Validation that the source is an existing directory.
3. Creation of the destination directory (temporary when none is given).
4. Computation of the manifest path inside the destination.
"""

import logging
import os
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Optional, Union

from treedigest.domain.errors import ConfigError, FilesystemError
from treedigest.infra.fs import create_temp_output_dir, discard_temp_output_dir, safe_mkdir

logger = logging.getLogger(__name__)

# A source directory handle: a ready path, a future resolving to one, or a
# zero-argument callable that materializes the tree and returns its path.
SourceHandle = Union[str, "os.PathLike[str]", "Future[str]", Callable[[], str]]


@dataclass(frozen=True)
class BuildEnvironment:
    """
    Resolved filesystem locations for one build.

    Attributes:
        source_dir: Absolute source directory to walk.
        dest_dir: Absolute destination directory.
        manifest_path: Absolute path of the manifest to write.
        dest_is_temporary: True when dest_dir was created by the build.
    """
    source_dir: str
    dest_dir: str
    manifest_path: str
    dest_is_temporary: bool = False


# ==============================================================================
# SOURCE RESOLUTION
# ==============================================================================

def resolve_source(source: SourceHandle) -> str:
    """
    Materialize a source handle into an absolute directory path.

    Args:
        source: Path, Future or callable supplied by the host tool.

    Returns:
        str: Absolute path of an existing directory.

    Raises:
        FilesystemError: If the resolved path is not an existing directory.
        Exception: Whatever the future or callable raised while materializing.
    """
    if isinstance(source, Future):
        raw = source.result()
    elif callable(source):
        raw = source()
    else:
        raw = source

    if raw is None:
        raise FilesystemError("Source tree resolved to no directory.")

    # Host handles are taken literally; ~ and $VAR expansion belongs to the CLI
    source_dir = os.path.abspath(os.fspath(raw))
    if not os.path.isdir(source_dir):
        raise FilesystemError(
            f"Invalid or non-existent source directory: {source_dir}", path=source_dir
        )
    return source_dir


# ==============================================================================
# ENVIRONMENT PREPARATION LOGIC
# ==============================================================================

def prepare_environment(
        source: SourceHandle,
        dest_dir: Optional[str],
        outputname: str,
) -> BuildEnvironment:
    """
    Resolve every filesystem location needed by the build.

    Args:
        source: Source directory handle.
        dest_dir: Destination directory, or None for a fresh temporary one.
        outputname: Manifest filename relative to the destination.

    Returns:
        BuildEnvironment: Resolved locations.

    Raises:
        FilesystemError: On an invalid source or an uncreatable destination.
        ConfigError: If outputname would place the manifest outside dest_dir.
    """
    source_dir = resolve_source(source)

    if dest_dir is None:
        final_dest = create_temp_output_dir()
        is_temp = True
        logger.debug(f"Using temporary destination directory: {final_dest}")
    else:
        final_dest = os.path.abspath(os.fspath(dest_dir))
        is_temp = False
        ok, err = safe_mkdir(final_dest)
        if not ok:
            raise FilesystemError(
                f"Cannot create destination directory {final_dest}: {err}", path=final_dest
            )

    try:
        manifest_path = _manifest_path(final_dest, outputname)
    except ConfigError:
        if is_temp:
            discard_temp_output_dir(final_dest)
        raise

    logger.debug(f"Build environment ready: {source_dir} -> {manifest_path}")
    return BuildEnvironment(
        source_dir=source_dir,
        dest_dir=final_dest,
        manifest_path=manifest_path,
        dest_is_temporary=is_temp,
    )


def _manifest_path(dest_dir: str, outputname: str) -> str:
    """Join outputname onto dest_dir, refusing names that escape it."""
    if not outputname or os.path.isabs(outputname):
        raise ConfigError(f"Invalid manifest output name: '{outputname}'")

    path = os.path.abspath(os.path.join(dest_dir, outputname))
    if os.path.commonpath([path, dest_dir]) != dest_dir or path == dest_dir:
        raise ConfigError(f"Manifest output name escapes the destination: '{outputname}'")
    return path
