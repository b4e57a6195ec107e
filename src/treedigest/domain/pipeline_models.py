from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the result object returned by the pipeline facade to the interface
layer, together with its factory functions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildResult:
    """
    Unified result object of a complete digest build.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        source_dir: Normalized source directory that was walked.
        dest_dir: Destination directory holding the manifest.
        manifest_path: Absolute path of the written manifest.
        outputname: Manifest filename relative to dest_dir.
        permutation: Salt used for the run.
        extensions: Extensions that were eligible.
        hash_algorithm: Digest algorithm embedded in fingerprinted names.
        manifest: Logical-name to fingerprinted-name mapping.
        counters: Walk statistics.
        summary: Additional execution metadata.
    """
    ok: bool
    error: str

    source_dir: str
    dest_dir: str
    manifest_path: str

    outputname: str
    permutation: str
    extensions: List[str]
    hash_algorithm: str

    manifest: Dict[str, str] = field(default_factory=dict)
    counters: Dict[str, int] = field(default_factory=dict)
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        cfg: Dict[str, Any],
        source_dir: str,
        dest_dir: str = "",
        summary_extra: Optional[Dict[str, Any]] = None
) -> BuildResult:
    """
    Create a failed build result instance.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        source_dir: The source directory.
        dest_dir: The destination directory, if already resolved.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        BuildResult: An immutable error result object.
    """
    return BuildResult(
        ok=False,
        error=error,
        source_dir=source_dir,
        dest_dir=dest_dir,
        manifest_path="",
        outputname=cfg.get("outputname", ""),
        permutation=cfg.get("permutation", ""),
        extensions=list(cfg.get("extensions", [])),
        hash_algorithm=cfg.get("hash_algorithm", ""),
        summary=summary_extra or {},
    )


def create_success_result(
        cfg: Dict[str, Any],
        source_dir: str,
        dest_dir: str,
        manifest_path: str,
        manifest: Optional[Dict[str, str]] = None,
        counters: Optional[Dict[str, int]] = None,
        summary_extra: Optional[Dict[str, Any]] = None
) -> BuildResult:
    """
    Create a successful build result instance.

    Args:
        cfg: Final configuration used during execution.
        source_dir: Normalized source directory.
        dest_dir: Destination directory returned by the build.
        manifest_path: Absolute path of the manifest file.
        manifest: Serialized mapping.
        counters: Walk statistics.
        summary_extra: Final execution metrics.

    Returns:
        BuildResult: An immutable success result object.
    """
    return BuildResult(
        ok=True,
        error="",
        source_dir=source_dir,
        dest_dir=dest_dir,
        manifest_path=manifest_path,
        outputname=cfg.get("outputname", ""),
        permutation=cfg.get("permutation", ""),
        extensions=list(cfg.get("extensions", [])),
        hash_algorithm=cfg.get("hash_algorithm", ""),
        manifest=dict(manifest or {}),
        counters=dict(counters or {}),
        summary=summary_extra or {},
    )
