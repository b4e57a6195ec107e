from __future__ import annotations

"""
Configuration Domain Management.

Provides the dictionary-based default configuration consumed by the CLI and
the pipeline, optional loading of a JSON configuration file, and the
immutable BuildConfig handed to the build orchestrator.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from treedigest.domain.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_HASH_ALGORITHM,
    DEFAULT_OUTPUT_NAME,
    DEFAULT_PERMUTATION,
    default_extensions,
)
from treedigest.domain.errors import ConfigError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration Models
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildConfig:
    """
    Immutable build parameters, read once when the orchestrator is created.

    Attributes:
        outputname: Manifest filename, relative to the destination directory.
        permutation: Salt appended to every file's hash input.
        extensions: Accepted file suffixes (exact, case-sensitive, no dot).
        hash_algorithm: hashlib algorithm used for fingerprints.
        chunk_size: Read buffer size for streaming hashes.
        max_workers: Upper bound of concurrent hashing workers (None = default).
        strict_collisions: Fail the build when two files share a logical name.
        copy_tree: Copy the source tree into the destination before writing
                   the manifest.
    """
    outputname: str = DEFAULT_OUTPUT_NAME
    permutation: str = DEFAULT_PERMUTATION
    extensions: Tuple[str, ...] = field(default_factory=lambda: tuple(default_extensions()))
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_workers: Optional[int] = None
    strict_collisions: bool = False
    copy_tree: bool = False


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "input_path": os.getcwd(),
        "output_path": "",

        # Manifest
        "outputname": DEFAULT_OUTPUT_NAME,
        "permutation": DEFAULT_PERMUTATION,
        "extensions": default_extensions(),

        # Hashing
        "hash_algorithm": DEFAULT_HASH_ALGORITHM,
        "chunk_size": DEFAULT_CHUNK_SIZE,
        "max_workers": None,

        # Behavior
        "strict_collisions": False,
        "copy_tree": False,
    }


def build_config(cfg: Dict[str, Any]) -> BuildConfig:
    """
    Convert a validated configuration dictionary into a BuildConfig.

    Args:
        cfg: Output of validate_config.

    Returns:
        BuildConfig: Frozen build parameters.
    """
    return BuildConfig(
        outputname=cfg["outputname"],
        permutation=cfg["permutation"],
        extensions=tuple(cfg["extensions"]),
        hash_algorithm=cfg["hash_algorithm"],
        chunk_size=int(cfg["chunk_size"]),
        max_workers=cfg.get("max_workers"),
        strict_collisions=bool(cfg["strict_collisions"]),
        copy_tree=bool(cfg["copy_tree"]),
    )


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config_file(path: str) -> Dict[str, Any]:
    """
    Load configuration values from a JSON file and merge them over defaults.

    Unknown keys are kept so that validation can report them.

    Args:
        path: Path to a JSON file containing a single object.

    Returns:
        Dict[str, Any]: Defaults updated with the file contents.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object.
    """
    config = get_default_config()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}", path=path) from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed config file: {e}", path=path) from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file must contain a JSON object, found {type(data).__name__}",
            path=path,
        )

    config.update(data)
    logger.debug(f"Configuration loaded from {path}")
    return config
