from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration dictionaries and sample source trees.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'treedigest.domain.config'.

    Returns:
        Dict[str, Any]: A sample configuration dictionary.
    """
    return {
        # IO Paths
        "input_path": "/tmp/test_input",
        "output_path": "/tmp/test_output",

        # Manifest
        "outputname": "digest.json",
        "permutation": "",
        "extensions": ["js"],

        # Hashing
        "hash_algorithm": "md5",
        "chunk_size": 65536,
        "max_workers": None,

        # Behavior
        "strict_collisions": False,
        "copy_tree": False,
    }


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    Create a small source tree with eligible and ineligible files.

    Structure:
    /src
      app.js          "console.log(1)"
      style.css       "body{}"
      README          "no extension"
      /lib
        util.js       "export default 1"
        /deep
          core.min.js "x"
      /empty
    """
    root = tmp_path / "src"
    (root / "lib" / "deep").mkdir(parents=True)
    (root / "empty").mkdir()

    (root / "app.js").write_bytes(b"console.log(1)")
    (root / "style.css").write_bytes(b"body{}")
    (root / "README").write_bytes(b"no extension")
    (root / "lib" / "util.js").write_bytes(b"export default 1")
    (root / "lib" / "deep" / "core.min.js").write_bytes(b"x")

    return root
