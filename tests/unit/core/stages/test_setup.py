from __future__ import annotations

"""
Unit tests for the Build Setup stage.

Validates source handle materialization, destination preparation and
manifest path containment.
"""

import os
import tempfile
from concurrent.futures import Future
from pathlib import Path
from unittest.mock import patch

import pytest

from treedigest.core.pipeline.stages.setup import prepare_environment, resolve_source
from treedigest.domain.errors import ConfigError, FilesystemError


def test_resolve_source_accepts_path_variants(tmp_path: Path) -> None:
    """TC-01: Verify str, Path and trailing-separator inputs resolve identically."""
    expected = os.path.abspath(str(tmp_path))

    assert resolve_source(str(tmp_path)) == expected
    assert resolve_source(tmp_path) == expected
    assert resolve_source(str(tmp_path) + os.sep) == expected


def test_resolve_source_from_future(tmp_path: Path) -> None:
    """TC-02: Verify that a completed future is materialized."""
    fut: Future = Future()
    fut.set_result(str(tmp_path))

    assert resolve_source(fut) == os.path.abspath(str(tmp_path))


def test_resolve_source_from_callable(tmp_path: Path) -> None:
    """TC-03: Verify that a callable is invoked to produce the tree."""
    calls = []

    def _materialize() -> str:
        calls.append(1)
        return str(tmp_path)

    assert resolve_source(_materialize) == os.path.abspath(str(tmp_path))
    assert calls == [1]


def test_resolve_source_failed_future_propagates() -> None:
    """TC-04: Verify that an upstream failure is not swallowed."""
    fut: Future = Future()
    fut.set_exception(RuntimeError("upstream broke"))

    with pytest.raises(RuntimeError, match="upstream broke"):
        resolve_source(fut)


def test_resolve_source_invalid(tmp_path: Path) -> None:
    """TC-05: Verify that missing directories, files and None are rejected."""
    f = tmp_path / "file.js"
    f.write_text("x")

    with pytest.raises(FilesystemError, match="Invalid or non-existent"):
        resolve_source(str(tmp_path / "void"))
    with pytest.raises(FilesystemError):
        resolve_source(str(f))
    with pytest.raises(FilesystemError):
        resolve_source(lambda: None)


def test_prepare_environment_creates_destination(tmp_path: Path) -> None:
    """TC-06: Verify that a missing destination is created and paths are absolute."""
    src = tmp_path / "src"
    src.mkdir()
    dest = tmp_path / "out" / "nested"

    env = prepare_environment(str(src), str(dest), "digest.json")

    assert dest.is_dir()
    assert env.dest_dir == os.path.abspath(str(dest))
    assert env.manifest_path == os.path.join(env.dest_dir, "digest.json")
    assert env.dest_is_temporary is False


def test_prepare_environment_temporary_destination(tmp_path: Path) -> None:
    """TC-07: Verify that omitting the destination creates a fresh temp directory."""
    env = prepare_environment(str(tmp_path), None, "digest.json")

    try:
        assert env.dest_is_temporary is True
        assert os.path.isdir(env.dest_dir)
        assert os.path.basename(env.dest_dir).startswith("treedigest-")
        assert os.listdir(env.dest_dir) == []
    finally:
        os.rmdir(env.dest_dir)


def test_prepare_environment_subdirectory_outputname(tmp_path: Path) -> None:
    """TC-08: Verify that a relative outputname may point into a subdirectory."""
    env = prepare_environment(str(tmp_path), str(tmp_path / "out"), os.path.join("meta", "d.json"))

    assert env.manifest_path == os.path.join(str(tmp_path / "out"), "meta", "d.json")


@pytest.mark.parametrize("name", ["", os.path.join("..", "escape.json"), os.path.abspath("abs.json"), "."])
def test_prepare_environment_rejects_escaping_outputname(tmp_path: Path, name: str) -> None:
    """TC-09: Verify that the manifest can never land outside the destination."""
    with pytest.raises(ConfigError):
        prepare_environment(str(tmp_path), str(tmp_path / "out"), name)


def test_prepare_environment_uncreatable_destination(tmp_path: Path) -> None:
    """TC-10: Verify that a destination creation failure raises FilesystemError."""
    with patch(
        "treedigest.core.pipeline.stages.setup.safe_mkdir",
        return_value=(False, "read-only file system"),
    ):
        with pytest.raises(FilesystemError, match="read-only"):
            prepare_environment(str(tmp_path), str(tmp_path / "out"), "digest.json")


def test_resolve_source_takes_host_paths_literally(tmp_path: Path, monkeypatch) -> None:
    """TC-11: Verify that '$VAR' and trailing spaces in handles are not rewritten."""
    monkeypatch.setenv("TD_SHADOW", "elsewhere")
    literal = tmp_path / "$TD_SHADOW"
    literal.mkdir()
    spaced = tmp_path / "assets "
    spaced.mkdir()

    assert resolve_source(str(literal)) == str(literal)
    assert resolve_source(lambda: str(spaced)) == str(spaced)


def test_prepare_environment_removes_temp_dir_on_bad_outputname(tmp_path: Path, monkeypatch) -> None:
    """TC-12: Verify that a rejected outputname does not leave a temporary destination."""
    temp_root = tmp_path / "tmp"
    temp_root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_root))
    src = tmp_path / "src"
    src.mkdir()

    with pytest.raises(ConfigError):
        prepare_environment(str(src), None, os.path.join("..", "escape.json"))

    assert list(temp_root.iterdir()) == []
