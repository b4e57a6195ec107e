from __future__ import annotations

"""
Unit tests for the Manifest Name Resolution stage.

Verifies:
1. Logical names are root-relative and extension-stripped.
2. Root-level files carry no directory prefix.
3. Trailing separators on the root are irrelevant.
4. Fingerprinted names append '-' and the digest.
"""

import os

import pytest

from treedigest.core.pipeline.stages.resolver import logical_name_for, resolve_entry

ROOT = os.path.abspath(os.path.join(os.sep, "project", "src"))


def test_root_level_file_has_no_prefix() -> None:
    """TC-01: Verify that a file directly under the root maps to its stem."""
    assert logical_name_for(os.path.join(ROOT, "app.js"), ROOT) == "app"


def test_nested_file_keeps_directory_path() -> None:
    """TC-02: Verify that nested directories are joined with the platform separator."""
    path = os.path.join(ROOT, "a", "b", "c", "util.js")

    assert logical_name_for(path, ROOT) == os.path.join("a", "b", "c", "util")


def test_only_last_extension_is_stripped() -> None:
    """TC-03: Verify that 'core.min.js' becomes 'core.min'."""
    path = os.path.join(ROOT, "lib", "core.min.js")

    assert logical_name_for(path, ROOT) == os.path.join("lib", "core.min")


def test_trailing_separator_on_root_is_ignored() -> None:
    """TC-04: Verify that root '/project/src/' behaves like '/project/src'."""
    path = os.path.join(ROOT, "lib", "util.js")

    assert logical_name_for(path, ROOT + os.sep) == logical_name_for(path, ROOT)


def test_file_outside_root_is_rejected() -> None:
    """TC-05: Verify that paths escaping the root raise ValueError."""
    outside = os.path.join(os.path.dirname(ROOT), "other", "x.js")

    with pytest.raises(ValueError):
        logical_name_for(outside, ROOT)


def test_resolve_entry_builds_fingerprinted_name() -> None:
    """TC-06: Verify the manifest entry fields."""
    path = os.path.join(ROOT, "lib", "util.js")
    digest = "0123456789abcdef0123456789abcdef"

    entry = resolve_entry(path, ROOT, digest)

    assert entry.logical_name == os.path.join("lib", "util")
    assert entry.fingerprinted_name == os.path.join("lib", "util") + "-" + digest
    assert entry.source_path == path


def test_undecodable_bytes_become_replacement_character() -> None:
    """TC-07: Verify that non-UTF-8 filename bytes yield a UTF-8 encodable name."""
    # 'caf\xe9.js' as surfaced by os.listdir on a UTF-8 filesystem
    path = os.path.join(ROOT, "lib", "caf\udce9.js")

    entry = resolve_entry(path, ROOT, "ff")

    assert entry.logical_name == os.path.join("lib", "caf\ufffd")
    assert entry.fingerprinted_name == os.path.join("lib", "caf\ufffd") + "-ff"
    entry.fingerprinted_name.encode("utf-8")
    assert entry.source_path == path
