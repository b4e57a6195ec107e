from __future__ import annotations

"""
Unit tests for CLI Argument Parsing and Mapping.

Verifies:
1. Parser definitions and defaults.
2. Translation of flags into configuration overrides.
3. Override merging in the application controller.
"""

import pytest

from treedigest.interface.cli.app import _merge_config
from treedigest.interface.cli.args import _split_csv, args_to_overrides, build_parser


def test_parser_defaults() -> None:
    """TC-01: Verify that an empty command line leaves every value unset."""
    args = build_parser().parse_args([])

    assert args.input_path is None
    assert args.output_path is None
    assert args.extensions is None
    assert args.max_workers is None
    assert args.strict_collisions is False
    assert args.json_output is False


def test_parser_full_command_line() -> None:
    """TC-02: Verify mapping of every value-carrying flag."""
    args = build_parser().parse_args([
        "-i", "/src", "-o", "/out", "--outputname", "m.json",
        "--permutation", "v1", "--ext", "js, css", "--algorithm", "sha1",
        "--workers", "3", "--strict-collisions", "--copy-tree",
    ])
    overrides = args_to_overrides(args)

    assert overrides == {
        "input_path": "/src",
        "output_path": "/out",
        "outputname": "m.json",
        "permutation": "v1",
        "hash_algorithm": "sha1",
        "max_workers": 3,
        "extensions": ["js", "css"],
        "strict_collisions": True,
        "copy_tree": True,
    }


def test_parser_rejects_non_integer_workers() -> None:
    """TC-03: Verify that argparse enforces the worker count type."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--workers", "many"])


def test_split_csv() -> None:
    """TC-04: Verify CSV splitting drops blanks and trims items."""
    assert _split_csv(" js ,,css, ") == ["js", "css"]
    assert _split_csv(None) is None


def test_merge_config_ignores_unset_values(mock_config_dict) -> None:
    """TC-05: Verify that None overrides keep the base value."""
    overrides = args_to_overrides(build_parser().parse_args(["--permutation", ""]))
    merged = _merge_config(mock_config_dict, overrides)

    assert merged["input_path"] == mock_config_dict["input_path"]
    assert merged["permutation"] == ""
    assert merged["extensions"] == ["js"]


def test_merge_config_applies_overrides(mock_config_dict) -> None:
    """TC-06: Verify that given values replace the base configuration."""
    overrides = args_to_overrides(build_parser().parse_args(["--ext", "css", "--workers", "2"]))
    merged = _merge_config(mock_config_dict, overrides)

    assert merged["extensions"] == ["css"]
    assert merged["max_workers"] == 2
