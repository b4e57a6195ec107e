from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from treedigest.domain.constants import DEFAULT_HASH_ALGORITHM, DEFAULT_OUTPUT_NAME

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the treedigest CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="treedigest",
        description=(
            "Fingerprint the files of a directory tree and write a JSON manifest "
            "mapping logical names to content-hashed names."
        ),
    )

    # --- Path Management ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help="Source directory to digest (default: current directory).",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Destination directory for the manifest (default: a new temporary directory).",
    )
    p.add_argument(
        "--outputname",
        dest="outputname",
        default=None,
        help=f"Manifest filename inside the destination (default: {DEFAULT_OUTPUT_NAME}).",
    )

    # --- Fingerprinting ---
    p.add_argument(
        "--permutation",
        dest="permutation",
        default=None,
        help="Salt appended to every file's content before hashing.",
    )
    p.add_argument(
        "--ext",
        dest="extensions",
        default=None,
        help="Comma-separated list of eligible extensions, without dots (default: js).",
    )
    p.add_argument(
        "--algorithm",
        dest="hash_algorithm",
        default=None,
        help=f"hashlib algorithm used for fingerprints (default: {DEFAULT_HASH_ALGORITHM}).",
    )

    # --- Runtime Constraints and Safety ---
    p.add_argument(
        "--workers",
        dest="max_workers",
        type=int,
        default=None,
        help="Maximum number of files hashed concurrently.",
    )
    p.add_argument(
        "--strict-collisions",
        action="store_true",
        help="Fail when two files resolve to the same logical name.",
    )
    p.add_argument(
        "--copy-tree",
        action="store_true",
        help="Copy the source tree into the destination next to the manifest.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON file with configuration values.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore --config and start from built-in defaults.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this rotating file.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the build result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset. Options the user did
                        not pass are present with a None value.
    """
    overrides: Dict[str, Any] = {}

    overrides["input_path"] = args.input_path
    overrides["output_path"] = args.output_path
    overrides["outputname"] = args.outputname
    overrides["permutation"] = args.permutation
    overrides["hash_algorithm"] = args.hash_algorithm
    overrides["max_workers"] = args.max_workers

    if args.extensions:
        overrides["extensions"] = _split_csv(args.extensions)

    if args.strict_collisions:
        overrides["strict_collisions"] = True
    if args.copy_tree:
        overrides["copy_tree"] = True

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
