from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of configuration
sources (defaults, config file and CLI overrides), pipeline execution and
result rendering.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from treedigest.core.pipeline.engine import run_pipeline
from treedigest.core.pipeline.stages.validator import validate_config
from treedigest.domain.config import get_default_config, load_config_file
from treedigest.domain.errors import ConfigError
from treedigest.domain.pipeline_models import BuildResult
from treedigest.infra.fs import normalize_path
from treedigest.infra.logging import LoggingConfig, configure_logging, get_logger
from treedigest.interface.cli import args as cli_args

logger = get_logger(__name__)

_MERGEABLE_KEYS = (
    "input_path", "output_path", "outputname", "permutation", "extensions",
    "hash_algorithm", "chunk_size", "max_workers", "strict_collisions", "copy_tree",
)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 build failure, 2 invalid input,
             130 interrupted).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (defaults vs config file)
    base_conf = get_default_config()
    if args.config_file and not args.use_defaults:
        try:
            base_conf = load_config_file(args.config_file)
        except ConfigError as e:
            logger.error(str(e))
            print(f"ERROR: {e}", file=sys.stderr)
            return 2

    # 4. Map and merge command-line overrides
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)

    # Short-circuit if configuration dump is requested
    if args.dump_config:
        clean_conf, warnings = validate_config(raw_conf, strict=False)
        for w in warnings:
            logger.warning(f"Configuration Warning: {w}")
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 5. Pre-flight input verification
    raw_input = raw_conf.get("input_path")
    input_path = normalize_path(raw_input if isinstance(raw_input, str) else None, os.getcwd())
    if not os.path.isdir(input_path):
        msg = f"Input directory does not exist: {input_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    # 6. Pipeline execution phase
    try:
        result = run_pipeline(raw_conf)
    except KeyboardInterrupt:
        logger.warning("Build interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return 130

    # 7. Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return 0 if result.ok else 1

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only known keys with a non-None value are merged.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in _MERGEABLE_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: BuildResult) -> None:
    """
    Format and print the build result to the standard output.

    Args:
        result: The build result to render.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    print("Digest completed successfully.")
    print(f"Source directory: {result.source_dir}")
    print(f"Output directory: {result.dest_dir}")
    print(f"Manifest: {result.manifest_path}")
    print(f"Algorithm: {result.hash_algorithm}")

    stats_keys = {
        "hashed": "Files hashed",
        "skipped": "Files skipped",
        "directories": "Directories visited",
        "collisions": "Name collisions",
    }
    for key, label in stats_keys.items():
        if key in result.counters:
            print(f"{label}: {result.counters[key]}")


# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
