from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates a digest build:
1. Resolves the source tree and prepares the destination directory.
2. Walks the source tree, hashing eligible files on a worker pool.
3. Collects every manifest entry into a single writer.
4. Optionally copies the source tree into the destination.
5. Writes the manifest and reports the destination directory.

BuildOrchestrator is the engine. DigestStep adapts it to the
tree-transformer contract used by host build tools, and run_pipeline wraps
it for the CLI, converting failures into a BuildResult.
"""

import logging
import os
from contextlib import closing
from enum import Enum
from typing import Any, Dict, Optional

from treedigest.core.pipeline.components.filters import ExtensionFilter
from treedigest.core.pipeline.components.writer import ManifestWriter
from treedigest.core.pipeline.stages.hasher import StreamingHasher
from treedigest.core.pipeline.stages.setup import (
    BuildEnvironment,
    SourceHandle,
    prepare_environment,
)
from treedigest.core.pipeline.stages.validator import validate_config
from treedigest.core.pipeline.stages.walker import TreeWalker
from treedigest.domain.config import BuildConfig, build_config
from treedigest.domain.errors import ConfigError, DigestError, FilesystemError, WriteError
from treedigest.domain.pipeline_models import (
    BuildResult,
    create_error_result,
    create_success_result,
)
from treedigest.infra.fs import copy_tree, discard_temp_output_dir, normalize_path

logger = logging.getLogger(__name__)


class BuildState(str, Enum):
    IDLE = "idle"
    RESOLVING_PATHS = "resolving_paths"
    WALKING = "walking"
    WRITING_MANIFEST = "writing_manifest"
    DONE = "done"
    FAILED = "failed"


_TERMINAL_STATES = (BuildState.DONE, BuildState.FAILED)


# ==============================================================================
# BUILD ORCHESTRATOR
# ==============================================================================

class BuildOrchestrator:
    """
    Runs one digest build from source resolution to manifest persistence.

    An orchestrator instance is single-use: it moves from IDLE to DONE or
    FAILED and refuses to run again.

    Attributes:
        config: Immutable build parameters.
        state: Current lifecycle state.
        environment: Resolved locations, available after path resolution.
        manifest: Final manifest mapping, available after a successful run.
        counters: Walk statistics of the run.
        error: First fatal error, if the build failed.
    """

    def __init__(self, config: BuildConfig, *, logger: Optional[logging.Logger] = None) -> None:
        self.config = config
        self._logger = logger or logging.getLogger(__name__)

        self.state = BuildState.IDLE
        self.environment: Optional[BuildEnvironment] = None
        self.manifest: Dict[str, str] = {}
        self.counters: Dict[str, int] = {}
        self.error: Optional[BaseException] = None

    def run(self, source: SourceHandle, dest_dir: Optional[str] = None) -> str:
        """
        Execute the build.

        Args:
            source: Source directory handle (path, Future or callable).
            dest_dir: Destination directory; a temporary one is created if None.

        Returns:
            str: The destination directory holding the manifest.

        Raises:
            DigestError: The first fatal error encountered.
            RuntimeError: If the orchestrator already ran.
        """
        if self.state is not BuildState.IDLE:
            raise RuntimeError(f"Build already executed (state: {self.state.value}).")

        try:
            self._transition(BuildState.RESOLVING_PATHS)
            env = prepare_environment(source, dest_dir, self.config.outputname)
            self.environment = env
            self._logger.info(f"Digesting {env.source_dir}")

            self._transition(BuildState.WALKING)
            writer = self._walk(env.source_dir)

            self._transition(BuildState.WRITING_MANIFEST)
            if self.config.copy_tree:
                self._copy_source(env)
            data = writer.serialize()
            writer.write(env.manifest_path, data)
            self.manifest = writer.as_dict()

        except BaseException as e:
            self.error = e
            self._transition(BuildState.FAILED)
            self._logger.error(f"Digest build failed: {e}")
            if self.environment is not None and self.environment.dest_is_temporary:
                discard_temp_output_dir(self.environment.dest_dir)
                self._logger.debug(f"Removed temporary destination {self.environment.dest_dir}")
            raise

        self._transition(BuildState.DONE)
        self._logger.info(f"Digested {len(self.manifest)} files.")
        return env.dest_dir

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _walk(self, source_dir: str) -> ManifestWriter:
        """Drive the walker and collect its entries into a fresh writer."""
        cfg = self.config
        hasher = StreamingHasher(
            permutation=cfg.permutation,
            algorithm=cfg.hash_algorithm,
            chunk_size=cfg.chunk_size,
        )
        walker = TreeWalker(
            ExtensionFilter(cfg.extensions),
            hasher,
            max_workers=cfg.max_workers,
            logger=self._logger,
        )
        writer = ManifestWriter(strict_collisions=cfg.strict_collisions, logger=self._logger)

        try:
            with closing(walker.walk(source_dir)) as entries:
                for entry in entries:
                    writer.record(entry)
        finally:
            self.counters = {
                "directories": walker.visited_dirs,
                "hashed": walker.hashed_files,
                "skipped": walker.skipped_files,
                "collisions": writer.collisions,
            }

        self.counters["entries"] = len(writer)
        return writer

    def _copy_source(self, env: BuildEnvironment) -> None:
        """Mirror the source tree into the destination as a pass-through tree."""
        if env.source_dir == env.dest_dir:
            return
        if os.path.commonpath([env.source_dir, env.dest_dir]) == env.source_dir:
            raise ConfigError(
                f"Cannot copy '{env.source_dir}' into its own subdirectory '{env.dest_dir}'"
            )
        try:
            copy_tree(env.source_dir, env.dest_dir)
        except OSError as e:
            raise WriteError(
                f"Failed to copy source tree into '{env.dest_dir}': {e}", path=env.dest_dir
            ) from e
        self._logger.debug(f"Copied source tree into {env.dest_dir}")

    def _transition(self, new_state: BuildState) -> None:
        if self.state in _TERMINAL_STATES:
            raise RuntimeError(f"Cannot leave terminal state {self.state.value}.")
        self._logger.debug(f"Build state: {self.state.value} -> {new_state.value}")
        self.state = new_state


# ==============================================================================
# TREE-TRANSFORMER ADAPTER
# ==============================================================================

class DigestStep:
    """
    Build-tool step contract: step(source, dest_dir) -> dest_dir.

    Each call runs a fresh BuildOrchestrator, so one step object can be
    invoked for every rebuild of the host pipeline. Failures propagate as
    exceptions; the destination must not be trusted after a failure.
    """

    def __init__(self, config: Optional[BuildConfig] = None, *, logger: Optional[logging.Logger] = None) -> None:
        self.config = config or BuildConfig()
        self._logger = logger
        self.last_build: Optional[BuildOrchestrator] = None

    def __call__(self, source: SourceHandle, dest_dir: Optional[str] = None) -> str:
        build = BuildOrchestrator(self.config, logger=self._logger)
        self.last_build = build
        return build.run(source, dest_dir)


# ==============================================================================
# PIPELINE FACADE
# ==============================================================================

def run_pipeline(config: Optional[Dict[str, Any]]) -> BuildResult:
    """
    Validate a configuration dictionary and execute a digest build.

    Args:
        config: Raw configuration (input_path, output_path, outputname, ...).

    Returns:
        BuildResult: Object containing status, manifest and counters.
    """
    logger.info("Digest pipeline started.")

    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    source_dir = normalize_path(cfg["input_path"], os.getcwd())
    dest_dir = normalize_path(cfg["output_path"], os.getcwd()) if cfg["output_path"] else None

    build = BuildOrchestrator(build_config(cfg))
    try:
        final_dest = build.run(source_dir, dest_dir)
    except FilesystemError as e:
        return create_error_result(f"Filesystem failure: {e}", cfg, source_dir, dest_dir or "")
    except DigestError as e:
        return create_error_result(str(e), cfg, source_dir, dest_dir or "")

    env = build.environment
    summary = {
        "state": build.state.value,
        "dest_is_temporary": bool(env and env.dest_is_temporary),
        "copied_tree": build.config.copy_tree,
        "warnings": list(warnings),
    }

    logger.info("Digest pipeline completed successfully.")
    return create_success_result(
        cfg,
        source_dir,
        final_dest,
        env.manifest_path if env else "",
        manifest=build.manifest,
        counters=build.counters,
        summary_extra=summary,
    )
