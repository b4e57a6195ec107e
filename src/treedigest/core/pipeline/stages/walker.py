from __future__ import annotations

"""
Concurrent Tree Walker.

Visits every entry below a root directory, filters files by extension and
dispatches eligible files to a bounded pool of hashing workers. Completed
manifest entries are yielded as workers finish, in no particular order.

Any metadata, listing or read failure aborts the whole walk: workers that
have not started yet are cancelled and the error propagates to the caller.
"""

import logging
import os
import stat
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import FrozenSet, Iterator, List, Optional, Tuple

from treedigest.core.pipeline.components.filters import ExtensionFilter
from treedigest.core.pipeline.stages.hasher import StreamingHasher
from treedigest.core.pipeline.stages.resolver import resolve_entry
from treedigest.domain.digest_models import ManifestEntry, NodeKind, TreeNode
from treedigest.domain.errors import FilesystemError


class TreeWalker:
    """
    Walks a source tree and produces one ManifestEntry per eligible file.

    Attributes:
        visited_dirs: Number of directories listed during the last walk.
        skipped_files: Number of entries ignored during the last walk.
        hashed_files: Number of entries produced during the last walk.
    """

    def __init__(
            self,
            extension_filter: ExtensionFilter,
            hasher: StreamingHasher,
            *,
            max_workers: Optional[int] = None,
            logger: Optional[logging.Logger] = None,
    ) -> None:
        if max_workers is not None and max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {max_workers}")

        self._filter = extension_filter
        self._hasher = hasher
        self._max_workers = max_workers
        self._logger = logger or logging.getLogger(__name__)

        self.visited_dirs = 0
        self.skipped_files = 0
        self.hashed_files = 0

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    def walk(self, root_path: str) -> Iterator[ManifestEntry]:
        """
        Hash every eligible file below root_path.

        The iterator is exhausted only once every descendant has been either
        skipped or hashed.

        Args:
            root_path: Directory to walk.

        Yields:
            ManifestEntry: One entry per eligible file, in completion order.

        Raises:
            FilesystemError: On the first filesystem failure anywhere in the tree.
        """
        root = os.path.abspath(root_path)
        self.visited_dirs = 0
        self.skipped_files = 0
        self.hashed_files = 0

        executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="DigestWorker",
        )
        pending: List[Future] = []

        try:
            for node in self.iter_nodes(root):
                if node.eligible:
                    pending.append(executor.submit(self._process_file, node.path, root))

            for future in as_completed(pending):
                entry = future.result()
                self.hashed_files += 1
                yield entry
        finally:
            # Drops queued work on failure; running reads are allowed to finish
            executor.shutdown(wait=True, cancel_futures=True)

    def iter_nodes(self, root_path: str) -> Iterator[TreeNode]:
        """
        Traverse the tree depth-first and describe every entry.

        A directory is listed once per path that reaches it. Symlinks that
        point back to one of their own ancestors are not followed, so link
        loops terminate.

        Args:
            root_path: Directory to traverse.

        Yields:
            TreeNode: Every directory and file, root included.
        """
        stack: List[Tuple[str, FrozenSet[Tuple[int, int]]]] = [(os.path.abspath(root_path), frozenset())]

        while stack:
            path, ancestors = stack.pop()
            st = self._stat(path)

            if stat.S_ISDIR(st.st_mode):
                key = (st.st_dev, st.st_ino)
                if key in ancestors:
                    self._logger.warning(f"Skipping symlink loop: {path}")
                    continue
                lineage = ancestors | {key}

                self.visited_dirs += 1
                children = self._list_dir(path)
                stack.extend((os.path.join(path, name), lineage) for name in reversed(children))
                yield TreeNode(path=path, kind=NodeKind.DIRECTORY)

            elif stat.S_ISREG(st.st_mode):
                eligible = self._filter.is_eligible(path)
                if not eligible:
                    self.skipped_files += 1
                    self._logger.debug(f"Skipping file: {path}")
                yield TreeNode(path=path, kind=NodeKind.FILE, eligible=eligible)

            else:
                self.skipped_files += 1
                self._logger.debug(f"Skipping special file: {path}")
                yield TreeNode(path=path, kind=NodeKind.OTHER)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _process_file(self, file_path: str, root: str) -> ManifestEntry:
        """Worker body: hash one file and resolve its manifest entry."""
        digest = self._hasher.hash_file(file_path)
        entry = resolve_entry(file_path, root, digest)
        self._logger.debug(f"{entry.logical_name} : {entry.fingerprinted_name}")
        return entry

    @staticmethod
    def _stat(path: str) -> os.stat_result:
        try:
            return os.stat(path)
        except OSError as e:
            raise FilesystemError(f"Cannot stat '{path}': {e}", path=path) from e

    @staticmethod
    def _list_dir(path: str) -> List[str]:
        try:
            return sorted(os.listdir(path))
        except OSError as e:
            raise FilesystemError(f"Cannot list directory '{path}': {e}", path=path) from e
