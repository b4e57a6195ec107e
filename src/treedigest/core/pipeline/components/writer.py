from __future__ import annotations

"""
Manifest Collection and Persistence.

Accumulates manifest entries produced by the hashing workers and writes the
resulting JSON object to disk in a single atomic replace.
"""

import json
import logging
import threading
from typing import Dict, Optional

from treedigest.domain.digest_models import ManifestEntry
from treedigest.domain.errors import CollisionError, WriteError
from treedigest.infra.fs import atomic_write_bytes


class ManifestWriter:
    """
    Single collector of logical-name to fingerprinted-name pairs.

    When two different source files resolve to the same logical name, the
    entry whose source path sorts last is kept and a warning is logged, so
    the outcome does not depend on which worker finished first. In strict
    mode the collision raises CollisionError instead.
    """

    def __init__(
            self,
            *,
            strict_collisions: bool = False,
            logger: Optional[logging.Logger] = None
    ) -> None:
        self._entries: Dict[str, ManifestEntry] = {}
        self._lock = threading.Lock()
        self._frozen = False
        self._strict = strict_collisions
        self._logger = logger or logging.getLogger(__name__)
        self.collisions = 0

    # -------------------------------------------------------------------------
    # COLLECTION
    # -------------------------------------------------------------------------

    def record(self, entry: ManifestEntry) -> None:
        """
        Insert or overwrite the mapping for entry.logical_name.

        Args:
            entry: Resolved manifest entry.

        Raises:
            CollisionError: On a logical-name collision in strict mode.
            RuntimeError: If called after serialization started.
        """
        with self._lock:
            if self._frozen:
                raise RuntimeError("Manifest is frozen; serialization already started.")

            existing = self._entries.get(entry.logical_name)
            if existing is not None and existing.source_path != entry.source_path:
                self.collisions += 1
                if self._strict:
                    raise CollisionError(
                        entry.logical_name, existing.source_path, entry.source_path
                    )

                winner = max(existing, entry, key=lambda e: e.source_path)
                self._logger.warning(
                    f"Logical name collision on '{entry.logical_name}': "
                    f"'{existing.source_path}' vs '{entry.source_path}'. "
                    f"Keeping '{winner.source_path}'."
                )
                self._entries[entry.logical_name] = winner
                return

            self._entries[entry.logical_name] = entry

    def as_dict(self) -> Dict[str, str]:
        """Return a copy of the manifest mapping."""
        with self._lock:
            return {k: e.fingerprinted_name for k, e in self._entries.items()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # -------------------------------------------------------------------------
    # SERIALIZATION AND PERSISTENCE
    # -------------------------------------------------------------------------

    def serialize(self) -> bytes:
        """
        Freeze the manifest and encode it as a UTF-8 JSON object.

        Keys are sorted and separators compact so identical inputs produce
        byte-identical output.

        Returns:
            bytes: The encoded manifest.
        """
        with self._lock:
            self._frozen = True
            mapping = {k: e.fingerprinted_name for k, e in self._entries.items()}

        text = json.dumps(mapping, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
        return text.encode("utf-8")

    def write(self, path: str, data: Optional[bytes] = None) -> None:
        """
        Persist the serialized manifest to path.

        Args:
            path: Destination file.
            data: Pre-serialized payload; serialize() is called when omitted.

        Raises:
            WriteError: If the file cannot be written.
        """
        payload = self.serialize() if data is None else data
        try:
            atomic_write_bytes(path, payload)
        except OSError as e:
            raise WriteError(f"Failed to write manifest to '{path}': {e}", path=path) from e

        self._logger.info(f"Saved digest to: {path}")
