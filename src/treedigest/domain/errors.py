from __future__ import annotations

"""
Digest Error Taxonomy.

Every failure raised by the build is a DigestError. Filesystem and write
failures are always fatal for the build; collisions only become errors when
strict collision checking is enabled.
"""

from typing import Optional


class DigestError(Exception):
    """
    Base class for all build failures.

    Attributes:
        path: Filesystem path involved in the failure, if any.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class FilesystemError(DigestError):
    """Metadata query, directory listing or file read failure."""


class WriteError(DigestError):
    """The manifest file could not be persisted."""


class CollisionError(DigestError):
    """Two source files resolved to the same logical name (strict mode)."""

    def __init__(self, logical_name: str, first_path: str, second_path: str) -> None:
        super().__init__(
            f"Logical name '{logical_name}' produced by both "
            f"'{first_path}' and '{second_path}'",
            path=second_path,
        )
        self.logical_name = logical_name
        self.first_path = first_path
        self.second_path = second_path


class ConfigError(DigestError):
    """Invalid configuration detected during strict validation or file loading."""
