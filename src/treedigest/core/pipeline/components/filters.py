from __future__ import annotations

"""
Extension Eligibility Filter.

Decides whether a path takes part in the digest, based on the final
dot-delimited suffix of its base name. Matching is exact and
case-sensitive: "js" does not match "JS" nor ".js".
"""

import os
from typing import Iterable, Optional, Union

PathInput = Union[str, "os.PathLike[str]", None]


def get_extension(file_path: PathInput) -> str:
    """
    Extract the final suffix of a path's base name, without the dot.

    Dotfiles (".bashrc"), names without a dot and names ending in a dot have
    no extension.

    Args:
        file_path: Any path-like value. None and malformed inputs are tolerated.

    Returns:
        str: The suffix, or an empty string.
    """
    if not file_path:
        return ""
    try:
        _, ext = os.path.splitext(os.fspath(file_path))
    except TypeError:
        return ""
    return ext[1:] if ext.startswith(".") else ""


class ExtensionFilter:
    """
    Allow-list of file extensions.

    Attributes:
        extensions: Frozen set of accepted suffixes.
    """

    def __init__(self, extensions: Optional[Iterable[str]]) -> None:
        self.extensions = frozenset(e for e in (extensions or ()) if isinstance(e, str) and e)

    def is_eligible(self, file_path: PathInput) -> bool:
        """
        Verify whether a file should be hashed.

        Args:
            file_path: Path of the candidate file.

        Returns:
            bool: True if its extension is in the allow-list.
        """
        ext = get_extension(file_path)
        if not ext:
            return False
        return ext in self.extensions

    def __repr__(self) -> str:
        return f"ExtensionFilter({sorted(self.extensions)!r})"
