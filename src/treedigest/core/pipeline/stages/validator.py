from __future__ import annotations

"""
Configuration Validation Service.

Ensures that the configuration dictionary assembled from defaults, config
files and CLI overrides conforms to the expected schema. Handles type
coercion and default injection, collecting a warning for every repaired
value. In strict mode the first problem raises ConfigError instead.

Extensions are deliberately left untouched apart from whitespace trimming:
eligibility matching is exact, so "JS" or ".js" are kept as given.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from treedigest.core.pipeline.stages.hasher import supported_algorithms
from treedigest.domain.config import get_default_config
from treedigest.domain.constants import default_extensions
from treedigest.domain.errors import ConfigError

logger = logging.getLogger(__name__)

_STRING_FIELDS = ["input_path", "output_path", "outputname", "hash_algorithm"]
_BOOL_FIELDS = ["strict_collisions", "copy_tree"]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises ConfigError instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and a
                                          list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        _report(msg, "Using defaults.", warnings, strict)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    unknown = sorted(set(config) - set(defaults))
    for key in unknown:
        _report(f"Unknown configuration key '{key}'.", "Ignored.", warnings, strict)
        merged.pop(key, None)

    # 2. Field Processing & Normalization
    for field in _STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    # The permutation may legitimately be empty or surrounded by spaces
    merged["permutation"] = _as_salt(merged.get("permutation"), warnings, strict)

    for field in _BOOL_FIELDS:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    merged["extensions"] = _as_list_str(
        merged.get("extensions"), default_extensions(), "extensions", warnings, strict
    )

    merged["chunk_size"] = _as_positive_int(
        merged.get("chunk_size"), defaults["chunk_size"], "chunk_size", warnings, strict
    )
    merged["max_workers"] = _as_positive_int(
        merged.get("max_workers"), None, "max_workers", warnings, strict
    )

    # 3. Domain-Specific Checks
    if merged["hash_algorithm"] not in supported_algorithms():
        _report(
            f"Unsupported hash algorithm '{merged['hash_algorithm']}'.",
            f"Using '{defaults['hash_algorithm']}'.",
            warnings,
            strict,
        )
        merged["hash_algorithm"] = defaults["hash_algorithm"]

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _report(msg: str, action: str, warnings: List[str], strict: bool) -> None:
    if strict:
        raise ConfigError(msg)
    warnings.append(f"{msg} {action}")
    logger.debug(msg)


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    _report(
        f"Invalid field '{field}': expected str, received {type(value).__name__}.",
        "Using fallback.", warnings, strict,
    )
    return fallback


def _as_salt(value: Any, warnings: List[str], strict: bool) -> str:
    """Accept the permutation verbatim; None means no salt."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool) and not strict:
        warnings.append(f"Field 'permutation' converted from number {value} to str.")
        return str(value)

    _report(
        f"Invalid field 'permutation': expected str, received {type(value).__name__}.",
        "Using empty permutation.", warnings, strict,
    )
    return ""


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    _report(
        f"Invalid field '{field}': expected bool, received {type(value).__name__}.",
        "Using fallback.", warnings, strict,
    )
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of trimmed, non-empty strings, supporting CSV strings."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple, set, frozenset)):
        out: List[str] = []
        for i, item in enumerate(sorted(value) if isinstance(value, (set, frozenset)) else value):
            if isinstance(item, str) and item.strip():
                out.append(item.strip())
            else:
                _report(f"Invalid item in '{field}[{i}]': expected non-empty str.",
                        "Item discarded.", warnings, strict)
        return out if out else list(fallback)

    _report(
        f"Invalid field '{field}': expected list[str], received {type(value).__name__}.",
        "Using fallback.", warnings, strict,
    )
    return list(fallback)


def _as_positive_int(
        value: Any,
        fallback: Optional[int],
        field: str,
        warnings: List[str],
        strict: bool
) -> Optional[int]:
    """Accept positive integers, or digit strings outside strict mode."""
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    if isinstance(value, str) and not strict and value.strip().isdigit() and int(value) > 0:
        warnings.append(f"Field '{field}' converted from '{value}' to int.")
        return int(value)

    _report(
        f"Invalid field '{field}': expected positive int, received {value!r}.",
        "Using fallback.", warnings, strict,
    )
    return fallback
