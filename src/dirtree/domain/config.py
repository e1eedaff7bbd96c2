from __future__ import annotations

"""
Options Domain Management.

Dict-based option sets for the scaffolding driver and the file watcher.
validate_options() merges caller options over defaults and normalizes
their types, either correcting with warnings or failing in strict mode.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dirtree.domain.errors import OptionsError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
DEFAULT_DEBOUNCE_MS = 200


def get_default_scaffold_options() -> Dict[str, Any]:
    """
    Generate the default options for set_dir_tree().

    Returns:
        Dict[str, Any]: Default option values.
    """
    return {
        # Trace handler entry/exit and the token/op tables
        "debug": False,
        # Empty each existing directory before populating it (live mode only)
        "clear": False,
        # Record operations instead of touching the filesystem
        "scaffold": False,
    }


def get_default_watch_options() -> Dict[str, Any]:
    """
    Generate the default options for watch_file().

    Returns:
        Dict[str, Any]: Default option values.
    """
    return {
        "debug": False,
        "ms": DEFAULT_DEBOUNCE_MS,
    }


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def validate_options(
        options: Optional[Mapping[str, Any]],
        defaults: Mapping[str, Any],
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize an options mapping against its defaults.

    The expected type of every key is taken from its default value.
    Unknown keys are dropped with a warning.

    strict=False:
      - coerces recognizable values and appends warnings.
      - falls back to the default on anything else.

    strict=True:
      - raises OptionsError on a value of the wrong type.

    Args:
        options: Caller-supplied options (None means all defaults).
        defaults: Default values, one per accepted key.
        strict: Whether to raise instead of correcting.

    Returns:
        Tuple[Dict[str, Any], List[str]]: (normalized options, warnings)
    """
    warnings: List[str] = []
    merged: Dict[str, Any] = dict(defaults)

    if options is None:
        return merged, warnings

    if not isinstance(options, Mapping):
        msg = f"Invalid options: expected a mapping, got {type(options).__name__}."
        if strict:
            raise OptionsError(msg)
        warnings.append(msg + " Using defaults.")
        logger.warning(msg)
        return merged, warnings

    for key, value in options.items():
        if key not in defaults:
            msg = f"Unknown option '{key}' ignored."
            warnings.append(msg)
            logger.warning(msg)
            continue

        fallback = defaults[key]
        if isinstance(fallback, bool):
            merged[key] = _as_bool(value, fallback, key, warnings, strict)
        elif isinstance(fallback, int):
            merged[key] = _as_non_negative_int(value, fallback, key, warnings, strict)
        else:
            merged[key] = value

    return merged, warnings


# -----------------------------------------------------------------------------
# Internal helpers
# -----------------------------------------------------------------------------
def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Option '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Option '{field}' converted from str '{value}' to bool True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Option '{field}' converted from str '{value}' to bool False.")
                return False

    msg = f"Invalid option '{field}': expected bool, got {type(value).__name__}."
    if strict:
        raise OptionsError(msg)
    warnings.append(msg + " Using fallback.")
    logger.warning(msg)
    return fallback


def _as_non_negative_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value

    if not strict and isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            warnings.append(f"Option '{field}' converted from str '{value}' to int.")
            return int(s)

    msg = f"Invalid option '{field}': expected a non-negative int, got {value!r}."
    if strict:
        raise OptionsError(msg)
    warnings.append(msg + " Using fallback.")
    logger.warning(msg)
    return fallback
