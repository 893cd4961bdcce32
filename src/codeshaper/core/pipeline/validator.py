from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted session values (config file, CLI flags) and the
batch runner. Handles type coercion, enum normalization and default value
injection.
"""

import logging
from typing import Any, Dict, List, Tuple

from codeshaper.core.classification.classifier import classify
from codeshaper.domain.config import get_default_config
from codeshaper.domain.languages import Mode

logger = logging.getLogger(__name__)

MAX_WORKERS_LIMIT = 64


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a session configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on invalid values instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: A tuple containing the normalized
                                          configuration and a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in ("mode", "file_type", "output_dir"):
        merged[field] = _as_str(merged.get(field), defaults.get(field, ""), field, warnings, strict)

    for field in ("overwrite", "estimate_tokens"):
        merged[field] = _as_bool(merged.get(field), defaults.get(field, False), field, warnings, strict)

    merged["max_workers"] = _as_positive_int(
        merged.get("max_workers"), defaults["max_workers"], "max_workers", warnings, strict
    )

    merged["mode"] = _normalize_mode(merged["mode"], defaults["mode"], warnings, strict)
    merged["file_type"] = _normalize_file_type(merged["file_type"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip()

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


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

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_positive_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce worker counts into the range 1..MAX_WORKERS_LIMIT."""
    if value is None:
        return fallback

    number = None
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    elif isinstance(value, str) and value.strip().isdigit() and not strict:
        number = int(value.strip())
        warnings.append(f"Field '{field}' converted from '{value}' to {number}.")

    if number is None or number < 1:
        msg = f"Invalid field '{field}': expected positive int, received {value!r}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if number > MAX_WORKERS_LIMIT:
        if strict:
            raise ValueError(f"Field '{field}' exceeds the limit of {MAX_WORKERS_LIMIT}.")
        warnings.append(f"Field '{field}' capped from {number} to {MAX_WORKERS_LIMIT}.")
        return MAX_WORKERS_LIMIT
    return number


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_mode(value: str, fallback: str, warnings: List[str], strict: bool) -> str:
    """Map mode aliases ('format', 'unminify') to their canonical value."""
    try:
        return Mode.parse(value or fallback).value
    except ValueError:
        msg = f"Invalid mode '{value}': expected 'minify' or 'beautify'."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{fallback}'.")
        return fallback


def _normalize_file_type(value: str, warnings: List[str], strict: bool) -> str:
    """Keep only type names the classifier understands; empty means 'by extension'."""
    if not value:
        return ""
    if classify(declared=value).is_known:
        return value.lower()

    msg = f"Unknown file type '{value}'."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Falling back to extension detection.")
    return ""
