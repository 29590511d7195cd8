"""Parsing helpers for configuration values coming from env vars or TOML."""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _parse_float(value: Any, *, name: str, minimum: float = 0.0) -> Optional[float]:
    """Parse a non-negative float, returning None (and warning) when invalid."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r (expected a number)", name, value)
        return None
    if parsed < minimum:
        logger.warning("Invalid value for %s: %r (must be >= %s)", name, value, minimum)
        return None
    return parsed


def _parse_int(value: Any, *, name: str, minimum: int = 0) -> Optional[int]:
    """Parse an integer bounded below by *minimum*, or None when invalid."""
    if isinstance(value, bool):
        logger.warning("Invalid value for %s: %r (expected an integer)", name, value)
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r (expected an integer)", name, value)
        return None
    if parsed < minimum:
        logger.warning("Invalid value for %s: %r (must be >= %s)", name, value, minimum)
        return None
    return parsed
