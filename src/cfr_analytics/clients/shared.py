"""Shared response helpers for the analytics HTTP clients.

Pure parsing helpers:
    - extract_error_message(response) -> Optional[str]
    - raise_for_status(source, response) -> None
    - as_number(value) -> Optional[float]
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Optional

from cfr_analytics.core.errors.transport import (
    ClientRequestError,
    ServerRequestError,
)

if TYPE_CHECKING:
    import httpx


def extract_error_message(response: "httpx.Response") -> Optional[str]:
    """Extract the server-provided error message from an error response.

    The backend reports failures as ``{"error": "..."}``. A nested
    ``{"error": {"message": ...}}`` or a top-level ``message`` are accepted
    too.

    Returns:
        The message, or ``None`` when the body carries none (callers then
        fall back to a generic message).
    """
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    error_field = data.get("error")
    if isinstance(error_field, dict):
        message = error_field.get("message")
    elif isinstance(error_field, str):
        message = error_field
    else:
        message = data.get("message")
    return str(message) if message else None


def raise_for_status(source: str, response: "httpx.Response") -> None:
    """Map an HTTP error status onto the analytics error taxonomy.

    Raises:
        ClientRequestError: For 4xx responses.
        ServerRequestError: For 5xx responses.
    """
    status = response.status_code
    if 400 <= status < 500:
        raise ClientRequestError(source, status, extract_error_message(response))
    if status >= 500:
        raise ServerRequestError(source, status, extract_error_message(response))


def as_number(value: Any) -> Optional[float]:
    """Return *value* as a finite float, or None for anything else.

    Booleans are rejected so that ``true`` never counts as 1.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None
