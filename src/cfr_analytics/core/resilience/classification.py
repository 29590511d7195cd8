"""Error classification for retry decisions.

Maps the analytics error taxonomy and raw ``httpx`` failures onto
:class:`ErrorClassification` so that the retry loop can decide whether an
attempt is worth repeating.
"""

import httpx

from cfr_analytics.core.errors.transport import (
    ClientRequestError,
    MalformedFragmentError,
    ServerRequestError,
    TransportUnreachableError,
)
from cfr_analytics.core.resilience.models import ErrorClassification, ErrorType


def classify_http_error(error: Exception) -> ErrorClassification:
    """Classify an exception for retry decisions.

    Classification rules (applied in order):
        1. ``ClientRequestError`` -> not retryable
        2. ``ServerRequestError`` -> retryable
        3. ``TransportUnreachableError`` -> retryable
        4. ``MalformedFragmentError`` -> not retryable
        5. ``httpx.TimeoutException`` -> retryable
        6. ``httpx.TransportError`` -> retryable
        7. anything else -> not retryable
    """
    if isinstance(error, ClientRequestError):
        return ErrorClassification(retryable=False, error_type=ErrorType.CLIENT_ERROR)
    if isinstance(error, ServerRequestError):
        return ErrorClassification(retryable=True, error_type=ErrorType.SERVER_ERROR)
    if isinstance(error, TransportUnreachableError):
        return ErrorClassification(retryable=True, error_type=ErrorType.UNREACHABLE)
    if isinstance(error, MalformedFragmentError):
        return ErrorClassification(retryable=False, error_type=ErrorType.MALFORMED)
    if isinstance(error, httpx.TimeoutException):
        return ErrorClassification(retryable=True, error_type=ErrorType.TIMEOUT)
    if isinstance(error, httpx.TransportError):
        return ErrorClassification(retryable=True, error_type=ErrorType.UNREACHABLE)
    return ErrorClassification(retryable=False, error_type=ErrorType.UNKNOWN)
