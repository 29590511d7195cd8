"""Unified error hierarchy for cfr-analytics.

Usage:
    from cfr_analytics.core.errors import AnalyticsServiceError, user_message
"""

from cfr_analytics.core.errors.sequencer import (
    SequenceError,
    SequenceInProgressError,
    SequenceNotResetError,
)
from cfr_analytics.core.errors.transport import (
    CLIENT_ERROR_FALLBACK,
    CONNECTIVITY_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    SERVER_ERROR_FALLBACK,
    AnalyticsServiceError,
    ClientRequestError,
    MalformedFragmentError,
    ServerRequestError,
    TransportUnreachableError,
    user_message,
)

__all__ = [
    "AnalyticsServiceError",
    "ClientRequestError",
    "MalformedFragmentError",
    "ServerRequestError",
    "TransportUnreachableError",
    "SequenceError",
    "SequenceInProgressError",
    "SequenceNotResetError",
    "CONNECTIVITY_MESSAGE",
    "CLIENT_ERROR_FALLBACK",
    "SERVER_ERROR_FALLBACK",
    "GENERIC_FAILURE_MESSAGE",
    "user_message",
]
