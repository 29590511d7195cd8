"""Analytics service error classes.

Every request path ends in either a value or one of these normalized
failures. Subclasses follow the connectivity / client / server split used
for user-facing messages.
"""

from typing import Optional

CONNECTIVITY_MESSAGE = (
    "Cannot connect to CFR analytics service. Please ensure the backend is running."
)
CLIENT_ERROR_FALLBACK = "Invalid request to CFR analytics service."
SERVER_ERROR_FALLBACK = "CFR analytics service error occurred."
GENERIC_FAILURE_MESSAGE = "CFR analytics request failed. Please try again."


class AnalyticsServiceError(Exception):
    """Base exception for analytics backend failures.

    Attributes:
        source: Name of the endpoint or source client that failed
        message: Human-readable error description
        status_code: HTTP status code, 0 when no response was received
        retryable: Whether the error is potentially transient
        original_error: The underlying exception if available
    """

    default_message = GENERIC_FAILURE_MESSAGE

    def __init__(
        self,
        source: str,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        retryable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        self.source = source
        self.message = message or self.default_message
        self.status_code = status_code
        self.retryable = retryable
        self.original_error = original_error
        super().__init__(f"[{source}] {self.message}")


class TransportUnreachableError(AnalyticsServiceError):
    """Raised when no response was received at all (refused, DNS, timeout)."""

    default_message = CONNECTIVITY_MESSAGE

    def __init__(
        self,
        source: str,
        message: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            source=source,
            message=message,
            status_code=0,
            retryable=True,
            original_error=original_error,
        )


class ClientRequestError(AnalyticsServiceError):
    """Raised for 4xx responses. Not retryable."""

    default_message = CLIENT_ERROR_FALLBACK

    def __init__(self, source: str, status_code: int, message: Optional[str] = None):
        super().__init__(
            source=source,
            message=message,
            status_code=status_code,
            retryable=False,
        )


class ServerRequestError(AnalyticsServiceError):
    """Raised for 5xx responses. Retryable."""

    default_message = SERVER_ERROR_FALLBACK

    def __init__(self, source: str, status_code: int, message: Optional[str] = None):
        super().__init__(
            source=source,
            message=message,
            status_code=status_code,
            retryable=True,
        )


class MalformedFragmentError(AnalyticsServiceError):
    """Raised when a 2xx payload does not match its expected shape.

    Enrichment sources carry it in a failed FragmentResult; the plain client
    calls raise it like any other service error.
    """

    default_message = "Response payload did not match the expected shape."


def user_message(error: BaseException) -> str:
    """Return the caller-facing message for any failure."""
    if isinstance(error, AnalyticsServiceError):
        return error.message
    return GENERIC_FAILURE_MESSAGE
