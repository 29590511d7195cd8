"""Types shared by the retry and classification code."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


class ErrorType(str, Enum):
    """What went wrong with a request, as far as retrying is concerned."""

    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    MALFORMED = "malformed"
    UNKNOWN = "unknown"


@dataclass
class ResilienceConfig:
    """Retry budget and backoff window for one endpoint."""

    max_retries: int = 2
    base_delay: float = 0.5
    max_delay: float = 8.0
    jitter: bool = True


@dataclass
class ErrorClassification:
    retryable: bool
    error_type: ErrorType = ErrorType.UNKNOWN
    backoff_seconds: Optional[float] = None


class SleepFunc(Protocol):
    async def __call__(self, seconds: float) -> None: ...
