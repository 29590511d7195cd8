"""Request resilience: error classification and retry with backoff."""

from cfr_analytics.core.resilience.classification import classify_http_error
from cfr_analytics.core.resilience.config import SOURCE_CONFIGS, get_source_config
from cfr_analytics.core.resilience.models import (
    ErrorClassification,
    ErrorType,
    ResilienceConfig,
    SleepFunc,
)
from cfr_analytics.core.resilience.retry import async_retry_with_backoff, backoff_delay

__all__ = [
    # Models & enums
    "ErrorType",
    "ErrorClassification",
    "ResilienceConfig",
    "SleepFunc",
    # Config
    "SOURCE_CONFIGS",
    "get_source_config",
    # Classification
    "classify_http_error",
    # Retry
    "async_retry_with_backoff",
    "backoff_delay",
]
