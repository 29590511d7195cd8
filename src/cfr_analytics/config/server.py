"""AnalyticsConfig dataclass and global configuration state.

This module defines the ``AnalyticsConfig`` class (field declarations and
simple accessor methods) and the global ``get_config`` / ``set_config``
helpers. Loading and validation logic lives in the ``_AnalyticsConfigLoader``
mixin (``loader.py``) which ``AnalyticsConfig`` inherits from.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from cfr_analytics.config.loader import _AnalyticsConfigLoader


@dataclass(frozen=True)
class StageSetting:
    """One configured progress stage: display label and duration in seconds."""

    label: str
    duration: float


DEFAULT_STAGES: List[StageSetting] = [
    StageSetting("Fetching website content...", 2.0),
    StageSetting("Analyzing accessibility features...", 1.5),
    StageSetting("Evaluating performance metrics...", 1.5),
    StageSetting("Reviewing government compliance...", 1.5),
    StageSetting("Generating comprehensive report...", 1.5),
]


@dataclass
class AnalyticsConfig(_AnalyticsConfigLoader):
    """Client configuration with support for env vars and TOML overrides."""

    # Backend connection
    api_base_url: str = "http://localhost:8080"
    request_timeout: float = 30.0
    max_retries: int = 2

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = False

    # Analysis screen
    site_url: str = "https://www.ecfr.gov/"
    stages: List[StageSetting] = field(default_factory=lambda: list(DEFAULT_STAGES))

    # Toast durations (seconds)
    success_toast_seconds: float = 3.0
    error_toast_seconds: float = 5.0

    # Dashboard refresh after a bulk download is accepted
    download_refresh_delay: float = 2.0

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.structured_logging:
            formatter = logging.Formatter(
                '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'
            )
        else:
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)

        root_logger = logging.getLogger("cfr_analytics")
        root_logger.setLevel(level)
        root_logger.handlers = [handler]


# Global configuration instance
_config: Optional[AnalyticsConfig] = None


def get_config() -> AnalyticsConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AnalyticsConfig.from_env()
    return _config


def set_config(config: Optional[AnalyticsConfig]) -> None:
    """Set (or with None, reset) the global configuration instance."""
    global _config
    _config = config
