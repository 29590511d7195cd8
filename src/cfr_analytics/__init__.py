"""cfr-analytics: fetch coordination and headless views for CFR analytics."""

from cfr_analytics.config import AnalyticsConfig, get_config, set_config

__all__ = ["AnalyticsConfig", "get_config", "set_config"]
