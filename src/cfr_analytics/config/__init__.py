"""Configuration package for cfr-analytics.

Sub-modules:
    parsing – boolean/number parsing helpers
    server  – AnalyticsConfig dataclass, get_config/set_config globals
    loader  – AnalyticsConfig loading/validation mixin (_AnalyticsConfigLoader)
"""

from cfr_analytics.config.parsing import (  # noqa: F401
    _parse_bool,
    _parse_float,
    _parse_int,
)
from cfr_analytics.config.server import (  # noqa: F401
    DEFAULT_STAGES,
    AnalyticsConfig,
    StageSetting,
    get_config,
    set_config,
)
