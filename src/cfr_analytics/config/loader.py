"""AnalyticsConfig loading and validation logic.

Provides ``_AnalyticsConfigLoader``, a mixin class whose methods are inherited
by ``AnalyticsConfig`` (defined in ``server.py``). Splitting loading logic into
its own module keeps ``server.py`` focused on field definitions.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, cast

if TYPE_CHECKING:
    from cfr_analytics.config.server import AnalyticsConfig, StageSetting

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from cfr_analytics.config.parsing import _parse_bool, _parse_float, _parse_int

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "CFR_ANALYTICS_CONFIG_FILE"
PROJECT_CONFIG_NAME = "cfr-analytics.toml"


class _AnalyticsConfigLoader:
    """Mixin providing config-loading methods for ``AnalyticsConfig``.

    At runtime ``self`` is always an ``AnalyticsConfig`` instance.
    """

    if TYPE_CHECKING:
        api_base_url: str
        request_timeout: float
        max_retries: int
        log_level: str
        structured_logging: bool
        site_url: str
        stages: List[StageSetting]
        success_toast_seconds: float
        error_toast_seconds: float
        download_refresh_delay: float

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "AnalyticsConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. Explicit TOML file (argument or CFR_ANALYTICS_CONFIG_FILE), or
           project TOML config (./cfr-analytics.toml)
        3. XDG config (~/.config/cfr-analytics/config.toml)
        4. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get(CONFIG_FILE_ENV_VAR)
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
            xdg_config = Path(xdg_config_home) / "cfr-analytics" / "config.toml"
            if xdg_config.exists():
                config._load_toml(xdg_config)
                logger.debug("Loaded XDG config from %s", xdg_config)

            project_config = Path(PROJECT_CONFIG_NAME)
            if project_config.exists():
                config._load_toml(project_config)
                logger.debug("Loaded project config from %s", project_config)

        config._load_env()
        return cast("AnalyticsConfig", config)

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return

        with open(path, "rb") as f:
            data = tomllib.load(f)

        if "api" in data:
            api = data["api"]
            if "base_url" in api:
                self.api_base_url = str(api["base_url"]).rstrip("/")
            if "timeout" in api:
                self._set_float("request_timeout", api["timeout"], "api.timeout")
            if "max_retries" in api:
                self._set_int("max_retries", api["max_retries"], "api.max_retries")

        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.log_level = str(log["level"]).upper()
            if "structured" in log:
                self.structured_logging = _parse_bool(log["structured"])

        if "analysis" in data:
            analysis = data["analysis"]
            if "site_url" in analysis:
                self.site_url = str(analysis["site_url"])
            if "stages" in analysis:
                self.stages = _parse_stages(analysis["stages"], source=str(path))

        if "notifications" in data:
            notes = data["notifications"]
            if "success_seconds" in notes:
                self._set_float("success_toast_seconds", notes["success_seconds"], "notifications.success_seconds")
            if "error_seconds" in notes:
                self._set_float("error_toast_seconds", notes["error_seconds"], "notifications.error_seconds")

        if "dashboard" in data:
            dash = data["dashboard"]
            if "refresh_delay" in dash:
                self._set_float("download_refresh_delay", dash["refresh_delay"], "dashboard.refresh_delay")

    def _load_env(self) -> None:
        """Apply environment variable overrides."""
        if api_url := os.environ.get("CFR_ANALYTICS_API_URL"):
            self.api_base_url = api_url.rstrip("/")
        if timeout := os.environ.get("CFR_ANALYTICS_TIMEOUT"):
            self._set_float("request_timeout", timeout, "CFR_ANALYTICS_TIMEOUT")
        if retries := os.environ.get("CFR_ANALYTICS_MAX_RETRIES"):
            self._set_int("max_retries", retries, "CFR_ANALYTICS_MAX_RETRIES")
        if level := os.environ.get("CFR_ANALYTICS_LOG_LEVEL"):
            self.log_level = level.upper()
        if structured := os.environ.get("CFR_ANALYTICS_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)
        if site_url := os.environ.get("CFR_ANALYTICS_SITE_URL"):
            self.site_url = site_url

    def _set_float(self, attr: str, value: Any, name: str) -> None:
        parsed = _parse_float(value, name=name)
        if parsed is not None:
            setattr(self, attr, parsed)

    def _set_int(self, attr: str, value: Any, name: str) -> None:
        parsed = _parse_int(value, name=name)
        if parsed is not None:
            setattr(self, attr, parsed)


def _parse_stages(raw: Any, *, source: str) -> List["StageSetting"]:
    """Parse ``[[analysis.stages]]`` entries into StageSetting objects.

    Raises:
        ValueError: If the list is empty or an entry is missing a label.
    """
    from cfr_analytics.config.server import StageSetting

    if not isinstance(raw, list) or not raw:
        raise ValueError(f"{source}: analysis.stages must be a non-empty array of tables")

    stages: List[StageSetting] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict) or not entry.get("label"):
            raise ValueError(f"{source}: analysis.stages[{index}] requires a 'label'")
        duration = _parse_float(entry.get("duration", 1.5), name=f"analysis.stages[{index}].duration")
        stages.append(StageSetting(label=str(entry["label"]), duration=1.5 if duration is None else duration))
    return stages


def config_summary(config: "AnalyticsConfig") -> Dict[str, Any]:
    """Return the non-secret settings as a plain dict (used by the CLI)."""
    return {
        "api_base_url": config.api_base_url,
        "request_timeout": config.request_timeout,
        "max_retries": config.max_retries,
        "site_url": config.site_url,
        "stages": [stage.label for stage in config.stages],
    }
