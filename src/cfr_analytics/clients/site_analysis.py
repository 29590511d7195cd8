"""Client for the website analysis endpoints (``/api/analysis``)."""

import logging

from pydantic import ValidationError

from cfr_analytics.clients.http import AnalyticsHttpClient
from cfr_analytics.core.errors.transport import (
    AnalyticsServiceError,
    MalformedFragmentError,
)
from cfr_analytics.models.site_analysis import SiteAnalysisResult

logger = logging.getLogger(__name__)

API_PREFIX = "/api/analysis"
DEFAULT_SITE_URL = "https://www.ecfr.gov/"


class SiteAnalysisClient(AnalyticsHttpClient):
    """Async client for the site analysis service."""

    async def analyze_site(self, url: str = DEFAULT_SITE_URL) -> SiteAnalysisResult:
        """Run a synchronous analysis of *url* on the backend."""
        payload = await self._execute_request(
            "site_analysis", "GET", f"{API_PREFIX}/analyze", params={"url": url}
        )
        return self._parse(payload)

    async def analyze_site_async(self, url: str = DEFAULT_SITE_URL) -> SiteAnalysisResult:
        """Run the analysis through the backend's async endpoint."""
        payload = await self._execute_request(
            "site_analysis", "POST", f"{API_PREFIX}/analyze-async", params={"url": url}, json={}
        )
        return self._parse(payload)

    async def health_check(self) -> bool:
        try:
            await self._execute_request("health", "GET", f"{API_PREFIX}/health", expect_json=False)
        except AnalyticsServiceError as e:
            logger.warning("Site analysis health check failed: %s", e)
            return False
        return True

    def _parse(self, payload: object) -> SiteAnalysisResult:
        try:
            return SiteAnalysisResult.model_validate(payload)
        except ValidationError as e:
            raise MalformedFragmentError(
                source="site_analysis",
                message=f"Analysis payload did not validate: {e.error_count()} error(s)",
                original_error=e,
            ) from e
