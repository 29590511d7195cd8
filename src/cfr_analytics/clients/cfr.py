"""Client for the primary CFR analytics endpoints.

Covers the overview listing (the base records for every title), raw title
data, per-part regulation content and history, the fire-and-forget bulk
download trigger and the health probe. The
three per-title enrichment sources share this client's settings through
:meth:`CFRAnalyticsClient.enrichment_sources`.

Example usage:
    client = CFRAnalyticsClient(base_url="http://localhost:8080")
    overview = await client.get_overview()
    sources = client.enrichment_sources()
"""

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from cfr_analytics.clients.http import AnalyticsHttpClient
from cfr_analytics.core.errors.transport import (
    AnalyticsServiceError,
    MalformedFragmentError,
)
from cfr_analytics.models.regulations import RegulationContent, RegulationHistory
from cfr_analytics.models.titles import CFROverview, DownloadStatus

if TYPE_CHECKING:
    from cfr_analytics.sources.base import EnrichmentSource

logger = logging.getLogger(__name__)

API_PREFIX = "/api/cfr"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate(model: type[ModelT], payload: Any, source: str) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise MalformedFragmentError(
            source=source,
            message=f"{model.__name__} payload did not validate: {e.error_count()} error(s)",
            original_error=e,
        ) from e


class CFRAnalyticsClient(AnalyticsHttpClient):
    """Async client for ``/api/cfr``."""

    async def get_overview(self) -> CFROverview:
        """Fetch the overview of all CFR titles.

        Raises:
            AnalyticsServiceError: On any transport, status or shape failure.
        """
        logger.info("Fetching CFR overview data")
        payload = await self._execute_request("overview", "GET", f"{API_PREFIX}/overview")
        overview = _validate(CFROverview, payload, "overview")
        logger.info("CFR overview loaded with %d titles", len(overview.titles))
        return overview

    async def get_title_data(self, title_number: int) -> dict[str, Any]:
        """Fetch raw part listing for a title."""
        logger.info("Fetching data for CFR title %s", title_number)
        payload = await self._execute_request("title", "GET", f"{API_PREFIX}/titles/{title_number}")
        if not isinstance(payload, dict):
            raise MalformedFragmentError(source="title", message="Title payload is not an object")
        return payload

    async def get_regulation_content(self, title_number: int, part_number: str) -> RegulationContent:
        """Fetch the text and content analytics of one part of a title."""
        logger.info("Fetching regulation content for CFR %s part %s", title_number, part_number)
        payload = await self._execute_request(
            "regulation_content", "GET", f"{API_PREFIX}/titles/{title_number}/parts/{part_number}"
        )
        return _validate(RegulationContent, payload, "regulation_content")

    async def get_regulation_history(self, title_number: int, part_number: str) -> RegulationHistory:
        """Fetch the version history of one part of a title."""
        logger.info("Fetching regulation history for CFR %s part %s", title_number, part_number)
        payload = await self._execute_request(
            "regulation_history",
            "GET",
            f"{API_PREFIX}/titles/{title_number}/parts/{part_number}/history",
        )
        history = _validate(RegulationHistory, payload, "regulation_history")
        logger.info("Loaded %d versions of CFR %s part %s", history.version_count, title_number, part_number)
        return history

    async def trigger_download(self) -> DownloadStatus:
        """Ask the backend to start a bulk CFR download. Never retried."""
        logger.info("Triggering bulk CFR data download")
        payload = await self._execute_request("download", "POST", f"{API_PREFIX}/download", json={})
        if not isinstance(payload, dict):
            raise MalformedFragmentError(source="download", message="Download payload is not an object")
        status = _validate(DownloadStatus, payload, "download")
        logger.info("Bulk download %s: %s", status.status, status.message)
        return status

    async def health_check(self) -> bool:
        """Check if the analytics service is reachable and healthy."""
        try:
            payload = await self._execute_request("health", "GET", f"{API_PREFIX}/health")
        except AnalyticsServiceError as e:
            logger.warning("CFR analytics health check failed: %s", e)
            return False
        if isinstance(payload, dict) and "status" in payload:
            return str(payload["status"]).upper() in {"UP", "OK", "HEALTHY"}
        return True

    def enrichment_sources(self) -> list["EnrichmentSource"]:
        """Build the word-count, redundancy and historical-changes sources."""
        from cfr_analytics.sources import (
            HistoricalChangesSource,
            RedundancySource,
            WordCountSource,
        )

        settings = self.client_settings()
        return [
            WordCountSource(**settings),
            RedundancySource(**settings),
            HistoricalChangesSource(**settings),
        ]
