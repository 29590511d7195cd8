"""Base HTTP client for the analytics backend.

Every request goes through :meth:`AnalyticsHttpClient._execute_request`,
which maps HTTP statuses and transport failures onto the analytics error
taxonomy and retries transient failures with backoff. A request therefore
always ends in a parsed value or an :class:`AnalyticsServiceError`; the
configured timeout guarantees it ends at all.
"""

import logging
from dataclasses import replace
from typing import Any, Optional

import httpx

from cfr_analytics.config import AnalyticsConfig, get_config
from cfr_analytics.core.errors.transport import (
    MalformedFragmentError,
    TransportUnreachableError,
)
from cfr_analytics.core.resilience import (
    ResilienceConfig,
    SleepFunc,
    async_retry_with_backoff,
    classify_http_error,
    get_source_config,
)
from cfr_analytics.clients.shared import raise_for_status

logger = logging.getLogger(__name__)


class AnalyticsHttpClient:
    """Shared request execution for all analytics endpoints.

    Attributes:
        base_url: API base URL (default from config: http://localhost:8080)
        timeout: Request timeout in seconds
        max_retries: Upper bound on retries for any endpoint
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        *,
        config: Optional[AnalyticsConfig] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        cfg = config or get_config()
        self._base_url = (base_url or cfg.api_base_url).rstrip("/")
        self._timeout = cfg.request_timeout if timeout is None else timeout
        self._max_retries = cfg.max_retries if max_retries is None else max_retries
        self._sleep_func = sleep_func

    @property
    def base_url(self) -> str:
        return self._base_url

    def client_settings(self) -> dict[str, Any]:
        """Return constructor kwargs that reproduce this client's settings."""
        return {
            "base_url": self._base_url,
            "timeout": self._timeout,
            "max_retries": self._max_retries,
            "sleep_func": self._sleep_func,
        }

    def resilience_config(self, source_name: str) -> ResilienceConfig:
        """Endpoint defaults, with retries capped by this client's max_retries."""
        defaults = get_source_config(source_name)
        return replace(defaults, max_retries=min(defaults.max_retries, self._max_retries))

    async def _execute_request(
        self,
        source_name: str,
        method: str,
        endpoint: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        expect_json: bool = True,
    ) -> Any:
        """Execute an API request with retry and error normalization.

        Raises:
            TransportUnreachableError: No response was received.
            ClientRequestError: 4xx response.
            ServerRequestError: 5xx response (after retries).
            MalformedFragmentError: 2xx response whose body is not JSON.
        """
        url = f"{self._base_url}{endpoint}"

        async def make_request() -> Any:
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    if method == "POST":
                        response = await client.post(url, params=params, json=json)
                    else:
                        response = await client.get(url, params=params)
            except httpx.HTTPError as e:
                raise TransportUnreachableError(source=source_name, original_error=e) from e

            raise_for_status(source_name, response)
            if not expect_json:
                return response.text
            try:
                return response.json()
            except ValueError as e:
                raise MalformedFragmentError(
                    source=source_name,
                    message=f"Response body is not valid JSON: {e}",
                    status_code=response.status_code,
                    original_error=e,
                ) from e

        config = self.resilience_config(source_name)
        logger.debug("%s %s (max_retries=%d)", method, url, config.max_retries)
        return await async_retry_with_backoff(
            make_request,
            max_retries=config.max_retries,
            base_delay=config.base_delay,
            max_delay=config.max_delay,
            jitter=config.jitter,
            should_retry=lambda e: classify_http_error(e).retryable,
            sleep_func=self._sleep_func,
        )
