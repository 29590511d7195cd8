"""Shared fixtures and mock builders for cfr-analytics tests.

The HTTP layer is exercised by patching ``httpx.AsyncClient`` with an
``AsyncMock`` whose ``get``/``post`` return mock ``httpx.Response`` objects.
"""

from contextlib import contextmanager
from typing import Any, Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from cfr_analytics.config import AnalyticsConfig, set_config

BASE_URL = "http://analytics.test"

_NO_BODY = object()


@pytest.fixture(autouse=True)
def default_config():
    """Isolate every test from env vars and TOML files on the machine."""
    config = AnalyticsConfig(api_base_url=BASE_URL)
    set_config(config)
    yield config
    set_config(None)


async def no_sleep(_seconds: float) -> None:
    return None


@pytest.fixture
def sleep_calls():
    """Injectable sleep that records requested delays without waiting."""
    calls: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        calls.append(seconds)

    fake_sleep.calls = calls
    return fake_sleep


def make_mock_response(
    *,
    status_code: int = 200,
    json_data: Any = _NO_BODY,
    text: str = "",
    raise_json: bool = False,
) -> MagicMock:
    """Build a mock httpx.Response.

    Args:
        status_code: HTTP status code.
        json_data: JSON body returned by response.json() (may be None or a list).
        text: Plain text body.
        raise_json: If True, response.json() raises ValueError.
    """
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    response.headers = {}
    response.text = text

    if raise_json:
        response.json.side_effect = ValueError("No JSON")
    elif json_data is _NO_BODY:
        response.json.return_value = {}
    else:
        response.json.return_value = json_data

    return response


def route_by_path(routes: dict[str, Any]):
    """Build a ``get``/``post`` side effect that answers by URL suffix.

    Values are mock responses, or exceptions to raise.
    """

    def respond(url: str, **kwargs: Any) -> Any:
        for suffix, outcome in routes.items():
            if url.endswith(suffix):
                if isinstance(outcome, BaseException):
                    raise outcome
                return outcome
        raise AssertionError(f"Unexpected request to {url}")

    return respond


def _as_mock(behaviour: Any) -> AsyncMock:
    if behaviour is None:
        return AsyncMock(side_effect=AssertionError("Unexpected request"))
    if isinstance(behaviour, (list, BaseException)) or (callable(behaviour) and not isinstance(behaviour, MagicMock)):
        return AsyncMock(side_effect=behaviour)
    return AsyncMock(return_value=behaviour)


@contextmanager
def mock_http(*, get: Any = None, post: Any = None) -> Iterator[AsyncMock]:
    """Patch ``httpx.AsyncClient`` for the duration of the block.

    ``get`` / ``post`` may be a single response, a list of responses or
    exceptions (consumed in order), an exception, or a callable.
    """
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = _as_mock(get)
        mock_client.post = _as_mock(post)
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=None)
        mock_client_class.return_value = mock_client
        yield mock_client


@pytest.fixture
def overview_payload():
    return {
        "totalTitles": 50,
        "totalRegulations": "200,000+",
        "activeAgencies": 4,
        "lastUpdated": 1735689600000,
        "deregulationOpportunities": 12,
        "titles": [
            {"number": 21, "name": "Food and Drugs", "agency": "Food and Drug Administration", "partCount": 1499},
            {"number": 40, "name": "Protection of Environment", "agency": "Environmental Protection Agency"},
        ],
    }


@pytest.fixture
def site_analysis_payload():
    return {
        "url": "https://www.ecfr.gov/",
        "analyzedAt": "2025-01-01T12:00:00",
        "responseTimeMs": 420,
        "statusCode": 200,
        "accessibility": {"wcagLevel": 2, "issues": ["Missing alt text"], "score": 85.0},
        "performance": {"loadTimeMs": 1200, "pageSizeBytes": 1572864, "score": 91.0},
        "usability": {"mobileResponsive": True, "score": 74.0},
        "compliance": {"section508Compliant": True, "complianceScore": 62.0},
    }
