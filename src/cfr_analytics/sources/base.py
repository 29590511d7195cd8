"""Abstract base class for enrichment sources.

An enrichment source fetches one kind of partial update (a *fragment*) for a
CFR title and normalizes the endpoint's response shape into that kind's fixed
field subset. :meth:`EnrichmentSource.fetch` never raises: every path ends in
a :class:`FragmentResult` that is either a success (possibly with no fields,
meaning "no update") or a failure carrying the normalized error.

Example usage:
    source = RedundancySource(base_url="http://localhost:8080")
    result = await source.fetch(40)
    if result.ok:
        print(result.fields)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Optional

from cfr_analytics.clients.http import AnalyticsHttpClient
from cfr_analytics.core.errors.transport import (
    AnalyticsServiceError,
    MalformedFragmentError,
)

logger = logging.getLogger(__name__)


class FragmentKind(str, Enum):
    """Kinds of enrichment fragments. Each updates a disjoint field set."""

    WORD_COUNT = "word_count"
    REDUNDANCY = "redundancy"
    HISTORICAL_CHANGES = "historical_changes"


@dataclass(frozen=True)
class FragmentResult:
    """Tagged outcome of one enrichment fetch.

    Attributes:
        kind: Fragment kind this result belongs to
        fields: Normalized field values (empty for "no update")
        error: The failure, or None on success
    """

    kind: FragmentKind
    fields: Mapping[str, Any] = field(default_factory=dict)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, kind: FragmentKind, fields: Mapping[str, Any]) -> "FragmentResult":
        return cls(kind=kind, fields=MappingProxyType(dict(fields)))

    @classmethod
    def failure(cls, kind: FragmentKind, error: Exception) -> "FragmentResult":
        return cls(kind=kind, fields=MappingProxyType({}), error=error)


class EnrichmentSource(AnalyticsHttpClient, ABC):
    """Base class for the per-title enrichment endpoints.

    Subclasses set ``kind`` and ``endpoint_template`` and implement
    :meth:`normalize`, which turns the raw JSON payload into the fragment's
    fields. ``normalize`` returns an empty dict when the payload carries
    nothing to apply and raises :class:`MalformedFragmentError` when the
    payload has the wrong shape.
    """

    kind: ClassVar[FragmentKind]
    endpoint_template: ClassVar[str]

    def get_source_name(self) -> str:
        """Return the unique identifier for this source."""
        return self.kind.value

    async def fetch(self, title_number: int) -> FragmentResult:
        """Fetch and normalize this source's fragment for a title.

        Args:
            title_number: CFR title number the fragment is keyed by

        Returns:
            FragmentResult; failures are logged, never raised.
        """
        endpoint = self.endpoint_template.format(title_number=title_number)
        try:
            payload = await self._execute_request(self.get_source_name(), "GET", endpoint)
            fields = self.normalize(payload)
        except MalformedFragmentError as e:
            logger.warning(
                "Malformed %s payload for title %s: %s", self.kind.value, title_number, e.message
            )
            return FragmentResult.failure(self.kind, e)
        except AnalyticsServiceError as e:
            logger.warning("Failed to load %s for title %s: %s", self.kind.value, title_number, e)
            return FragmentResult.failure(self.kind, e)
        except Exception as e:
            logger.exception("Unexpected error loading %s for title %s", self.kind.value, title_number)
            return FragmentResult.failure(
                self.kind,
                AnalyticsServiceError(self.get_source_name(), str(e), original_error=e),
            )

        if not fields:
            logger.info("No %s data returned for title %s; keeping defaults", self.kind.value, title_number)
        return FragmentResult.success(self.kind, fields)

    @abstractmethod
    def normalize(self, payload: Any) -> dict[str, Any]:
        """Reduce the endpoint payload to this fragment's field subset.

        Raises:
            MalformedFragmentError: If the payload shape is not recognized.
        """
        ...

    def _malformed(self, message: str) -> MalformedFragmentError:
        return MalformedFragmentError(source=self.get_source_name(), message=message)
