"""Per-title analysis presenter.

Loads the overview to find the base record for one title, then enriches it
with the word-count, redundancy and historical-changes fragments. The view
stays in its loading state until every fragment has resolved; a failed
fragment leaves its placeholders in place and is reported through
``failed_kinds``. If the base record cannot be obtained there is no record
at all, only an error message.
"""

import logging
from typing import Optional

from cfr_analytics.clients.cfr import CFRAnalyticsClient
from cfr_analytics.core.collaborators import (
    VIEW_DASHBOARD,
    VIEW_REGULATION_VIEWER,
    Navigator,
)
from cfr_analytics.core.errors import AnalyticsServiceError, user_message
from cfr_analytics.core.reconciliation import (
    NOT_AVAILABLE,
    CompositeRecord,
    ReconciliationAccumulator,
    create_composite,
    enrich,
)
from cfr_analytics.sources.base import FragmentKind

logger = logging.getLogger(__name__)

# Reference figure the word count is compared against
AVERAGE_WORD_COUNT = 85000


def percentage_difference(value: float, average: float) -> str:
    """Signed percent difference of *value* from *average*, e.g. ``+12.5%``."""
    if not value or not average:
        return NOT_AVAILABLE
    diff = (value - average) / average * 100
    sign = "+" if diff > 0 else ""
    return f"{sign}{diff:.1f}%"


def redundancy_label(score: float) -> str:
    if score <= 3:
        return "Low Redundancy"
    if score <= 6:
        return "Moderate Redundancy"
    return "High Redundancy"


class TitleAnalysisView:
    percentage_difference = staticmethod(percentage_difference)
    redundancy_label = staticmethod(redundancy_label)

    def __init__(
        self,
        title_number: int,
        client: CFRAnalyticsClient,
        navigator: Navigator,
        average_word_count: int = AVERAGE_WORD_COUNT,
    ):
        self.title_number = title_number
        self.average_word_count = average_word_count
        self._client = client
        self._navigator = navigator

        self.record: Optional[CompositeRecord] = None
        self.is_loading = False
        self.error_message = ""
        self.accumulator: Optional[ReconciliationAccumulator] = None

    @property
    def applied_kinds(self) -> list[FragmentKind]:
        return list(self.accumulator.applied_kinds) if self.accumulator else []

    @property
    def failed_kinds(self) -> list[FragmentKind]:
        return list(self.accumulator.failed_kinds) if self.accumulator else []

    async def load(self) -> Optional[CompositeRecord]:
        self.is_loading = True
        self.error_message = ""
        self.record = None
        self.accumulator = None

        try:
            overview = await self._client.get_overview()
        except AnalyticsServiceError as e:
            logger.error("Failed to load overview for title %s: %s", self.title_number, e)
            self.error_message = user_message(e)
            self.is_loading = False
            return None

        base = overview.find_title(self.title_number)
        if base is None:
            logger.error("CFR Title %s not found in overview", self.title_number)
            self.error_message = f"CFR Title {self.title_number} not found."
            self.is_loading = False
            return None

        record = create_composite(base)
        self.record = record
        self.accumulator = await enrich(
            record, self._client.enrichment_sources(), on_complete=self._on_enriched
        )
        return record

    async def retry(self) -> Optional[CompositeRecord]:
        return await self.load()

    def _on_enriched(self, record: CompositeRecord) -> None:
        logger.info("Title %s analysis loaded", record.number)
        self.is_loading = False

    @property
    def word_count_difference(self) -> str:
        word_count = self.record.word_count if self.record else 0
        return percentage_difference(word_count, self.average_word_count)

    @property
    def redundancy(self) -> str:
        return redundancy_label(self.record.redundancy_score if self.record else 0)

    def view_regulation_content(self) -> None:
        self._navigator.navigate(VIEW_REGULATION_VIEWER, title=self.title_number)

    def go_back(self) -> None:
        self._navigator.navigate(VIEW_DASHBOARD)
