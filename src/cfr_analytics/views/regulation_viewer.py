"""Regulation content presenter.

Loads the text of one part of a CFR title and, on request, its version
history. Failed loads leave nothing to show except ``error_message``.
"""

import logging
import math
from typing import Optional

from cfr_analytics.clients.cfr import CFRAnalyticsClient
from cfr_analytics.core.collaborators import VIEW_TITLE_ANALYSIS, Navigator
from cfr_analytics.core.errors import AnalyticsServiceError, user_message
from cfr_analytics.models.changes import parse_change_date
from cfr_analytics.models.regulations import RegulationContent, RegulationHistory

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200


def complexity_level(score: float) -> str:
    if score >= 8.0:
        return "High"
    if score >= 6.0:
        return "Medium"
    return "Low"


def compliance_burden(word_count: int) -> str:
    if word_count >= 2000:
        return "significant"
    if word_count >= 1000:
        return "moderate"
    return "minimal"


def reading_time(word_count: int) -> str:
    return f"{math.ceil(word_count / WORDS_PER_MINUTE)} min"


class RegulationViewerView:
    """State for the regulation viewer screen."""

    complexity_level = staticmethod(complexity_level)
    compliance_burden = staticmethod(compliance_burden)
    reading_time = staticmethod(reading_time)

    def __init__(
        self,
        client: CFRAnalyticsClient,
        navigator: Optional[Navigator] = None,
        title_number: Optional[int] = None,
        part_number: str = "",
    ):
        self._client = client
        self._navigator = navigator
        self.title_number = title_number
        self.part_number = part_number

        self.content: Optional[RegulationContent] = None
        self.history: Optional[RegulationHistory] = None
        self.is_loading = False
        self.is_loading_history = False
        self.error_message = ""
        self.history_error_message = ""

    def select_title(self, title_number: int) -> None:
        """Switch titles; the part and anything loaded for it are cleared."""
        self.title_number = title_number
        self.part_number = ""
        self.content = None
        self.history = None

    @property
    def can_load(self) -> bool:
        return bool(self.title_number) and bool(self.part_number) and not self.is_loading

    async def load(self) -> Optional[RegulationContent]:
        if not (self.title_number and self.part_number):
            return None
        self.is_loading = True
        self.error_message = ""
        try:
            self.content = await self._client.get_regulation_content(self.title_number, self.part_number)
        except AnalyticsServiceError as e:
            logger.error(
                "Failed to load CFR %s part %s: %s", self.title_number, self.part_number, e
            )
            self.content = None
            self.error_message = user_message(e)
        finally:
            self.is_loading = False
        return self.content

    async def load_history(self) -> Optional[RegulationHistory]:
        if not (self.title_number and self.part_number):
            return None
        self.is_loading_history = True
        self.history_error_message = ""
        try:
            self.history = await self._client.get_regulation_history(self.title_number, self.part_number)
        except AnalyticsServiceError as e:
            logger.error(
                "Failed to load history of CFR %s part %s: %s", self.title_number, self.part_number, e
            )
            self.history = None
            self.history_error_message = user_message(e)
        finally:
            self.is_loading_history = False
        return self.history

    @property
    def complexity(self) -> str:
        if self.content is None:
            return ""
        return f"{complexity_level(self.content.analytics.complexity_score)} complexity"

    @property
    def deregulation_risk(self) -> str:
        if self.content is None:
            return "Low"
        return complexity_level(self.content.analytics.complexity_score)

    @property
    def burden(self) -> str:
        if self.content is None:
            return "minimal"
        return compliance_burden(self.content.analytics.word_count)

    @property
    def estimated_reading_time(self) -> str:
        if self.content is None:
            return "0 min"
        return reading_time(self.content.analytics.word_count)

    def export_text(self) -> Optional[tuple[str, str]]:
        """Return ``(filename, text)`` for saving the loaded part as plain text."""
        content = self.content
        if content is None:
            return None
        downloaded = parse_change_date(content.analytics.downloaded_at)
        lines = [
            f"CFR Title {content.title_number}, Part {content.part_number}",
            content.title,
            "",
            content.content,
            "",
            "Analytics:",
            f"- Word Count: {content.analytics.word_count}",
            f"- Complexity Score: {content.analytics.complexity_score}",
            f"- Downloaded: {downloaded.isoformat() if downloaded else 'Unknown'}",
        ]
        return f"CFR_{content.title_number}_{content.part_number}.txt", "\n".join(lines)

    def go_back(self) -> None:
        if self._navigator is not None and self.title_number:
            self._navigator.navigate(VIEW_TITLE_ANALYSIS, title_number=self.title_number)
