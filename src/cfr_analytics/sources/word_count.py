"""Word count source: total words and part count for a title.

The endpoint returns either an object carrying ``totalWords`` (and
optionally ``regulationCount``) or a list of per-agency rows with
``totalWordCount`` / ``regulationCount`` which are summed.
"""

from typing import Any, Optional

from cfr_analytics.clients.shared import as_number
from cfr_analytics.sources.base import EnrichmentSource, FragmentKind

HIGH_BURDEN_WORDS = 100_000
MEDIUM_BURDEN_WORDS = 25_000


def burden_level(word_count: int) -> str:
    """Regulatory burden level implied by a word count."""
    if word_count > HIGH_BURDEN_WORDS:
        return "HIGH"
    if word_count > MEDIUM_BURDEN_WORDS:
        return "MEDIUM"
    return "LOW"


class WordCountSource(EnrichmentSource):
    """Fetches the ``word_count`` fragment."""

    kind = FragmentKind.WORD_COUNT
    endpoint_template = "/api/mvp/title/{title_number}/agencies/word-count"

    def normalize(self, payload: Any) -> dict[str, Any]:
        if payload is None:
            return {}
        if isinstance(payload, dict):
            total = as_number(payload.get("totalWords", payload.get("totalWordCount")))
            parts = as_number(payload.get("regulationCount"))
        elif isinstance(payload, list):
            if not payload:
                return {}
            total, parts = self._sum_rows(payload)
        else:
            raise self._malformed(f"expected object or array, got {type(payload).__name__}")

        if not total:
            return {}

        word_count = int(total)
        fields: dict[str, Any] = {
            "word_count": word_count,
            "burden_level": burden_level(word_count),
        }
        if parts:
            fields["part_count"] = int(parts)
        return fields

    def _sum_rows(self, rows: list[Any]) -> tuple[Optional[float], Optional[float]]:
        total = 0.0
        parts = 0.0
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                raise self._malformed(f"row {index} is {type(row).__name__}, expected object")
            total += as_number(row.get("totalWordCount", row.get("totalWords"))) or 0.0
            parts += as_number(row.get("regulationCount")) or 0.0
        return total, parts
