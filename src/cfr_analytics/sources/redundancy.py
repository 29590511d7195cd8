"""Redundancy source: averaged deregulation priority for a title.

The endpoint returns a list of scored redundancy findings. The list is
reduced to a rounded mean score, the number of findings, and how many of
them clear the deregulation-opportunity threshold.
"""

import math
from typing import Any, Optional

from cfr_analytics.clients.shared import as_number
from cfr_analytics.sources.base import EnrichmentSource, FragmentKind

OPPORTUNITY_THRESHOLD = 7

_SEVERITY_POINTS = {
    "CRITICAL": 50,
    "HIGH": 30,
    "MEDIUM": 15,
    "LOW": 5,
}


def derive_priority_score(item: dict[str, Any]) -> Optional[float]:
    """Compute a finding's priority score from its raw redundancy metrics.

    Used when the backend omits ``deregulationPriorityScore``. Returns None
    when there is no similarity score to start from.
    """
    similarity = as_number(item.get("similarityScore"))
    if similarity is None:
        return None

    score = int(similarity * 100)
    score += _SEVERITY_POINTS.get(str(item.get("severity", "")).upper(), 0)

    savings = as_number(item.get("estimatedCostSavings"))
    if savings is not None and savings > 100:
        score += 25

    agency1, agency2 = item.get("agency1"), item.get("agency2")
    if agency1 and agency2 and agency1 != agency2:
        score += 20

    return float(min(score, 100))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RedundancySource(EnrichmentSource):
    """Fetches the ``redundancy`` fragment."""

    kind = FragmentKind.REDUNDANCY
    endpoint_template = "/api/mvp/title/{title_number}/redundancy-analysis"

    def normalize(self, payload: Any) -> dict[str, Any]:
        if payload is None:
            return {}
        if not isinstance(payload, list):
            raise self._malformed(f"expected array, got {type(payload).__name__}")
        if not payload:
            return {}

        scores = [self._item_score(index, item) for index, item in enumerate(payload)]
        return {
            "redundancy_score": _round_half_up(sum(scores) / len(scores)),
            "redundant_sections": len(scores),
            "deregulation_opportunities": sum(1 for s in scores if s > OPPORTUNITY_THRESHOLD),
        }

    def _item_score(self, index: int, item: Any) -> float:
        if not isinstance(item, dict):
            raise self._malformed(f"item {index} is {type(item).__name__}, expected object")
        score = as_number(item.get("deregulationPriorityScore"))
        if score is None:
            score = derive_priority_score(item)
        return score or 0.0
