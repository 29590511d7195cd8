"""Historical changes source: change count, trend and change rows."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from cfr_analytics.models.changes import HistoricalChangeEntry
from cfr_analytics.sources.base import EnrichmentSource, FragmentKind

TREND_WINDOW = timedelta(days=365)
INCREASING_ABOVE = 15
DECREASING_BELOW = 5


def change_trend(entries: list[HistoricalChangeEntry], now: datetime) -> str:
    """Classify activity in the trailing year as Increasing, Stable or Decreasing."""
    cutoff = now - TREND_WINDOW
    recent = sum(1 for entry in entries if entry.date is not None and entry.date > cutoff)
    if recent > INCREASING_ABOVE:
        return "Increasing"
    if recent < DECREASING_BELOW:
        return "Decreasing"
    return "Stable"


def _newest_first(entry: HistoricalChangeEntry) -> tuple[int, float]:
    if entry.date is None:
        return (1, 0.0)
    return (0, -entry.date.timestamp())


class HistoricalChangesSource(EnrichmentSource):
    """Fetches the ``historical_changes`` fragment."""

    kind = FragmentKind.HISTORICAL_CHANGES
    endpoint_template = "/api/mvp/title/{title_number}/historical-changes"

    def __init__(self, *args: Any, clock: Optional[Callable[[], datetime]] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def normalize(self, payload: Any) -> dict[str, Any]:
        if payload is None:
            return {}
        if isinstance(payload, dict):
            if "changes" not in payload:
                raise self._malformed("object payload has no 'changes' array")
            payload = payload["changes"]
        if not isinstance(payload, list):
            raise self._malformed(f"expected array, got {type(payload).__name__}")

        entries = []
        for index, row in enumerate(payload):
            if not isinstance(row, dict):
                raise self._malformed(f"change {index} is {type(row).__name__}, expected object")
            entries.append(HistoricalChangeEntry.from_payload(row))

        entries.sort(key=_newest_first)
        return {
            "recent_changes": len(entries),
            "change_trend": change_trend(entries, self._clock()),
            "historical_changes": tuple(entries),
        }
