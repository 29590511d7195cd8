"""Historical change entries for a CFR title."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_CHANGE_TYPE = "Modification"
DEFAULT_DESCRIPTION = "Regulatory update"

MAJOR_DELTA = 1000
MINOR_DELTA = 100


def parse_change_date(value: Any) -> Optional[datetime]:
    """Parse the date formats the backend emits for a change.

    Accepts ISO 8601 strings (with or without ``Z``), epoch milliseconds and
    Jackson-style ``[year, month, day, ...]`` arrays. Returned datetimes are
    timezone-aware (naive values are assumed UTC).
    """
    parsed: Optional[datetime] = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    elif isinstance(value, (list, tuple)) and len(value) >= 3:
        try:
            parsed = datetime(*(int(part) for part in value[:6]))
        except (TypeError, ValueError):
            return None

    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def change_impact(delta: int) -> str:
    """Classify a word-count delta as MAJOR, MINOR or EDITORIAL."""
    magnitude = abs(delta)
    if magnitude > MAJOR_DELTA:
        return "MAJOR"
    if magnitude > MINOR_DELTA:
        return "MINOR"
    return "EDITORIAL"


class HistoricalChangeEntry(BaseModel):
    """One normalized row of a title's change history."""

    model_config = ConfigDict(frozen=True)

    date: Optional[datetime] = None
    change_type: str = DEFAULT_CHANGE_TYPE
    word_count_delta: int = 0
    description: str = DEFAULT_DESCRIPTION
    impact: str = "EDITORIAL"

    @classmethod
    def from_payload(cls, row: dict[str, Any]) -> "HistoricalChangeEntry":
        """Build an entry from a raw backend row, applying field fallbacks."""
        try:
            raw_delta = row.get("wordCountDelta")
            if raw_delta is None and row.get("wordCountBefore") is not None and row.get("wordCountAfter") is not None:
                raw_delta = int(row["wordCountAfter"]) - int(row["wordCountBefore"])
            delta = int(raw_delta or 0)
        except (TypeError, ValueError):
            delta = 0

        change_type = row.get("changeType") or row.get("type") or DEFAULT_CHANGE_TYPE
        description = (
            row.get("description")
            or row.get("changeDescription")
            or row.get("summary")
            or DEFAULT_DESCRIPTION
        )
        return cls(
            date=parse_change_date(row.get("changeDate") or row.get("date")),
            change_type=str(change_type).replace("_", " ").title(),
            word_count_delta=delta,
            description=str(description),
            impact=row.get("changeImpact") or change_impact(delta),
        )
