"""Overview and title models returned by the CFR analytics endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Base for JSON payloads: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class TitleSummary(_WireModel):
    """A CFR title as listed by the overview endpoint.

    Descriptive fields never change after creation; enrichment happens on
    :class:`~cfr_analytics.core.reconciliation.CompositeRecord`.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    name: str = ""
    agency: str = ""
    part_count: Optional[int] = None


class CFROverview(_WireModel):
    """Dashboard overview of all CFR titles."""

    total_titles: int = 0
    total_regulations: str = ""
    active_agencies: int = 0
    last_updated: Optional[int] = Field(default=None, description="Epoch milliseconds")
    deregulation_opportunities: int = 0
    titles: list[TitleSummary] = Field(default_factory=list)

    @field_validator("total_regulations", mode="before")
    @classmethod
    def _coerce_total_regulations(cls, value: Any) -> str:
        # The backend sends either a count or a display string like "200,000+"
        if value is None:
            return ""
        return str(value)

    def find_title(self, number: int) -> Optional[TitleSummary]:
        """Return the title with the given number, or None."""
        for title in self.titles:
            if title.number == number:
                return title
        return None


class DownloadStatus(_WireModel):
    """Acknowledgement returned when a bulk download is triggered."""

    status: str = "unknown"
    message: str = ""
    estimated_duration: Optional[str] = None
    started_at: Optional[int] = None
