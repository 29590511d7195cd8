"""Regulation part content and version history models."""

from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from cfr_analytics.models.titles import _WireModel


class _PartModel(_WireModel):
    title_number: int
    part_number: str

    @field_validator("part_number", mode="before")
    @classmethod
    def _part_as_text(cls, value: Any) -> str:
        # Parts are identifiers ("100", "1910"), sometimes sent as numbers
        return str(value)


class RegulationAnalytics(_WireModel):
    word_count: int = 0
    complexity_score: float = 0.0
    downloaded_at: Optional[int] = Field(default=None, description="Epoch milliseconds")


class RegulationContent(_PartModel):
    """Text of one CFR part together with its content analytics."""

    title: str = ""
    content: str = ""
    analytics: RegulationAnalytics = Field(default_factory=RegulationAnalytics)


class RegulationVersion(_WireModel):
    date: Optional[int] = None
    effective_date: Optional[int] = None
    summary: str = ""
    word_count: Optional[int] = None


class RegulationHistory(_PartModel):
    """Version history of one CFR part."""

    versions: list[RegulationVersion] = Field(default_factory=list)
    version_count: int = 0
    change_frequency: str = ""
    downloaded_at: Optional[int] = None

    @model_validator(mode="after")
    def _count_versions(self) -> "RegulationHistory":
        # Older backends omit versionCount
        if not self.version_count and self.versions:
            self.version_count = len(self.versions)
        return self
