"""Enrichment sources: per-title partial updates for a composite record."""

from cfr_analytics.sources.base import EnrichmentSource, FragmentKind, FragmentResult
from cfr_analytics.sources.historical_changes import HistoricalChangesSource
from cfr_analytics.sources.redundancy import RedundancySource
from cfr_analytics.sources.word_count import WordCountSource

__all__ = [
    "EnrichmentSource",
    "FragmentKind",
    "FragmentResult",
    "HistoricalChangesSource",
    "RedundancySource",
    "WordCountSource",
]
