"""Wire models for the CFR analytics and site analysis endpoints."""

from cfr_analytics.models.changes import HistoricalChangeEntry, parse_change_date
from cfr_analytics.models.regulations import RegulationContent, RegulationHistory
from cfr_analytics.models.site_analysis import SiteAnalysisResult
from cfr_analytics.models.titles import CFROverview, DownloadStatus, TitleSummary

__all__ = [
    "CFROverview",
    "DownloadStatus",
    "HistoricalChangeEntry",
    "RegulationContent",
    "RegulationHistory",
    "SiteAnalysisResult",
    "TitleSummary",
    "parse_change_date",
]
