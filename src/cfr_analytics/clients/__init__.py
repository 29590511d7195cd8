"""HTTP clients for the CFR analytics backend."""

from cfr_analytics.clients.cfr import CFRAnalyticsClient
from cfr_analytics.clients.http import AnalyticsHttpClient
from cfr_analytics.clients.site_analysis import SiteAnalysisClient

__all__ = ["AnalyticsHttpClient", "CFRAnalyticsClient", "SiteAnalysisClient"]
