"""Headless presenters holding the state each analytics screen binds to."""

from cfr_analytics.views.analysis import AnalysisView
from cfr_analytics.views.dashboard import DashboardView
from cfr_analytics.views.regulation_viewer import RegulationViewerView
from cfr_analytics.views.results import ResultsView
from cfr_analytics.views.title_analysis import TitleAnalysisView

__all__ = [
    "AnalysisView",
    "DashboardView",
    "RegulationViewerView",
    "ResultsView",
    "TitleAnalysisView",
]
