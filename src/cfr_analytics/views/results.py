"""Results presenter for the latest site analysis."""

from typing import Optional

from cfr_analytics.core.collaborators import VIEW_ANALYSIS, Navigator
from cfr_analytics.core.state import AnalysisResultStore
from cfr_analytics.models.site_analysis import SiteAnalysisResult

_BYTE_UNITS = ("Bytes", "KB", "MB", "GB")
_WCAG_LEVELS = {0: "Below A", 1: "A", 2: "AA", 3: "AAA"}


def format_bytes(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_BYTE_UNITS[unit]}"


def wcag_level_text(level: int) -> str:
    return _WCAG_LEVELS.get(level, "Unknown")


def _grade(score: float, labels: tuple[str, str, str, str, str]) -> str:
    for threshold, label in zip((90, 80, 70, 60), labels):
        if score >= threshold:
            return label
    return labels[-1]


def performance_description(score: float) -> str:
    return _grade(score, ("Excellent", "Good", "Fair", "Needs Improvement", "Poor"))


def usability_description(score: float) -> str:
    return _grade(
        score, ("Highly Usable", "Good Usability", "Adequate", "Below Average", "Poor Usability")
    )


def compliance_description(score: float) -> str:
    return _grade(
        score,
        (
            "Fully Compliant",
            "Mostly Compliant",
            "Partially Compliant",
            "Limited Compliance",
            "Non-Compliant",
        ),
    )


class ResultsView:
    """Shows whatever the shared store holds; ``result`` is None until an
    analysis has completed."""

    wcag_level_text = staticmethod(wcag_level_text)
    performance_description = staticmethod(performance_description)
    usability_description = staticmethod(usability_description)
    compliance_description = staticmethod(compliance_description)
    format_bytes = staticmethod(format_bytes)

    def __init__(self, store: AnalysisResultStore, navigator: Optional[Navigator] = None):
        self._navigator = navigator
        self.result: Optional[SiteAnalysisResult] = None
        self._unsubscribe = store.subscribe(self._on_result)

    def _on_result(self, result: Optional[SiteAnalysisResult]) -> None:
        self.result = result

    def summary(self) -> dict[str, str]:
        """Headline descriptions for the four score cards."""
        if self.result is None:
            return {}
        r = self.result
        return {
            "accessibility": f"WCAG {wcag_level_text(r.accessibility.wcag_level)}",
            "performance": performance_description(r.performance.score),
            "usability": usability_description(r.usability.score),
            "compliance": compliance_description(r.compliance.compliance_score),
            "page_size": format_bytes(r.performance.page_size_bytes),
        }

    def run_new_analysis(self) -> None:
        if self._navigator is not None:
            self._navigator.navigate(VIEW_ANALYSIS)

    def close(self) -> None:
        self._unsubscribe()
