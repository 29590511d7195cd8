"""Site analysis result returned by the analysis endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Section(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class AccessibilityMetrics(_Section):
    wcag_level: int = 0
    issues: list[str] = Field(default_factory=list)
    score: float = 0.0
    details: dict[str, Any] = Field(default_factory=dict)


class PerformanceMetrics(_Section):
    load_time_ms: int = 0
    page_size_bytes: int = 0
    number_of_requests: int = 0
    image_count: int = 0
    script_count: int = 0
    stylesheet_count: int = 0
    score: float = 0.0


class ContentAnalysis(_Section):
    title: str = ""
    description: str = ""
    heading_count: int = 0
    link_count: int = 0
    image_count: int = 0
    word_count: int = 0
    languages: list[str] = Field(default_factory=list)
    has_search_functionality: bool = False


class TechnicalAnalysis(_Section):
    doctype: str = ""
    is_https: bool = False
    has_csp: bool = False
    has_robots_txt: bool = False
    has_sitemap: bool = False
    technologies: list[str] = Field(default_factory=list)
    meta_tags: dict[str, str] = Field(default_factory=dict)


class UsabilityAnalysis(_Section):
    mobile_responsive: bool = False
    has_navigation: bool = False
    has_breadcrumbs: bool = False
    has_skip_links: bool = False
    navigation_depth: int = 0
    score: float = 0.0


class GovernmentCompliance(_Section):
    section508_compliant: bool = False
    has_privacy_policy: bool = False
    has_accessibility_statement: bool = False
    has_foia: bool = False
    has_contact: bool = False
    compliance_score: float = 0.0
    recommendations: list[str] = Field(default_factory=list)


class SiteAnalysisResult(_Section):
    """Full result of one website analysis run."""

    url: str
    analyzed_at: str = ""
    response_time_ms: int = 0
    status_code: int = 0
    accessibility: AccessibilityMetrics = Field(default_factory=AccessibilityMetrics)
    performance: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    content: ContentAnalysis = Field(default_factory=ContentAnalysis)
    technical: TechnicalAnalysis = Field(default_factory=TechnicalAnalysis)
    usability: UsabilityAnalysis = Field(default_factory=UsabilityAnalysis)
    compliance: GovernmentCompliance = Field(default_factory=GovernmentCompliance)
