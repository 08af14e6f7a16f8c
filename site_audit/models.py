from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, computed_field

Impact = Literal["critical", "serious", "moderate", "minor"]
IMPACT_LEVELS: tuple[Impact, ...] = ("critical", "serious", "moderate", "minor")
Health = Literal["EXCELLENT", "GOOD", "NEEDS_IMPROVEMENT"]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# --- Target matrix ---

class PageTarget(BaseModel):
    path: str
    title: str


class ViewportSpec(BaseModel):
    name: str
    width: int
    height: int


# --- Per-unit results ---

class CrawlResult(BaseModel):
    page: str
    title: str
    timestamp: str = Field(default_factory=utc_timestamp)
    success: bool = False
    error: str | None = None


class ScreenshotResult(CrawlResult):
    viewport: str
    file_path: str = ""


class Violation(BaseModel):
    id: str
    impact: Impact
    description: str = ""
    help: str = ""
    help_url: str = ""
    affected_node_count: int = 0


class RuleCheck(BaseModel):
    """A passed or incomplete axe rule; impact is often unset for these."""

    id: str
    impact: str | None = None
    description: str = ""
    help: str = ""
    help_url: str = ""
    affected_node_count: int = 0


class AccessibilityResult(CrawlResult):
    url: str = ""
    violations: list[Violation] = Field(default_factory=list)
    passes: list[RuleCheck] = Field(default_factory=list)
    incomplete: list[RuleCheck] = Field(default_factory=list)

    def count_by_impact(self, impact: Impact) -> int:
        return sum(1 for v in self.violations if v.impact == impact)

    @computed_field
    @property
    def status(self) -> Literal["PASS", "FAIL", "ERROR"]:
        if not self.success:
            return "ERROR"
        return "FAIL" if self.count_by_impact("critical") else "PASS"


class MetaData(BaseModel):
    title: str | None = None
    description: str | None = None
    keywords: str | None = None
    robots: str | None = None
    canonical: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    og_type: str | None = None
    og_url: str | None = None
    twitter_card: str | None = None
    twitter_title: str | None = None
    twitter_description: str | None = None
    twitter_image: str | None = None
    author: str | None = None
    generator: str | None = None
    viewport: str | None = None
    theme_color: str | None = None


class Headings(BaseModel):
    h1: list[str] = Field(default_factory=list)
    h2: list[str] = Field(default_factory=list)
    h3: list[str] = Field(default_factory=list)
    h4: list[str] = Field(default_factory=list)
    h5: list[str] = Field(default_factory=list)
    h6: list[str] = Field(default_factory=list)

    def level(self, n: int) -> list[str]:
        return getattr(self, f"h{n}")


class ImageInfo(BaseModel):
    src: str
    alt: str | None = None
    title: str | None = None
    has_alt: bool


class LinkInfo(BaseModel):
    href: str
    text: str = ""
    title: str | None = None
    rel: str | None = None
    is_external: bool = False


class PerformanceTiming(BaseModel):
    load_time_ms: int = 0
    # Best effort: stays 0 when the DOMContentLoaded listener missed the event
    dom_content_loaded_ms: int = 0


class SEOResult(CrawlResult):
    url: str = ""
    meta: MetaData = Field(default_factory=MetaData)
    headings: Headings = Field(default_factory=Headings)
    images: list[ImageInfo] = Field(default_factory=list)
    links: list[LinkInfo] = Field(default_factory=list)
    performance: PerformanceTiming = Field(default_factory=PerformanceTiming)
    issues: list[str] = Field(default_factory=list)


# --- Category summaries ---

class ScreenshotSummary(BaseModel):
    total: int = 0
    successful: int = 0
    failed: int = 0
    results: list[ScreenshotResult] = Field(default_factory=list)


class AccessibilitySummary(BaseModel):
    total_pages: int = 0
    total_violations: int = 0
    critical_violations: int = 0
    serious_violations: int = 0
    moderate_violations: int = 0
    minor_violations: int = 0
    overall_status: Literal["PASS", "FAIL"] = "PASS"
    results: list[AccessibilityResult] = Field(default_factory=list)


class SEOSummary(BaseModel):
    total_pages: int = 0
    total_issues: int = 0
    average_load_time: int = 0
    overall_health: Health = "EXCELLENT"
    results: list[SEOResult] = Field(default_factory=list)


# --- Session report ---

class CategoryOutcome(BaseModel):
    completed: bool = False
    output_dir: str = ""
    error: str | None = None


class ScreenshotOutcome(CategoryOutcome):
    summary: ScreenshotSummary = Field(default_factory=ScreenshotSummary)


class AccessibilityOutcome(CategoryOutcome):
    summary: AccessibilitySummary = Field(default_factory=AccessibilitySummary)


class SEOOutcome(CategoryOutcome):
    summary: SEOSummary = Field(default_factory=SEOSummary)


class SessionReport(BaseModel):
    session_id: str
    generated_at: str = Field(default_factory=utc_timestamp)
    screenshots: ScreenshotOutcome = Field(default_factory=ScreenshotOutcome)
    accessibility: AccessibilityOutcome = Field(default_factory=AccessibilityOutcome)
    seo: SEOOutcome = Field(default_factory=SEOOutcome)
    all_passed: bool = False
    high_priority: list[str] = Field(default_factory=list)
    medium_priority: list[str] = Field(default_factory=list)
