"""WCAG compliance scan per page, classified by axe impact level."""

from __future__ import annotations

import logging

from site_audit.axe import AxeEngine
from site_audit.config import DEFAULT_ACCESSIBILITY_TAGS, DEFAULT_BASE_URL, DEFAULT_DWELL_MS, PAGES, find_page
from site_audit.models import AccessibilityResult, AccessibilitySummary, Impact, PageTarget, Violation
from site_audit.report import render_accessibility_markdown, write_report_pair
from site_audit.runner import CrawlStrategy, Visit, run_fault_isolated
from site_audit.session import Session

logger = logging.getLogger(__name__)


class AccessibilityStrategy(CrawlStrategy[AccessibilityResult]):
    category = "accessibility"

    def __init__(self, engine, tags: list[str], fail_on_critical: bool = True):
        self.engine = engine
        self.tags = tags
        self.fail_on_critical = fail_on_critical

    def new_result(self, target: PageTarget) -> AccessibilityResult:
        return AccessibilityResult(page=target.path, title=target.title)

    async def capture(self, browser, visit: Visit, result: AccessibilityResult) -> None:
        scan = await self.engine.analyze(self.tags)
        result.violations = scan.violations
        result.passes = scan.passes
        result.incomplete = scan.incomplete
        result.url = browser.current_url

        critical = result.count_by_impact("critical")
        if self.fail_on_critical and critical:
            result.error = f"Found {critical} critical accessibility violations"

    def describe(self, result: AccessibilityResult) -> str:
        return f"{result.title}: {len(result.violations)} violations"


def summarize_accessibility(results: list[AccessibilityResult]) -> AccessibilitySummary:
    critical = sum(r.count_by_impact("critical") for r in results)
    return AccessibilitySummary(
        total_pages=len(results),
        total_violations=sum(len(r.violations) for r in results),
        critical_violations=critical,
        serious_violations=sum(r.count_by_impact("serious") for r in results),
        moderate_violations=sum(r.count_by_impact("moderate") for r in results),
        minor_violations=sum(r.count_by_impact("minor") for r in results),
        overall_status="PASS" if critical == 0 else "FAIL",
        results=results,
    )


async def crawl_accessibility(
    browser,
    session: Session,
    *,
    engine=None,
    base_url: str = DEFAULT_BASE_URL,
    pages: list[PageTarget] | None = None,
    tags: list[str] | None = None,
    dwell_ms: int = DEFAULT_DWELL_MS,
    fail_on_critical: bool = True,
    unit_timeout: float | None = None,
    results: list[AccessibilityResult] | None = None,
) -> AccessibilitySummary:
    """Scan every page and persist accessibility-report.md / accessibility-results.json.

    Never raises for critical violations; callers decide whether the summary
    fails the run.
    """
    output_dir = session.output_directory("accessibility")
    strategy = AccessibilityStrategy(
        engine or AxeEngine(browser),
        list(DEFAULT_ACCESSIBILITY_TAGS if tags is None else tags),
        fail_on_critical=fail_on_critical,
    )
    results = await run_fault_isolated(
        browser,
        strategy,
        PAGES if pages is None else pages,
        base_url=base_url,
        dwell_ms=dwell_ms,
        unit_timeout=unit_timeout,
        results=results,
    )

    summary = summarize_accessibility(results)
    write_report_pair(summary, render_accessibility_markdown(summary), output_dir, "accessibility")
    logger.info(
        "accessibility crawl completed",
        extra={
            "pages": summary.total_pages,
            "violations": summary.total_violations,
            "critical": summary.critical_violations,
            "status": summary.overall_status,
        },
    )
    return summary


async def check_single_page_accessibility(
    browser,
    page_path: str,
    *,
    engine=None,
    base_url: str = DEFAULT_BASE_URL,
    pages: list[PageTarget] | None = None,
    tags: list[str] | None = None,
    dwell_ms: int = DEFAULT_DWELL_MS,
    fail_on_critical: bool = True,
    unit_timeout: float | None = None,
) -> AccessibilityResult:
    strategy = AccessibilityStrategy(
        engine or AxeEngine(browser),
        list(DEFAULT_ACCESSIBILITY_TAGS if tags is None else tags),
        fail_on_critical=fail_on_critical,
    )
    [result] = await run_fault_isolated(
        browser,
        strategy,
        [find_page(page_path, pages)],
        base_url=base_url,
        dwell_ms=dwell_ms,
        unit_timeout=unit_timeout,
    )
    return result


def get_violations_by_impact(results: list[AccessibilityResult], impact: Impact) -> list[dict]:
    """Pages that have at least one violation of ``impact``, with those violations."""
    grouped: list[dict] = []
    for r in results:
        violations: list[Violation] = [v for v in r.violations if v.impact == impact]
        if violations:
            grouped.append({"page": r.page, "title": r.title, "violations": violations})
    return grouped


def is_accessibility_compliant(summary: AccessibilitySummary) -> bool:
    return summary.critical_violations == 0
