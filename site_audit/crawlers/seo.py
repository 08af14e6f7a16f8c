"""On-page SEO facts, load timing and issue detection per page."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from site_audit.analyzers import analyze_seo_issues
from site_audit.config import DEFAULT_BASE_URL, DEFAULT_DWELL_MS, DEFAULT_PERFORMANCE_THRESHOLD_MS, PAGES, find_page
from site_audit.extract import extract_page_facts
from site_audit.models import Health, PageTarget, PerformanceTiming, SEOResult, SEOSummary
from site_audit.report import render_seo_markdown, write_report_pair
from site_audit.runner import CrawlStrategy, Visit, run_fault_isolated
from site_audit.session import Session

logger = logging.getLogger(__name__)

GOOD_HEALTH_MAX_ISSUES = 9


class SEOStrategy(CrawlStrategy[SEOResult]):
    category = "seo"

    def __init__(self, performance_threshold: int = DEFAULT_PERFORMANCE_THRESHOLD_MS):
        self.performance_threshold = performance_threshold
        self._listener = None

    def new_result(self, target: PageTarget) -> SEOResult:
        return SEOResult(page=target.path, title=target.title)

    def before_navigation(self, browser, visit: Visit) -> None:
        # The listener can attach after the event already fired, in which case
        # dom_content_loaded_ms stays 0. The value is advisory only.
        def on_dom_content_loaded(*_):
            visit.mark("domcontentloaded")

        self._listener = on_dom_content_loaded
        browser.on_dom_content_loaded(on_dom_content_loaded)

    async def capture(self, browser, visit: Visit, result: SEOResult) -> None:
        html = await browser.content()
        result.url = browser.current_url
        facts = extract_page_facts(html, result.url)
        result.meta = facts.meta
        result.headings = facts.headings
        result.images = facts.images
        result.links = facts.links
        result.performance = PerformanceTiming(
            load_time_ms=visit.load_time_ms,
            dom_content_loaded_ms=visit.marks.get("domcontentloaded", 0),
        )
        result.issues = analyze_seo_issues(result, self.performance_threshold)

    def after_visit(self, browser, visit: Visit) -> None:
        if self._listener is not None:
            browser.remove_dom_content_loaded(self._listener)
            self._listener = None

    def describe(self, result: SEOResult) -> str:
        return f"{result.title}: {len(result.issues)} issues"


def overall_health(total_issues: int) -> Health:
    if total_issues == 0:
        return "EXCELLENT"
    if total_issues <= GOOD_HEALTH_MAX_ISSUES:
        return "GOOD"
    return "NEEDS_IMPROVEMENT"


def summarize_seo(results: list[SEOResult]) -> SEOSummary:
    total_issues = sum(len(r.issues) for r in results)
    load_times = [r.performance.load_time_ms for r in results]
    average = sum(load_times) / len(load_times) if load_times else 0
    return SEOSummary(
        total_pages=len(results),
        total_issues=total_issues,
        # half-up, not banker's rounding
        average_load_time=math.floor(average + 0.5),
        overall_health=overall_health(total_issues),
        results=results,
    )


async def crawl_seo(
    browser,
    session: Session,
    *,
    base_url: str = DEFAULT_BASE_URL,
    pages: list[PageTarget] | None = None,
    dwell_ms: int = DEFAULT_DWELL_MS,
    performance_threshold: int = DEFAULT_PERFORMANCE_THRESHOLD_MS,
    unit_timeout: float | None = None,
    results: list[SEOResult] | None = None,
) -> SEOSummary:
    output_dir = session.output_directory("seo")
    results = await run_fault_isolated(
        browser,
        SEOStrategy(performance_threshold),
        PAGES if pages is None else pages,
        base_url=base_url,
        dwell_ms=dwell_ms,
        unit_timeout=unit_timeout,
        results=results,
    )

    summary = summarize_seo(results)
    write_report_pair(summary, render_seo_markdown(summary), output_dir, "seo")
    logger.info(
        "seo crawl completed",
        extra={
            "pages": summary.total_pages,
            "issues": summary.total_issues,
            "average_load_time": summary.average_load_time,
            "health": summary.overall_health,
        },
    )
    return summary


async def analyze_single_page_seo(
    browser,
    page_path: str,
    *,
    base_url: str = DEFAULT_BASE_URL,
    pages: list[PageTarget] | None = None,
    dwell_ms: int = DEFAULT_DWELL_MS,
    performance_threshold: int = DEFAULT_PERFORMANCE_THRESHOLD_MS,
    unit_timeout: float | None = None,
) -> SEOResult:
    [result] = await run_fault_isolated(
        browser,
        SEOStrategy(performance_threshold),
        [find_page(page_path, pages)],
        base_url=base_url,
        dwell_ms=dwell_ms,
        unit_timeout=unit_timeout,
    )
    return result


def get_pages_by_issue_type(results: list[SEOResult], issue_type: str) -> list[dict]:
    """Pages whose issues mention ``issue_type`` (case-insensitive)."""
    needle = issue_type.lower()
    matches = []
    for r in results:
        issues = [i for i in r.issues if needle in i.lower()]
        if issues:
            matches.append({"page": r.page, "title": r.title, "issues": issues})
    return matches


def is_seo_compliant(summary: SEOSummary) -> bool:
    return summary.overall_health == "EXCELLENT"


@dataclass
class PerformanceMetrics:
    average_load_time: int
    fastest_page: tuple[str, int]
    slowest_page: tuple[str, int]


def get_performance_metrics(results: list[SEOResult]) -> PerformanceMetrics | None:
    if not results:
        return None
    timings = [(r.page, r.performance.load_time_ms) for r in results]
    return PerformanceMetrics(
        average_load_time=summarize_seo(results).average_load_time,
        fastest_page=min(timings, key=lambda t: t[1]),
        slowest_page=max(timings, key=lambda t: t[1]),
    )
