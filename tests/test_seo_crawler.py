"""SEO crawler: facts, timing, summaries and helpers."""

import json

import pytest

from site_audit.crawlers import (
    analyze_single_page_seo,
    crawl_seo,
    get_pages_by_issue_type,
    get_performance_metrics,
    is_seo_compliant,
    summarize_seo,
)
from site_audit.models import PerformanceTiming, SEOResult

from .conftest import BASE_URL, FakeBrowser

BARE_HTML = "<html><head></head><body><p>nothing here</p></body></html>"


def _seo_result(page, load_time_ms, issues=()):
    return SEOResult(
        page=page, title=page, performance=PerformanceTiming(load_time_ms=load_time_ms), issues=list(issues)
    )


@pytest.mark.asyncio
async def test_crawl_clean_page_has_no_issues(browser, session, home_only):
    summary = await crawl_seo(browser, session, base_url=BASE_URL, pages=home_only, dwell_ms=0)
    [result] = summary.results
    assert result.success is True
    assert result.url == f"{BASE_URL}/"
    assert result.issues == []
    assert summary.overall_health == "EXCELLENT"
    assert is_seo_compliant(summary)

    out = session.directory / "seo"
    assert (out / "seo-report.md").exists()
    assert json.loads((out / "seo-results.json").read_text())["total_pages"] == 1


@pytest.mark.asyncio
async def test_crawl_bare_page_reports_missing_facts(session, home_only):
    browser = FakeBrowser(html={f"{BASE_URL}/": BARE_HTML})
    summary = await crawl_seo(browser, session, base_url=BASE_URL, pages=home_only, dwell_ms=0)
    issues = summary.results[0].issues
    assert issues[:3] == ["Missing page title", "Missing meta description", "Missing H1 heading"]
    assert summary.total_issues == 6
    assert summary.overall_health == "GOOD"


@pytest.mark.asyncio
async def test_dom_content_loaded_is_zero_when_event_missed(browser, home_only):
    result = await analyze_single_page_seo(browser, "/", base_url=BASE_URL, pages=home_only, dwell_ms=0)
    assert result.performance.dom_content_loaded_ms == 0
    assert result.issues == []
    # Listener is detached after the visit
    assert browser.handlers == []


@pytest.mark.asyncio
async def test_dom_content_loaded_recorded_when_event_fires(home_only):
    browser = FakeBrowser(fire_dom_content_loaded=True)
    result = await analyze_single_page_seo(browser, "/", base_url=BASE_URL, pages=home_only, dwell_ms=0)
    assert result.issues == []
    assert result.performance.dom_content_loaded_ms >= 0
    assert browser.handlers == []


@pytest.mark.asyncio
async def test_navigation_failure_keeps_default_facts(session, home_only):
    browser = FakeBrowser(failing={f"{BASE_URL}/": "refused"})
    summary = await crawl_seo(browser, session, base_url=BASE_URL, pages=home_only, dwell_ms=0)
    [result] = summary.results
    assert result.success is False
    assert result.error == "refused"
    assert result.issues == []


def test_average_load_time_rounds_half_up():
    summary = summarize_seo([_seo_result("/", 1000), _seo_result("/a", 1001)])
    assert summary.average_load_time == 1001
    summary = summarize_seo([_seo_result("/", 2), _seo_result("/a", 3)])
    assert summary.average_load_time == 3


def test_empty_summary():
    summary = summarize_seo([])
    assert summary.total_pages == 0
    assert summary.average_load_time == 0
    assert summary.overall_health == "EXCELLENT"
    assert get_performance_metrics([]) is None


def test_pages_by_issue_type_is_case_insensitive():
    results = [
        _seo_result("/", 100, ["Missing page title", "Missing H1 heading"]),
        _seo_result("/about", 100, ["Missing Open Graph image"]),
    ]
    matches = get_pages_by_issue_type(results, "h1")
    assert matches == [{"page": "/", "title": "/", "issues": ["Missing H1 heading"]}]
    assert len(get_pages_by_issue_type(results, "missing")) == 2


def test_performance_metrics():
    metrics = get_performance_metrics([_seo_result("/", 1200), _seo_result("/a", 300), _seo_result("/b", 4000)])
    assert metrics.fastest_page == ("/a", 300)
    assert metrics.slowest_page == ("/b", 4000)
    assert metrics.average_load_time == 1833
