"""Accessibility crawler, axe result parsing and impact classification."""

import json

import pytest

from site_audit.axe import AccessibilityScan, parse_scan
from site_audit.crawlers import (
    check_single_page_accessibility,
    crawl_accessibility,
    get_violations_by_impact,
    is_accessibility_compliant,
    summarize_accessibility,
)
from site_audit.errors import CaptureError
from site_audit.models import AccessibilityResult, Violation

from .conftest import BASE_URL, FakeBrowser, FakeEngine


def _violation(impact, rule="color-contrast"):
    return Violation(id=rule, impact=impact, description="d", help="h", help_url="u", affected_node_count=2)


def _result(*impacts, success=True):
    return AccessibilityResult(
        page="/", title="Home", success=success, violations=[_violation(i) for i in impacts]
    )


@pytest.mark.parametrize(
    "results, expected",
    [
        ([_result("serious", "minor")], "PASS"),
        ([_result("critical", "serious")], "FAIL"),
        ([_result("critical"), _result("critical", "critical")], "FAIL"),
        ([], "PASS"),
    ],
)
def test_overall_status_tracks_critical_count(results, expected):
    summary = summarize_accessibility(results)
    assert summary.overall_status == expected
    assert (summary.overall_status == "PASS") == (summary.critical_violations == 0)


def test_summary_counts_by_impact():
    summary = summarize_accessibility([_result("critical", "serious", "serious"), _result("moderate", "minor")])
    assert summary.total_pages == 2
    assert summary.total_violations == 5
    assert summary.critical_violations == 1
    assert summary.serious_violations == 2
    assert summary.moderate_violations == 1
    assert summary.minor_violations == 1
    assert not is_accessibility_compliant(summary)


def test_page_status():
    assert _result("serious").status == "PASS"
    assert _result("critical").status == "FAIL"
    assert _result(success=False).status == "ERROR"


def test_parse_scan_maps_axe_fields():
    scan = parse_scan({
        "violations": [{"id": "image-alt", "impact": "critical", "description": "d",
                        "help": "Images must have alt", "helpUrl": "https://dequeuniversity.com", "nodes": 3}],
        "passes": [{"id": "html-has-lang", "impact": None, "nodes": 1}],
        "incomplete": [],
    })
    [v] = scan.violations
    assert v.help_url == "https://dequeuniversity.com"
    assert v.affected_node_count == 3
    assert scan.passes[0].impact is None


def test_parse_scan_rejects_unknown_impact():
    with pytest.raises(CaptureError):
        parse_scan({"violations": [{"id": "x", "impact": "catastrophic", "nodes": 1}]})


@pytest.mark.asyncio
async def test_crawl_records_violations_and_writes_reports(session, home_only):
    browser = FakeBrowser()
    engine = FakeEngine(browser, {f"{BASE_URL}/": AccessibilityScan(violations=[_violation("serious")])})
    summary = await crawl_accessibility(
        browser, session, engine=engine, base_url=BASE_URL, pages=home_only, dwell_ms=0, tags=["wcag2a"]
    )
    assert summary.overall_status == "PASS"
    assert engine.calls == [["wcag2a"]]
    [result] = summary.results
    assert result.success is True
    assert result.url == f"{BASE_URL}/"

    out = session.directory / "accessibility"
    assert (out / "accessibility-report.md").exists()
    data = json.loads((out / "accessibility-results.json").read_text())
    assert data["results"][0]["status"] == "PASS"


@pytest.mark.asyncio
async def test_criticals_mark_page_error_but_do_not_raise(session, home_only):
    browser = FakeBrowser()
    engine = FakeEngine(browser, {f"{BASE_URL}/": AccessibilityScan(violations=[_violation("critical")] * 2)})
    summary = await crawl_accessibility(
        browser, session, engine=engine, base_url=BASE_URL, pages=home_only, dwell_ms=0
    )
    [result] = summary.results
    assert result.success is True
    assert result.error == "Found 2 critical accessibility violations"
    assert summary.overall_status == "FAIL"


@pytest.mark.asyncio
async def test_criticals_without_fail_flag_leave_error_unset(session, home_only):
    browser = FakeBrowser()
    engine = FakeEngine(browser, {f"{BASE_URL}/": AccessibilityScan(violations=[_violation("critical")])})
    summary = await crawl_accessibility(
        browser, session, engine=engine, base_url=BASE_URL, pages=home_only, dwell_ms=0,
        fail_on_critical=False,
    )
    assert summary.results[0].error is None
    assert summary.critical_violations == 1


@pytest.mark.asyncio
async def test_failed_page_is_reported_as_error(session, home_only):
    browser = FakeBrowser(failing={f"{BASE_URL}/": "refused"})
    summary = await crawl_accessibility(
        browser, session, engine=FakeEngine(browser), base_url=BASE_URL, pages=home_only, dwell_ms=0
    )
    assert summary.results[0].status == "ERROR"
    assert summary.overall_status == "PASS"


@pytest.mark.asyncio
async def test_single_page_check(browser):
    result = await check_single_page_accessibility(
        browser, "/about", engine=FakeEngine(browser), base_url=BASE_URL, dwell_ms=0
    )
    assert result.title == "About"
    assert result.violations == []


def test_violations_grouped_by_impact():
    results = [_result("critical", "minor"), _result("minor")]
    results[1].page = "/about"
    grouped = get_violations_by_impact(results, "critical")
    assert [g["page"] for g in grouped] == ["/"]
    assert len(get_violations_by_impact(results, "minor")) == 2
