"""SEO issue rules and health buckets."""

import pytest

from site_audit.analyzers import (
    analyze_description,
    analyze_headings,
    analyze_images,
    analyze_links,
    analyze_open_graph,
    analyze_performance,
    analyze_seo_issues,
    analyze_title,
)
from site_audit.crawlers import overall_health
from site_audit.models import Headings, ImageInfo, LinkInfo, MetaData, PerformanceTiming, SEOResult

TITLE_RANGE = "(recommended: 30-60 characters)"
DESCRIPTION_RANGE = "(recommended: 120-160 characters)"


@pytest.mark.parametrize(
    "title, expected",
    [
        (None, ["Missing page title"]),
        ("", ["Missing page title"]),
        ("Short", [f"Page title too short {TITLE_RANGE}"]),
        ("t" * 30, []),
        ("t" * 60, []),
        ("t" * 61, [f"Page title too long {TITLE_RANGE}"]),
    ],
)
def test_title_rules(title, expected):
    assert analyze_title(MetaData(title=title)) == expected


@pytest.mark.parametrize(
    "description, expected",
    [
        (None, ["Missing meta description"]),
        ("d" * 119, [f"Meta description too short {DESCRIPTION_RANGE}"]),
        ("d" * 120, []),
        ("d" * 160, []),
        ("d" * 200, [f"Meta description too long {DESCRIPTION_RANGE}"]),
    ],
)
def test_description_rules(description, expected):
    assert analyze_description(MetaData(description=description)) == expected


def test_good_title_with_long_description():
    meta = MetaData(title="t" * 45, description="d" * 200)
    assert analyze_title(meta) == []
    assert analyze_description(meta) == [f"Meta description too long {DESCRIPTION_RANGE}"]


def test_heading_rules():
    assert analyze_headings(Headings()) == ["Missing H1 heading"]
    assert analyze_headings(Headings(h1=["One"])) == []
    assert analyze_headings(Headings(h1=["One", "Two"])) == ["Multiple H1 headings found (should be unique)"]


def test_image_rule_counts_missing_alt():
    images = [
        ImageInfo(src="/a.png", alt="A", has_alt=True),
        ImageInfo(src="/b.png", has_alt=False),
        ImageInfo(src="/c.png", alt="", has_alt=False),
    ]
    assert analyze_images(images) == ["2 images missing alt text"]
    assert analyze_images(images[:1]) == []


def test_open_graph_rules():
    assert analyze_open_graph(MetaData()) == [
        "Missing Open Graph title",
        "Missing Open Graph description",
        "Missing Open Graph image",
    ]
    assert analyze_open_graph(MetaData(og_title="t", og_description="d", og_image="i")) == []


def test_performance_rule_threshold():
    assert analyze_performance(PerformanceTiming(load_time_ms=3000), 3000) == []
    assert analyze_performance(PerformanceTiming(load_time_ms=3001), 3000) == [
        "Slow page load time (>3 seconds)"
    ]
    assert analyze_performance(PerformanceTiming(load_time_ms=2000), 1500) == [
        "Slow page load time (>1.5 seconds)"
    ]


def test_dom_content_loaded_never_produces_issue():
    assert analyze_performance(PerformanceTiming(load_time_ms=10, dom_content_loaded_ms=99999), 3000) == []


def test_link_security_rule():
    external = "https://example.org/"
    safe = LinkInfo(href=external, rel="noopener noreferrer", is_external=True)
    unsafe = LinkInfo(href=external, is_external=True)
    internal = LinkInfo(href="/about", is_external=False)

    assert analyze_links([safe, internal]) == []
    assert analyze_links([unsafe]) == [
        '1 external links missing security attributes (rel="noopener noreferrer")'
    ]
    assert analyze_links([LinkInfo(href=external, rel="noreferrer", is_external=True)]) == []


def test_issues_in_fixed_order():
    result = SEOResult(page="/", title="Home", performance=PerformanceTiming(load_time_ms=5000))
    result.links = [LinkInfo(href="https://example.org", is_external=True)]
    issues = analyze_seo_issues(result, 3000)
    assert issues == [
        "Missing page title",
        "Missing meta description",
        "Missing H1 heading",
        "Missing Open Graph title",
        "Missing Open Graph description",
        "Missing Open Graph image",
        "Slow page load time (>3 seconds)",
        '1 external links missing security attributes (rel="noopener noreferrer")',
    ]


@pytest.mark.parametrize(
    "issues, health",
    [(0, "EXCELLENT"), (1, "GOOD"), (9, "GOOD"), (10, "NEEDS_IMPROVEMENT"), (25, "NEEDS_IMPROVEMENT")],
)
def test_health_buckets(issues, health):
    assert overall_health(issues) == health
