from site_audit.config import DEFAULT_PERFORMANCE_THRESHOLD_MS
from site_audit.models import SEOResult

from .headings import analyze_headings
from .images import analyze_images, count_missing_alt
from .links import analyze_links, is_unsafe_external
from .meta_tags import analyze_description, analyze_open_graph, analyze_title
from .performance import analyze_performance


def analyze_seo_issues(
    result: SEOResult, performance_threshold: int = DEFAULT_PERFORMANCE_THRESHOLD_MS
) -> list[str]:
    """Run every rule in its fixed order and return the concatenated issues."""
    return [
        *analyze_title(result.meta),
        *analyze_description(result.meta),
        *analyze_headings(result.headings),
        *analyze_images(result.images),
        *analyze_open_graph(result.meta),
        *analyze_performance(result.performance, performance_threshold),
        *analyze_links(result.links),
    ]


__all__ = [
    "analyze_seo_issues",
    "analyze_title",
    "analyze_description",
    "analyze_headings",
    "analyze_images",
    "analyze_open_graph",
    "analyze_performance",
    "analyze_links",
    "count_missing_alt",
    "is_unsafe_external",
]
