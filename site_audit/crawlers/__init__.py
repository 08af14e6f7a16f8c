from .accessibility import (
    check_single_page_accessibility,
    crawl_accessibility,
    get_violations_by_impact,
    is_accessibility_compliant,
    summarize_accessibility,
)
from .screenshots import (
    crawl_desktop_screenshots,
    crawl_laptop_screenshots,
    crawl_mobile_screenshots,
    crawl_screenshots,
    crawl_viewport_screenshots,
    screenshot_file_name,
    screenshot_single_page,
    summarize_screenshots,
)
from .seo import (
    analyze_single_page_seo,
    crawl_seo,
    get_pages_by_issue_type,
    get_performance_metrics,
    is_seo_compliant,
    overall_health,
    summarize_seo,
)

__all__ = [
    "crawl_screenshots",
    "crawl_viewport_screenshots",
    "crawl_desktop_screenshots",
    "crawl_laptop_screenshots",
    "crawl_mobile_screenshots",
    "screenshot_single_page",
    "screenshot_file_name",
    "summarize_screenshots",
    "crawl_accessibility",
    "check_single_page_accessibility",
    "summarize_accessibility",
    "get_violations_by_impact",
    "is_accessibility_compliant",
    "crawl_seo",
    "analyze_single_page_seo",
    "summarize_seo",
    "overall_health",
    "get_pages_by_issue_type",
    "is_seo_compliant",
    "get_performance_metrics",
]
