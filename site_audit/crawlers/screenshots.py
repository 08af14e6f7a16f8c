"""Full-page screenshots across the page x viewport matrix."""

from __future__ import annotations

import logging
from pathlib import Path

from site_audit.config import DEFAULT_BASE_URL, DEFAULT_DWELL_MS, PAGES, VIEWPORTS, find_page, find_viewport
from site_audit.models import PageTarget, ScreenshotResult, ScreenshotSummary, ViewportSpec
from site_audit.report import render_screenshot_markdown, write_report_pair
from site_audit.runner import CrawlStrategy, Visit, run_fault_isolated
from site_audit.session import Session

logger = logging.getLogger(__name__)


def screenshot_file_name(path: str, viewport_name: str) -> str:
    """``/blog/post`` + ``mobile`` -> ``_blog_post_mobile.png``; the root page is ``home``."""
    stem = path.replace("/", "_") if path.strip("/") else "home"
    return f"{stem}_{viewport_name}.png"


class ScreenshotStrategy(CrawlStrategy[ScreenshotResult]):
    category = "screenshots"

    def __init__(self, viewport: ViewportSpec, output_dir: Path, full_page: bool = True, animations: str = "disabled"):
        self.viewport = viewport
        self.output_dir = output_dir
        self.full_page = full_page
        self.animations = animations

    def new_result(self, target: PageTarget) -> ScreenshotResult:
        return ScreenshotResult(page=target.path, title=target.title, viewport=self.viewport.name)

    async def capture(self, browser, visit: Visit, result: ScreenshotResult) -> None:
        file_path = self.output_dir / screenshot_file_name(visit.target.path, self.viewport.name)
        await browser.capture_full_page_image(file_path, full_page=self.full_page, animations=self.animations)
        result.file_path = str(file_path)

    def describe(self, result: ScreenshotResult) -> str:
        return f"{result.page} on {result.viewport}"


def summarize_screenshots(results: list[ScreenshotResult]) -> ScreenshotSummary:
    successful = sum(1 for r in results if r.success)
    return ScreenshotSummary(
        total=len(results),
        successful=successful,
        failed=len(results) - successful,
        results=results,
    )


async def crawl_screenshots(
    browser,
    session: Session,
    *,
    base_url: str = DEFAULT_BASE_URL,
    viewports: list[ViewportSpec] | None = None,
    pages: list[PageTarget] | None = None,
    dwell_ms: int = DEFAULT_DWELL_MS,
    full_page: bool = True,
    animations: str = "disabled",
    unit_timeout: float | None = None,
    results: list[ScreenshotResult] | None = None,
) -> ScreenshotSummary:
    """Screenshot every page for every viewport; the viewport is resized once per viewport."""
    output_dir = session.output_directory("screenshots")
    targets = list(PAGES if pages is None else pages)
    if results is None:
        results = []

    for viewport in VIEWPORTS if viewports is None else viewports:
        try:
            await browser.set_viewport_size(viewport.width, viewport.height)
        except Exception as e:
            logger.warning("could not set viewport %s: %s", viewport.name, e)
            for target in targets:
                results.append(ScreenshotResult(
                    page=target.path,
                    title=target.title,
                    viewport=viewport.name,
                    error=f"Could not set viewport {viewport.name}: {e}",
                ))
            continue

        strategy = ScreenshotStrategy(viewport, output_dir, full_page=full_page, animations=animations)
        await run_fault_isolated(
            browser,
            strategy,
            targets,
            base_url=base_url,
            dwell_ms=dwell_ms,
            unit_timeout=unit_timeout,
            results=results,
        )

    summary = summarize_screenshots(results)
    write_report_pair(summary, render_screenshot_markdown(summary), output_dir, "screenshot")
    logger.info(
        "screenshot crawl completed",
        extra={"total": summary.total, "successful": summary.successful, "failed": summary.failed},
    )
    return summary


async def crawl_viewport_screenshots(
    browser,
    session: Session,
    viewport_name: str,
    *,
    viewports: list[ViewportSpec] | None = None,
    **options,
) -> ScreenshotSummary:
    """Same as :func:`crawl_screenshots` restricted to one configured viewport."""
    viewport = find_viewport(viewport_name, viewports)
    return await crawl_screenshots(browser, session, viewports=[viewport], **options)


async def crawl_desktop_screenshots(browser, session: Session, **options) -> ScreenshotSummary:
    return await crawl_viewport_screenshots(browser, session, "desktop", **options)


async def crawl_laptop_screenshots(browser, session: Session, **options) -> ScreenshotSummary:
    return await crawl_viewport_screenshots(browser, session, "laptop", **options)


async def crawl_mobile_screenshots(browser, session: Session, **options) -> ScreenshotSummary:
    return await crawl_viewport_screenshots(browser, session, "mobile", **options)


async def screenshot_single_page(
    browser,
    session: Session,
    page_path: str,
    viewport_name: str,
    *,
    base_url: str = DEFAULT_BASE_URL,
    pages: list[PageTarget] | None = None,
    viewports: list[ViewportSpec] | None = None,
    dwell_ms: int = DEFAULT_DWELL_MS,
    full_page: bool = True,
    animations: str = "disabled",
    unit_timeout: float | None = None,
) -> ScreenshotResult:
    viewport = find_viewport(viewport_name, viewports)
    target = find_page(page_path, pages)
    output_dir = session.output_directory("screenshots")

    try:
        await browser.set_viewport_size(viewport.width, viewport.height)
    except Exception as e:
        return ScreenshotResult(
            page=target.path,
            title=target.title,
            viewport=viewport.name,
            error=f"Could not set viewport {viewport.name}: {e}",
        )

    strategy = ScreenshotStrategy(viewport, output_dir, full_page=full_page, animations=animations)
    [result] = await run_fault_isolated(
        browser, strategy, [target], base_url=base_url, dwell_ms=dwell_ms, unit_timeout=unit_timeout
    )
    return result
