"""Logical commands: run one category or all three and aggregate the session report."""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, TypeVar

from site_audit.aggregator import aggregate, persist_session_report
from site_audit.axe import AxeEngine
from site_audit.config import Settings, find_viewport
from site_audit.crawlers import (
    crawl_accessibility,
    crawl_screenshots,
    crawl_seo,
    summarize_accessibility,
    summarize_screenshots,
    summarize_seo,
)
from site_audit.errors import CriticalViolationsError, RunTimeoutError
from site_audit.models import (
    AccessibilityOutcome,
    AccessibilityResult,
    AccessibilitySummary,
    ScreenshotOutcome,
    ScreenshotResult,
    ScreenshotSummary,
    SEOOutcome,
    SEOResult,
    SEOSummary,
    SessionReport,
)
from site_audit.report import (
    render_accessibility_markdown,
    render_screenshot_markdown,
    render_seo_markdown,
    write_report_pair,
)
from site_audit.session import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class AuditRun:
    """Mutable state of one run; result lists grow unit by unit."""

    session: Session
    screenshots: ScreenshotOutcome = field(default_factory=ScreenshotOutcome)
    accessibility: AccessibilityOutcome = field(default_factory=AccessibilityOutcome)
    seo: SEOOutcome = field(default_factory=SEOOutcome)
    screenshot_results: list[ScreenshotResult] = field(default_factory=list)
    accessibility_results: list[AccessibilityResult] = field(default_factory=list)
    seo_results: list[SEOResult] = field(default_factory=list)
    report: SessionReport | None = None

    def partial_summaries(self) -> tuple[ScreenshotSummary, AccessibilitySummary, SEOSummary]:
        """Summaries over whatever results were appended so far."""
        return (
            summarize_screenshots(list(self.screenshot_results)),
            summarize_accessibility(list(self.accessibility_results)),
            summarize_seo(list(self.seo_results)),
        )


async def with_run_ceiling(awaitable: Awaitable[T], timeout_seconds: float | None) -> T:
    """Abort the whole run once ``timeout_seconds`` elapse; appended results survive."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        raise RunTimeoutError(f"Run exceeded {timeout_seconds:g}s ceiling") from e


def clean_results(root: str | Path) -> bool:
    """Delete every prior session tree under ``root``."""
    root = Path(root)
    if not root.exists():
        return False
    shutil.rmtree(root)
    logger.info("removed previous results", extra={"path": str(root)})
    return True


class AuditSuite:
    def __init__(self, browser, session: Session, settings: Settings, engine=None):
        self.browser = browser
        self.session = session
        self.settings = settings
        self.engine = engine or AxeEngine(
            browser, script_url=settings.axe_script_url, script_path=settings.axe_script_path
        )
        self.run = AuditRun(session=session)

    def _common_options(self) -> dict:
        return {
            "base_url": self.settings.base_url,
            "pages": self.settings.pages,
            "dwell_ms": self.settings.dwell_ms,
            "unit_timeout": self.settings.unit_timeout_seconds,
        }

    async def run_screenshots(self, viewport: str | None = None) -> ScreenshotSummary:
        viewports = self.settings.viewports
        if viewport is not None:
            # Unknown names fail here, before any navigation
            viewports = [find_viewport(viewport, viewports)]

        outcome = self.run.screenshots
        outcome.output_dir = str(self.session.output_directory("screenshots"))
        try:
            summary = await crawl_screenshots(
                self.browser,
                self.session,
                viewports=viewports,
                results=self.run.screenshot_results,
                **self._common_options(),
            )
        except Exception as e:
            outcome.error = str(e)
            outcome.summary = summarize_screenshots(list(self.run.screenshot_results))
            logger.exception("screenshot crawl failed")
            raise
        outcome.summary = summary
        outcome.completed = True
        return summary

    async def run_accessibility(self, fail_on_critical: bool | None = None) -> AccessibilitySummary:
        """Run the accessibility crawl; raises CriticalViolationsError when the check is enabled and fails."""
        if fail_on_critical is None:
            fail_on_critical = self.settings.fail_on_critical
        summary = await self._accessibility(fail_on_critical)
        if fail_on_critical and summary.critical_violations:
            raise CriticalViolationsError(summary.critical_violations)
        return summary

    async def _accessibility(self, fail_on_critical: bool) -> AccessibilitySummary:
        outcome = self.run.accessibility
        outcome.output_dir = str(self.session.output_directory("accessibility"))
        try:
            summary = await crawl_accessibility(
                self.browser,
                self.session,
                engine=self.engine,
                tags=self.settings.accessibility_tags,
                fail_on_critical=fail_on_critical,
                results=self.run.accessibility_results,
                **self._common_options(),
            )
        except Exception as e:
            outcome.error = str(e)
            outcome.summary = summarize_accessibility(list(self.run.accessibility_results))
            logger.exception("accessibility crawl failed")
            raise
        outcome.summary = summary
        outcome.completed = True
        return summary

    async def run_seo(self) -> SEOSummary:
        outcome = self.run.seo
        outcome.output_dir = str(self.session.output_directory("seo"))
        try:
            summary = await crawl_seo(
                self.browser,
                self.session,
                performance_threshold=self.settings.performance_threshold_ms,
                results=self.run.seo_results,
                **self._common_options(),
            )
        except Exception as e:
            outcome.error = str(e)
            outcome.summary = summarize_seo(list(self.run.seo_results))
            logger.exception("seo crawl failed")
            raise
        outcome.summary = summary
        outcome.completed = True
        return summary

    async def run_all(self, fail_on_critical: bool | None = None) -> SessionReport:
        """All three categories in order, then the session report.

        A category that raises is recorded as not completed and the next one
        still runs. Critical violations are raised only after the session
        report has been written.
        """
        if fail_on_critical is None:
            fail_on_critical = self.settings.fail_on_critical
        logger.info("starting unified session", extra={"session_id": self.session.id})

        categories = (
            ("screenshots", self.run_screenshots),
            ("accessibility", lambda: self._accessibility(fail_on_critical)),
            ("seo", self.run_seo),
        )
        for name, step in categories:
            try:
                await step()
            except Exception:
                logger.warning("%s did not complete, continuing with the next category", name)

        report = self.write_report()
        critical = report.accessibility.summary.critical_violations
        if fail_on_critical and critical:
            raise CriticalViolationsError(critical)
        return report

    async def run_with_ceiling(self, awaitable: Awaitable[T], timeout_seconds: float | None) -> T:
        """``with_run_ceiling``, persisting whatever was captured before a breach."""
        try:
            return await with_run_ceiling(awaitable, timeout_seconds)
        except RunTimeoutError:
            self.write_partial_results()
            raise

    def write_partial_results(self) -> list[Path]:
        """Category reports for units that finished before the run was aborted."""
        shots, a11y, seo = self.run.partial_summaries()
        pending = (
            ("screenshots", "screenshot", self.run.screenshots, shots, render_screenshot_markdown),
            ("accessibility", "accessibility", self.run.accessibility, a11y, render_accessibility_markdown),
            ("seo", "seo", self.run.seo, seo, render_seo_markdown),
        )
        written = []
        for category, stem, outcome, summary, render in pending:
            if outcome.completed or not summary.results:
                continue
            outcome.summary = summary
            _, json_path = write_report_pair(summary, render(summary), self.session.output_directory(category), stem)
            written.append(json_path)
            logger.warning(
                "%s aborted, partial results saved", category,
                extra={"session_id": self.session.id, "units": len(summary.results)},
            )
        return written

    def write_report(self) -> SessionReport:
        report = aggregate(self.session.id, self.run.screenshots, self.run.accessibility, self.run.seo)
        persist_session_report(self.session, report)
        self.run.report = report
        return report
