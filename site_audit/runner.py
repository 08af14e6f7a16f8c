"""Navigate -> settle -> dwell -> capture loop shared by every crawler."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Generic, Iterable, TypeVar
from urllib.parse import urljoin

from site_audit.models import CrawlResult, PageTarget

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=CrawlResult)


def page_url(base_url: str, path: str) -> str:
    return urljoin(base_url, path)


@dataclass
class Visit:
    """Timing context for one unit of work."""

    target: PageTarget
    url: str
    started: float = field(default_factory=time.monotonic)
    load_time_ms: int = 0
    marks: dict[str, int] = field(default_factory=dict)

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started) * 1000)

    def mark(self, name: str) -> None:
        self.marks[name] = self.elapsed_ms()


class CrawlStrategy(Generic[R]):
    """Category-specific part of a crawl; the runner owns navigation and failures."""

    category = ""

    def new_result(self, target: PageTarget) -> R:
        raise NotImplementedError

    def before_navigation(self, browser, visit: Visit) -> None:
        pass

    async def capture(self, browser, visit: Visit, result: R) -> None:
        raise NotImplementedError

    def after_visit(self, browser, visit: Visit) -> None:
        pass

    def describe(self, result: R) -> str:
        return f"{result.title} ({result.page})"


async def _visit(browser, strategy: CrawlStrategy[R], visit: Visit, result: R, dwell_ms: int) -> None:
    strategy.before_navigation(browser, visit)
    await browser.navigate(visit.url)
    visit.load_time_ms = visit.elapsed_ms()
    # Late-rendering content and animations
    await browser.wait(dwell_ms)
    await strategy.capture(browser, visit, result)


async def run_fault_isolated(
    browser,
    strategy: CrawlStrategy[R],
    targets: Iterable[PageTarget],
    *,
    base_url: str,
    dwell_ms: int,
    unit_timeout: float | None = None,
    results: list[R] | None = None,
) -> list[R]:
    """Run ``strategy`` over ``targets`` in order, one result per target.

    A failure in one unit is recorded on its result and never stops the loop.
    Results are appended to ``results`` as soon as each unit finishes, so a
    caller that shares the list keeps partial progress if the run is cancelled.
    """
    if results is None:
        results = []

    for target in targets:
        result = strategy.new_result(target)
        visit = Visit(target=target, url=page_url(base_url, target.path))
        try:
            await asyncio.wait_for(
                _visit(browser, strategy, visit, result, dwell_ms), timeout=unit_timeout
            )
            result.success = True
            logger.info(
                "%s capture completed for %s",
                strategy.category,
                strategy.describe(result),
            )
        except asyncio.TimeoutError:
            result.error = f"Timed out after {unit_timeout:g}s"
            logger.warning(
                "%s capture timed out for %s",
                strategy.category,
                strategy.describe(result),
                extra={"url": visit.url},
            )
        except Exception as e:
            result.error = str(e) or type(e).__name__
            logger.warning(
                "%s capture failed for %s: %s",
                strategy.category,
                strategy.describe(result),
                result.error,
                extra={"url": visit.url},
            )
        finally:
            strategy.after_visit(browser, visit)
        results.append(result)

    return results
