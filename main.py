import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, TypeVar

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response

from site_audit.browser import launch_browser
from site_audit.config import get_settings
from site_audit.errors import ConfigurationError, CriticalViolationsError, RunTimeoutError
from site_audit.logging_config import setup_logging
from site_audit.models import AccessibilitySummary, ScreenshotSummary, SEOSummary, SessionReport
from site_audit.pdf_report import generate_pdf
from site_audit.session import SessionManager
from site_audit.suite import AuditSuite, clean_results

logger = logging.getLogger(__name__)

T = TypeVar("T")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)

    app.state.settings = settings
    # One browser page per run; runs never overlap
    app.state.run_lock = asyncio.Lock()

    logger.info("site audit service ready", extra={"base_url": settings.base_url})
    yield
    logger.info("shutting down site audit service")


app = FastAPI(title="Site Audit", version="1.0.0", lifespan=lifespan)


async def _execute(request: Request, response: Response, action: Callable[[AuditSuite], Awaitable[T]]) -> T:
    """Run ``action`` against a fresh session and browser, mapping audit errors to HTTP codes."""
    settings = request.app.state.settings

    async with request.app.state.run_lock:
        # Claimed under the lock so back-to-back runs never share a tree
        session = await SessionManager(settings.results_root).claim()
        headers = {"X-Session-Id": session.id}
        response.headers.update(headers)
        try:
            async with launch_browser(settings) as browser:
                suite = AuditSuite(browser, session, settings)
                return await suite.run_with_ceiling(action(suite), settings.run_timeout_seconds)
        except ConfigurationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except CriticalViolationsError as e:
            raise HTTPException(status_code=409, detail=str(e), headers=headers)
        except RunTimeoutError as e:
            raise HTTPException(status_code=504, detail=str(e), headers=headers)
        except HTTPException:
            raise
        except Exception as e:
            logger.exception("audit run failed", extra={"session_id": session.id})
            raise HTTPException(status_code=500, detail=f"Audit run failed: {e}")


@app.post("/api/run", response_model=SessionReport)
async def run_all(request: Request, response: Response, fail_on_critical: bool | None = None):
    return await _execute(request, response, lambda suite: suite.run_all(fail_on_critical))


@app.post("/api/run/screenshots", response_model=ScreenshotSummary)
async def run_screenshots(request: Request, response: Response, viewport: str | None = None):
    return await _execute(request, response, lambda suite: suite.run_screenshots(viewport))


@app.post("/api/run/accessibility", response_model=AccessibilitySummary)
async def run_accessibility(request: Request, response: Response, fail_on_critical: bool | None = None):
    return await _execute(request, response, lambda suite: suite.run_accessibility(fail_on_critical))


@app.post("/api/run/seo", response_model=SEOSummary)
async def run_seo(request: Request, response: Response):
    return await _execute(request, response, lambda suite: suite.run_seo())


@app.delete("/api/results")
async def delete_results(request: Request):
    async with request.app.state.run_lock:
        removed = clean_results(request.app.state.settings.results_root)
    return {"removed": removed}


@app.post("/api/report/pdf")
async def export_pdf(data: SessionReport):
    pdf_bytes = generate_pdf(data)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=site-audit-{data.session_id}.pdf"},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}
