"""HTTP entry point."""

from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import main
from site_audit.axe import AccessibilityScan
from site_audit.models import SessionReport, Violation
from site_audit.suite import AuditSuite

from .conftest import BASE_URL, FakeBrowser, FakeEngine


@pytest.fixture
def scans():
    return {}


@pytest.fixture
def client(settings, home_only, desktop_only, scans):
    settings = settings.model_copy(update={"pages": home_only, "viewports": desktop_only})

    @asynccontextmanager
    async def fake_launch(_settings):
        yield FakeBrowser()

    def make_suite(browser, session, settings):
        return AuditSuite(browser, session, settings, engine=FakeEngine(browser, scans))

    with patch("main.get_settings", return_value=settings), \
            patch("main.setup_logging"), \
            patch("main.launch_browser", fake_launch), \
            patch("main.AuditSuite", make_suite), \
            TestClient(main.app) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_run_all(client, tmp_path):
    resp = client.post("/api/run")
    assert resp.status_code == 200
    body = resp.json()
    assert body["all_passed"] is True
    assert body["screenshots"]["summary"]["total"] == 1
    session_id = resp.headers["X-Session-Id"]
    assert body["session_id"] == session_id
    assert (tmp_path / session_id / "test-session-summary.md").exists()


def test_run_screenshots_for_viewport(client):
    resp = client.post("/api/run/screenshots", params={"viewport": "desktop"})
    assert resp.status_code == 200
    assert resp.json()["successful"] == 1


def test_unknown_viewport_is_bad_request(client):
    resp = client.post("/api/run/screenshots", params={"viewport": "tablet"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Viewport 'tablet' not found in configuration"


def test_run_seo(client):
    resp = client.post("/api/run/seo")
    assert resp.status_code == 200
    assert resp.json()["overall_health"] == "EXCELLENT"


def test_criticals_conflict(client, scans):
    scans[f"{BASE_URL}/"] = AccessibilityScan(violations=[Violation(id="image-alt", impact="critical")])
    resp = client.post("/api/run/accessibility")
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Found 1 critical accessibility violations"

    resp = client.post("/api/run/accessibility", params={"fail_on_critical": False})
    assert resp.status_code == 200
    assert resp.json()["overall_status"] == "FAIL"


def test_delete_results(client, tmp_path):
    client.post("/api/run/seo")
    resp = client.delete("/api/results")
    assert resp.json() == {"removed": True}
    assert not tmp_path.exists()


def test_export_pdf(client):
    report = SessionReport(session_id="2026-01-02T03-04-05")
    resp = client.post("/api/report/pdf", json=report.model_dump(mode="json"))
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")


def test_back_to_back_runs_get_separate_sessions(client, tmp_path):
    first = client.post("/api/run")
    second = client.post("/api/run/seo")
    assert first.status_code == second.status_code == 200

    first_id = first.headers["X-Session-Id"]
    second_id = second.headers["X-Session-Id"]
    assert first_id != second_id
    # The first run's summary is still intact
    assert (tmp_path / first_id / "test-session-summary.md").exists()
    assert not (tmp_path / second_id / "test-session-summary.md").exists()
