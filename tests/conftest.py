"""Fixtures: fake browser, fake axe engine, per-test session and settings."""

import asyncio
from pathlib import Path

import pytest

from site_audit.axe import AccessibilityScan
from site_audit.config import Settings
from site_audit.errors import NavigationError
from site_audit.models import PageTarget, ViewportSpec
from site_audit.session import Session

BASE_URL = "http://localhost:4321"

GOOD_HTML = """<html><head>
<title>Acme Widgets - Handmade widgets for every workshop</title>
<meta name="description" content="{description}">
<meta property="og:title" content="Acme Widgets">
<meta property="og:description" content="Handmade widgets">
<meta property="og:image" content="https://localhost/og.png">
</head><body>
<h1>Acme Widgets</h1>
<img src="/logo.png" alt="Acme logo">
<a href="/about">About</a>
</body></html>""".format(description="d" * 140)


class FakeBrowser:
    """Records every call; ``failing`` maps URL -> error message for navigation."""

    def __init__(self, html=None, failing=None, fire_dom_content_loaded=False, viewport_error=None):
        self.html = html or {}
        self.failing = failing or {}
        self.fire_dom_content_loaded = fire_dom_content_loaded
        self.viewport_error = viewport_error
        self.navigations: list[str] = []
        self.viewports: list[tuple[int, int]] = []
        self.captures: list[Path] = []
        self.injected: list[str] = []
        self.handlers: list = []
        self.current_url = "about:blank"

    async def navigate(self, url):
        self.navigations.append(url)
        if url in self.failing:
            raise NavigationError(self.failing[url])
        self.current_url = url
        if self.fire_dom_content_loaded:
            for handler in list(self.handlers):
                handler()

    async def set_viewport_size(self, width, height):
        if self.viewport_error:
            raise RuntimeError(self.viewport_error)
        self.viewports.append((width, height))

    async def wait(self, ms):
        pass

    async def capture_full_page_image(self, path, *, full_page=True, animations="disabled"):
        Path(path).write_bytes(b"\x89PNG")
        self.captures.append(Path(path))

    async def content(self):
        return self.html.get(self.current_url, GOOD_HTML)

    async def extract(self, script, arg=None):
        return {}

    async def inject_script(self, source):
        self.injected.append(source)

    def on_dom_content_loaded(self, handler):
        self.handlers.append(handler)

    def remove_dom_content_loaded(self, handler):
        self.handlers.remove(handler)


class HangingBrowser(FakeBrowser):
    """Navigation to ``hang_on`` never settles."""

    def __init__(self, hang_on, **kwargs):
        super().__init__(**kwargs)
        self.hang_on = hang_on

    async def navigate(self, url):
        if url == self.hang_on:
            await asyncio.sleep(30)
        await super().navigate(url)


class FakeEngine:
    """Axe stand-in returning canned scans keyed by the browser's current URL."""

    def __init__(self, browser, scans=None):
        self.browser = browser
        self.scans = scans if scans is not None else {}
        self.calls: list[list[str]] = []

    async def analyze(self, tags):
        self.calls.append(list(tags))
        return self.scans.get(self.browser.current_url, AccessibilityScan())


@pytest.fixture
def browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture
def session(tmp_path) -> Session:
    return Session(id="2026-01-02T03-04-05", root=tmp_path)


@pytest.fixture
def home_only() -> list[PageTarget]:
    return [PageTarget(path="/", title="Home")]


@pytest.fixture
def desktop_only() -> list[ViewportSpec]:
    return [ViewportSpec(name="desktop", width=1920, height=1080)]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        base_url=BASE_URL,
        results_root=str(tmp_path),
        dwell_ms=0,
        unit_timeout_seconds=5,
        run_timeout_seconds=30,
    )
