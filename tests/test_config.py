"""Target matrix lookups and environment settings."""

import pytest

from site_audit.config import PAGES, VIEWPORTS, Settings, find_page, find_viewport
from site_audit.errors import ConfigurationError
from site_audit.models import ViewportSpec


def test_default_matrix():
    assert [p.path for p in PAGES] == ["/", "/about", "/blog", "/contact", "/pricing"]
    assert [(v.name, v.width, v.height) for v in VIEWPORTS] == [
        ("desktop", 1920, 1080),
        ("laptop", 1366, 768),
        ("mobile", 375, 667),
    ]


def test_find_viewport():
    assert find_viewport("laptop").width == 1366
    custom = [ViewportSpec(name="tablet", width=768, height=1024)]
    assert find_viewport("tablet", custom).height == 1024
    with pytest.raises(ConfigurationError, match="Viewport 'desktop' not found in configuration"):
        find_viewport("desktop", custom)


def test_find_page():
    assert find_page("/pricing").title == "Pricing"
    unknown = find_page("/careers")
    assert (unknown.path, unknown.title) == ("/careers", "Unknown")


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SITE_AUDIT_BASE_URL", "https://staging.example.org")
    monkeypatch.setenv("SITE_AUDIT_FAIL_ON_CRITICAL", "false")
    monkeypatch.setenv("SITE_AUDIT_VIEWPORTS", '[{"name": "tablet", "width": 768, "height": 1024}]')
    settings = Settings()
    assert settings.base_url == "https://staging.example.org"
    assert settings.fail_on_critical is False
    assert [v.name for v in settings.viewports] == ["tablet"]
    assert settings.pages == PAGES


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.base_url == "http://localhost:4321"
    assert settings.results_root == "test-results"
    assert settings.accessibility_tags == ["wcag2a", "wcag2aa", "wcag21aa"]
    assert settings.dwell_ms == 2000
    assert settings.performance_threshold_ms == 3000
