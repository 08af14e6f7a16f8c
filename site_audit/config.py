from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from site_audit.errors import ConfigurationError
from site_audit.models import PageTarget, ViewportSpec

TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60
DESCRIPTION_MIN_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 160

DEFAULT_DWELL_MS = 2000
DEFAULT_PERFORMANCE_THRESHOLD_MS = 3000
# Fixed bar for the session action list, independent of the crawler threshold
SLOW_PAGE_ACTION_MS = 3000
NAVIGATION_TIMEOUT_MS = 60000
UNIT_TIMEOUT_SECONDS = 60
RUN_TIMEOUT_SECONDS = 300

DEFAULT_ACCESSIBILITY_TAGS = ["wcag2a", "wcag2aa", "wcag21aa"]
AXE_SCRIPT_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.10.2/axe.min.js"
AXE_SCRIPT_TIMEOUT = 30

DEFAULT_BASE_URL = "http://localhost:4321"
RESULTS_ROOT = "test-results"
CATEGORIES = ("screenshots", "accessibility", "seo")

PAGES = [
    PageTarget(path="/", title="Home"),
    PageTarget(path="/about", title="About"),
    PageTarget(path="/blog", title="Blog"),
    PageTarget(path="/contact", title="Contact"),
    PageTarget(path="/pricing", title="Pricing"),
]

VIEWPORTS = [
    ViewportSpec(name="desktop", width=1920, height=1080),
    ViewportSpec(name="laptop", width=1366, height=768),
    ViewportSpec(name="mobile", width=375, height=667),
]

# meta name/property -> MetaData field
META_FIELDS = {
    "description": "description",
    "keywords": "keywords",
    "robots": "robots",
    "author": "author",
    "generator": "generator",
    "viewport": "viewport",
    "theme-color": "theme_color",
    "og:title": "og_title",
    "og:description": "og_description",
    "og:image": "og_image",
    "og:type": "og_type",
    "og:url": "og_url",
    "twitter:card": "twitter_card",
    "twitter:title": "twitter_title",
    "twitter:description": "twitter_description",
    "twitter:image": "twitter_image",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SITE_AUDIT_", extra="ignore")

    base_url: str = DEFAULT_BASE_URL
    results_root: str = RESULTS_ROOT
    pages: list[PageTarget] = Field(default_factory=lambda: list(PAGES))
    viewports: list[ViewportSpec] = Field(default_factory=lambda: list(VIEWPORTS))

    dwell_ms: int = DEFAULT_DWELL_MS
    performance_threshold_ms: int = DEFAULT_PERFORMANCE_THRESHOLD_MS
    accessibility_tags: list[str] = Field(default_factory=lambda: list(DEFAULT_ACCESSIBILITY_TAGS))
    fail_on_critical: bool = True

    run_timeout_seconds: float = RUN_TIMEOUT_SECONDS
    unit_timeout_seconds: float = UNIT_TIMEOUT_SECONDS
    navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS

    headless: bool = True
    axe_script_url: str = AXE_SCRIPT_URL
    axe_script_path: str = ""
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def find_viewport(name: str, viewports: list[ViewportSpec] | None = None) -> ViewportSpec:
    """Look up a configured viewport by name, failing fast when it is absent."""
    for viewport in viewports if viewports is not None else VIEWPORTS:
        if viewport.name == name:
            return viewport
    raise ConfigurationError(f"Viewport '{name}' not found in configuration")


def find_page(path: str, pages: list[PageTarget] | None = None) -> PageTarget:
    """Return the configured target for ``path``; unknown paths get the title "Unknown"."""
    for page in pages if pages is not None else PAGES:
        if page.path == path:
            return page
    return PageTarget(path=path, title="Unknown")
