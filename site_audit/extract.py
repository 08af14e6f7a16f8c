"""Structured SEO facts pulled from the rendered DOM."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from site_audit.config import META_FIELDS
from site_audit.models import Headings, ImageInfo, LinkInfo, MetaData


@dataclass
class PageFacts:
    meta: MetaData
    headings: Headings
    images: list[ImageInfo]
    links: list[LinkInfo]


def is_external(href: str, page_host: str | None) -> bool:
    """Absolute http(s) URL pointing at a different host than the current page."""
    parsed = urlparse(href)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return False
    return parsed.hostname != page_host


def extract_meta(soup: BeautifulSoup) -> MetaData:
    meta = MetaData()
    # Inline SVG icons carry their own <title>; only the document title counts
    title = next((t for t in soup.find_all("title") if t.find_parent("svg") is None), None)
    if title is not None:
        meta.title = " ".join(title.get_text().split())

    for tag in soup.find_all("meta"):
        name = tag.get("name") or tag.get("property")
        content = tag.get("content")
        if not name or not content:
            continue
        field_name = META_FIELDS.get(name.lower())
        if field_name:
            setattr(meta, field_name, content)

    canonical = soup.find("link", attrs={"rel": "canonical"})
    if canonical is not None:
        meta.canonical = canonical.get("href")
    return meta


def extract_headings(soup: BeautifulSoup) -> Headings:
    return Headings(**{
        f"h{level}": [tag.get_text().strip() for tag in soup.find_all(f"h{level}")]
        for level in range(1, 7)
    })


def extract_images(soup: BeautifulSoup) -> list[ImageInfo]:
    images = []
    for img in soup.find_all("img"):
        src = img.get("src") or img.get("data-src")
        if not src:
            continue
        alt = img.get("alt")
        images.append(ImageInfo(src=src, alt=alt, title=img.get("title"), has_alt=bool(alt)))
    return images


def extract_links(soup: BeautifulSoup, page_url: str) -> list[LinkInfo]:
    page_host = urlparse(page_url).hostname
    links = []
    for a in soup.find_all("a", href=True):
        href = a["href"]
        if not href:
            continue
        rel = a.get("rel")
        if isinstance(rel, list):
            rel = " ".join(rel)
        links.append(LinkInfo(
            href=href,
            text=a.get_text().strip(),
            title=a.get("title"),
            rel=rel or None,
            is_external=is_external(href, page_host),
        ))
    return links


def extract_page_facts(html: str, page_url: str) -> PageFacts:
    soup = BeautifulSoup(html, "lxml")
    return PageFacts(
        meta=extract_meta(soup),
        headings=extract_headings(soup),
        images=extract_images(soup),
        links=extract_links(soup, page_url),
    )
