"""Markdown and JSON report documents for each crawl category."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel

from site_audit.models import (
    AccessibilitySummary,
    ScreenshotSummary,
    SEOSummary,
    utc_timestamp,
)

logger = logging.getLogger(__name__)

HEALTH_LABELS: dict[str, str] = {
    "EXCELLENT": "✅ EXCELLENT",
    "GOOD": "⚠️ GOOD",
    "NEEDS_IMPROVEMENT": "❌ NEEDS IMPROVEMENT",
}


def write_report_pair(summary: BaseModel, markdown: str, output_dir: Path, stem: str) -> tuple[Path, Path]:
    """Write ``<stem>-report.md`` and ``<stem>-results.json`` into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    markdown_path = output_dir / f"{stem}-report.md"
    json_path = output_dir / f"{stem}-results.json"
    markdown_path.write_text(markdown, encoding="utf-8")
    json_path.write_text(summary.model_dump_json(indent=2), encoding="utf-8")
    logger.info("%s reports saved", stem, extra={"output_dir": str(output_dir)})
    return markdown_path, json_path


# ---------------------------------------------------------------------------
# Screenshots
# ---------------------------------------------------------------------------

def render_screenshot_markdown(summary: ScreenshotSummary) -> str:
    rate = round(summary.successful / summary.total * 100) if summary.total else 0
    lines = [
        "# Screenshot Crawler Report",
        "",
        f"Generated: {utc_timestamp()}",
        "",
        "## Summary",
        "",
        f"- **Total Screenshots**: {summary.total}",
        f"- **Successful**: {summary.successful}",
        f"- **Failed**: {summary.failed}",
        f"- **Success Rate**: {rate}%",
        "",
        "## Results",
        "",
    ]
    for r in summary.results:
        lines += [
            f"### {r.title} ({r.page}) - {r.viewport}",
            "",
            f"- **Status**: {'✅ Success' if r.success else '❌ Failed'}",
            f"- **File Path**: {r.file_path if r.success else 'N/A'}",
            f"- **Timestamp**: {r.timestamp}",
        ]
        if r.error:
            lines.append(f"- **Error**: {r.error}")
        lines.append("")
    lines += ["---", "*Report generated by Screenshot Crawler*", ""]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Accessibility
# ---------------------------------------------------------------------------

def render_accessibility_markdown(summary: AccessibilitySummary) -> str:
    status = "✅ PASS" if summary.overall_status == "PASS" else "❌ FAIL (Critical issues found)"
    lines = [
        "# Accessibility Report",
        "",
        f"Generated: {utc_timestamp()}",
        "",
        "## Summary",
        "",
        f"- **Total Pages Tested**: {summary.total_pages}",
        f"- **Total Violations**: {summary.total_violations}",
        f"- **Critical Violations**: {summary.critical_violations}",
        f"- **Serious Violations**: {summary.serious_violations}",
        f"- **Moderate Violations**: {summary.moderate_violations}",
        f"- **Minor Violations**: {summary.minor_violations}",
        f"- **Overall Status**: {status}",
        "",
        "## Page Results",
        "",
    ]

    page_status = {"PASS": "✅ PASS", "FAIL": "❌ FAIL", "ERROR": "❌ ERROR"}
    for r in summary.results:
        lines += [
            f"### {r.title} ({r.page})",
            "",
            f"- **URL**: {r.url}",
            f"- **Status**: {page_status[r.status]}",
            f"- **Total Violations**: {len(r.violations)}",
            f"- **Critical**: {r.count_by_impact('critical')} | "
            f"**Serious**: {r.count_by_impact('serious')} | "
            f"**Moderate**: {r.count_by_impact('moderate')} | "
            f"**Minor**: {r.count_by_impact('minor')}",
        ]
        if r.error:
            lines.append(f"- **Error**: {r.error}")
        lines.append("")

        if r.violations:
            lines += ["#### Violations", ""]
            for v in r.violations:
                lines += [
                    f"**{v.id}** ({v.impact})",
                    f"- **Description**: {v.description}",
                    f"- **Help**: {v.help}",
                    f"- **Affected Elements**: {v.affected_node_count}",
                    f"- **Help URL**: [{v.help_url}]({v.help_url})",
                    "",
                ]

        if r.incomplete:
            lines += ["#### Incomplete Checks", ""]
            for check in r.incomplete:
                lines += [
                    f"**{check.id}**",
                    f"- **Description**: {check.description}",
                    f"- **Help**: {check.help}",
                    "",
                ]

        lines += ["---", ""]

    critical_note = (
        "Address all critical accessibility violations immediately as they prevent users from accessing content."
        if summary.critical_violations else "No critical issues found! 🎉"
    )
    serious_note = (
        "Address serious violations as they significantly impact user experience for assistive technology users."
        if summary.serious_violations else "No serious issues found! 🎉"
    )
    lines += [
        "## Recommendations",
        "",
        "### Critical Issues",
        critical_note,
        "",
        "### Serious Issues",
        serious_note,
        "",
        "### Best Practices",
        "- Regularly test with screen readers",
        "- Ensure proper color contrast ratios",
        "- Test keyboard navigation",
        "- Validate semantic HTML structure",
        "- Consider users with cognitive disabilities",
        "",
        "---",
        "*Report generated by Accessibility Crawler*",
        "",
    ]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# SEO
# ---------------------------------------------------------------------------

def _with_length(value: str | None, fallback: str) -> str:
    return f"{value} ({len(value)} chars)" if value else fallback


def render_seo_markdown(summary: SEOSummary) -> str:
    lines = [
        "# SEO Analysis Report",
        "",
        f"Generated: {utc_timestamp()}",
        "",
        "## Summary",
        "",
        f"- **Total Pages Analyzed**: {summary.total_pages}",
        f"- **Total SEO Issues**: {summary.total_issues}",
        f"- **Average Load Time**: {summary.average_load_time}ms",
        f"- **Overall SEO Health**: {HEALTH_LABELS[summary.overall_health]}",
        "",
        "## Page Analysis",
        "",
    ]

    for r in summary.results:
        meta = r.meta
        lines += [
            f"### {r.title} ({r.page})",
            "",
            f"- **URL**: {r.url}",
            f"- **Status**: {'✅ Success' if r.success else '❌ Failed'}",
            f"- **Load Time**: {r.performance.load_time_ms}ms",
            f"- **DOM Content Loaded**: {r.performance.dom_content_loaded_ms}ms (advisory)",
            f"- **Issues Found**: {len(r.issues)}",
        ]
        if r.error:
            lines.append(f"- **Error**: {r.error}")
        lines += [
            "",
            "#### Meta Data",
            f"- **Title**: {_with_length(meta.title, 'Missing')}",
            f"- **Description**: {_with_length(meta.description, 'Missing')}",
            f"- **Keywords**: {meta.keywords or 'Not specified'}",
            f"- **Canonical URL**: {meta.canonical or 'Not specified'}",
            "",
            "#### Open Graph Data",
            f"- **OG Title**: {meta.og_title or 'Missing'}",
            f"- **OG Description**: {meta.og_description or 'Missing'}",
            f"- **OG Image**: {meta.og_image or 'Missing'}",
            f"- **OG Type**: {meta.og_type or 'Not specified'}",
            "",
            "#### Twitter Card Data",
            f"- **Twitter Card**: {meta.twitter_card or 'Not specified'}",
            f"- **Twitter Title**: {meta.twitter_title or 'Not specified'}",
            f"- **Twitter Description**: {meta.twitter_description or 'Not specified'}",
            f"- **Twitter Image**: {meta.twitter_image or 'Not specified'}",
            "",
            "#### Content Structure",
            f"- **H1 Headings**: {len(r.headings.h1)} ({', '.join(r.headings.h1) or 'None'})",
            f"- **H2 Headings**: {len(r.headings.h2)}",
            f"- **H3 Headings**: {len(r.headings.h3)}",
            f"- **Total Images**: {len(r.images)}",
            f"- **Images with Alt Text**: {sum(1 for img in r.images if img.has_alt)}",
            f"- **Total Links**: {len(r.links)}",
            f"- **External Links**: {sum(1 for link in r.links if link.is_external)}",
            "",
            "#### SEO Issues",
        ]
        if r.issues:
            lines += [f"- ❌ {issue}" for issue in r.issues]
        else:
            lines.append("- ✅ No issues found!")
        lines += ["", "---", ""]

    has_missing = any(i.startswith("Missing") for r in summary.results for i in r.issues)
    lines += [
        "## Overall Recommendations",
        "",
        "### Critical Issues",
        "- Fix all missing meta tags and essential SEO elements"
        if has_missing else "- No critical missing elements found! 🎉",
        "",
        "### Performance",
        "- Optimize page load times (target: <3 seconds)",
        "- Compress images and optimize assets",
        "",
        "### Content Optimization",
        "- Ensure unique, descriptive titles for each page",
        "- Use proper heading hierarchy (H1 → H2 → H3)",
        "- Add alt text to all images",
        "",
        "### Technical SEO",
        "- Implement proper canonical URLs",
        "- Add security attributes to external links",
        "",
        "---",
        "*Report generated by SEO Crawler*",
        "",
    ]
    return "\n".join(lines)
