"""Cross-category session report: overall status, action lists, persistence."""

from __future__ import annotations

import logging
from pathlib import Path

from site_audit.analyzers import count_missing_alt
from site_audit.config import SLOW_PAGE_ACTION_MS
from site_audit.models import (
    AccessibilityOutcome,
    ScreenshotOutcome,
    SEOOutcome,
    SessionReport,
)
from site_audit.pdf_report import generate_pdf
from site_audit.session import Session

logger = logging.getLogger(__name__)

SUMMARY_MARKDOWN = "test-session-summary.md"
SUMMARY_JSON = "test-session-results.json"
SUMMARY_PDF = "test-session-report.pdf"


def all_passed(
    screenshots: ScreenshotOutcome, accessibility: AccessibilityOutcome, seo: SEOOutcome
) -> bool:
    """Accessibility criticals block; screenshot failures and SEO issues are advisory."""
    return (
        screenshots.completed
        and accessibility.completed
        and seo.completed
        and accessibility.summary.critical_violations == 0
    )


def high_priority_actions(accessibility: AccessibilityOutcome, seo: SEOOutcome) -> list[str]:
    actions = []
    critical = accessibility.summary.critical_violations
    if critical > 0:
        actions.append(
            f"Fix {critical} critical accessibility violations - "
            "these prevent users from accessing your content"
        )

    results = seo.summary.results
    if any(issue.startswith("Missing") for r in results for issue in r.issues):
        actions.append("Add missing meta tags - essential for search engine optimization")

    if any(r.performance.load_time_ms > SLOW_PAGE_ACTION_MS for r in results):
        actions.append(
            f"Optimize page load times - pages loading slower than {SLOW_PAGE_ACTION_MS / 1000:g} seconds detected"
        )
    return actions


def medium_priority_actions(accessibility: AccessibilityOutcome, seo: SEOOutcome) -> list[str]:
    actions = []
    serious = accessibility.summary.serious_violations
    if serious > 0:
        actions.append(
            f"Address {serious} serious accessibility issues - "
            "improve the experience for assistive technology users"
        )

    missing_alt = sum(count_missing_alt(r.images) for r in seo.summary.results)
    if missing_alt > 0:
        actions.append(f"Add alt text to {missing_alt} images - improves accessibility and SEO")
    return actions


def aggregate(
    session_id: str,
    screenshots: ScreenshotOutcome,
    accessibility: AccessibilityOutcome,
    seo: SEOOutcome,
) -> SessionReport:
    return SessionReport(
        session_id=session_id,
        screenshots=screenshots,
        accessibility=accessibility,
        seo=seo,
        all_passed=all_passed(screenshots, accessibility, seo),
        high_priority=high_priority_actions(accessibility, seo),
        medium_priority=medium_priority_actions(accessibility, seo),
    )


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------

def _completion(outcome) -> str:
    return "✅ COMPLETED" if outcome.completed else "❌ FAILED"


def _action_lines(actions: list[str], empty: str) -> list[str]:
    return [f"- {a}" for a in actions] if actions else [f"- ✅ {empty}"]


def render_session_markdown(report: SessionReport) -> str:
    shots = report.screenshots
    a11y = report.accessibility
    seo = report.seo

    status = (
        "🎉 **ALL TESTS PASSED** - Your site is looking great!"
        if report.all_passed
        else "⚠️ **ATTENTION REQUIRED** - Some issues need to be addressed"
    )
    lines = [
        "# Unified Test Session Report",
        "",
        f"**Session ID**: {report.session_id}  ",
        f"**Generated**: {report.generated_at}",
        "",
        "## Test Summary",
        "",
        "| Test Suite | Status | Key Metrics |",
        "|------------|--------|-------------|",
        f"| Screenshots | {_completion(shots)} | "
        f"{shots.summary.total} attempted, {shots.summary.failed} failed |",
        f"| Accessibility | {_completion(a11y)} | "
        f"{a11y.summary.critical_violations} critical violations |",
        f"| SEO Analysis | {_completion(seo)} | {seo.summary.total_issues} issues found |",
        "",
        "## Overall Status",
        "",
        status,
        "",
    ]

    errors = [(name, o.error) for name, o in (("Screenshots", shots), ("Accessibility", a11y), ("SEO", seo)) if o.error]
    if errors:
        lines += ["### Category Errors", ""]
        lines += [f"- **{name}**: {error}" for name, error in errors]
        lines.append("")

    lines += [
        "## Quick Navigation",
        "",
        "### Screenshots",
        f"- **Location**: `{shots.output_dir}`",
        f"- **Attempted**: {shots.summary.total}",
        f"- **Successful**: {shots.summary.successful}",
        f"- **Failed**: {shots.summary.failed}",
        "",
        "### Accessibility Report",
        f"- **Location**: `{a11y.output_dir}/accessibility-report.md`",
        f"- **Critical Issues**: {a11y.summary.critical_violations}",
        f"- **Total Pages Tested**: {a11y.summary.total_pages}",
        "- **Status**: "
        + ("✅ No critical accessibility issues" if a11y.summary.critical_violations == 0
           else "❌ Critical issues found - immediate attention required"),
        "",
        "### SEO Analysis",
        f"- **Location**: `{seo.output_dir}/seo-report.md`",
        f"- **Total Issues**: {seo.summary.total_issues}",
        f"- **Pages Analyzed**: {seo.summary.total_pages}",
        f"- **Average Load Time**: {seo.summary.average_load_time}ms",
        "",
        "## Action Items",
        "",
        "### High Priority",
        *_action_lines(report.high_priority, "No high priority issues found!"),
        "",
        "### Medium Priority",
        *_action_lines(report.medium_priority, "No medium priority issues found!"),
        "",
    ]

    failed_units = [
        *(f"Screenshot {r.page} ({r.viewport}): {r.error}" for r in shots.summary.results if not r.success),
        *(f"Accessibility {r.page}: {r.error}" for r in a11y.summary.results if not r.success),
        *(f"SEO {r.page}: {r.error}" for r in seo.summary.results if not r.success),
    ]
    if failed_units:
        lines += ["## Failed Units", ""]
        lines += [f"- {unit}" for unit in failed_units]
        lines.append("")

    lines += [
        "---",
        f"*Session: {report.session_id}*",
        "",
    ]
    return "\n".join(lines)


def persist_session_report(session: Session, report: SessionReport) -> dict[str, Path]:
    """Write the summary documents at the session root; other sessions are untouched."""
    session_dir = session.directory
    session_dir.mkdir(parents=True, exist_ok=True)

    paths = {
        "markdown": session_dir / SUMMARY_MARKDOWN,
        "json": session_dir / SUMMARY_JSON,
        "pdf": session_dir / SUMMARY_PDF,
    }
    paths["markdown"].write_text(render_session_markdown(report), encoding="utf-8")
    paths["json"].write_text(report.model_dump_json(indent=2), encoding="utf-8")
    paths["pdf"].write_bytes(generate_pdf(report))

    logger.info(
        "session report saved",
        extra={"session_id": report.session_id, "path": str(paths["markdown"]), "all_passed": report.all_passed},
    )
    return paths
