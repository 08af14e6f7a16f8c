from __future__ import annotations

import math

from fpdf import FPDF

from site_audit.models import SessionReport

# ---------------------------------------------------------------------------
# Colour constants (RGB tuples)
# ---------------------------------------------------------------------------
GREEN = (34, 197, 94)
YELLOW = (245, 158, 11)
ORANGE = (249, 115, 22)
RED = (239, 68, 68)
BLUE = (59, 130, 246)
DARK_BG = (30, 41, 59)
LIGHT_TEXT = (226, 232, 240)
WHITE = (255, 255, 255)
GREY = (148, 163, 184)

IMPACT_COLORS: dict[str, tuple[int, int, int]] = {
    "critical": RED,
    "serious": ORANGE,
    "moderate": YELLOW,
    "minor": BLUE,
}

HEALTH_COLORS: dict[str, tuple[int, int, int]] = {
    "EXCELLENT": GREEN,
    "GOOD": YELLOW,
    "NEEDS_IMPROVEMENT": RED,
}


def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def _coverage(report: SessionReport) -> int:
    """Percentage of attempted units that completed successfully."""
    results = [
        *report.screenshots.summary.results,
        *report.accessibility.summary.results,
        *report.seo.summary.results,
    ]
    if not results:
        return 0
    return round(sum(1 for r in results if r.success) / len(results) * 100)


def _coverage_color(score: int) -> tuple[int, int, int]:
    if score >= 80:
        return GREEN
    if score >= 50:
        return YELLOW
    return RED


# ===================================================================
# PDF class
# ===================================================================

class SessionReportPDF(FPDF):
    def __init__(self) -> None:
        super().__init__(orientation="P", unit="mm", format="A4")
        self.set_auto_page_break(auto=True, margin=20)

    def _set_color(self, rgb: tuple[int, int, int]) -> None:
        self.set_text_color(*rgb)

    def _dark_page(self) -> None:
        self.add_page()
        self.set_fill_color(*DARK_BG)
        self.rect(0, 0, self.w, self.h, "F")

    def _ensure_space(self, needed: float) -> None:
        if self.get_y() > self.h - needed:
            self._dark_page()
            self.set_y(15)

    def _heading(self, title: str) -> None:
        self.set_font("Helvetica", "B", 20)
        self._set_color(WHITE)
        self.set_xy(15, 15)
        self.cell(0, 10, title, new_x="LMARGIN", new_y="NEXT")
        self.set_draw_color(*GREY)
        self.set_line_width(0.3)
        self.line(15, 28, self.w - 15, 28)
        self.set_y(33)

    def _draw_rounded_rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        r: float,
        fill_color: tuple[int, int, int],
    ) -> None:
        self.set_fill_color(*fill_color)
        self.rect(x + r, y, w - 2 * r, h, "F")
        self.rect(x, y + r, w, h - 2 * r, "F")
        for cx, cy in [
            (x + r, y + r),
            (x + w - r, y + r),
            (x + r, y + h - r),
            (x + w - r, y + h - r),
        ]:
            self.ellipse(cx - r, cy - r, 2 * r, 2 * r, "F")

    def _badge(self, x: float, y: float, label: str, color: tuple[int, int, int]) -> float:
        label = label.upper()
        self.set_font("Helvetica", "B", 6.5)
        badge_w = self.get_string_width(label) + 6
        badge_h = 5.5
        tint = tuple(min(255, c + 140) for c in color)
        self._draw_rounded_rect(x, y, badge_w, badge_h, 1.5, tint)  # type: ignore[arg-type]
        self._set_color(color)
        self.set_xy(x, y + 0.3)
        self.cell(badge_w, badge_h, label, align="C")
        return badge_w

    def _bar(self, label: str, value: int, max_value: int, color: tuple[int, int, int], y: float) -> None:
        bar_x = 60
        bar_max_w = self.w - bar_x - 25

        self.set_font("Helvetica", "", 9)
        self._set_color(LIGHT_TEXT)
        self.set_xy(15, y)
        self.cell(bar_x - 17, 6, _latin1(label), align="R")

        self.set_fill_color(80, 90, 110)
        self.rect(bar_x, y + 1, bar_max_w, 4, "F")
        fill_w = bar_max_w * value / max_value if max_value else 0
        if fill_w > 0:
            self.set_fill_color(*color)
            self.rect(bar_x, y + 1, fill_w, 4, "F")

        self.set_font("Helvetica", "B", 9)
        self._set_color(color)
        self.set_xy(bar_x + bar_max_w + 2, y)
        self.cell(20, 6, str(value))


def _draw_arc(
    pdf: SessionReportPDF,
    cx: float,
    cy: float,
    r: float,
    start_deg: float,
    end_deg: float,
) -> None:
    """Draw an arc as small line segments."""
    steps = max(30, int(abs(end_deg - start_deg) / 2))
    pts: list[tuple[float, float]] = []
    for i in range(steps + 1):
        angle = math.radians(start_deg + (end_deg - start_deg) * i / steps)
        pts.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))
    for i in range(len(pts) - 1):
        pdf.line(pts[i][0], pts[i][1], pts[i + 1][0], pts[i + 1][1])


# ===================================================================
# Page renderers
# ===================================================================

def _render_cover(pdf: SessionReportPDF, report: SessionReport) -> None:
    pdf._dark_page()
    page_w = pdf.w

    pdf.set_font("Helvetica", "B", 32)
    pdf._set_color(WHITE)
    pdf.set_y(50)
    pdf.cell(0, 14, "Site Audit Report", align="C", new_x="LMARGIN", new_y="NEXT")

    pdf.set_font("Helvetica", "", 13)
    pdf._set_color(GREY)
    pdf.set_y(72)
    pdf.cell(0, 8, f"Session {report.session_id}", align="C", new_x="LMARGIN", new_y="NEXT")

    pdf.set_font("Helvetica", "", 10)
    pdf.set_y(84)
    pdf.cell(0, 6, f"Generated {report.generated_at}", align="C", new_x="LMARGIN", new_y="NEXT")

    # Coverage gauge: 270 degree arc from 135 degrees
    cx, cy = page_w / 2, 145
    radius = 38
    coverage = _coverage(report)
    color = _coverage_color(coverage)
    start_angle = 135
    sweep = 270

    pdf.set_draw_color(80, 90, 110)
    pdf.set_line_width(3.5)
    _draw_arc(pdf, cx, cy, radius, start_angle, start_angle + sweep)
    if coverage > 0:
        pdf.set_draw_color(*color)
        _draw_arc(pdf, cx, cy, radius, start_angle, start_angle + sweep * coverage / 100)

    pdf.set_font("Helvetica", "B", 36)
    pdf._set_color(color)
    text = f"{coverage}%"
    tw = pdf.get_string_width(text)
    pdf.set_xy(cx - tw / 2, cy - 12)
    pdf.cell(tw, 14, text)

    pdf.set_font("Helvetica", "", 9)
    pdf._set_color(GREY)
    label = "units captured"
    lw = pdf.get_string_width(label)
    pdf.set_xy(cx - lw / 2, cy + 6)
    pdf.cell(lw, 5, label)

    # Overall status
    pdf.set_y(195)
    pdf.set_font("Helvetica", "B", 16)
    pdf._set_color(GREEN if report.all_passed else RED)
    pdf.cell(0, 10, "ALL CHECKS PASSED" if report.all_passed else "ATTENTION REQUIRED", align="C")

    shots = report.screenshots.summary
    summary_parts = [
        (f"{shots.successful}/{shots.total} Screenshots", BLUE),
        (f"{report.accessibility.summary.critical_violations} Critical", RED),
        (f"{report.accessibility.summary.serious_violations} Serious", ORANGE),
        (f"{report.seo.summary.total_issues} SEO Issues", YELLOW),
    ]
    pdf.set_font("Helvetica", "", 11)
    total_w = sum(pdf.get_string_width(t) + 12 for t, _ in summary_parts)
    x = (page_w - total_w) / 2
    for text, clr in summary_parts:
        pdf._set_color(clr)
        pdf.set_xy(x, 215)
        w = pdf.get_string_width(text) + 12
        pdf.cell(w, 8, text, align="C")
        x += w


def _render_summary(pdf: SessionReportPDF, report: SessionReport) -> None:
    pdf._dark_page()
    pdf._heading("Category Summary")

    a11y = report.accessibility.summary
    seo = report.seo.summary
    shots = report.screenshots.summary

    pdf.set_font("Helvetica", "B", 13)
    pdf._set_color(WHITE)
    pdf.set_x(15)
    pdf.cell(0, 8, "Screenshots", new_x="LMARGIN", new_y="NEXT")
    y = pdf.get_y() + 2
    pdf._bar("Successful", shots.successful, shots.total, GREEN, y)
    pdf._bar("Failed", shots.failed, shots.total, RED, y + 10)

    pdf.set_y(y + 24)
    pdf.set_font("Helvetica", "B", 13)
    pdf._set_color(WHITE)
    pdf.set_x(15)
    pdf.cell(0, 8, f"Accessibility ({a11y.overall_status})", new_x="LMARGIN", new_y="NEXT")
    y = pdf.get_y() + 2
    counts = {
        "critical": a11y.critical_violations,
        "serious": a11y.serious_violations,
        "moderate": a11y.moderate_violations,
        "minor": a11y.minor_violations,
    }
    peak = max(counts.values()) or 1
    for impact, count in counts.items():
        pdf._bar(impact.capitalize(), count, peak, IMPACT_COLORS[impact], y)
        y += 10

    pdf.set_y(y + 4)
    pdf.set_font("Helvetica", "B", 13)
    pdf._set_color(HEALTH_COLORS[seo.overall_health])
    pdf.set_x(15)
    health = seo.overall_health.replace("_", " ")
    pdf.cell(
        0, 8, f"SEO ({health}, avg load {seo.average_load_time}ms)",
        new_x="LMARGIN", new_y="NEXT",
    )
    y = pdf.get_y() + 2
    peak = max((len(r.issues) for r in seo.results), default=0) or 1
    for r in seo.results:
        if y > pdf.h - 25:
            pdf._dark_page()
            y = 20
        pdf._bar(f"{r.title} ({r.page})", len(r.issues), peak, YELLOW, y)
        y += 10
    pdf.set_y(y)


def _render_actions(pdf: SessionReportPDF, report: SessionReport) -> None:
    pdf._dark_page()
    pdf._heading("Action Items")

    sections = [
        ("High Priority", RED, report.high_priority, "No high priority issues found."),
        ("Medium Priority", YELLOW, report.medium_priority, "No medium priority issues found."),
    ]
    for title, color, actions, empty in sections:
        pdf._ensure_space(30)
        pdf.set_font("Helvetica", "B", 13)
        pdf._set_color(color)
        pdf.set_x(15)
        pdf.cell(0, 8, title, new_x="LMARGIN", new_y="NEXT")

        if not actions:
            pdf.set_font("Helvetica", "", 10)
            pdf._set_color(GREEN)
            pdf.set_x(20)
            pdf.cell(0, 6, empty, new_x="LMARGIN", new_y="NEXT")
        for action in actions:
            pdf._ensure_space(15)
            pdf.set_font("Helvetica", "", 9)
            pdf._set_color(LIGHT_TEXT)
            pdf.set_x(20)
            pdf.multi_cell(pdf.w - 40, 5, _latin1(f"- {action}"), new_x="LMARGIN", new_y="NEXT")
        pdf.set_y(pdf.get_y() + 6)

    failed = [
        *(("screenshot", f"{r.page} ({r.viewport})", r.error) for r in report.screenshots.summary.results if not r.success),
        *(("a11y", r.page, r.error) for r in report.accessibility.summary.results if not r.success),
        *(("seo", r.page, r.error) for r in report.seo.summary.results if not r.success),
    ]
    if not failed:
        return

    pdf._ensure_space(30)
    pdf.set_font("Helvetica", "B", 13)
    pdf._set_color(WHITE)
    pdf.set_x(15)
    pdf.cell(0, 8, "Failed Units", new_x="LMARGIN", new_y="NEXT")
    for category, unit, error in failed:
        pdf._ensure_space(15)
        iy = pdf.get_y()
        badge_w = pdf._badge(17, iy + 0.5, category, RED)
        pdf.set_font("Helvetica", "", 8)
        pdf._set_color(LIGHT_TEXT)
        text_x = 17 + badge_w + 3
        pdf.set_xy(text_x, iy)
        pdf.multi_cell(pdf.w - text_x - 17, 4.5, _latin1(f"{unit}: {error or 'unknown error'}"))
        if pdf.get_y() < iy + 6:
            pdf.set_y(iy + 6)
        pdf.set_y(pdf.get_y() + 1)


# ===================================================================
# Public API
# ===================================================================

def generate_pdf(report: SessionReport) -> bytes:
    """Render the session report as a PDF and return raw bytes."""
    pdf = SessionReportPDF()
    _render_cover(pdf, report)
    _render_summary(pdf, report)
    _render_actions(pdf, report)
    return bytes(pdf.output())
