"""Accessibility rule engine: axe-core injected into the live page."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import requests
from pydantic import ValidationError

from site_audit.config import AXE_SCRIPT_TIMEOUT, AXE_SCRIPT_URL
from site_audit.errors import CaptureError
from site_audit.models import RuleCheck, Violation

AXE_RUN_SCRIPT = """async (tags) => {
    const results = await axe.run(document, { runOnly: { type: 'tag', values: tags } });
    const pick = (rule) => ({
        id: rule.id,
        impact: rule.impact,
        description: rule.description,
        help: rule.help,
        helpUrl: rule.helpUrl,
        nodes: rule.nodes.length,
    });
    return {
        violations: results.violations.map(pick),
        passes: results.passes.map(pick),
        incomplete: results.incomplete.map(pick),
    };
}"""


@dataclass
class AccessibilityScan:
    violations: list[Violation] = field(default_factory=list)
    passes: list[RuleCheck] = field(default_factory=list)
    incomplete: list[RuleCheck] = field(default_factory=list)


@lru_cache
def load_axe_source(url: str = AXE_SCRIPT_URL, path: str = "") -> str:
    """Read axe.min.js from ``path`` when given, otherwise download it once."""
    if path:
        return Path(path).read_text(encoding="utf-8")
    resp = requests.get(url, timeout=AXE_SCRIPT_TIMEOUT)
    resp.raise_for_status()
    return resp.text


def _rule_fields(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": raw.get("id", ""),
        "impact": raw.get("impact"),
        "description": raw.get("description", ""),
        "help": raw.get("help", ""),
        "help_url": raw.get("helpUrl", ""),
        "affected_node_count": raw.get("nodes", 0),
    }


def parse_scan(raw: dict[str, Any]) -> AccessibilityScan:
    """Convert axe's result payload; a violation outside the four impact levels is rejected."""
    try:
        return AccessibilityScan(
            violations=[Violation(**_rule_fields(v)) for v in raw.get("violations", [])],
            passes=[RuleCheck(**_rule_fields(p)) for p in raw.get("passes", [])],
            incomplete=[RuleCheck(**_rule_fields(i)) for i in raw.get("incomplete", [])],
        )
    except ValidationError as e:
        raise CaptureError(f"Unexpected axe result: {e}") from e


class AxeEngine:
    def __init__(self, browser, script_url: str = AXE_SCRIPT_URL, script_path: str = ""):
        self.browser = browser
        self.script_url = script_url
        self.script_path = script_path

    async def analyze(self, tags: list[str]) -> AccessibilityScan:
        try:
            source = await asyncio.to_thread(load_axe_source, self.script_url, self.script_path)
        except (requests.RequestException, OSError) as e:
            raise CaptureError(f"Could not load axe-core: {e}") from e

        # Navigation discards injected scripts, so inject on every page
        await self.browser.inject_script(source)
        raw = await self.browser.extract(AXE_RUN_SCRIPT, list(tags))
        return parse_scan(raw or {})
