from site_audit.config import (
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from site_audit.models import MetaData


def analyze_title(meta: MetaData) -> list[str]:
    title = meta.title
    if not title:
        return ["Missing page title"]
    recommended = f"(recommended: {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters)"
    if len(title) < TITLE_MIN_LENGTH:
        return [f"Page title too short {recommended}"]
    if len(title) > TITLE_MAX_LENGTH:
        return [f"Page title too long {recommended}"]
    return []


def analyze_description(meta: MetaData) -> list[str]:
    desc = meta.description
    if not desc:
        return ["Missing meta description"]
    recommended = f"(recommended: {DESCRIPTION_MIN_LENGTH}-{DESCRIPTION_MAX_LENGTH} characters)"
    if len(desc) < DESCRIPTION_MIN_LENGTH:
        return [f"Meta description too short {recommended}"]
    if len(desc) > DESCRIPTION_MAX_LENGTH:
        return [f"Meta description too long {recommended}"]
    return []


def analyze_open_graph(meta: MetaData) -> list[str]:
    issues = []
    if not meta.og_title:
        issues.append("Missing Open Graph title")
    if not meta.og_description:
        issues.append("Missing Open Graph description")
    if not meta.og_image:
        issues.append("Missing Open Graph image")
    return issues
