from site_audit.models import Headings


def analyze_headings(headings: Headings) -> list[str]:
    h1_count = len(headings.h1)
    if h1_count == 0:
        return ["Missing H1 heading"]
    if h1_count > 1:
        return ["Multiple H1 headings found (should be unique)"]
    return []
