from site_audit.models import LinkInfo

SAFE_REL_TOKENS = {"noopener", "noreferrer"}


def is_unsafe_external(link: LinkInfo) -> bool:
    """External link whose rel carries neither noopener nor noreferrer."""
    if not link.is_external:
        return False
    tokens = set((link.rel or "").lower().split())
    return not tokens & SAFE_REL_TOKENS


def analyze_links(links: list[LinkInfo]) -> list[str]:
    unsafe = sum(1 for link in links if is_unsafe_external(link))
    if unsafe:
        return [f'{unsafe} external links missing security attributes (rel="noopener noreferrer")']
    return []
