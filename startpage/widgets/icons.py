"""Icon URLs: Lucide first, Simple Icons brand logos as the fallback."""

from typing import List
from urllib.parse import quote


LUCIDE_BASE = "https://cdn.jsdelivr.net/npm/lucide-static/icons"
SIMPLE_ICONS_BASE = "https://cdn.simpleicons.org"

DEFAULT_CATEGORY_ICON = "frontend/media/news.png"
DEFAULT_LINK_ICON = "frontend/media/none.png"


def lucide_icon_url(name: str) -> str:
    return f"{LUCIDE_BASE}/{quote(name, safe='')}.svg"


def simple_icon_url(name: str) -> str:
    return f"{SIMPLE_ICONS_BASE}/{quote(name, safe='')}"


def icon_candidates(name: str, default_url: str = DEFAULT_LINK_ICON) -> List[str]:
    """URLs to try in order; a blank name goes straight to the bundled default."""
    trimmed = (name or "").strip().lower()
    if not trimmed:
        return [default_url]
    return [lucide_icon_url(trimmed), simple_icon_url(trimmed)]
