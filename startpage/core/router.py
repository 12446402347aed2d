"""Bookmark routing for the command bar.

Matches the query against bookmark titles (case-insensitive prefix) and
decides where a submitted query goes: a bookmark URL or a web search.
"""

from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
from urllib.parse import quote

from loguru import logger

from .models import BookmarkEntry, MatchResult, Navigation, RouteResult


DEFAULT_SEARCH_ENGINE = "https://duckduckgo.com/?q="

# Characters encodeURIComponent leaves alone besides alphanumerics and -_.
_URI_COMPONENT_SAFE = "!~*'()"


def route(query: str, entries: Sequence[BookmarkEntry]) -> RouteResult:
    """
    Compute prefix matches and the exact match for a query.

    The result depends only on the arguments. Duplicate titles match
    independently; when several titles equal the query the first one in
    input order provides exact_url.
    """
    normalized = (query or "").strip()
    if not normalized:
        return RouteResult(query="", matches=[], exact_url=None)

    needle = normalized.lower()
    matches: List[MatchResult] = []
    exact_url: Optional[str] = None

    for entry in entries:
        title = entry.title.lower()
        if title.startswith(needle):
            matches.append(MatchResult(entry=entry, matched_prefix_length=len(normalized)))
            if exact_url is None and title == needle:
                exact_url = entry.url

    return RouteResult(query=normalized, matches=matches, exact_url=exact_url)


def category_counts(matches: Iterable[MatchResult]) -> Dict[Any, int]:
    """Number of matches per category id."""
    return dict(Counter(m.entry.category_id for m in matches))


def search_url(query: str, engine_url: str = DEFAULT_SEARCH_ENGINE) -> str:
    """Web search target for a raw query, percent-encoded."""
    return f"{engine_url}{quote(query, safe=_URI_COMPONENT_SAFE)}"


def decide(
    result: RouteResult,
    raw_query: str,
    single_prefix_match_navigates: bool = False,
    engine_url: str = DEFAULT_SEARCH_ENGINE,
) -> Optional[Navigation]:
    """
    Submit policy, applied after the calculator declined.

    1. An exact title match navigates to its bookmark.
    2. With single_prefix_match_navigates, a lone prefix match does too.
    3. Everything else (no matches, several matches) is a web search.

    Returns None for an empty query; there is nothing to submit.
    """
    raw = (raw_query or "").strip()
    if not raw:
        return None

    if result.exact_url is not None:
        logger.debug(f"Exact bookmark match for {raw!r}")
        return Navigation(url=result.exact_url, kind="bookmark")

    if single_prefix_match_navigates and len(result.matches) == 1:
        logger.debug(f"Single prefix match for {raw!r}")
        return Navigation(url=result.matches[0].entry.url, kind="bookmark")

    logger.debug(f"No decisive bookmark for {raw!r} ({len(result.matches)} matches), searching")
    return Navigation(url=search_url(raw, engine_url), kind="search")


def flatten_categories(categories: Sequence[Any]) -> List[BookmarkEntry]:
    """
    Flatten the nested category/link tree into bookmark entries.

    Accepts plain mappings ({"title", "icon", "links": [...]}) or objects
    with the same attributes (the settings models). The category id is the
    category's position in the list.
    """
    entries: List[BookmarkEntry] = []
    for index, category in enumerate(categories):
        for link in _field(category, "links") or []:
            title = (_field(link, "title") or "").strip() or "Link"
            url = _field(link, "url") or "#"
            entries.append(BookmarkEntry(title=title, url=url, category_id=index))
    return entries


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)
