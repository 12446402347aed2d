"""Pure projection from bookmark matches to render instructions."""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Union

from .models import BookmarkEntry, MatchResult
from .router import category_counts


@dataclass(frozen=True)
class ResetAll:
    """Clear every highlight and show every category."""
    kind: str = "reset"


@dataclass(frozen=True)
class HighlightLink:
    """Render a link with its matched prefix emphasised."""
    entry: BookmarkEntry
    matched: str
    rest: str
    kind: str = "highlight"


@dataclass(frozen=True)
class MarkCategory:
    """Category has at least one match."""
    category_id: Any
    count: int
    kind: str = "mark"


@dataclass(frozen=True)
class HideCategory:
    """Category has no matches for the current query."""
    category_id: Any
    kind: str = "hide"


Instruction = Union[ResetAll, HighlightLink, MarkCategory, HideCategory]


@dataclass(frozen=True)
class RenderPlan:
    instructions: List[Instruction] = field(default_factory=list)
    searching: bool = False

    def of_kind(self, kind: str) -> List[Instruction]:
        return [i for i in self.instructions if i.kind == kind]


def reset_plan() -> RenderPlan:
    return RenderPlan(instructions=[ResetAll()], searching=False)


def project(query: str, matches: List[MatchResult], category_ids: Iterable[Any]) -> RenderPlan:
    """
    Build the render plan for the live search state.

    Every plan starts from a full reset so hosts can apply it without
    remembering the previous one. An empty query yields only the reset.
    """
    normalized = (query or "").strip()
    if not normalized:
        return reset_plan()

    instructions: List[Instruction] = [ResetAll()]
    for match in matches:
        instructions.append(HighlightLink(entry=match.entry, matched=match.matched, rest=match.rest))

    counts = category_counts(matches)
    for category_id in category_ids:
        count = counts.get(category_id, 0)
        if count:
            instructions.append(MarkCategory(category_id=category_id, count=count))
        else:
            instructions.append(HideCategory(category_id=category_id))

    return RenderPlan(instructions=instructions, searching=True)
