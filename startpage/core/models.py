"""Data models shared by the command bar and carousel engines."""

import math
from dataclasses import dataclass
from typing import Any, List, Literal, Optional


@dataclass(frozen=True)
class BookmarkEntry:
    """A single bookmark, flattened out of its category."""
    title: str
    url: str
    category_id: Any  # opaque; position of the category in settings


@dataclass(frozen=True)
class MatchResult:
    """A bookmark whose title starts with the current query."""
    entry: BookmarkEntry
    matched_prefix_length: int

    @property
    def matched(self) -> str:
        return self.entry.title[:self.matched_prefix_length]

    @property
    def rest(self) -> str:
        return self.entry.title[self.matched_prefix_length:]


@dataclass(frozen=True)
class RouteResult:
    """Output of one routing pass."""
    query: str
    matches: List[MatchResult]
    exact_url: Optional[str] = None


NavigationKind = Literal["bookmark", "search"]


@dataclass(frozen=True)
class Navigation:
    """Where a submitted query should take the browser."""
    url: str
    kind: NavigationKind


@dataclass
class CalculatorState:
    """
    Per input session calculator memory.

    Only one chained value is kept; the command bar clears it as soon as
    the user types something that does not start with an operator.
    """
    last_result: Optional[float] = None

    def reset(self) -> None:
        self.last_result = None


@dataclass(frozen=True)
class StepperState:
    """Carousel position plus the live geometry it was read against."""
    current_index: int
    item_count: int
    pitch: float
    viewport_extent: float
    content_extent: float
    visible_count: int = 4

    @property
    def max_scroll(self) -> float:
        return max(0.0, self.content_extent - self.viewport_extent)

    @property
    def max_index(self) -> int:
        """Last reachable index; recomputed from geometry on every read."""
        if self.pitch <= 0:
            return 0
        geometry_max = math.ceil(self.max_scroll / self.pitch)
        count_max = self.item_count - self.visible_count
        return max(geometry_max, count_max, 0)


@dataclass(frozen=True)
class ScrollCommand:
    """Instruction for the host to scroll the carousel."""
    index: int
    offset: float
    smooth: bool = True
