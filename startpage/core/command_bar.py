"""Command bar session: calculator first, then bookmarks, then web search."""

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Sequence

from loguru import logger

from .config import SearchConfig
from .evaluator import evaluate, format_number, starts_with_operator
from .models import BookmarkEntry, CalculatorState, Navigation, RouteResult
from .projection import RenderPlan, project, reset_plan
from .router import decide, route


OutcomeKind = Literal["ignore", "display", "navigate"]


@dataclass(frozen=True)
class LiveUpdate:
    """Result of a keystroke: the matches and how to render them."""
    route: RouteResult
    plan: RenderPlan


@dataclass(frozen=True)
class SubmitOutcome:
    """
    What the host does after the user presses enter.

    display  - replace the field text with display_text (calculator result)
    navigate - go to navigation.url
    ignore   - empty input, nothing to do
    """
    kind: OutcomeKind
    display_text: Optional[str] = None
    navigation: Optional[Navigation] = None
    plan: RenderPlan = field(default_factory=reset_plan)


class CommandBarSession:
    """
    State for one command bar input session.

    Owns the chained calculator value so hosts don't need a module global;
    the bookmark list is read-only and may be swapped when settings change.
    """

    def __init__(self,
                 entries: Sequence[BookmarkEntry],
                 search_config: Optional[SearchConfig] = None,
                 calculator: Optional[CalculatorState] = None,
                 category_ids: Optional[Sequence] = None):
        self.entries: List[BookmarkEntry] = list(entries)
        self.search_config = search_config or SearchConfig()
        self.calculator = calculator or CalculatorState()
        # Categories without links are only known when passed explicitly
        self._category_ids = list(category_ids) if category_ids is not None else None

    @property
    def category_ids(self) -> List:
        if self._category_ids is not None:
            return list(self._category_ids)
        seen = []
        for entry in self.entries:
            if entry.category_id not in seen:
                seen.append(entry.category_id)
        return seen

    def replace_entries(self,
                        entries: Sequence[BookmarkEntry],
                        category_ids: Optional[Sequence] = None) -> None:
        self.entries = list(entries)
        self._category_ids = list(category_ids) if category_ids is not None else None

    def on_input(self, text: str) -> LiveUpdate:
        """Handle a keystroke: drop the chained value unless text starts with an operator."""
        if self.calculator.last_result is not None and not starts_with_operator(text):
            logger.debug("Clearing chained calculator value")
            self.calculator.reset()

        result = route(text, self.entries)
        return LiveUpdate(route=result, plan=project(result.query, result.matches, self.category_ids))

    def on_submit(self, text: str) -> SubmitOutcome:
        raw = (text or "").strip()
        if not raw:
            return SubmitOutcome(kind="ignore")

        calc = evaluate(raw, self.calculator.last_result)
        if calc.evaluated:
            self.calculator.last_result = calc.value
            return SubmitOutcome(kind="display", display_text=format_number(calc.value))

        result = route(raw, self.entries)
        navigation = decide(
            result,
            raw,
            single_prefix_match_navigates=self.search_config.single_prefix_match_navigates,
            engine_url=self.search_config.engine_url,
        )
        logger.info(f"Submitting {raw!r} -> {navigation.kind}: {navigation.url}")
        return SubmitOutcome(kind="navigate", navigation=navigation)
