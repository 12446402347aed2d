"""Tests for the command bar session."""

import pytest

from startpage.core.command_bar import CommandBarSession
from startpage.core.config import SearchConfig
from startpage.core.models import BookmarkEntry


@pytest.fixture
def entries():
    return [
        BookmarkEntry("Go", "https://go.dev", 0),
        BookmarkEntry("Google", "https://www.google.com", 0),
        BookmarkEntry("GitHub", "https://github.com", 1),
        BookmarkEntry("Reddit", "https://www.reddit.com", 2),
    ]


@pytest.fixture
def session(entries):
    return CommandBarSession(entries)


class TestSubmit:
    """Test submit outcomes."""

    def test_empty_is_ignored(self, session):
        assert session.on_submit("   ").kind == "ignore"

    def test_calculator_displays_result(self, session):
        outcome = session.on_submit("2+3*4")
        assert outcome.kind == "display"
        assert outcome.display_text == "14"
        assert outcome.navigation is None
        assert session.calculator.last_result == 14

    def test_exact_bookmark(self, session):
        outcome = session.on_submit("go")
        assert outcome.kind == "navigate"
        assert outcome.navigation.kind == "bookmark"
        assert outcome.navigation.url == "https://go.dev"

    def test_prefix_only_searches(self, session):
        outcome = session.on_submit("goo")
        assert outcome.navigation.kind == "search"
        assert outcome.navigation.url == "https://duckduckgo.com/?q=goo"

    def test_single_prefix_flag(self, entries):
        session = CommandBarSession(entries, SearchConfig(single_prefix_match_navigates=True))
        assert session.on_submit("goo").navigation.url == "https://www.google.com"
        assert session.on_submit("red").navigation.url == "https://www.reddit.com"

    def test_free_text_search_is_encoded(self, session):
        outcome = session.on_submit("c++ tips")
        assert outcome.navigation.url == "https://duckduckgo.com/?q=c%2B%2B%20tips"

    def test_division_by_zero_becomes_search(self, session):
        outcome = session.on_submit("5/0")
        assert outcome.kind == "navigate"
        assert outcome.navigation.url == "https://duckduckgo.com/?q=5%2F0"
        assert session.calculator.last_result is None


class TestChaining:
    """Test result chaining across submissions."""

    def test_operator_input_keeps_chain(self, session):
        session.on_submit("10")
        session.on_input("+")
        session.on_input("+8")
        assert session.on_submit("+8").display_text == "18"
        session.on_input("*2")
        assert session.on_submit("*2").display_text == "36"

    def test_other_input_resets_chain(self, session):
        session.on_submit("10")
        session.on_input("g")
        assert session.calculator.last_result is None
        # Without a chained value "+8" is just a signed number
        assert session.on_submit("+8").display_text == "8"

    def test_chained_result_keeps_decimals(self, session):
        session.on_submit("7")
        assert session.on_submit("/2").display_text == "3.5"


class TestLiveInput:
    """Test per keystroke updates."""

    def test_matches_and_plan(self, session):
        update = session.on_input("g")
        assert [m.entry.title for m in update.route.matches] == ["Go", "Google", "GitHub"]
        assert update.plan.searching
        assert [i.category_id for i in update.plan.of_kind("hide")] == [2]

    def test_blank_input_resets(self, session):
        update = session.on_input("   ")
        assert update.route.matches == []
        assert not update.plan.searching
        assert [i.kind for i in update.plan.instructions] == ["reset"]

    def test_replace_entries(self, session):
        session.replace_entries([BookmarkEntry("Zulip", "https://zulip.com", 0)])
        assert session.on_submit("zulip").navigation.url == "https://zulip.com"
        assert session.category_ids == [0]

    def test_empty_category_is_hidden(self):
        """Categories without links still get hidden while searching."""
        session = CommandBarSession(
            [BookmarkEntry("GitHub", "https://github.com", 0)],
            category_ids=[0, 1],
        )
        update = session.on_input("zzz")
        assert [i.category_id for i in update.plan.of_kind("hide")] == [0, 1]

        session.replace_entries([BookmarkEntry("Zulip", "https://zulip.com", 0)], category_ids=[0, 1, 2])
        assert session.category_ids == [0, 1, 2]
