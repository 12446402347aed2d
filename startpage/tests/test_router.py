"""Tests for bookmark routing."""

import pytest

from startpage.core.config import CategoryConfig, LinkConfig
from startpage.core.models import BookmarkEntry
from startpage.core.router import (
    category_counts, decide, flatten_categories, route, search_url
)


@pytest.fixture
def entries():
    return [
        BookmarkEntry("Go", "https://go.dev", 0),
        BookmarkEntry("Google", "https://www.google.com", 0),
        BookmarkEntry("GitHub", "https://github.com", 1),
        BookmarkEntry("Reddit", "https://www.reddit.com", 2),
    ]


class TestRoute:
    """Test prefix and exact matching."""

    def test_exact_match_wins_over_prefix(self, entries):
        result = route("go", entries)
        assert result.exact_url == "https://go.dev"
        assert [m.entry.title for m in result.matches] == ["Go", "Google"]

    def test_case_insensitive(self, entries):
        result = route("GOOGLE", entries)
        assert result.exact_url == "https://www.google.com"

    def test_query_is_trimmed(self, entries):
        result = route("  goo ", entries)
        assert result.query == "goo"
        assert len(result.matches) == 1
        assert result.matches[0].matched_prefix_length == 3
        assert result.matches[0].matched == "Goo"
        assert result.matches[0].rest == "gle"

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_empty_query(self, entries, query):
        result = route(query, entries)
        assert result.matches == []
        assert result.exact_url is None

    def test_no_matches(self, entries):
        result = route("zzz", entries)
        assert result.matches == []
        assert result.exact_url is None

    def test_duplicate_titles_match_independently(self):
        dupes = [
            BookmarkEntry("Docs", "https://a.example", 0),
            BookmarkEntry("Docs", "https://b.example", 1),
        ]
        result = route("docs", dupes)
        assert len(result.matches) == 2
        assert result.exact_url == "https://a.example"

    def test_category_counts(self, entries):
        result = route("g", entries)
        assert category_counts(result.matches) == {0: 2, 1: 1}


class TestDecide:
    """Test the submit policy."""

    def test_exact_navigates(self, entries):
        nav = decide(route("go", entries), "go")
        assert nav.kind == "bookmark"
        assert nav.url == "https://go.dev"

    def test_single_prefix_searches_by_default(self, entries):
        nav = decide(route("goo", entries), "goo")
        assert nav.kind == "search"
        assert nav.url == "https://duckduckgo.com/?q=goo"

    def test_single_prefix_navigates_when_enabled(self, entries):
        nav = decide(route("goo", entries), "goo", single_prefix_match_navigates=True)
        assert nav.kind == "bookmark"
        assert nav.url == "https://www.google.com"

    def test_multiple_prefix_matches_search_even_when_enabled(self, entries):
        nav = decide(route("g", entries), "g", single_prefix_match_navigates=True)
        assert nav.kind == "search"

    def test_empty_query_has_no_navigation(self, entries):
        assert decide(route("", entries), "  ") is None

    def test_custom_engine(self, entries):
        nav = decide(route("zzz", entries), "zzz", engine_url="https://example.com/s?q=")
        assert nav.url == "https://example.com/s?q=zzz"


class TestHelpers:
    """Test URL building and category flattening."""

    def test_search_url_encoding(self):
        assert search_url("c++ tips") == "https://duckduckgo.com/?q=c%2B%2B%20tips"
        assert search_url("a&b=c/d") == "https://duckduckgo.com/?q=a%26b%3Dc%2Fd"
        assert search_url("it's (ok)!") == "https://duckduckgo.com/?q=it's%20(ok)!"

    def test_flatten_mappings(self):
        categories = [
            {"title": "Dev", "icon": "code", "links": [
                {"title": " GitHub ", "url": "https://github.com", "icon": "github"},
                {"title": "", "url": "https://untitled.example"},
            ]},
            {"title": "Empty", "links": []},
            {"title": "Misc", "links": [{"title": "No URL"}]},
        ]
        entries = flatten_categories(categories)
        assert entries == [
            BookmarkEntry("GitHub", "https://github.com", 0),
            BookmarkEntry("Link", "https://untitled.example", 0),
            BookmarkEntry("No URL", "#", 2),
        ]

    def test_flatten_config_models(self):
        categories = [CategoryConfig(title="Dev", links=[LinkConfig(title="NPM", url="https://www.npmjs.com")])]
        assert flatten_categories(categories) == [BookmarkEntry("NPM", "https://www.npmjs.com", 0)]
