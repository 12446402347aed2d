"""Tests for the sp command line."""

import sys
from datetime import datetime

import pytest
import yaml
from click.testing import CliRunner
from loguru import logger

from startpage.cli.sp import cli, format_clock, make_session
from startpage.core.config import Config


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "startpage.yaml"
    path.write_text(yaml.safe_dump({
        "categories": [
            {"title": "Search", "links": [
                {"title": "Go", "url": "https://go.dev"},
                {"title": "Google", "url": "https://www.google.com"},
            ]},
            {"title": "Dev", "links": [
                {"title": "GitHub", "url": "https://github.com"},
            ]},
            {"title": "Shopping", "links": [
                {"title": "Amazon", "url": "https://www.amazon.com"},
            ]},
        ],
    }))
    return path


def test_calc(runner):
    result = runner.invoke(cli, ["calc", "2+3*4"])
    assert result.exit_code == 0
    assert result.output.strip() == "14"


def test_calc_chaining(runner):
    result = runner.invoke(cli, ["calc", "--last", "10", "+8"])
    assert result.output.strip() == "18"


def test_calc_rejects_text(runner):
    result = runner.invoke(cli, ["calc", "hello"])
    assert result.exit_code == 1
    assert "Not an expression" in result.output


def test_go_exact(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "go", "go"])
    assert result.exit_code == 0
    assert "bookmark https://go.dev" in result.output


def test_go_search(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "go", "goo"])
    assert "search https://duckduckgo.com/?q=goo" in result.output


def test_go_missing_config(runner, tmp_path):
    result = runner.invoke(cli, ["-c", str(tmp_path / "missing.yaml"), "go", "x"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_bookmarks_filtered(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "bookmarks", "g"])
    assert result.exit_code == 0
    assert "GitHub" in result.output
    assert "Google" in result.output
    assert "Amazon" not in result.output


def test_bookmarks_no_match(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "bookmarks", "zzz"])
    assert "No matching bookmarks" in result.output


def test_shell_chains_results(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "shell"], input="2+3\n*4\ngo\n\n")
    assert result.exit_code == 0
    assert "= 5" in result.output
    assert "= 20" in result.output
    assert "bookmark https://go.dev" in result.output


def test_carousel(runner, config_file):
    result = runner.invoke(cli, [
        "-c", str(config_file), "carousel",
        "--items", "8", "--pitch", "320", "--viewport", "1280",
        "next", "next", "prev", "drag:-100", "goto:99", "ArrowRight",
    ])
    assert result.exit_code == 0
    lines = [line.split() for line in result.output.strip().splitlines()]
    assert [line[2] for line in lines] == ["1", "2", "1", "2", "4", "4"]
    assert lines[-1][-1] == "1280px"


def test_carousel_unknown_move(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "carousel", "jump"])
    assert result.exit_code == 2
    assert "Unknown move" in result.output


def test_weather_not_configured(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "weather"])
    assert "Configure in settings" in result.output


def test_tasks_not_configured(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "tasks"])
    assert "Configure in settings" in result.output


def test_config_init(runner, tmp_path):
    target = tmp_path / "sp.yaml"
    result = runner.invoke(cli, ["config", "init", str(target)])
    assert result.exit_code == 0
    assert len(Config.load(target).categories) == 4

    again = runner.invoke(cli, ["config", "init", str(target)])
    assert again.exit_code == 1

    forced = runner.invoke(cli, ["config", "init", str(target), "--force"])
    assert forced.exit_code == 0


def test_config_show(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "config", "show"])
    assert result.exit_code == 0
    assert "Search, Dev, Shopping" in result.output


def test_numeric_bookmark_title(runner, tmp_path):
    path = tmp_path / "numeric.yaml"
    path.write_text("categories:\n  - title: Games\n    links:\n      - title: 2048\n        url: https://play2048.co\n")
    result = runner.invoke(cli, ["-c", str(path), "bookmarks", "20"])
    assert result.exit_code == 0
    assert "2048" in result.output
    assert "Games" in result.output


def test_make_session_knows_empty_categories():
    config = Config(categories=[
        {"title": "Dev", "links": [{"title": "GitHub", "url": "https://github.com"}]},
        {"title": "Later"},
    ])
    update = make_session(config).on_input("zzz")
    assert {i.category_id for i in update.plan.of_kind("hide")} == {0, 1}


def test_format_clock():
    now = datetime(2024, 1, 5, 14, 5, 9)
    assert format_clock(now, twelve_hour=False) == "14:05:09"
    assert format_clock(now, twelve_hour=True) == "02:05:09 PM"


def test_clock(runner, config_file):
    result = runner.invoke(cli, ["-c", str(config_file), "clock"])
    assert result.exit_code == 0
    assert len(result.output.strip().split(":")) == 3
