#!/usr/bin/env python3
"""
Main CLI for the start page.

Usage:
    sp calc "2+3*4"          - Evaluate an expression
    sp go "query"            - Resolve where the command bar would navigate
    sp bookmarks [query]     - List bookmarks, highlighting prefix matches
    sp shell                 - Interactive command bar with result chaining
    sp carousel next next    - Step the category carousel
    sp weather               - Show current weather
    sp tasks                 - Show open tasks
    sp clock                 - Show the current time
    sp config init|show      - Manage settings
"""

import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

import click
import httpx
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.carousel import CarouselController, Geometry
from ..core.command_bar import CommandBarSession
from ..core.config import Config
from ..core.evaluator import evaluate, format_number
from ..core.models import BookmarkEntry
from ..core.projection import RenderPlan
from ..core.router import flatten_categories
from ..widgets.tasks import NO_TASKS, TaskList, fetch_tasks, format_due_label
from ..widgets.weather import WeatherReport, fetch_weather

console = Console()

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def setup_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level="DEBUG" if verbose else "WARNING")


def load_config(config_path: Optional[str]) -> Config:
    """Load settings, seeding default categories when there are none."""
    try:
        config = Config.load(Path(config_path) if config_path else None)
    except FileNotFoundError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{e}")
        sys.exit(1)
    config.ensure_categories(Path(config_path) if config_path else None)
    return config


def make_session(config: Config) -> CommandBarSession:
    return CommandBarSession(
        flatten_categories(config.categories),
        config.search,
        category_ids=range(len(config.categories)),
    )


@click.group()
@click.option("--config", "-c", "config_path", type=click.Path(), help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging to stderr")
@click.pass_context
def cli(ctx, config_path: Optional[str], verbose: bool):
    """Start page command bar and carousel."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


def _config(ctx) -> Config:
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_config(ctx.obj.get("config_path"))
    return ctx.obj["config"]


@cli.command()
@click.argument("expression", nargs=-1, required=True)
@click.option("--last", type=float, default=None, help="Previous result to chain from")
def calc(expression: Tuple[str, ...], last: Optional[float]):
    """Evaluate an arithmetic expression."""
    result = evaluate(" ".join(expression), last)
    if not result.evaluated:
        console.print("[yellow]Not an expression[/yellow]")
        sys.exit(1)
    console.print(format_number(result.value))


@cli.command()
@click.argument("query", nargs=-1, required=True)
@click.pass_context
def go(ctx, query: Tuple[str, ...]):
    """Show where submitting QUERY would navigate."""
    outcome = make_session(_config(ctx)).on_submit(" ".join(query))
    if outcome.kind == "display":
        console.print(outcome.display_text)
    elif outcome.kind == "navigate":
        console.print(f"[magenta]{outcome.navigation.kind}[/magenta] {outcome.navigation.url}")


@cli.command()
@click.argument("query", nargs=-1)
@click.pass_context
def bookmarks(ctx, query: Tuple[str, ...]):
    """List bookmarks; with QUERY, only categories holding prefix matches."""
    config = _config(ctx)
    session = make_session(config)
    update = session.on_input(" ".join(query))
    display_bookmarks(config, session.entries, update.plan)


def display_bookmarks(config: Config, entries: List[BookmarkEntry], plan: RenderPlan) -> None:
    """Render the plan as a table, one row per visible link."""
    highlights = {i.entry: i for i in plan.of_kind("highlight")}
    marked = {i.category_id for i in plan.of_kind("mark")}

    if plan.searching and not marked:
        console.print("[yellow]No matching bookmarks[/yellow]")
        return

    table = Table(title="Bookmarks")
    table.add_column("Category", style="cyan")
    table.add_column("Title", no_wrap=False)
    table.add_column("URL", style="dim")

    for entry in entries:
        if plan.searching and entry.category_id not in marked:
            continue
        title = Text(entry.title)
        match = highlights.get(entry)
        if match is not None:
            title = Text.assemble((match.matched, "bold green"), match.rest)
        elif plan.searching:
            title.stylize("dim")
        table.add_row(config.categories[entry.category_id].title or "Category", title, entry.url)

    console.print(table)


@cli.command()
@click.pass_context
def shell(ctx):
    """Interactive command bar. Empty line or Ctrl-D exits."""
    session = make_session(_config(ctx))
    console.print("[dim]Type an expression or a query; results chain with + - * /[/dim]")
    while True:
        try:
            text = click.prompt(">", default="", show_default=False, prompt_suffix=" ")
        except (EOFError, click.Abort):
            break
        if not text.strip():
            break

        live = session.on_input(text)
        counts = len(live.plan.of_kind("mark"))
        outcome = session.on_submit(text)
        if outcome.kind == "display":
            console.print(f"= [bold]{outcome.display_text}[/bold]")
        elif outcome.kind == "navigate":
            console.print(
                f"[magenta]{outcome.navigation.kind}[/magenta] {outcome.navigation.url} "
                f"[dim]({len(live.route.matches)} matches in {counts} categories)[/dim]"
            )


@cli.command()
@click.argument("moves", nargs=-1)
@click.option("--items", default=8, help="Number of cards")
@click.option("--pitch", default=320.0, help="Card width plus gap in px")
@click.option("--viewport", default=1280.0, help="Visible width in px")
@click.option("--content", default=None, type=float, help="Scrollable width in px (default items*pitch)")
@click.option("--offset", default=0.0, help="Starting scroll offset in px")
@click.pass_context
def carousel(ctx, moves: Tuple[str, ...], items: int, pitch: float, viewport: float,
             content: Optional[float], offset: float):
    """
    Replay carousel input.

    MOVES are next, prev, ArrowLeft, ArrowRight, drag:<dx>, wheel:<dx>:<dy>
    or goto:<index>. Wheel moves are not debounced here.
    """
    config = _config(ctx)
    geometry = Geometry(
        item_count=items,
        pitch=pitch,
        viewport_extent=viewport,
        content_extent=content if content is not None else items * pitch,
        scroll_offset=offset,
    )
    controller = CarouselController(geometry, config.carousel)

    for move in moves:
        try:
            command = apply_move(controller, move)
        except ValueError:
            console.print(f"[red]Unknown move:[/red] {move}")
            sys.exit(2)
        controller.wheel_gate.release()
        if command is None:
            console.print(f"{move:>14}  [dim]no movement[/dim]")
        else:
            console.print(f"{move:>14}  index {command.index}  offset {command.offset:g}px")


def apply_move(controller: CarouselController, move: str):
    name, _, args = move.partition(":")
    if name == "next":
        return controller.scroll_by_one(1)
    if name == "prev":
        return controller.scroll_by_one(-1)
    if name in ("ArrowLeft", "ArrowRight"):
        return controller.on_key(name)
    if name == "drag":
        return controller.on_drag_end(float(args))
    if name == "wheel":
        dx, _, dy = args.partition(":")
        return controller.on_wheel(float(dx), float(dy or 0))
    if name == "goto":
        return controller.go_to(int(args))
    raise ValueError(move)


@cli.command()
@click.pass_context
def weather(ctx):
    """Show current weather."""
    report = asyncio.run(_get_weather(_config(ctx)))
    if isinstance(report, str):
        console.print(f"[yellow]{report}[/yellow]")
        return
    display_weather(report)


async def _get_weather(config: Config):
    async with httpx.AsyncClient() as client:
        return await fetch_weather(config.weather, client)


def display_weather(report: WeatherReport) -> None:
    console.print(f"[bold]{report.temperature_label}[/bold] {report.description} [dim]({report.icon})[/dim]")
    console.print(f"  {report.feels_like_label}  ·  {report.wind_label}")


@cli.command()
@click.pass_context
def tasks(ctx):
    """Show open tasks, soonest first."""
    result = asyncio.run(_get_tasks(_config(ctx)))
    if isinstance(result, str):
        console.print(f"[yellow]{result}[/yellow]")
        return
    display_tasks(result)


async def _get_tasks(config: Config):
    async with httpx.AsyncClient() as client:
        return await fetch_tasks(config.tasks.token, client)


def display_tasks(task_list: TaskList) -> None:
    if not task_list.items:
        console.print(f"[green]{NO_TASKS}[/green]")
        return

    table = Table(title=task_list.label)
    table.add_column("Task", no_wrap=False)
    table.add_column("Due", style="magenta")
    for item in task_list.items:
        table.add_row(item.content, format_due_label(item.due))
    console.print(table)


@cli.command()
@click.pass_context
def clock(ctx):
    """Show the current time, 12 or 24 hour per settings."""
    console.print(format_clock(datetime.now(), _config(ctx).clock_12h))


def format_clock(now: datetime, twelve_hour: bool) -> str:
    return now.strftime("%I:%M:%S %p" if twelve_hour else "%H:%M:%S")


@cli.group(name="config")
def config_group():
    """Manage start page settings."""
    pass


@config_group.command(name="init")
@click.argument("path", type=click.Path(), default="startpage.yaml")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path: str, force: bool):
    """Write a settings file with the default categories."""
    target = Path(path)
    if target.exists() and not force:
        console.print(f"[red]{target} already exists[/red] (use --force)")
        sys.exit(1)
    config = Config()
    config.ensure_categories()
    config.save(target)
    console.print(f"[green]✓[/green] Wrote {target}")


@config_group.command(name="show")
@click.pass_context
def config_show(ctx):
    """Print the effective settings."""
    config = _config(ctx)
    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("clock_12h", str(config.clock_12h))
    table.add_row("search.single_prefix_match_navigates", str(config.search.single_prefix_match_navigates))
    table.add_row("search.engine_url", config.search.engine_url)
    table.add_row("carousel.visible_count", str(config.carousel.visible_count))
    table.add_row("carousel.wheel_debounce_ms", str(config.carousel.wheel_debounce_ms))
    table.add_row("weather", "configured" if config.weather.configured else "not configured")
    table.add_row("tasks", "configured" if config.tasks.token else "not configured")
    table.add_row("categories", ", ".join(c.title or "Category" for c in config.categories))
    console.print(table)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
