"""Shared CLI helpers: window presets, engine setup, error reporting, output."""

from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import load_config
from ..exceptions import Cancelled, GitAnalyticsError
from ..logging_config import get_logger
from ..query import QueryEngine
from ..recent import RecentRepos
from ..serializers import to_jsonable

console = Console()
logger = get_logger(__name__)

# Preset name -> days back from today; None means all history.
PRESETS: dict[str, Optional[int]] = {
    "30d": 30,
    "90d": 90,
    "6mo": 182,
    "1yr": 365,
    "all": None,
}
DEFAULT_PRESET = "6mo"
EPOCH = date(1970, 1, 1)

FROM_OPTION = typer.Option(None, "--from", help="Window start, YYYY-MM-DD (inclusive)")
TO_OPTION = typer.Option(None, "--to", help="Window end, YYYY-MM-DD (exclusive)")
LAST_OPTION = typer.Option(
    None, "--last", "-l", help="Preset window: 30d, 90d, 6mo, 1yr or all"
)
EXCLUDE_OPTION = typer.Option(
    None, "--exclude", "-x", help="Glob or substring to exclude (repeatable)"
)
TOP_OPTION = typer.Option(20, "--top", "-t", help="Number of rows to show", min=1, max=100000)
JSON_OPTION = typer.Option(False, "--json", help="Output in machine-readable JSON format")


def resolve_window(
    start: Optional[str], end: Optional[str], last: Optional[str], today: Optional[date] = None
) -> tuple[str, str]:
    """Turn CLI window options into ISO ``from``/``to`` strings.

    Explicit dates win over a preset; ``to`` defaults to tomorrow so today's
    commits are included.
    """
    today = today or date.today()
    tomorrow = (today + timedelta(days=1)).isoformat()
    if start or end:
        return start or EPOCH.isoformat(), end or tomorrow

    preset = (last or DEFAULT_PRESET).lower()
    if preset not in PRESETS:
        raise typer.BadParameter(
            f"unknown preset {last!r}, choose from {', '.join(PRESETS)}", param_hint="--last"
        )
    days = PRESETS[preset]
    if days is None:
        return EPOCH.isoformat(), tomorrow
    return (today - timedelta(days=days)).isoformat(), tomorrow


def engine_from_context(ctx: typer.Context) -> QueryEngine:
    obj = ctx.obj or {}
    config = load_config(config_file=obj.get("config"))
    return QueryEngine(config)


def repo_from_context(ctx: typer.Context) -> Path:
    obj = ctx.obj or {}
    return Path(obj.get("repo") or Path.cwd())


def remember(ctx: typer.Context) -> None:
    """Record the repository in the recent list; failures only log."""
    obj = ctx.obj or {}
    if not obj.get("record", True):
        return
    repo = repo_from_context(ctx).resolve()
    try:
        recent = RecentRepos.load()
        recent.add(str(repo), repo.name)
        recent.save()
    except OSError as e:
        logger.warning("Could not update recent repositories: %s", e)


@contextmanager
def handle_errors(json_output: bool = False) -> Iterator[None]:
    """Report engine errors and exit non-zero; cancellation exits quietly."""
    try:
        yield
    except (Cancelled, KeyboardInterrupt):
        raise typer.Exit(130)
    except GitAnalyticsError as e:
        if json_output:
            print(json.dumps(e.to_json(), indent=2))
        else:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def print_json(result: Any) -> None:
    print(json.dumps(to_jsonable(result), indent=2))


def render_table(
    title: str, columns: Sequence[tuple[str, str, str]], rows: Sequence[Sequence[Any]]
) -> None:
    """Print a rich table; columns are ``(header, style, justify)``."""
    table = Table(title=title, show_lines=False, pad_edge=True)
    for header, style, justify in columns:
        table.add_column(header, style=style or None, justify=justify)  # type: ignore[arg-type]
    for row in rows:
        table.add_row(*(escape(str(cell)) for cell in row))
    console.print()
    console.print(table)
    console.print()


def pct(value: float) -> str:
    return f"{value * 100:.1f}%"
