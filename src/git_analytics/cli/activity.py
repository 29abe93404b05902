"""Repository-level commands: info, stats, heatmap, hours."""

from typing import List, Optional

import typer
from rich.markup import escape

from . import app
from ._common import (
    EXCLUDE_OPTION,
    FROM_OPTION,
    JSON_OPTION,
    LAST_OPTION,
    TO_OPTION,
    console,
    engine_from_context,
    handle_errors,
    print_json,
    remember,
    render_table,
    repo_from_context,
    resolve_window,
)

AUTHOR_OPTION = typer.Option(None, "--author", "-a", help="Only count commits by this email")
BAR_WIDTH = 40


def _bar(count: int, peak: int) -> str:
    if peak <= 0 or count <= 0:
        return ""
    return "#" * max(1, round(count / peak * BAR_WIDTH))


@app.command()
def info(
    ctx: typer.Context,
    json_output: bool = JSON_OPTION,
):
    """
    Repository name, branch, HEAD and the latest commit.
    """
    with handle_errors(json_output):
        engine = engine_from_context(ctx)
        result = engine.repo_info(repo_from_context(ctx))
    remember(ctx)

    if json_output:
        print_json(result)
        return

    console.print()
    console.print(f"[bold cyan]{escape(result.name)}[/bold cyan]")
    console.print(f"  Branch: [green]{escape(result.branch)}[/green]")
    console.print(f"  HEAD:   {result.head_hash or '-'}")
    if result.last_author:
        console.print(
            f"  Last:   {escape(result.last_message)} "
            f"[dim]({escape(result.last_author)}, {result.last_commit_age})[/dim]"
        )
    else:
        console.print("  [dim]No commits yet[/dim]")
    console.print()


@app.command()
def stats(
    ctx: typer.Context,
    start: Optional[str] = FROM_OPTION,
    end: Optional[str] = TO_OPTION,
    last: Optional[str] = LAST_OPTION,
    exclude: Optional[List[str]] = EXCLUDE_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Summary totals for the window: commits, contributors, lines, files.
    """
    since, until = resolve_window(start, end, last)
    with handle_errors(json_output):
        engine = engine_from_context(ctx)
        result = engine.dashboard(repo_from_context(ctx), since, until, exclude)
    remember(ctx)

    if json_output:
        print_json(result)
        return
    render_table(
        f"Summary ({since} to {until})",
        [("Metric", "cyan", "left"), ("Value", "bold", "right")],
        [
            ("Commits", result.commits),
            ("Contributors", result.contributors),
            ("Lines added", f"+{result.additions}"),
            ("Lines removed", f"-{result.deletions}"),
            ("Files changed", result.files_changed),
        ],
    )


@app.command()
def heatmap(
    ctx: typer.Context,
    start: Optional[str] = FROM_OPTION,
    end: Optional[str] = TO_OPTION,
    last: Optional[str] = LAST_OPTION,
    author: Optional[str] = AUTHOR_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Commits per day (UTC), one row per day including quiet ones.
    """
    since, until = resolve_window(start, end, last)
    with handle_errors(json_output):
        engine = engine_from_context(ctx)
        result = engine.heatmap(repo_from_context(ctx), since, until, author_email=author)
    remember(ctx)

    if json_output:
        print_json(result)
        return
    active = [d for d in result if d.count]
    peak = max((d.count for d in result), default=0)
    render_table(
        f"Daily Activity ({since} to {until})",
        [("Date", "cyan", "left"), ("Commits", "bold", "right"), ("", "green", "left")],
        [(d.date, d.count, _bar(d.count, peak)) for d in active],
    )
    console.print(f"[dim]{len(active)} active of {len(result)} days[/dim]")


@app.command()
def hours(
    ctx: typer.Context,
    start: Optional[str] = FROM_OPTION,
    end: Optional[str] = TO_OPTION,
    last: Optional[str] = LAST_OPTION,
    author: Optional[str] = AUTHOR_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Commits by hour of day (UTC).
    """
    since, until = resolve_window(start, end, last)
    with handle_errors(json_output):
        engine = engine_from_context(ctx)
        result = engine.hours(repo_from_context(ctx), since, until, author_email=author)
    remember(ctx)

    if json_output:
        print_json(result)
        return
    peak = max((b.count for b in result), default=0)
    render_table(
        f"Commits by Hour, UTC ({since} to {until})",
        [("Hour", "cyan", "right"), ("Commits", "bold", "right"), ("", "green", "left")],
        [(f"{b.hour:02d}:00", b.count, _bar(b.count, peak)) for b in result],
    )
