"""File-level metric commands: hotspots, temporal, ownership, contributors, coupling."""

from typing import List, Optional

import typer

from . import app
from ._common import (
    EXCLUDE_OPTION,
    FROM_OPTION,
    JSON_OPTION,
    LAST_OPTION,
    TO_OPTION,
    TOP_OPTION,
    engine_from_context,
    handle_errors,
    pct,
    print_json,
    remember,
    render_table,
    repo_from_context,
    resolve_window,
)


@app.command()
def hotspots(
    ctx: typer.Context,
    start: Optional[str] = FROM_OPTION,
    end: Optional[str] = TO_OPTION,
    last: Optional[str] = LAST_OPTION,
    exclude: Optional[List[str]] = EXCLUDE_OPTION,
    top: int = TOP_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Files with the most lines changed in the window.

    [bold cyan]Examples:[/bold cyan]

      git-analytics hotspots --last 30d -x "*.lock"
    """
    since, until = resolve_window(start, end, last)
    with handle_errors(json_output):
        engine = engine_from_context(ctx)
        result = engine.hotspots(repo_from_context(ctx), since, until, exclude, limit=top)
    remember(ctx)

    if json_output:
        print_json(result)
        return
    render_table(
        f"File Hotspots ({since} to {until})",
        [
            ("Path", "cyan", "left"),
            ("Lines", "bold", "right"),
            ("+", "green", "right"),
            ("-", "red", "right"),
            ("Commits", "", "right"),
        ],
        [(h.path, h.lines_changed, h.additions, h.deletions, h.commits) for h in result],
    )


@app.command()
def temporal(
    ctx: typer.Context,
    start: Optional[str] = FROM_OPTION,
    end: Optional[str] = TO_OPTION,
    last: Optional[str] = LAST_OPTION,
    exclude: Optional[List[str]] = EXCLUDE_OPTION,
    top: int = TOP_OPTION,
    half_life: Optional[float] = typer.Option(
        None, "--half-life", help="Decay half-life in days (default from config)", min=0.1
    ),
    json_output: bool = JSON_OPTION,
):
    """
    Files that are hot right now: churn weighted by how recently it happened.
    """
    since, until = resolve_window(start, end, last)
    with handle_errors(json_output):
        engine = engine_from_context(ctx)
        result = engine.temporal_hotspots(
            repo_from_context(ctx), since, until, exclude, limit=top, half_life_days=half_life
        )
    remember(ctx)

    if json_output:
        print_json(result)
        return
    render_table(
        f"Temporal Hotspots ({since} to {until})",
        [
            ("Path", "cyan", "left"),
            ("Score", "bold yellow", "right"),
            ("Lines", "", "right"),
            ("Commits", "", "right"),
            ("Last changed", "green", "left"),
            ("Days ago", "dim", "right"),
        ],
        [
            (h.path, f"{h.score:.1f}", h.lines_changed, h.commits, h.last_changed, h.days_since)
            for h in result
        ],
    )


@app.command()
def ownership(
    ctx: typer.Context,
    start: Optional[str] = FROM_OPTION,
    end: Optional[str] = TO_OPTION,
    last: Optional[str] = LAST_OPTION,
    exclude: Optional[List[str]] = EXCLUDE_OPTION,
    top: int = TOP_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Who owns each file, by net lines contributed.
    """
    since, until = resolve_window(start, end, last)
    with handle_errors(json_output):
        engine = engine_from_context(ctx)
        result = engine.ownership(repo_from_context(ctx), since, until, exclude, limit=top)
    remember(ctx)

    if json_output:
        print_json(result)
        return
    render_table(
        f"File Ownership ({since} to {until})",
        [
            ("Path", "cyan", "left"),
            ("Top author", "bold", "left"),
            ("Share", "yellow", "right"),
            ("Second author", "", "left"),
            ("Share", "", "right"),
            ("Authors", "dim", "right"),
            ("Net lines", "dim", "right"),
        ],
        [
            (
                o.path,
                o.top_author_name,
                pct(o.top_author_pct),
                o.second_author_name or "-",
                pct(o.second_author_pct) if o.second_author_email else "-",
                o.contributor_count,
                o.total_lines,
            )
            for o in result
        ],
    )


@app.command()
def contributors(
    ctx: typer.Context,
    start: Optional[str] = FROM_OPTION,
    end: Optional[str] = TO_OPTION,
    last: Optional[str] = LAST_OPTION,
    exclude: Optional[List[str]] = EXCLUDE_OPTION,
    top: int = TOP_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Contributor leaderboard by commits.
    """
    since, until = resolve_window(start, end, last)
    with handle_errors(json_output):
        engine = engine_from_context(ctx)
        result = engine.contributors(repo_from_context(ctx), since, until, exclude, limit=top)
    remember(ctx)

    if json_output:
        print_json(result)
        return
    render_table(
        f"Contributors ({since} to {until})",
        [
            ("Author", "bold", "left"),
            ("Email", "dim", "left"),
            ("Commits", "cyan", "right"),
            ("+", "green", "right"),
            ("-", "red", "right"),
        ],
        [(c.author_name, c.author_email, c.commits, c.additions, c.deletions) for c in result],
    )


@app.command()
def coupling(
    ctx: typer.Context,
    start: Optional[str] = FROM_OPTION,
    end: Optional[str] = TO_OPTION,
    last: Optional[str] = LAST_OPTION,
    exclude: Optional[List[str]] = EXCLUDE_OPTION,
    top: int = TOP_OPTION,
    min_count: Optional[int] = typer.Option(
        None, "--min-count", help="Minimum shared commits (default from config)", min=1
    ),
    max_files: Optional[int] = typer.Option(
        None, "--max-files", help="Skip commits touching more files than this", min=2
    ),
    json_output: bool = JSON_OPTION,
):
    """
    File pairs that keep changing in the same commits.
    """
    since, until = resolve_window(start, end, last)
    with handle_errors(json_output):
        engine = engine_from_context(ctx)
        result = engine.coupling(
            repo_from_context(ctx),
            since,
            until,
            exclude,
            limit=top,
            min_count=min_count,
            pairwise_cap=max_files,
        )
    remember(ctx)

    if json_output:
        print_json(result)
        return
    render_table(
        f"Co-change Coupling ({since} to {until})",
        [
            ("File A", "cyan", "left"),
            ("File B", "cyan", "left"),
            ("Ratio", "bold yellow", "right"),
            ("Together", "", "right"),
            ("Commits A", "dim", "right"),
            ("Commits B", "dim", "right"),
        ],
        [
            (p.file_a, p.file_b, pct(p.coupling_ratio), p.co_change_count, p.commits_a, p.commits_b)
            for p in result
        ],
    )
