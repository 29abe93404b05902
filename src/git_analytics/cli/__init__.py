"""CLI entry point: the typer app and its registered subcommands."""

from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..logging_config import setup_logging

app = typer.Typer(
    name="git-analytics",
    help="git-analytics - hotspots, ownership, coupling and activity from git history",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        print(f"git-analytics {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-r",
        help="Path to the git repository",
        file_okay=False,
        dir_okay=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs here"),
    record: bool = typer.Option(
        True, "--record/--no-record", help="Remember this repository in the recent list"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """
    Mine a repository's commit history for change analytics.

    [bold cyan]Examples:[/bold cyan]

      git-analytics hotspots --last 90d

      git-analytics --repo ../service coupling -x "vendor/*" --json

      git-analytics heatmap --from 2025-01-01 --to 2025-04-01
    """
    setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)
    ctx.ensure_object(dict)
    ctx.obj.update({"repo": repo, "config": config, "record": record})


# Import subcommands to register them
from .activity import heatmap as _heatmap, hours as _hours, info as _info, stats as _stats  # noqa: F401, E402
from .metrics import contributors as _contributors, coupling as _coupling  # noqa: F401, E402
from .metrics import hotspots as _hotspots, ownership as _ownership, temporal as _temporal  # noqa: F401, E402
from .recent import recent as _recent  # noqa: F401, E402
