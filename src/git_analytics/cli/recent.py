"""List or prune the recently analysed repositories."""

from typing import Optional

import typer

from . import app
from ._common import JSON_OPTION, console, print_json, render_table
from ..recent import RecentRepos


@app.command()
def recent(
    remove: Optional[str] = typer.Option(
        None, "--remove", help="Forget this repository path"
    ),
    json_output: bool = JSON_OPTION,
):
    """
    Repositories analysed recently, newest first.
    """
    store = RecentRepos.load()
    if remove:
        store.remove(remove)
        store.save()
        console.print(f"Removed {remove}")
        return

    entries = store.existing()
    if json_output:
        print_json(entries)
        return
    if not entries:
        console.print("[dim]No recent repositories[/dim]")
        return
    render_table(
        "Recent Repositories",
        [("Name", "bold cyan", "left"), ("Path", "", "left"), ("Opened", "dim", "left")],
        [(r.name, r.path, r.opened_at[:19].replace("T", " ")) for r in entries],
    )
