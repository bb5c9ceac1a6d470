"""
Trash Commands.

Commands for restoring and permanently deleting trashed notes.
"""

import typer

from cloudnotes.cli.commands.common import execute
from cloudnotes.cli.state import Page

app = typer.Typer(help="Trash")

REFRESH = ("refresh", {})


@app.command("list")
def list_trash() -> None:
    """List trashed notes, most recently deleted first."""
    execute([REFRESH], page=Page.TRASH)


@app.command()
def restore(trash_id: str = typer.Argument(..., help="Trash entry id")) -> None:
    """Move a trashed note back to the active notes. It gets a new id."""
    execute([("restore", {"trash_id": trash_id}), REFRESH], page=Page.TRASH)


@app.command("rm")
def remove(
    trash_id: str = typer.Argument(..., help="Trash entry id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a trashed note permanently."""
    if not yes:
        typer.confirm("Permanently delete?", abort=True)
    execute([("purge", {"trash_id": trash_id}), REFRESH], page=Page.TRASH)


@app.command()
def empty(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every trashed note permanently."""
    if not yes:
        typer.confirm("Permanently delete everything in the trash?", abort=True)
    execute([("empty", {}), REFRESH], page=Page.TRASH)
