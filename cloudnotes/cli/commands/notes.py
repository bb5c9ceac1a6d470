"""
Note Commands.

Commands for the caller's active notes and todos.
"""

from pathlib import Path

import typer

from cloudnotes.cli.commands.common import execute
from cloudnotes.cli.state import Page

app = typer.Typer(help="Notes and todos")

REFRESH = ("refresh", {})


@app.command("list")
def list_notes(
    todo: bool = typer.Option(False, "--todo", "-t", help="Show the todo view"),
) -> None:
    """
    List active notes, newest first.

    Examples:
        cli.py notes list
        cli.py notes list --todo
    """
    execute([REFRESH], page=Page.TODO if todo else Page.NOTES)


@app.command()
def add(text: str = typer.Argument("", help="Note text")) -> None:
    """
    Create a note.

    Examples:
        cli.py notes add "call the bank"
    """
    execute([("create", {"text": text, "todo": False}), REFRESH])


@app.command()
def todo(text: str = typer.Argument(..., help="Todo text")) -> None:
    """
    Create a todo.

    Examples:
        cli.py notes todo "buy milk"
    """
    execute([("create", {"text": text, "todo": True}), REFRESH], page=Page.TODO)


@app.command()
def show(note_id: str = typer.Argument(..., help="Note id")) -> None:
    """Show one note in full, with its attachment link."""
    execute([REFRESH, ("select", {"note_id": note_id})])


@app.command()
def edit(
    note_id: str = typer.Argument(..., help="Note id"),
    text: str = typer.Argument(..., help="New text; empty moves the note to the trash"),
) -> None:
    """
    Replace a note's text.

    Examples:
        cli.py notes edit 2f1c... "call the bank at 10"
    """
    execute([("edit", {"note_id": note_id, "text": text}), REFRESH])


@app.command()
def done(note_id: str = typer.Argument(..., help="Todo id")) -> None:
    """Toggle the done flag of a todo."""
    execute([REFRESH, ("toggle", {"note_id": note_id})], page=Page.TODO)


@app.command("rm")
def remove(note_id: str = typer.Argument(..., help="Note id")) -> None:
    """Move a note to the trash."""
    execute([("delete", {"note_id": note_id}), REFRESH])


@app.command()
def attach(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to upload"),
) -> None:
    """
    Upload a file and create a note linking to it.

    Examples:
        cli.py notes attach ~/receipts/march.pdf
    """
    execute([("import", {"path": str(path)}), REFRESH])
