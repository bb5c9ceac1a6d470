"""
Terminal Views.

Rich renderables built from a UIState snapshot. `render(state)` is the only
entry point the shell and commands use; it picks the view for the current
page.
"""

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cloudnotes.cli.state import (
    Page,
    UIState,
    notes_view,
    selected_note,
    todo_view,
    trash_view,
)

PREVIEW_LENGTH = 120


def _preview(text: str) -> str:
    text = text.replace("\n", " ")
    if not text:
        return "Untitled"
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH - 1] + "…"
    return text


def _signed_out() -> RenderableType:
    return Panel("[dim]Sign in to view your notes (set CLOUDNOTES_TOKEN or pass --token)[/dim]")


def render_notes(state: UIState) -> RenderableType:
    table = Table(title="Simple Notes", show_header=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Note")
    table.add_column("Attachment", style="cyan")
    table.add_column("Updated", style="dim")

    for note in notes_view(state):
        marker = "[bold]>[/bold] " if note.id == state.selected_id else ""
        attachment = f"📎 {note.attachment['name']}" if note.attachment else ""
        table.add_row(note.id, marker + _preview(note.text), attachment, note.updated_at)

    selected = selected_note(state)
    if selected is None:
        return table

    detail = Text(selected.text or "")
    if selected.attachment:
        detail.append(f"\n\n📎 {selected.attachment['name']}  {selected.attachment['url']}", style="cyan")
    return Group(table, Panel(detail, title=f"Note {selected.id}"))


def render_todos(state: UIState) -> RenderableType:
    table = Table(title="To-Do List", show_header=True)
    table.add_column("", width=3)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Todo")

    for note in todo_view(state):
        box = "[green]✓[/green]" if note.done else "☐"
        label = f"[dim strike]{note.label}[/dim strike]" if note.done else note.label
        table.add_row(box, note.id, label)

    return table


def render_trash(state: UIState) -> RenderableType:
    table = Table(title="Trash", show_header=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Note")
    table.add_column("Deleted", style="dim")

    for item in trash_view(state):
        table.add_row(item.id, _preview(item.label), item.deleted_at)

    return table


_PAGES = {
    Page.NOTES: render_notes,
    Page.TODO: render_todos,
    Page.TRASH: render_trash,
}


def render(state: UIState) -> RenderableType:
    """Render the current page of a snapshot, with its last error if any."""
    if not state.signed_in:
        return _signed_out()

    body = _PAGES[state.page](state)
    if state.error:
        return Group(body, Text(f"Error: {state.error}", style="red"))
    return body
