"""
Client Actions.

Every user action is an entry in ACTIONS, keyed by action name. A handler
calls the backend and returns the events describing what happened; it never
changes state itself. `run_action` folds those events into a new snapshot.

Usage:
    state = await run_action("refresh", client, state)
    state = await run_action("create", client, state, text="buy milk")
"""

import mimetypes
from pathlib import Path
from typing import Any, Awaitable, Callable

import httpx

from cloudnotes.backend.core.logging import get_logger, log_with_source
from cloudnotes.backend.models.note import NoteKind
from cloudnotes.cli.client import APIClient, APIError, unwrap
from cloudnotes.cli.state import (
    Event,
    NoteRestored,
    NoteSelected,
    NoteSaved,
    NotesLoaded,
    NoteTrashed,
    NoteView,
    Page,
    RequestFailed,
    SignedIn,
    TrashEmptied,
    TrashLoaded,
    TrashPurged,
    TrashView,
    UIState,
    find_note,
    reduce,
)

logger = get_logger(__name__)

Handler = Callable[..., Awaitable[list[Event]]]


class ActionError(Exception):
    """An action cannot run with the given state or arguments."""


async def _load_notes(client: APIClient) -> NotesLoaded:
    data = unwrap(await client.get(client.api("/notes")))
    return NotesLoaded(notes=tuple(NoteView.from_api(item) for item in data or []))


async def _load_trash(client: APIClient) -> TrashLoaded:
    data = unwrap(await client.get(client.api("/trash")))
    return TrashLoaded(trash=tuple(TrashView.from_api(item) for item in data or []))


async def refresh(client: APIClient, state: UIState) -> list[Event]:
    return [await _load_notes(client), await _load_trash(client)]


async def whoami(client: APIClient, state: UIState) -> list[Event]:
    data = unwrap(await client.get(client.api("/me")))
    return [SignedIn(owner_id=data["ownerId"], email=data.get("email"))]


async def select(client: APIClient, state: UIState, note_id: str) -> list[Event]:
    """Open a loaded note in the detail panel."""
    if find_note(state, note_id) is None:
        raise ActionError(f"Note {note_id} is not loaded")
    return [NoteSelected(note_id=note_id)]


async def create(
    client: APIClient,
    state: UIState,
    text: str = "",
    todo: bool | None = None,
) -> list[Event]:
    """Create a note. On the todo page, or with todo=True, the note is a todo."""
    if todo is None:
        todo = state.page is Page.TODO
    body: dict[str, Any] = {"text": text}
    if todo:
        body["kind"] = NoteKind.TODO.value
    data = unwrap(await client.post(client.api("/notes"), json=body))
    return [NoteSaved(note=NoteView.from_api(data))]


async def edit(client: APIClient, state: UIState, note_id: str, text: str) -> list[Event]:
    """Replace a note's text. Empty text moves the note to the trash instead."""
    if text == "":
        return await delete(client, state, note_id=note_id)
    data = unwrap(await client.put(client.api(f"/notes/{note_id}"), json={"text": text}))
    return [NoteSaved(note=NoteView.from_api(data))]


async def save(client: APIClient, state: UIState, text: str) -> list[Event]:
    """Save new text into the selected note."""
    if state.selected_id is None:
        raise ActionError("No note selected")
    data = unwrap(
        await client.put(client.api(f"/notes/{state.selected_id}"), json={"text": text})
    )
    return [NoteSaved(note=NoteView.from_api(data))]


async def delete(client: APIClient, state: UIState, note_id: str) -> list[Event]:
    """Move a note to the trash."""
    unwrap(await client.delete(client.api(f"/notes/{note_id}")))
    return [NoteTrashed(note_id=note_id), await _load_trash(client)]


async def toggle(client: APIClient, state: UIState, note_id: str) -> list[Event]:
    """Flip the done flag of a loaded note."""
    note = find_note(state, note_id)
    if note is None:
        raise ActionError(f"Note {note_id} is not loaded")
    data = unwrap(
        await client.put(client.api(f"/notes/{note_id}"), json={"done": not note.done})
    )
    return [NoteSaved(note=NoteView.from_api(data))]


async def import_file(client: APIClient, state: UIState, path: str) -> list[Event]:
    """Upload a file and create a note that links to it, titled with its name."""
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise ActionError(f"No such file: {path}")

    mime = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    with open(file_path, "rb") as f:
        attachment = unwrap(
            await client.post(client.api("/upload"), files={"file": (file_path.name, f, mime)})
        )

    data = unwrap(
        await client.post(
            client.api("/notes"),
            json={"text": attachment["name"], "attachment": attachment},
        )
    )
    return [NoteSaved(note=NoteView.from_api(data))]


async def restore(client: APIClient, state: UIState, trash_id: str) -> list[Event]:
    data = unwrap(await client.post(client.api(f"/trash/restore/{trash_id}")))
    return [NoteRestored(trash_id=trash_id, note=NoteView.from_api(data))]


async def purge(client: APIClient, state: UIState, trash_id: str) -> list[Event]:
    unwrap(await client.delete(client.api(f"/trash/{trash_id}")))
    return [TrashPurged(trash_id=trash_id)]


async def empty(client: APIClient, state: UIState) -> list[Event]:
    unwrap(await client.delete(client.api("/trash")))
    return [TrashEmptied()]


ACTIONS: dict[str, Handler] = {
    "refresh": refresh,
    "whoami": whoami,
    "select": select,
    "create": create,
    "edit": edit,
    "save": save,
    "delete": delete,
    "toggle": toggle,
    "import": import_file,
    "restore": restore,
    "purge": purge,
    "empty": empty,
}


async def run_action(name: str, client: APIClient, state: UIState, **params: Any) -> UIState:
    """
    Run the named action and return the resulting snapshot.

    Backend failures do not raise: they come back as a snapshot whose
    `error` is set, and nothing is retried.

    Raises:
        KeyError: For an unknown action name
        ActionError: If the action cannot run in this state
    """
    handler = ACTIONS[name]
    log_with_source(logger, "cli", "debug", "Running action", action=name)

    try:
        events = await handler(client, state, **params)
    except APIError as e:
        log_with_source(
            logger, "cli", "warning", "Action failed",
            action=name, status_code=e.status_code, error=e.message,
        )
        events = [RequestFailed(message=e.message)]
    except httpx.HTTPError as e:
        events = [RequestFailed(message=f"Cannot reach backend: {e}")]

    for event in events:
        state = reduce(state, event)
    return state
