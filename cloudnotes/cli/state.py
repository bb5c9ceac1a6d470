"""
Client UI State.

The terminal client keeps everything it shows in one immutable `UIState`
snapshot. Actions produce events; `reduce(state, event)` folds an event into
a new snapshot and never touches the old one. Views read snapshots only.

Usage:
    state = UIState()
    state = reduce(state, NotesLoaded(notes=(...)))
    for note in notes_view(state):
        ...
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable

from cloudnotes.backend.models.note import TODO_PREFIX, NoteKind


class Page(str, Enum):
    """Pages of the client."""

    NOTES = "notes"
    TODO = "todo"
    TRASH = "trash"


@dataclass(frozen=True)
class NoteView:
    """An active note as the client sees it."""

    id: str
    text: str
    kind: NoteKind
    done: bool | None = None
    attachment: dict[str, Any] | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "NoteView":
        return cls(
            id=data["id"],
            text=data.get("text") or "",
            kind=NoteKind(data.get("kind", NoteKind.PLAIN.value)),
            done=data.get("done"),
            attachment=data.get("attachment"),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )

    @property
    def is_todo(self) -> bool:
        return self.kind is NoteKind.TODO

    @property
    def label(self) -> str:
        """Display text. Todo notes drop their `todo:` marker."""
        if self.is_todo and self.text.startswith(TODO_PREFIX):
            return self.text[len(TODO_PREFIX):].strip()
        return self.text


@dataclass(frozen=True)
class TrashView:
    """A trash entry as the client sees it."""

    id: str
    text: str
    kind: NoteKind
    attachment: dict[str, Any] | None = None
    deleted_at: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "TrashView":
        return cls(
            id=data["id"],
            text=data.get("text") or "",
            kind=NoteKind(data.get("kind", NoteKind.PLAIN.value)),
            attachment=data.get("attachment"),
            deleted_at=data.get("deletedAt", ""),
        )

    @property
    def label(self) -> str:
        if self.text:
            return self.text
        if self.attachment:
            return self.attachment.get("name", "Deleted")
        return "Deleted"


@dataclass(frozen=True)
class UIState:
    """Immutable snapshot of the client. Notes and trash keep server order."""

    page: Page = Page.NOTES
    notes: tuple[NoteView, ...] = ()
    trash: tuple[TrashView, ...] = ()
    selected_id: str | None = None
    signed_in: bool = False
    owner_id: str | None = None
    email: str | None = None
    error: str | None = None


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class SignedIn:
    owner_id: str
    email: str | None = None


@dataclass(frozen=True)
class SignedOut:
    pass


@dataclass(frozen=True)
class PageSwitched:
    page: Page


@dataclass(frozen=True)
class NotesLoaded:
    notes: tuple[NoteView, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TrashLoaded:
    trash: tuple[TrashView, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NoteSelected:
    note_id: str | None


@dataclass(frozen=True)
class NoteSaved:
    """A note was created or updated on the server."""

    note: NoteView


@dataclass(frozen=True)
class NoteTrashed:
    note_id: str


@dataclass(frozen=True)
class NoteRestored:
    trash_id: str
    note: NoteView


@dataclass(frozen=True)
class TrashPurged:
    trash_id: str


@dataclass(frozen=True)
class TrashEmptied:
    pass


@dataclass(frozen=True)
class RequestFailed:
    message: str


Event = (
    SignedIn | SignedOut | PageSwitched | NotesLoaded | TrashLoaded | NoteSelected
    | NoteSaved | NoteTrashed | NoteRestored | TrashPurged | TrashEmptied | RequestFailed
)


# =============================================================================
# Reducer
# =============================================================================


def _signed_in(state: UIState, event: SignedIn) -> UIState:
    return replace(state, signed_in=True, owner_id=event.owner_id, email=event.email)


def _signed_out(state: UIState, event: SignedOut) -> UIState:
    return UIState(page=state.page)


def _page_switched(state: UIState, event: PageSwitched) -> UIState:
    return replace(state, page=event.page, selected_id=None)


def _notes_loaded(state: UIState, event: NotesLoaded) -> UIState:
    ids = {note.id for note in event.notes}
    selected = state.selected_id if state.selected_id in ids else None
    return replace(state, notes=tuple(event.notes), selected_id=selected)


def _trash_loaded(state: UIState, event: TrashLoaded) -> UIState:
    return replace(state, trash=tuple(event.trash))


def _note_selected(state: UIState, event: NoteSelected) -> UIState:
    return replace(state, selected_id=event.note_id)


def _note_saved(state: UIState, event: NoteSaved) -> UIState:
    saved = event.note
    if any(note.id == saved.id for note in state.notes):
        notes = tuple(saved if note.id == saved.id else note for note in state.notes)
    else:
        notes = state.notes + (saved,)
    return replace(state, notes=notes)


def _note_trashed(state: UIState, event: NoteTrashed) -> UIState:
    selected = None if state.selected_id == event.note_id else state.selected_id
    return replace(
        state,
        notes=tuple(note for note in state.notes if note.id != event.note_id),
        selected_id=selected,
    )


def _note_restored(state: UIState, event: NoteRestored) -> UIState:
    return replace(
        state,
        trash=tuple(item for item in state.trash if item.id != event.trash_id),
        notes=state.notes + (event.note,),
    )


def _trash_purged(state: UIState, event: TrashPurged) -> UIState:
    return replace(state, trash=tuple(item for item in state.trash if item.id != event.trash_id))


def _trash_emptied(state: UIState, event: TrashEmptied) -> UIState:
    return replace(state, trash=())


def _request_failed(state: UIState, event: RequestFailed) -> UIState:
    return replace(state, error=event.message)


_REDUCERS: dict[type, Callable[[UIState, Any], UIState]] = {
    SignedIn: _signed_in,
    SignedOut: _signed_out,
    PageSwitched: _page_switched,
    NotesLoaded: _notes_loaded,
    TrashLoaded: _trash_loaded,
    NoteSelected: _note_selected,
    NoteSaved: _note_saved,
    NoteTrashed: _note_trashed,
    NoteRestored: _note_restored,
    TrashPurged: _trash_purged,
    TrashEmptied: _trash_emptied,
    RequestFailed: _request_failed,
}


def reduce(state: UIState, event: Event) -> UIState:
    """
    Apply one event to a snapshot and return the next snapshot.

    Any event other than RequestFailed clears the previous error.

    Raises:
        TypeError: For an object that is not a known event
    """
    reducer = _REDUCERS.get(type(event))
    if reducer is None:
        raise TypeError(f"Unknown event: {event!r}")
    if not isinstance(event, RequestFailed):
        state = replace(state, error=None)
    return reducer(state, event)


# =============================================================================
# Views
# =============================================================================


def notes_view(state: UIState) -> list[NoteView]:
    """All active notes, newest first."""
    return list(reversed(state.notes))


def todo_view(state: UIState) -> list[NoteView]:
    """Todo notes in insertion order."""
    return [note for note in state.notes if note.is_todo]


def trash_view(state: UIState) -> list[TrashView]:
    """Trash entries, most recently trashed first."""
    return list(reversed(state.trash))


def find_note(state: UIState, note_id: str) -> NoteView | None:
    return next((note for note in state.notes if note.id == note_id), None)


def selected_note(state: UIState) -> NoteView | None:
    if state.selected_id is None:
        return None
    return find_note(state, state.selected_id)
