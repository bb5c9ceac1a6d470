"""
Note Service.

Lifecycle of an owner's notes: create, list, update, move to trash, restore
and permanent deletion.

Moves between the active collection and the trash are two separate store
writes with no transaction around them. The destination is always written
before the source is removed, so a failure between the two leaves the note
in both collections rather than in neither.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cloudnotes.backend.core.exceptions import NotFoundError
from cloudnotes.backend.core.utils import later_than, utc_now
from cloudnotes.backend.models.note import CONTENT_FIELDS, Note, NoteKind, TrashedNote
from cloudnotes.backend.repositories.note import NoteStore
from cloudnotes.backend.schemas.note import NoteCreate, NoteUpdate
from cloudnotes.backend.services.base import BaseService


def _content_of(record: Note | TrashedNote) -> dict[str, Any]:
    return {field: getattr(record, field) for field in CONTENT_FIELDS}


class NoteService(BaseService):
    """
    Service for one owner's notes and trash.

    The owner id is bound at construction and comes from the authenticated
    identity. Concurrent requests for the same owner are not coordinated:
    updates are last-write-wins.
    """

    def __init__(self, session: AsyncSession, owner_id: str) -> None:
        super().__init__(session)
        self.owner_id = owner_id
        self.store = NoteStore(session, owner_id)

    # -------------------------------------------------------------------------
    # Active notes
    # -------------------------------------------------------------------------

    async def list_notes(self) -> list[Note]:
        """Return the owner's active notes in insertion order."""
        notes = await self._execute_db_operation("list_notes", self.store.active.list_all())
        return list(notes.values())

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new active note.

        The kind is taken from the request, or derived once from the `todo:`
        prefix when the request does not say. Todo notes start not done.
        """
        text = data.text or ""
        kind = data.kind or NoteKind.from_text(text)
        done = data.done
        if kind is NoteKind.TODO and done is None:
            done = False

        now = utc_now()
        self._log_operation("Creating note", owner_id=self.owner_id, kind=kind.value)

        note = await self._execute_db_operation(
            "create_note",
            self.store.active.create(
                text=text,
                attachment=data.attachment.model_dump() if data.attachment else None,
                kind=kind.value,
                done=done,
                created_at=now,
                updated_at=now,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(self, note_id: str, data: NoteUpdate) -> Note:
        """
        Merge the fields present in `data` into a note.

        Fields absent from the request keep their values. updated_at always
        moves forward, even when no field changes.

        Raises:
            NotFoundError: If the owner has no active note with this id
        """
        existing = await self._execute_db_operation(
            "update_note.read", self.store.active.get_by_id(note_id)
        )
        fields = data.model_dump(exclude_unset=True)

        self._log_operation(
            "Updating note",
            owner_id=self.owner_id,
            note_id=note_id,
            fields=sorted(fields),
        )

        return await self._execute_db_operation(
            "update_note",
            self.store.active.update(
                note_id,
                **fields,
                updated_at=later_than(existing.updated_at),
            ),
        )

    async def soft_delete(self, note_id: str) -> TrashedNote:
        """
        Move a note to the trash.

        Writes a new trash entry carrying the note's fields and timestamps plus
        deleted_at, then removes the active note. If the active note is already
        gone by then, a concurrent delete has moved it first: the entry written
        here is withdrawn and NotFoundError is raised, leaving one trash entry.

        Raises:
            NotFoundError: If the owner has no active note with this id
            StorageError: If either write fails; a failed removal leaves the
                note in both collections
        """
        note = await self._execute_db_operation(
            "soft_delete.read", self.store.active.get_by_id(note_id)
        )

        self._log_operation("Moving note to trash", owner_id=self.owner_id, note_id=note_id)

        trashed = await self._execute_db_operation(
            "soft_delete.write_trash",
            self.store.trash.create(
                **_content_of(note),
                created_at=note.created_at,
                updated_at=note.updated_at,
                deleted_at=later_than(note.updated_at),
            ),
        )

        removed = await self._execute_db_operation(
            "soft_delete.remove_active", self.store.active.delete(note_id)
        )
        if not removed:
            self._logger.warning(
                "Note moved to trash concurrently; withdrawing duplicate entry",
                extra={"note_id": note_id, "trash_id": trashed.id},
            )
            await self._execute_db_operation(
                "soft_delete.withdraw_trash", self.store.trash.delete(trashed.id)
            )
            raise NotFoundError("Note not found")

        self._log_debug("Note trashed", note_id=note_id, trash_id=trashed.id)
        return trashed

    # -------------------------------------------------------------------------
    # Trash
    # -------------------------------------------------------------------------

    async def list_trash(self) -> list[TrashedNote]:
        """Return the owner's trash entries in insertion order."""
        trashed = await self._execute_db_operation("list_trash", self.store.trash.list_all())
        return list(trashed.values())

    async def restore(self, trash_id: str) -> Note:
        """
        Move a trash entry back to the active notes.

        Creates a new active note (new id, created_at = updated_at = now) with
        the entry's content, then removes the entry. A concurrent restore of
        the same entry is resolved like a concurrent soft delete. If a
        concurrent permanent delete removed the entry first, the new note is
        withdrawn as well, so the note ends up in neither collection.

        Raises:
            NotFoundError: If the owner has no trash entry with this id
            StorageError: If either write fails; a failed removal leaves the
                note in both collections
        """
        item = await self._execute_db_operation(
            "restore.read", self.store.trash.get_by_id(trash_id)
        )

        self._log_operation("Restoring note", owner_id=self.owner_id, trash_id=trash_id)

        now = utc_now()
        note = await self._execute_db_operation(
            "restore.write_active",
            self.store.active.create(**_content_of(item), created_at=now, updated_at=now),
        )

        removed = await self._execute_db_operation(
            "restore.remove_trash", self.store.trash.delete(trash_id)
        )
        if not removed:
            self._logger.warning(
                "Trash entry restored concurrently; withdrawing duplicate note",
                extra={"trash_id": trash_id, "note_id": note.id},
            )
            await self._execute_db_operation(
                "restore.withdraw_active", self.store.active.delete(note.id)
            )
            raise NotFoundError("Trash item not found")

        self._log_debug("Note restored", trash_id=trash_id, note_id=note.id)
        return note

    async def permanent_delete(self, trash_id: str) -> None:
        """Remove a trash entry for good. A missing entry is not an error."""
        self._log_operation("Deleting trash entry", owner_id=self.owner_id, trash_id=trash_id)
        await self._execute_db_operation(
            "permanent_delete", self.store.trash.delete(trash_id)
        )

    async def empty_trash(self) -> int:
        """Remove every trash entry of the owner. Returns how many were removed."""
        count = await self._execute_db_operation("empty_trash", self.store.trash.delete_all())
        self._log_operation("Emptied trash", owner_id=self.owner_id, deleted=count)
        return count
