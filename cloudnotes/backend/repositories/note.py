"""
Note Repositories.

Data access for an owner's two collections: active notes and trash.
NoteStore is the addressing layer the lifecycle service works against.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from cloudnotes.backend.models.note import Note, TrashedNote
from cloudnotes.backend.repositories.base import OwnerScopedRepository


class NoteRepository(OwnerScopedRepository[Note]):
    """An owner's active notes collection."""

    model = Note


class TrashRepository(OwnerScopedRepository[TrashedNote]):
    """An owner's trash collection."""

    model = TrashedNote

    def _insertion_order(self) -> tuple:
        return (self.model.deleted_at, self.model.id)


class NoteStore:
    """
    Both collections of one owner.

    The owner id must come from the authenticated identity; the store has no
    way to reach any other owner's rows.

    Usage:
        store = NoteStore(session, identity.owner_id)
        notes = await store.active.list_all()
        trashed = await store.trash.get_by_id(trash_id)
    """

    def __init__(self, session: AsyncSession, owner_id: str) -> None:
        self.owner_id = owner_id
        self.active = NoteRepository(session, owner_id)
        self.trash = TrashRepository(session, owner_id)
