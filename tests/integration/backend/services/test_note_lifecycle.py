"""
Integration Tests for the Note Lifecycle.

Runs NoteService against a real database to check the move rules between
the active collection and the trash.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cloudnotes.backend.core.exceptions import NotFoundError, StorageError
from cloudnotes.backend.schemas.note import Attachment, NoteCreate, NoteUpdate
from cloudnotes.backend.services.note import NoteService

ATTACHMENT = Attachment(name="a.pdf", mime="application/pdf", size=3, url="https://blobs.test/a.pdf")


def _disk_error() -> OperationalError:
    return OperationalError("DELETE", {}, Exception("disk I/O error"))


@pytest.fixture
def service(db_session: AsyncSession, owner_id: str) -> NoteService:
    return NoteService(db_session, owner_id)


async def _fresh(
    factory: async_sessionmaker[AsyncSession], owner_id: str
) -> tuple[list, list]:
    """Read both collections through a new session."""
    async with factory() as session:
        reader = NoteService(session, owner_id)
        return await reader.list_notes(), await reader.list_trash()


class TestIdentity:
    """Ids of active notes."""

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, service: NoteService):
        """Should give every created note its own id."""
        notes = [await service.create_note(NoteCreate(text=str(i))) for i in range(20)]

        assert len({note.id for note in notes}) == 20

    @pytest.mark.asyncio
    async def test_client_id_is_ignored(self, service: NoteService):
        """Should not let a request body choose the id."""
        data = NoteCreate.model_validate({"id": "chosen", "text": "x"})

        note = await service.create_note(data)

        assert note.id != "chosen"


class TestSoftDelete:
    """Moving a note to the trash."""

    @pytest.mark.asyncio
    async def test_move_not_copy(self, service: NoteService, db_session_factory, owner_id):
        """Should leave exactly one trash entry and no active note."""
        note = await service.create_note(NoteCreate(text="bye", attachment=ATTACHMENT))

        trashed = await service.soft_delete(note.id)

        notes, trash = await _fresh(db_session_factory, owner_id)
        assert notes == []
        assert [item.id for item in trash] == [trashed.id]
        item = trash[0]
        assert item.id != note.id
        assert item.text == "bye"
        assert item.attachment == ATTACHMENT.model_dump()
        assert item.created_at == note.created_at
        assert item.updated_at == note.updated_at
        assert item.deleted_at > note.updated_at

    @pytest.mark.asyncio
    async def test_failed_removal_keeps_both(self, service: NoteService, db_session_factory, owner_id):
        """Should leave the note in both collections when the second write fails."""
        note_id = (await service.create_note(NoteCreate(text="keep me"))).id

        with patch.object(
            service.store.active, "delete", new=AsyncMock(side_effect=_disk_error())
        ):
            with pytest.raises(StorageError):
                await service.soft_delete(note_id)

        notes, trash = await _fresh(db_session_factory, owner_id)
        assert [n.id for n in notes] == [note_id]
        assert [t.text for t in trash] == ["keep me"]

    @pytest.mark.asyncio
    async def test_failed_trash_write_changes_nothing(
        self, service: NoteService, db_session_factory, owner_id
    ):
        """Should keep the active note untouched when the trash write fails."""
        note_id = (await service.create_note(NoteCreate(text="safe"))).id

        with patch.object(
            service.store.trash, "create", new=AsyncMock(side_effect=_disk_error())
        ):
            with pytest.raises(StorageError):
                await service.soft_delete(note_id)

        notes, trash = await _fresh(db_session_factory, owner_id)
        assert [n.id for n in notes] == [note_id]
        assert trash == []

    @pytest.mark.asyncio
    async def test_concurrent_delete_leaves_one_entry(
        self, db_session: AsyncSession, db_session_factory, owner_id
    ):
        """Should keep a single trash entry when two deletes race."""
        first = NoteService(db_session, owner_id)
        second = NoteService(db_session, owner_id)
        note = await first.create_note(NoteCreate(text="racy"))
        stale = await second.store.active.get_by_id(note.id)

        await first.soft_delete(note.id)
        with patch.object(second.store.active, "get_by_id", new=AsyncMock(return_value=stale)):
            with pytest.raises(NotFoundError):
                await second.soft_delete(note.id)

        notes, trash = await _fresh(db_session_factory, owner_id)
        assert notes == []
        assert len(trash) == 1

    @pytest.mark.asyncio
    async def test_other_owner_cannot_delete(self, service: NoteService, db_session, other_owner_id):
        """Should not find notes of another owner."""
        note = await service.create_note(NoteCreate(text="mine"))

        with pytest.raises(NotFoundError):
            await NoteService(db_session, other_owner_id).soft_delete(note.id)

        assert [n.id for n in await service.list_notes()] == [note.id]


class TestRestore:
    """Moving a trash entry back."""

    @pytest.mark.asyncio
    async def test_restore_preserves_content(self, service: NoteService, db_session_factory, owner_id):
        """Should create a new note with the entry's content and remove the entry."""
        note = await service.create_note(NoteCreate(text="todo: back", attachment=ATTACHMENT))
        trashed = await service.soft_delete(note.id)

        restored = await service.restore(trashed.id)

        assert restored.id not in (note.id, trashed.id)
        assert restored.text == "todo: back"
        assert restored.attachment == ATTACHMENT.model_dump()
        assert restored.kind == "todo"
        assert restored.done is False
        assert restored.created_at == restored.updated_at
        assert restored.created_at >= trashed.deleted_at
        notes, trash = await _fresh(db_session_factory, owner_id)
        assert [n.id for n in notes] == [restored.id]
        assert trash == []

    @pytest.mark.asyncio
    async def test_failed_removal_keeps_both(self, service: NoteService, db_session_factory, owner_id):
        """Should leave the note in both collections when removing the entry fails."""
        note = await service.create_note(NoteCreate(text="twice"))
        trash_id = (await service.soft_delete(note.id)).id

        with patch.object(
            service.store.trash, "delete", new=AsyncMock(side_effect=_disk_error())
        ):
            with pytest.raises(StorageError):
                await service.restore(trash_id)

        notes, trash = await _fresh(db_session_factory, owner_id)
        assert [n.text for n in notes] == ["twice"]
        assert [t.id for t in trash] == [trash_id]

    @pytest.mark.asyncio
    async def test_concurrent_restore_leaves_one_note(
        self, db_session: AsyncSession, db_session_factory, owner_id
    ):
        """Should keep a single active note when two restores race."""
        first = NoteService(db_session, owner_id)
        second = NoteService(db_session, owner_id)
        note = await first.create_note(NoteCreate(text="racy"))
        trash_id = (await first.soft_delete(note.id)).id
        stale = await second.store.trash.get_by_id(trash_id)

        await first.restore(trash_id)
        with patch.object(second.store.trash, "get_by_id", new=AsyncMock(return_value=stale)):
            with pytest.raises(NotFoundError):
                await second.restore(trash_id)

        notes, trash = await _fresh(db_session_factory, owner_id)
        assert [n.text for n in notes] == ["racy"]
        assert trash == []

    @pytest.mark.asyncio
    async def test_restore_racing_permanent_delete(
        self, db_session: AsyncSession, db_session_factory, owner_id
    ):
        """Should leave the note in neither collection when purged mid-restore."""
        restorer = NoteService(db_session, owner_id)
        purger = NoteService(db_session, owner_id)
        note = await restorer.create_note(NoteCreate(text="purged"))
        trash_id = (await restorer.soft_delete(note.id)).id
        stale = await restorer.store.trash.get_by_id(trash_id)

        await purger.permanent_delete(trash_id)
        with patch.object(restorer.store.trash, "get_by_id", new=AsyncMock(return_value=stale)):
            with pytest.raises(NotFoundError):
                await restorer.restore(trash_id)

        notes, trash = await _fresh(db_session_factory, owner_id)
        assert notes == []
        assert trash == []

    @pytest.mark.asyncio
    async def test_restore_missing(self, service: NoteService):
        """Should raise NotFoundError for an unknown entry."""
        with pytest.raises(NotFoundError):
            await service.restore("missing")


class TestUpdateAndPurge:
    """Updates and permanent deletion."""

    @pytest.mark.asyncio
    async def test_update_merge(self, service: NoteService):
        """Should keep text when only done is sent and move updated_at forward."""
        note = await service.create_note(NoteCreate(text="todo: milk"))
        before = note.updated_at

        updated = await service.update_note(note.id, NoteUpdate.model_validate({"done": True}))

        assert updated.text == "todo: milk"
        assert updated.done is True
        assert updated.updated_at > before
        assert updated.created_at == note.created_at

    @pytest.mark.asyncio
    async def test_repeated_updates_strictly_increase(self, service: NoteService):
        """Should never repeat an updated_at value."""
        note = await service.create_note(NoteCreate(text="x"))
        stamps = [note.updated_at]
        for i in range(5):
            stamps.append((await service.update_note(note.id, NoteUpdate(text=str(i)))).updated_at)

        assert stamps == sorted(set(stamps))

    @pytest.mark.asyncio
    async def test_permanent_delete_idempotent(self, service: NoteService):
        """Should not raise on the second call."""
        note = await service.create_note(NoteCreate(text="x"))
        trashed = await service.soft_delete(note.id)

        await service.permanent_delete(trashed.id)
        await service.permanent_delete(trashed.id)

        assert await service.list_trash() == []

    @pytest.mark.asyncio
    async def test_empty_trash_scoped_to_owner(self, service: NoteService, db_session, other_owner_id):
        """Should only empty the caller's trash."""
        other = NoteService(db_session, other_owner_id)
        for svc in (service, service, other):
            note = await svc.create_note(NoteCreate(text="t"))
            await svc.soft_delete(note.id)

        assert await service.empty_trash() == 2
        assert await service.list_trash() == []
        assert len(await other.list_trash()) == 1
