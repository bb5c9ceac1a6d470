"""
Integration Tests for Trash API.

Tests restore, permanent deletion and emptying with a real database.
"""

import pytest
from httpx import AsyncClient

NOTES = "/api/notes"
TRASH = "/api/trash"


async def _trash_note(client: AsyncClient, headers: dict, text: str) -> dict:
    created = await client.post(NOTES, json={"text": text}, headers=headers)
    await client.delete(f"{NOTES}/{created.json()['data']['id']}", headers=headers)
    trash = (await client.get(TRASH, headers=headers)).json()["data"]
    return next(item for item in trash if item["text"] == text)


class TestTrashLifecycle:
    """The create, delete and restore round trip."""

    @pytest.mark.asyncio
    async def test_example_round_trip(self, client: AsyncClient, api, auth_headers):
        """Should restore a trashed note under a new id with fresh timestamps."""
        created = api.assert_success(
            await client.post(NOTES, json={"text": "buy milk"}, headers=auth_headers), 201
        )["data"]
        await client.delete(f"{NOTES}/{created['id']}", headers=auth_headers)

        assert api.assert_success(await client.get(NOTES, headers=auth_headers))["data"] == []
        [item] = api.assert_success(await client.get(TRASH, headers=auth_headers))["data"]
        assert item["text"] == "buy milk"

        response = await client.post(f"{TRASH}/restore/{item['id']}", headers=auth_headers)

        restored = api.assert_success(response)["data"]
        assert restored["text"] == "buy milk"
        assert restored["id"] != created["id"]
        assert restored["createdAt"] == restored["updatedAt"]
        assert restored["createdAt"] >= item["deletedAt"]
        assert "deletedAt" not in restored
        assert api.assert_success(await client.get(TRASH, headers=auth_headers))["data"] == []
        notes = api.assert_success(await client.get(NOTES, headers=auth_headers))["data"]
        assert [n["id"] for n in notes] == [restored["id"]]

    @pytest.mark.asyncio
    async def test_restore_keeps_todo_state(self, client: AsyncClient, api, auth_headers):
        """Should carry kind and done through the trash."""
        created = await client.post(NOTES, json={"text": "todo: x"}, headers=auth_headers)
        note_id = created.json()["data"]["id"]
        await client.put(f"{NOTES}/{note_id}", json={"done": True}, headers=auth_headers)
        await client.delete(f"{NOTES}/{note_id}", headers=auth_headers)
        [item] = (await client.get(TRASH, headers=auth_headers)).json()["data"]

        restored = api.assert_success(
            await client.post(f"{TRASH}/restore/{item['id']}", headers=auth_headers)
        )["data"]

        assert restored["kind"] == "todo"
        assert restored["done"] is True

    @pytest.mark.asyncio
    async def test_restore_missing(self, client: AsyncClient, api, auth_headers):
        """Should return 404 for an unknown trash id."""
        response = await client.post(f"{TRASH}/restore/missing", headers=auth_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_restore_twice(self, client: AsyncClient, api, auth_headers):
        """Should create only one note."""
        item = await _trash_note(client, auth_headers, "again")

        await client.post(f"{TRASH}/restore/{item['id']}", headers=auth_headers)
        response = await client.post(f"{TRASH}/restore/{item['id']}", headers=auth_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")
        notes = (await client.get(NOTES, headers=auth_headers)).json()["data"]
        assert len(notes) == 1

    @pytest.mark.asyncio
    async def test_trash_ordered_by_deletion(self, client: AsyncClient, api, auth_headers):
        """Should list entries in the order they were trashed."""
        first = await client.post(NOTES, json={"text": "first"}, headers=auth_headers)
        second = await client.post(NOTES, json={"text": "second"}, headers=auth_headers)
        await client.delete(f"{NOTES}/{second.json()['data']['id']}", headers=auth_headers)
        await client.delete(f"{NOTES}/{first.json()['data']['id']}", headers=auth_headers)

        trash = api.assert_success(await client.get(TRASH, headers=auth_headers))["data"]

        assert [item["text"] for item in trash] == ["second", "first"]


class TestPermanentDelete:
    """Tests for DELETE /api/trash/{id} and DELETE /api/trash."""

    @pytest.mark.asyncio
    async def test_purge_is_idempotent(self, client: AsyncClient, api, auth_headers):
        """Should succeed whether or not the entry exists."""
        item = await _trash_note(client, auth_headers, "gone")

        first = await client.delete(f"{TRASH}/{item['id']}", headers=auth_headers)
        second = await client.delete(f"{TRASH}/{item['id']}", headers=auth_headers)

        assert api.assert_success(first)["data"]["ok"] is True
        assert api.assert_success(second)["data"]["ok"] is True
        assert (await client.get(TRASH, headers=auth_headers)).json()["data"] == []

    @pytest.mark.asyncio
    async def test_purge_other_owner_entry(
        self, client: AsyncClient, api, auth_headers, other_owner_headers
    ):
        """Should not touch another owner's trash."""
        item = await _trash_note(client, auth_headers, "mine")

        response = await client.delete(f"{TRASH}/{item['id']}", headers=other_owner_headers)

        api.assert_success(response)
        assert len((await client.get(TRASH, headers=auth_headers)).json()["data"]) == 1

    @pytest.mark.asyncio
    async def test_empty_trash(
        self, client: AsyncClient, api, auth_headers, other_owner_headers
    ):
        """Should remove all of the caller's entries and report the count."""
        await _trash_note(client, auth_headers, "a")
        await _trash_note(client, auth_headers, "b")
        await _trash_note(client, other_owner_headers, "c")

        response = await client.delete(TRASH, headers=auth_headers)

        assert api.assert_success(response)["data"]["deleted"] == 2
        assert (await client.get(TRASH, headers=auth_headers)).json()["data"] == []
        assert len((await client.get(TRASH, headers=other_owner_headers)).json()["data"]) == 1

    @pytest.mark.asyncio
    async def test_trash_requires_token(self, client: AsyncClient, api):
        """Should reject anonymous trash access."""
        api.assert_error(await client.get(TRASH), 401, "AUTH_UNAUTHORIZED")
