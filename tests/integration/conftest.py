"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and the full app.
These fixtures build on the root conftest.py database fixtures; the blob
store is replaced by an in-memory fake.
"""

from collections.abc import AsyncGenerator
from typing import Any, BinaryIO

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cloudnotes.backend.core.database import get_db_session
from cloudnotes.backend.storage.blob import get_blob_store

API = "/api"


class InMemoryBlobStore:
    """Blob store double that keeps uploads in a dict."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}

    async def put(self, key: str, body: BinaryIO, content_type: str) -> str:
        self.objects[key] = body.read()
        return f"https://blobs.test/{key}"


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session_factory: async_sessionmaker[AsyncSession],
    blob_store: InMemoryBlobStore,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the test database and blob store.

    Each request gets its own session from the test engine, like production.

    Usage:
        async def test_list(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/notes", headers=auth_headers)
            assert response.status_code == 200
    """
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_session_factory() as session:
            yield session

    from cloudnotes.backend.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Authentication Fixtures
# =============================================================================


def _bearer(owner_id: str, email: str | None = None) -> dict[str, str]:
    from cloudnotes.backend.core.security import create_access_token

    claims = {"sub": owner_id}
    if email:
        claims["email"] = email
    return {"Authorization": f"Bearer {create_access_token(claims)}"}


@pytest.fixture
def auth_headers(owner_id: str) -> dict[str, str]:
    """
    Provide authentication headers for the default test owner.

    Usage:
        async def test_protected_endpoint(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/me", headers=auth_headers)
            assert response.status_code == 200
    """
    return _bearer(owner_id, "alice@example.com")


@pytest.fixture
def other_owner_headers(other_owner_id: str) -> dict[str, str]:
    """Authentication headers for a second owner."""
    return _bearer(other_owner_id)


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error envelope.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(response: Any) -> dict[str, Any]:
        """Assert API response is a validation error (400)."""
        return ApiAssertions.assert_error(response, 400)


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
