"""
Unit Test Fixtures.

Fixtures for unit tests - external dependencies are mocked or faked.
Unit tests should be fast and isolated, never touching real services.
"""

from typing import Any, BinaryIO
from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session, "owner-1")
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


# =============================================================================
# Blob Store Fakes
# =============================================================================


class FakeBlobStore:
    """In-memory blob store that records what was uploaded."""

    def __init__(self, base_url: str = "https://blobs.test") -> None:
        self.base_url = base_url
        self.objects: dict[str, dict[str, Any]] = {}

    async def put(self, key: str, body: BinaryIO, content_type: str) -> str:
        self.objects[key] = {"body": body.read(), "content_type": content_type}
        return f"{self.base_url}/{key}"


@pytest.fixture
def fake_blob_store() -> FakeBlobStore:
    """Provide an empty in-memory blob store."""
    return FakeBlobStore()


# =============================================================================
# HTTP Mock Fixtures
# =============================================================================


class MockResponse:
    """Mock HTTP response for testing."""

    def __init__(
        self,
        status_code: int,
        json_data: dict[str, Any] | None = None,
        text: str = "",
    ) -> None:
        self.status_code = status_code
        self._json_data = json_data
        self.text = text or str(json_data)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self._json_data is None:
            raise ValueError("No JSON body")
        return self._json_data


@pytest.fixture
def mock_response() -> type[MockResponse]:
    """Provide MockResponse class for creating mock HTTP responses."""
    return MockResponse
