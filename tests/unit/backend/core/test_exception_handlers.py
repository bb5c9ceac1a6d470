"""
Unit Tests for Exception Handlers.

Tests the exception handler functions in isolation.
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError

from cloudnotes.backend.core.exception_handlers import (
    EXCEPTION_STATUS_MAP,
    _get_request_id,
    application_error_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from cloudnotes.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    NotFoundError,
    StorageError,
    ValidationError,
)


def _mock_request(path: str = "/api/notes", method: str = "GET", headers: dict | None = None):
    request = MagicMock(spec=Request)
    request.url.path = path
    request.method = method
    request.headers = headers or {}
    del request.state.request_id
    return request


class TestExceptionStatusMapping:
    """Tests for exception to HTTP status code mapping."""

    def test_not_found_maps_to_404(self):
        assert EXCEPTION_STATUS_MAP[NotFoundError] == 404

    def test_validation_maps_to_400(self):
        assert EXCEPTION_STATUS_MAP[ValidationError] == 400

    def test_authentication_maps_to_401(self):
        assert EXCEPTION_STATUS_MAP[AuthenticationError] == 401

    def test_storage_maps_to_500(self):
        assert EXCEPTION_STATUS_MAP[StorageError] == 500


class TestGetRequestId:
    """Tests for request ID extraction."""

    def test_extracts_from_request_state(self):
        """Should extract request_id from request.state."""
        request = MagicMock(spec=Request)
        request.state.request_id = "state-123"
        request.headers = {}

        assert _get_request_id(request) == "state-123"

    def test_extracts_from_header(self):
        """Should extract request_id from x-request-id header."""
        request = _mock_request(headers={"x-request-id": "header-456"})

        assert _get_request_id(request) == "header-456"

    def test_returns_none_when_not_present(self):
        """Should return None when no request_id available."""
        assert _get_request_id(_mock_request()) is None


class TestApplicationErrorHandler:
    """Tests for application_error_handler."""

    @pytest.fixture
    def mock_request(self):
        return _mock_request(headers={"x-request-id": "test-123"})

    @pytest.mark.asyncio
    async def test_not_found_returns_404_envelope(self, mock_request):
        """NotFoundError should return a 404 error envelope."""
        response = await application_error_handler(mock_request, NotFoundError("Note not found"))

        assert response.status_code == 404
        body = json.loads(response.body)
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["code"] == "RES_NOT_FOUND"
        assert body["error"]["message"] == "Note not found"

    @pytest.mark.asyncio
    async def test_authentication_returns_401(self, mock_request):
        response = await application_error_handler(mock_request, AuthenticationError("No token provided"))

        assert response.status_code == 401
        assert json.loads(response.body)["error"]["code"] == "AUTH_UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_storage_error_returns_500(self, mock_request):
        response = await application_error_handler(mock_request, StorageError())

        assert response.status_code == 500
        assert json.loads(response.body)["error"]["code"] == "SYS_STORAGE_ERROR"

    @pytest.mark.asyncio
    async def test_validation_includes_details(self, mock_request):
        """ValidationError should include details in response."""
        exc = ValidationError("File too large", details={"limit": 10})

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 400
        body = json.loads(response.body)
        assert body["error"]["code"] == "VAL_VALIDATION_ERROR"
        assert body["error"]["details"] == {"limit": 10}

    @pytest.mark.asyncio
    async def test_metadata_uses_camel_case_request_id(self, mock_request):
        """Envelope metadata should carry the request id under its wire name."""
        response = await application_error_handler(mock_request, NotFoundError())

        assert json.loads(response.body)["metadata"]["requestId"] == "test-123"

    @pytest.mark.asyncio
    async def test_unknown_application_error_returns_500(self, mock_request):
        """Unknown ApplicationError subclass should return 500."""
        exc = ApplicationError("Unknown error", code="CUSTOM_ERROR")

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 500


class TestValidationErrorHandler:
    """Tests for validation_error_handler."""

    @pytest.mark.asyncio
    async def test_returns_400_with_field_errors(self):
        """Malformed requests should be a 400 listing each field."""
        exc = MagicMock(spec=RequestValidationError)
        exc.errors.return_value = [
            {"loc": ("body", "text"), "msg": "Input should be a valid string", "type": "string_type"},
            {"loc": ("body", "done"), "msg": "Input should be a valid boolean", "type": "bool_parsing"},
        ]

        response = await validation_error_handler(_mock_request(method="PUT"), exc)

        assert response.status_code == 400
        body = json.loads(response.body)
        assert body["error"]["code"] == "VAL_REQUEST_INVALID"
        fields = [e["field"] for e in body["error"]["details"]["validation_errors"]]
        assert fields == ["body.text", "body.done"]


class TestHttpExceptionHandler:
    """Tests for http_exception_handler."""

    @pytest.mark.asyncio
    async def test_string_detail_becomes_message(self):
        response = await http_exception_handler(
            _mock_request(), HTTPException(status_code=405, detail="Method Not Allowed")
        )

        assert response.status_code == 405
        body = json.loads(response.body)
        assert body["error"]["code"] == "HTTP_METHOD_NOT_ALLOWED"
        assert body["error"]["message"] == "Method Not Allowed"

    @pytest.mark.asyncio
    async def test_dict_detail_becomes_details(self):
        detail = {"status": "unhealthy", "checks": {"database": {"status": "unhealthy"}}}

        response = await http_exception_handler(
            _mock_request(path="/health/ready"), HTTPException(status_code=503, detail=detail)
        )

        assert response.status_code == 503
        body = json.loads(response.body)
        assert body["error"]["code"] == "SYS_UNAVAILABLE"
        assert body["error"]["message"] == "unhealthy"
        assert body["error"]["details"] == detail


class TestUnhandledExceptionHandler:
    """Tests for unhandled_exception_handler."""

    @pytest.mark.asyncio
    async def test_returns_generic_500(self):
        """Unhandled exception should return 500 without leaking the message."""
        response = await unhandled_exception_handler(
            _mock_request(), RuntimeError("secret internals")
        )

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error"]["code"] == "SYS_INTERNAL_ERROR"
        assert "secret internals" not in response.body.decode()
