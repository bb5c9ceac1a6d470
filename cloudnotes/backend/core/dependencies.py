"""
FastAPI Dependencies.

Shared dependencies for request handling: database session, request id
and the authenticated identity.
"""

import uuid
from typing import Annotated

import structlog
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from cloudnotes.backend.core.database import get_db_session
from cloudnotes.backend.core.exceptions import AuthenticationError
from cloudnotes.backend.core.logging import get_logger
from cloudnotes.backend.core.security import Identity, verify_identity

logger = get_logger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Extract or generate request ID from headers."""
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_current_identity(
    authorization: str | None = Header(None),
) -> Identity:
    """
    Authenticate the request from its `Authorization: Bearer` header.

    The owner id comes only from the verified token, never from the
    request path or body.

    Raises:
        AuthenticationError: If the header is missing or the token is invalid
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("No token provided")

    token = authorization[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError("No token provided")

    identity = verify_identity(token)
    structlog.contextvars.bind_contextvars(owner_id=identity.owner_id)
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
