"""
Security Utilities.

Bearer credential verification. Tokens are JWTs signed with JWT_SECRET;
the `sub` claim is the owner id that keys every note and trash query.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from cloudnotes.backend.core.config import get_app_config, get_settings
from cloudnotes.backend.core.exceptions import AuthenticationError
from cloudnotes.backend.core.logging import get_logger
from cloudnotes.backend.core.utils import utc_now

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller."""

    owner_id: str
    email: str | None = None


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a signed access token.

    Used by development tooling and tests; production tokens are issued by
    the identity provider sharing JWT_SECRET.

    Args:
        data: Claims to encode (must include "sub")
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid token")


def verify_identity(token: str) -> Identity:
    """
    Resolve a bearer token to the caller's identity.

    Raises:
        AuthenticationError: If the token is invalid or carries no subject
    """
    payload = decode_token(token)
    owner_id = payload.get("sub")
    if not owner_id or not isinstance(owner_id, str):
        raise AuthenticationError("Invalid token")
    return Identity(owner_id=owner_id, email=payload.get("email"))
