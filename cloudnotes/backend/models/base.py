"""
SQLAlchemy Base Model.

Base class for all database models with common fields.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from cloudnotes.backend.core.utils import utc_now


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at timestamps.

    Defaults cover direct inserts; the note service sets both explicitly so
    that updated_at strictly increases on every mutation.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )


class UUIDMixin:
    """Mixin that adds a store-generated UUID primary key."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )


class OwnedMixin:
    """Mixin that scopes a row to exactly one owner."""

    owner_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        index=True,
    )
