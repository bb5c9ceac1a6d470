"""
Note Models.

Active notes and trashed notes live in two separate tables. Moving a note to
the trash inserts a new trashed_notes row (new id) and deletes the notes row;
there is no "deleted" flag.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cloudnotes.backend.core.utils import utc_now
from cloudnotes.backend.models.base import Base, OwnedMixin, TimestampMixin, UUIDMixin

TODO_PREFIX = "todo:"


class NoteKind(str, Enum):
    """Whether a note is plain text or a todo item. Fixed at creation."""

    PLAIN = "plain"
    TODO = "todo"

    @classmethod
    def from_text(cls, text: str) -> "NoteKind":
        """Classify text written with the `todo:` prefix convention."""
        return cls.TODO if text.startswith(TODO_PREFIX) else cls.PLAIN


class NoteContentMixin:
    """Columns shared by active and trashed notes."""

    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    attachment: Mapped[dict[str, Any] | None] = mapped_column(
        JSON,
        nullable=True,
    )
    kind: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=NoteKind.PLAIN.value,
    )
    done: Mapped[bool | None] = mapped_column(
        nullable=True,
    )


# Fields carried across the active <-> trash move
CONTENT_FIELDS = ("text", "attachment", "kind", "done")


class Note(UUIDMixin, OwnedMixin, TimestampMixin, NoteContentMixin, Base):
    """An active note in its owner's notes collection."""

    __tablename__ = "notes"

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, owner_id={self.owner_id}, kind={self.kind})>"


class TrashedNote(UUIDMixin, OwnedMixin, TimestampMixin, NoteContentMixin, Base):
    """A soft-deleted note in its owner's trash collection."""

    __tablename__ = "trashed_notes"

    deleted_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<TrashedNote(id={self.id}, owner_id={self.owner_id})>"
