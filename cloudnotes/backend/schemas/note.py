"""
Note Schemas.

Pydantic schemas for note, trash and attachment request/response validation.
"""

from datetime import datetime

from pydantic import AliasChoices, ConfigDict, Field

from cloudnotes.backend.models.note import NoteKind
from cloudnotes.backend.schemas.base import CamelModel

MAX_TEXT_LENGTH = 100_000


class Attachment(CamelModel):
    """Reference to a blob stored outside the note store."""

    name: str = Field(description="Original file name", examples=["receipt.pdf"])
    mime: str = Field(description="Content type", examples=["application/pdf"])
    size: int = Field(ge=0, description="Size in bytes")
    url: str = Field(description="Retrieval URL")


class NoteCreate(CamelModel):
    """Schema for creating a new note. Every field is optional."""

    model_config = ConfigDict(extra="ignore")

    text: str | None = Field(
        default=None,
        max_length=MAX_TEXT_LENGTH,
        description="Note content; missing or null means empty",
        examples=["buy milk"],
    )
    attachment: Attachment | None = Field(
        default=None,
        validation_alias=AliasChoices("attachment", "file"),
        description="Attachment returned by POST /upload",
    )
    kind: NoteKind | None = Field(
        default=None,
        description="plain or todo; derived from a `todo:` text prefix when omitted",
    )
    done: bool | None = Field(
        default=None,
        description="Completion flag for todo notes",
    )


class NoteUpdate(CamelModel):
    """
    Schema for updating an existing note.

    Only fields present in the request body are applied. Sending
    `attachment: null` or `done: null` clears that field; `text` cannot be null.
    """

    model_config = ConfigDict(extra="ignore")

    text: str = Field(
        default="",
        max_length=MAX_TEXT_LENGTH,
        description="Note content",
    )
    attachment: Attachment | None = Field(
        default=None,
        validation_alias=AliasChoices("attachment", "file"),
        description="Attachment reference",
    )
    done: bool | None = Field(
        default=None,
        description="Completion flag",
    )


class NoteResponse(CamelModel):
    """An active note."""

    id: str = Field(description="Note identifier in the active collection")
    text: str = Field(description="Note content")
    attachment: Attachment | None = Field(default=None, description="Attachment reference")
    kind: NoteKind = Field(description="plain or todo")
    done: bool | None = Field(default=None, description="Completion flag")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last mutation timestamp")


class TrashedNoteResponse(NoteResponse):
    """A note in the trash. `id` is the trash entry id, not the former note id."""

    id: str = Field(description="Trash entry identifier")
    deleted_at: datetime = Field(description="Soft-delete timestamp")


class IdentityResponse(CamelModel):
    """The authenticated caller."""

    owner_id: str
    email: str | None = None
