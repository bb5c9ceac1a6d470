"""
Base Schemas.

Standard API response envelope shared by every endpoint. Field names go on
the wire in camelCase; request bodies accept camelCase or snake_case.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cloudnotes.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base for wire schemas: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ResponseMetadata(CamelModel):
    """Metadata included in all API responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(CamelModel):
    """Error detail structure. `code` is the machine-readable error kind."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(CamelModel, Generic[DataT]):
    """
    Standard API response envelope.

    All API responses use this structure for consistency.
    """

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class ErrorResponse(CamelModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class OkResponse(CamelModel):
    """Acknowledgement for operations without a resource to return."""

    ok: bool = True
    deleted: int | None = None
