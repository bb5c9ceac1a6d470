# Pydantic schemas package
from cloudnotes.backend.schemas.base import (
    ApiResponse,
    ErrorDetail,
    ErrorResponse,
    OkResponse,
    ResponseMetadata,
)

__all__ = [
    "ApiResponse",
    "ErrorDetail",
    "ErrorResponse",
    "OkResponse",
    "ResponseMetadata",
]
