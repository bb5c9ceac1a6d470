"""
Notes API Endpoints.

REST endpoints for the caller's active notes. Every route acts as the owner
resolved from the bearer token.
"""

from fastapi import APIRouter, Path

from cloudnotes.backend.core.dependencies import CurrentIdentity, DbSession, RequestId
from cloudnotes.backend.schemas.base import ApiResponse, OkResponse, ResponseMetadata
from cloudnotes.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from cloudnotes.backend.services.note import NoteService

router = APIRouter()

NoteId = Path(..., min_length=1, max_length=64, description="Active note id")


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="All active notes of the caller, oldest first.",
)
async def list_notes(
    db: DbSession,
    identity: CurrentIdentity,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """List active notes."""
    service = NoteService(db, identity.owner_id)
    notes = await service.list_notes()
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note with optional text and attachment.",
)
async def create_note(
    db: DbSession,
    identity: CurrentIdentity,
    request_id: RequestId,
    data: NoteCreate | None = None,
) -> ApiResponse[NoteResponse]:
    """Create a note. An empty body creates an empty plain note."""
    service = NoteService(db, identity.owner_id)
    note = await service.create_note(data or NoteCreate())
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Merge the given fields into a note. Absent fields are left unchanged.",
)
async def update_note(
    data: NoteUpdate,
    db: DbSession,
    identity: CurrentIdentity,
    request_id: RequestId,
    note_id: str = NoteId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    service = NoteService(db, identity.owner_id)
    note = await service.update_note(note_id, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[OkResponse],
    summary="Move a note to the trash",
    description="Soft delete: the note moves to the trash under a new id.",
)
async def delete_note(
    db: DbSession,
    identity: CurrentIdentity,
    request_id: RequestId,
    note_id: str = NoteId,
) -> ApiResponse[OkResponse]:
    """Soft-delete a note."""
    service = NoteService(db, identity.owner_id)
    await service.soft_delete(note_id)
    return ApiResponse(
        data=OkResponse(),
        metadata=ResponseMetadata(request_id=request_id),
    )
