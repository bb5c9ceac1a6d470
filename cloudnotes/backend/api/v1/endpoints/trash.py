"""
Trash API Endpoints.

Listing, restoring and permanently deleting the caller's trashed notes.
"""

from fastapi import APIRouter, Path

from cloudnotes.backend.core.dependencies import CurrentIdentity, DbSession, RequestId
from cloudnotes.backend.schemas.base import ApiResponse, OkResponse, ResponseMetadata
from cloudnotes.backend.schemas.note import NoteResponse, TrashedNoteResponse
from cloudnotes.backend.services.note import NoteService

router = APIRouter()

TrashId = Path(..., min_length=1, max_length=64, description="Trash entry id")


@router.get(
    "",
    response_model=ApiResponse[list[TrashedNoteResponse]],
    summary="List trash",
)
async def list_trash(
    db: DbSession,
    identity: CurrentIdentity,
    request_id: RequestId,
) -> ApiResponse[list[TrashedNoteResponse]]:
    service = NoteService(db, identity.owner_id)
    trashed = await service.list_trash()
    return ApiResponse(
        data=[TrashedNoteResponse.model_validate(item) for item in trashed],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/restore/{trash_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Restore a note",
    description="Move a trash entry back to the active notes. The note gets a new id.",
)
async def restore_note(
    db: DbSession,
    identity: CurrentIdentity,
    request_id: RequestId,
    trash_id: str = TrashId,
) -> ApiResponse[NoteResponse]:
    service = NoteService(db, identity.owner_id)
    note = await service.restore(trash_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{trash_id}",
    response_model=ApiResponse[OkResponse],
    summary="Delete a trash entry permanently",
    description="Idempotent: deleting an entry that does not exist still succeeds.",
)
async def delete_trash_entry(
    db: DbSession,
    identity: CurrentIdentity,
    request_id: RequestId,
    trash_id: str = TrashId,
) -> ApiResponse[OkResponse]:
    service = NoteService(db, identity.owner_id)
    await service.permanent_delete(trash_id)
    return ApiResponse(
        data=OkResponse(),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "",
    response_model=ApiResponse[OkResponse],
    summary="Empty the trash",
)
async def empty_trash(
    db: DbSession,
    identity: CurrentIdentity,
    request_id: RequestId,
) -> ApiResponse[OkResponse]:
    service = NoteService(db, identity.owner_id)
    count = await service.empty_trash()
    return ApiResponse(
        data=OkResponse(deleted=count),
        metadata=ResponseMetadata(request_id=request_id),
    )
