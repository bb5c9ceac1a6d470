"""
Attachment Upload Endpoint.

Accepts one multipart file and returns the attachment reference to embed in
a note via POST /notes or PUT /notes/{id}. The upload itself does not touch
any note.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from cloudnotes.backend.core.config import get_app_config
from cloudnotes.backend.core.dependencies import CurrentIdentity, RequestId
from cloudnotes.backend.core.exceptions import ValidationError
from cloudnotes.backend.schemas.base import ApiResponse, ResponseMetadata
from cloudnotes.backend.schemas.note import Attachment
from cloudnotes.backend.services.attachment import AttachmentService
from cloudnotes.backend.storage.blob import BlobStore, get_blob_store

router = APIRouter()

BlobStoreDep = Annotated[BlobStore, Depends(get_blob_store)]


@router.post(
    "",
    response_model=ApiResponse[Attachment],
    status_code=201,
    summary="Upload an attachment",
)
async def upload_attachment(
    identity: CurrentIdentity,
    blob_store: BlobStoreDep,
    request_id: RequestId,
    file: UploadFile | None = File(None),
) -> ApiResponse[Attachment]:
    """
    Store an uploaded file under the caller's namespace.

    Raises:
        ValidationError: If no file is sent or it exceeds storage.max_upload_bytes
        StorageError: If the blob store rejects the upload
    """
    if file is None:
        raise ValidationError("No file uploaded", details={"field": "file"})

    storage = get_app_config().storage
    try:
        if file.size is not None and file.size > storage.max_upload_bytes:
            raise ValidationError(
                "File too large",
                details={"size": file.size, "limit": storage.max_upload_bytes},
            )

        service = AttachmentService(blob_store, identity.owner_id, key_prefix=storage.key_prefix)
        attachment = await service.upload(
            file.file,
            file.filename or "file",
            file.content_type,
        )
    finally:
        await file.close()

    return ApiResponse(
        data=attachment,
        metadata=ResponseMetadata(request_id=request_id),
    )
