"""
Attachment Service.

Stores an uploaded file in the blob store and returns the reference that
gets embedded into a note via create or update. Type and size policy is the
endpoint's concern, not this service's.
"""

import os
import uuid
from typing import BinaryIO

from cloudnotes.backend.core.logging import get_logger
from cloudnotes.backend.schemas.note import Attachment
from cloudnotes.backend.storage.blob import BlobStore

logger = get_logger(__name__)

DEFAULT_MIME = "application/octet-stream"


def _safe_filename(filename: str) -> str:
    """Strip any client-supplied directory part from the file name."""
    name = os.path.basename(filename.replace("\\", "/")).strip()
    return name or "file"


def _stream_size(stream: BinaryIO) -> int:
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


class AttachmentService:
    """
    Links uploaded blobs to an owner.

    Objects are keyed `<prefix>/<owner_id>/notes/<uuid>_<filename>` so two
    uploads of the same name never collide.
    """

    def __init__(self, blob_store: BlobStore, owner_id: str, key_prefix: str = "users") -> None:
        self.blob_store = blob_store
        self.owner_id = owner_id
        self.key_prefix = key_prefix.strip("/")

    def object_key(self, filename: str) -> str:
        return f"{self.key_prefix}/{self.owner_id}/notes/{uuid.uuid4()}_{_safe_filename(filename)}"

    async def upload(
        self,
        stream: BinaryIO,
        filename: str,
        mime_type: str | None,
    ) -> Attachment:
        """
        Store `stream` and describe it as an attachment.

        Raises:
            StorageError: If the blob store rejects the upload
        """
        name = _safe_filename(filename)
        mime = mime_type or DEFAULT_MIME
        size = _stream_size(stream)
        key = self.object_key(name)

        logger.info(
            "Uploading attachment",
            extra={"owner_id": self.owner_id, "key": key, "mime": mime, "size": size},
        )
        url = await self.blob_store.put(key, stream, mime)

        return Attachment(name=name, mime=mime, size=size, url=url)
