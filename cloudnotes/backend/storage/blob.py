"""
Blob Store.

S3-compatible object storage for note attachments (AWS S3, Cloudflare R2,
MinIO). boto3 is synchronous, so every call runs on the shared I/O pool.

Retrieval URLs are `public_base_url/key` when a public base is configured,
otherwise presigned GET URLs valid for `presign_expiry_seconds`.
"""

from typing import Any, BinaryIO, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from cloudnotes.backend.core.concurrency import run_blocking
from cloudnotes.backend.core.config_schema import StorageSchema
from cloudnotes.backend.core.exceptions import StorageError
from cloudnotes.backend.core.logging import get_logger

logger = get_logger(__name__)


class BlobStore(Protocol):
    """Anything that stores a byte stream and returns a retrieval URL."""

    async def put(self, key: str, body: BinaryIO, content_type: str) -> str:
        ...


class S3BlobStore:
    """
    Blob store backed by an S3 bucket.

    Usage:
        store = S3BlobStore(get_app_config().storage, access_key, secret_key)
        url = await store.put("users/u1/notes/abc_file.pdf", fileobj, "application/pdf")
    """

    def __init__(
        self,
        config: StorageSchema,
        access_key: str | None = None,
        secret_key: str | None = None,
        client: Any = None,
    ) -> None:
        self.config = config
        self._client = client or boto3.client(
            "s3",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            endpoint_url=config.endpoint_url,
            region_name=config.region,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": config.addressing_style},
            ),
        )

    def _url_for(self, key: str) -> str:
        if self.config.public_base_url:
            return self.config.public_base_url.rstrip("/") + "/" + key
        return self._client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.config.bucket, "Key": key},
            ExpiresIn=self.config.presign_expiry_seconds,
        )

    def _put_sync(self, key: str, body: BinaryIO, content_type: str) -> str:
        self._client.put_object(
            Bucket=self.config.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )
        return self._url_for(key)

    async def put(self, key: str, body: BinaryIO, content_type: str) -> str:
        """
        Upload `body` under `key` and return its retrieval URL.

        Raises:
            StorageError: If the upload or URL signing fails
        """
        try:
            return await run_blocking(self._put_sync, key, body, content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Blob upload failed",
                extra={"bucket": self.config.bucket, "key": key, "error": str(e)},
            )
            raise StorageError("Attachment upload failed") from e


_blob_store: BlobStore | None = None


def get_blob_store() -> BlobStore:
    """Get the application blob store, built from storage.yaml and secrets on first use."""
    global _blob_store
    if _blob_store is None:
        from cloudnotes.backend.core.config import get_app_config, get_settings

        settings = get_settings()
        _blob_store = S3BlobStore(
            get_app_config().storage,
            access_key=settings.storage_access_key,
            secret_key=settings.storage_secret_key,
        )
        logger.debug("Blob store created", extra={"bucket": get_app_config().storage.bucket})
    return _blob_store
