from __future__ import annotations

import base64
import binascii
import logging
import re
from uuid import uuid4

import inject

from src.app.domain.exceptions import (
    PartialFailureError,
    UploadValidationError,
    UpstreamFailureError,
)
from src.app.domain.models import ImageUpload
from src.app.domain.repositories import BlobStoreRepository
from src.setup.aws_config import get_aws_settings

logger = logging.getLogger(__name__)

BASE64_CONTENT_TYPE = "image/jpeg"
_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")


def decode_base64_image(data: str) -> bytes:
    """Decode ``data``, ignoring an optional ``<mime>;base64,`` prefix.

    The payload is the segment after the first comma; when that segment is
    missing or empty the whole string is decoded. Characters outside the
    base64 alphabet are dropped and padding is restored.
    """
    segments = data.split(",")
    encoded = segments[1] if len(segments) > 1 and segments[1] else data
    encoded = _NON_BASE64.sub("", encoded)
    encoded += "=" * (-len(encoded) % 4)
    try:
        return base64.b64decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise UploadValidationError("Invalid base64 data") from exc


class ImageLifecycleManager:
    """Stores uploaded task images as blobs and removes them with their task.

    Uploads are not attached to any task; a client attaches one by setting
    ``imageKey`` on the task afterwards. Blobs that are never attached, or whose
    key is later replaced, stay in the bucket.
    """

    def __init__(
        self,
        blobs: BlobStoreRepository | None = None,
        *,
        bucket: str | None = None,
    ) -> None:
        self._blobs = blobs or inject.instance(BlobStoreRepository)
        self._bucket = bucket or get_aws_settings().S3_BUCKET

    async def upload_binary(self, body: bytes | None, content_type: str | None) -> ImageUpload:
        """Store raw image bytes under a freshly generated key."""
        if not body:
            raise UploadValidationError("Missing file")
        return await self._store(body, content_type)

    async def upload_base64(self, data: str | None) -> ImageUpload:
        """Store a base64 (optionally data-URI) encoded JPEG under a fresh key."""
        if not data:
            raise UploadValidationError("Missing base64 data")
        body = decode_base64_image(data)
        if not body:
            raise UploadValidationError("Invalid base64 data")
        return await self._store(body, BASE64_CONTENT_TYPE)

    async def remove(self, key: str) -> None:
        """Delete the blob ``key``; a failure is reported as a partial failure."""
        try:
            await self._blobs.delete_object(self._bucket, key)
        except UpstreamFailureError as exc:
            raise PartialFailureError(key, exc) from exc
        logger.info(
            "Deleted image %s from bucket %s",
            key,
            self._bucket,
            extra={"key": key, "bucket": self._bucket},
        )

    async def _store(self, body: bytes, content_type: str | None) -> ImageUpload:
        generated_id = str(uuid4())
        key = f"{generated_id}.jpg"
        try:
            await self._blobs.put_object(self._bucket, key, body, content_type)
        except UpstreamFailureError:
            logger.error(
                "Image upload of %s to bucket %s failed",
                key,
                self._bucket,
                extra={"key": key, "bucket": self._bucket},
            )
            raise
        logger.info(
            "Stored image %s in bucket %s (%d bytes)",
            key,
            self._bucket,
            len(body),
            extra={"key": key, "bucket": self._bucket, "size": len(body)},
        )
        return ImageUpload(generated_id=generated_id, blob_key=key, bucket=self._bucket)
