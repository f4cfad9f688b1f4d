from __future__ import annotations

from typing import Any

from src.app.domain.repositories import BlobStoreRepository
from src.app.infrastructure.aws.errors import call


class S3BlobStore(BlobStoreRepository):
    """S3-backed blob store for task images."""

    def __init__(self, client: Any) -> None:
        self._client = client

    async def put_object(
        self, bucket: str, key: str, body: bytes, content_type: str | None
    ) -> None:
        kwargs: dict[str, Any] = {"Bucket": bucket, "Key": key, "Body": body}
        if content_type:
            kwargs["ContentType"] = content_type
        await call("s3.put_object", self._client.put_object, **kwargs)

    async def delete_object(self, bucket: str, key: str) -> None:
        await call("s3.delete_object", self._client.delete_object, Bucket=bucket, Key=key)

    async def list_buckets(self) -> list[str]:
        response = await call("s3.list_buckets", self._client.list_buckets)
        return [bucket["Name"] for bucket in response.get("Buckets", [])]

    async def create_bucket(self, bucket: str) -> None:
        kwargs: dict[str, Any] = {"Bucket": bucket}
        region = self._client.meta.region_name
        # us-east-1 rejects an explicit LocationConstraint.
        if region and region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
        await call("s3.create_bucket", self._client.create_bucket, **kwargs)
