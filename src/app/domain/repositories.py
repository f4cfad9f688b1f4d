from __future__ import annotations

from typing import Any, Protocol


class TaskTableRepository(Protocol):
    """Contract for the durable key-value table holding task records."""

    async def put_item(self, table: str, item: dict[str, Any]) -> None:
        """Write ``item`` to ``table``, replacing any record with the same key."""

    async def get_item(self, table: str, key: dict[str, Any]) -> dict[str, Any] | None:
        """Return the record stored under ``key`` or ``None``."""

    async def delete_item(self, table: str, key: dict[str, Any]) -> None:
        """Remove the record stored under ``key``."""

    async def list_tables(self) -> list[str]:
        """Return the names of all existing tables."""

    async def create_table(self, table: str, hash_key: str) -> None:
        """Create ``table`` with a single string hash key and on-demand capacity."""


class BlobStoreRepository(Protocol):
    """Contract for the object store holding image blobs."""

    async def put_object(
        self, bucket: str, key: str, body: bytes, content_type: str | None
    ) -> None:
        """Store ``body`` under ``key``."""

    async def delete_object(self, bucket: str, key: str) -> None:
        """Remove the object stored under ``key``."""

    async def list_buckets(self) -> list[str]:
        """Return the names of all existing buckets."""

    async def create_bucket(self, bucket: str) -> None:
        """Create ``bucket``."""


class EventFanoutRepository(Protocol):
    """Contract for the topic/queue pair that fans out task events."""

    async def create_topic(self, name: str) -> str:
        """Create (or look up) the topic ``name`` and return its ARN."""

    async def create_queue(self, name: str) -> str:
        """Create (or look up) the queue ``name`` and return its URL."""

    async def get_queue_arn(self, queue_url: str) -> str:
        """Return the ARN of the queue at ``queue_url``."""

    async def subscribe(self, topic_arn: str, protocol: str, endpoint: str) -> str | None:
        """Subscribe ``endpoint`` to ``topic_arn`` and return the subscription ARN."""
