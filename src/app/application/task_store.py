from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

import inject

from src.app.application.images import ImageLifecycleManager
from src.app.application.task_cache import TaskCache
from src.app.domain.exceptions import (
    PartialFailureError,
    TaskNotFoundError,
    UpstreamFailureError,
)
from src.app.domain.models import TaskDeletion, TaskRecord
from src.app.domain.repositories import TaskTableRepository
from src.setup.api_config import get_api_settings
from src.setup.aws_config import get_aws_settings

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string with millisecond precision, e.g. ``...T10:00:00.000Z``."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def timestamp_id() -> str:
    """Identifier for tasks created without one: milliseconds since the epoch."""
    return str(time.time_ns() // 1_000_000)


class TaskStore:
    """Task records cached in process and written through to the task table.

    Every write goes to the cache first and the table second, as two separate
    calls. A failed table write leaves the cache updated. Reads are answered by
    the cache; with ``read_through`` enabled a cache miss is looked up in the
    table and the result cached.
    """

    def __init__(
        self,
        table: TaskTableRepository | None = None,
        images: ImageLifecycleManager | None = None,
        *,
        table_name: str | None = None,
        cache: TaskCache | None = None,
        read_through: bool | None = None,
    ) -> None:
        self._table = table or inject.instance(TaskTableRepository)
        self._images = images or ImageLifecycleManager()
        self._table_name = table_name or get_aws_settings().DYNAMO_TABLE
        self._cache = cache if cache is not None else TaskCache()
        if read_through is None:
            read_through = get_api_settings().TASK_READ_THROUGH
        self._read_through = read_through

    @property
    def cache(self) -> TaskCache:
        return self._cache

    async def create(self, payload: dict[str, Any] | None) -> TaskRecord:
        """Store a new task, keeping caller-supplied ``id``/``createdAt``/``updatedAt``."""
        payload = dict(payload or {})
        raw_id = payload.get("id")
        task_id = str(raw_id) if raw_id is not None else timestamp_id()
        record = TaskRecord.from_item(
            {
                **payload,
                "id": task_id,
                "createdAt": payload.get("createdAt") or utc_timestamp(),
                "updatedAt": payload.get("updatedAt") or None,
            }
        )
        self._cache.put(record)
        await self._write(record, "create")
        return record

    async def get(self, task_id: str) -> TaskRecord:
        record = await self._lookup(task_id)
        if record is None:
            raise TaskNotFoundError(task_id)
        return record

    async def update(self, task_id: str, payload: dict[str, Any] | None) -> TaskRecord:
        """Merge ``payload`` over the current record; ``id`` and ``createdAt`` never change."""
        previous = await self._lookup(task_id)
        current = previous.to_item() if previous is not None else {}
        merged = {**current, **(payload or {}), "id": task_id, "updatedAt": utc_timestamp()}
        if "createdAt" in current:
            merged["createdAt"] = current["createdAt"]
        record = TaskRecord.from_item(merged)
        self._cache.put(record)
        await self._write(record, "update")
        return record

    async def delete(self, task_id: str) -> TaskDeletion:
        """Remove a task, its image blob (best effort), table row and cache entry."""
        record = await self._lookup(task_id)
        if record is None:
            raise TaskNotFoundError(task_id)

        if record.imageKey:
            try:
                await self._images.remove(record.imageKey)
            except PartialFailureError as exc:
                logger.warning(
                    "Failed to delete image %s of task %s, continuing with task deletion",
                    exc.blob_key,
                    task_id,
                    extra={"task_id": task_id, "key": exc.blob_key},
                    exc_info=exc.cause,
                )

        try:
            await self._table.delete_item(self._table_name, {"id": task_id})
        except UpstreamFailureError:
            logger.error("Delete of task %s failed", task_id, extra={"task_id": task_id})
            raise
        self._cache.pop(task_id)
        return TaskDeletion(id=task_id)

    async def _lookup(self, task_id: str) -> TaskRecord | None:
        record = self._cache.get(task_id)
        if record is not None or not self._read_through:
            return record
        item = await self._table.get_item(self._table_name, {"id": task_id})
        if item is None:
            return None
        # A write that reached the cache while the table read was pending wins.
        return self._cache.setdefault(TaskRecord.from_item(item))

    async def _write(self, record: TaskRecord, action: str) -> None:
        try:
            await self._table.put_item(self._table_name, record.to_item())
        except UpstreamFailureError:
            logger.error(
                "Task %s %s failed after cache update",
                record.id,
                action,
                extra={"task_id": record.id, "action": action},
            )
            raise
