from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

import inject

from src.app.domain.exceptions import ProvisioningError, UpstreamFailureError
from src.app.domain.models import ProvisionedResources
from src.app.domain.repositories import (
    BlobStoreRepository,
    EventFanoutRepository,
    TaskTableRepository,
)
from src.setup.aws_config import QUEUE_NAME, TOPIC_NAME, get_aws_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

TABLE_HASH_KEY = "id"
SUBSCRIPTION_PROTOCOL = "sqs"


class ResourceProvisioner:
    """Ensures the bucket, table, topic, queue and subscription exist.

    Bucket and table are created only when a listing does not include them;
    topic and queue creation return the existing resource when the name is
    taken. Subscribing twice is not guarded against. The first failing step
    aborts the run without undoing earlier steps, so a later run picks up
    where this one stopped.
    """

    def __init__(
        self,
        blobs: BlobStoreRepository | None = None,
        table: TaskTableRepository | None = None,
        fanout: EventFanoutRepository | None = None,
        *,
        bucket: str | None = None,
        table_name: str | None = None,
        topic_name: str = TOPIC_NAME,
        queue_name: str = QUEUE_NAME,
    ) -> None:
        settings = get_aws_settings()
        self._blobs = blobs or inject.instance(BlobStoreRepository)
        self._table = table or inject.instance(TaskTableRepository)
        self._fanout = fanout or inject.instance(EventFanoutRepository)
        self._bucket = bucket or settings.S3_BUCKET
        self._table_name = table_name or settings.DYNAMO_TABLE
        self._topic_name = topic_name
        self._queue_name = queue_name

    async def ensure(self) -> ProvisionedResources:
        bucket_created = await self._step("bucket", self._ensure_bucket())
        table_created = await self._step("table", self._ensure_table())

        topic_arn = await self._step("topic", self._fanout.create_topic(self._topic_name))
        logger.info("Topic ready: %s", topic_arn, extra={"topic_arn": topic_arn})

        queue_url = await self._step("queue", self._fanout.create_queue(self._queue_name))
        queue_arn = await self._step("queue", self._fanout.get_queue_arn(queue_url))
        logger.info(
            "Queue ready: %s (%s)",
            queue_url,
            queue_arn,
            extra={"queue_url": queue_url, "queue_arn": queue_arn},
        )

        subscription_arn = await self._step(
            "subscription",
            self._fanout.subscribe(topic_arn, SUBSCRIPTION_PROTOCOL, queue_arn),
        )
        logger.info(
            "Subscribed queue %s to topic %s",
            queue_arn,
            topic_arn,
            extra={"topic_arn": topic_arn, "queue_arn": queue_arn},
        )

        return ProvisionedResources(
            bucket=self._bucket,
            bucket_created=bucket_created,
            table=self._table_name,
            table_created=table_created,
            topic_arn=topic_arn,
            queue_url=queue_url,
            queue_arn=queue_arn,
            subscription_arn=subscription_arn,
        )

    async def _ensure_bucket(self) -> bool:
        if self._bucket in await self._blobs.list_buckets():
            logger.info("Bucket exists %s", self._bucket, extra={"bucket": self._bucket})
            return False
        await self._blobs.create_bucket(self._bucket)
        logger.info("Created bucket %s", self._bucket, extra={"bucket": self._bucket})
        return True

    async def _ensure_table(self) -> bool:
        if self._table_name in await self._table.list_tables():
            logger.info("Table exists %s", self._table_name, extra={"table": self._table_name})
            return False
        await self._table.create_table(self._table_name, TABLE_HASH_KEY)
        logger.info("Created table %s", self._table_name, extra={"table": self._table_name})
        return True

    @staticmethod
    async def _step(name: str, operation: Awaitable[T]) -> T:
        try:
            return await operation
        except UpstreamFailureError as exc:
            logger.error(
                "Provisioning step '%s' failed: %s",
                name,
                exc,
                extra={"step": name, "operation": exc.operation},
            )
            raise ProvisioningError(name, exc) from exc
