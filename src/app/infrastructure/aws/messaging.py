from __future__ import annotations

from typing import Any

from src.app.domain.repositories import EventFanoutRepository
from src.app.infrastructure.aws.errors import call


class SnsSqsFanout(EventFanoutRepository):
    """SNS topic fanned out to an SQS queue."""

    def __init__(self, sns_client: Any, sqs_client: Any) -> None:
        self._sns = sns_client
        self._sqs = sqs_client

    async def create_topic(self, name: str) -> str:
        response = await call("sns.create_topic", self._sns.create_topic, Name=name)
        return response["TopicArn"]

    async def create_queue(self, name: str) -> str:
        response = await call("sqs.create_queue", self._sqs.create_queue, QueueName=name)
        return response["QueueUrl"]

    async def get_queue_arn(self, queue_url: str) -> str:
        response = await call(
            "sqs.get_queue_attributes",
            self._sqs.get_queue_attributes,
            QueueUrl=queue_url,
            AttributeNames=["QueueArn"],
        )
        return response["Attributes"]["QueueArn"]

    async def subscribe(self, topic_arn: str, protocol: str, endpoint: str) -> str | None:
        response = await call(
            "sns.subscribe",
            self._sns.subscribe,
            TopicArn=topic_arn,
            Protocol=protocol,
            Endpoint=endpoint,
        )
        return response.get("SubscriptionArn")
