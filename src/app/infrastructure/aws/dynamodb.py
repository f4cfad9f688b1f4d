from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from src.app.domain.exceptions import UpstreamFailureError
from src.app.domain.repositories import TaskTableRepository
from src.app.infrastructure.aws.errors import call

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def to_dynamo(item: dict[str, Any]) -> dict[str, Any]:
    # DynamoDB numbers must be Decimal; JSON floats are not accepted.
    plain = json.loads(json.dumps(item), parse_float=Decimal)
    return {name: _serializer.serialize(value) for name, value in plain.items()}


def _encode(operation: str, item: dict[str, Any]) -> dict[str, Any]:
    try:
        return to_dynamo(item)
    except (TypeError, ValueError, ArithmeticError) as exc:
        # NaN and Infinity have no DynamoDB number representation.
        raise UpstreamFailureError(operation, exc) from exc


def _plain(value: Any) -> Any:
    # Integral numbers come back as int, so 2.0 is read as 2.
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, set)):
        return [_plain(v) for v in value]
    return value


def from_dynamo(attributes: dict[str, Any]) -> dict[str, Any]:
    return {
        name: _plain(_deserializer.deserialize(value))
        for name, value in attributes.items()
    }


class DynamoTaskTable(TaskTableRepository):
    """DynamoDB-backed task table using a low-level boto3 client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    async def put_item(self, table: str, item: dict[str, Any]) -> None:
        await call(
            "dynamodb.put_item",
            self._client.put_item,
            TableName=table,
            Item=_encode("dynamodb.put_item", item),
        )

    async def get_item(self, table: str, key: dict[str, Any]) -> dict[str, Any] | None:
        response = await call(
            "dynamodb.get_item",
            self._client.get_item,
            TableName=table,
            Key=_encode("dynamodb.get_item", key),
            ConsistentRead=True,
        )
        attributes = response.get("Item")
        if not attributes:
            return None
        return from_dynamo(attributes)

    async def delete_item(self, table: str, key: dict[str, Any]) -> None:
        await call(
            "dynamodb.delete_item",
            self._client.delete_item,
            TableName=table,
            Key=_encode("dynamodb.delete_item", key),
        )

    async def list_tables(self) -> list[str]:
        names: list[str] = []
        kwargs: dict[str, Any] = {}
        while True:
            response = await call("dynamodb.list_tables", self._client.list_tables, **kwargs)
            names.extend(response.get("TableNames", []))
            last = response.get("LastEvaluatedTableName")
            if not last:
                return names
            kwargs = {"ExclusiveStartTableName": last}

    async def create_table(self, table: str, hash_key: str) -> None:
        await call(
            "dynamodb.create_table",
            self._client.create_table,
            TableName=table,
            BillingMode="PAY_PER_REQUEST",
            AttributeDefinitions=[{"AttributeName": hash_key, "AttributeType": "S"}],
            KeySchema=[{"AttributeName": hash_key, "KeyType": "HASH"}],
        )
