from __future__ import annotations

import asyncio
import importlib
from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.domain.exceptions import UpstreamFailureError
from src.app.domain.repositories import (
    BlobStoreRepository,
    EventFanoutRepository,
    TaskTableRepository,
)


def _fail(operation: str) -> UpstreamFailureError:
    return UpstreamFailureError(operation, RuntimeError("service unavailable"))


class FakeTaskTable(TaskTableRepository):
    """In-memory task table recording every call."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.failing: set[str] = set()
        # When set, reads wait on it after fetching, so tests can interleave writes.
        self.read_gate: asyncio.Event | None = None

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise _fail(operation)

    def rows(self, table: str = "Tasks") -> dict[str, dict[str, Any]]:
        return self.tables.get(table, {})

    async def put_item(self, table: str, item: dict[str, Any]) -> None:
        self.calls.append(("put_item", table, item["id"]))
        self._check("put_item")
        self.tables.setdefault(table, {})[item["id"]] = dict(item)

    async def get_item(self, table: str, key: dict[str, Any]) -> dict[str, Any] | None:
        self.calls.append(("get_item", table, key["id"]))
        self._check("get_item")
        item = self.tables.get(table, {}).get(key["id"])
        if self.read_gate is not None:
            await self.read_gate.wait()
        return dict(item) if item is not None else None

    async def delete_item(self, table: str, key: dict[str, Any]) -> None:
        self.calls.append(("delete_item", table, key["id"]))
        self._check("delete_item")
        self.tables.get(table, {}).pop(key["id"], None)

    async def list_tables(self) -> list[str]:
        self.calls.append(("list_tables",))
        self._check("list_tables")
        return list(self.tables)

    async def create_table(self, table: str, hash_key: str) -> None:
        self.calls.append(("create_table", table, hash_key))
        self._check("create_table")
        if table in self.tables:
            raise _fail("create_table")
        self.tables[table] = {}


class FakeBlobStore(BlobStoreRepository):
    """In-memory object store recording every call."""

    def __init__(self) -> None:
        self.buckets: dict[str, dict[str, tuple[bytes, str | None]]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.failing: set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise _fail(operation)

    async def put_object(
        self, bucket: str, key: str, body: bytes, content_type: str | None
    ) -> None:
        self.calls.append(("put_object", bucket, key))
        self._check("put_object")
        self.buckets.setdefault(bucket, {})[key] = (body, content_type)

    async def delete_object(self, bucket: str, key: str) -> None:
        self.calls.append(("delete_object", bucket, key))
        self._check("delete_object")
        self.buckets.get(bucket, {}).pop(key, None)

    async def list_buckets(self) -> list[str]:
        self.calls.append(("list_buckets",))
        self._check("list_buckets")
        return list(self.buckets)

    async def create_bucket(self, bucket: str) -> None:
        self.calls.append(("create_bucket", bucket))
        self._check("create_bucket")
        if bucket in self.buckets:
            raise _fail("create_bucket")
        self.buckets[bucket] = {}


class FakeEventFanout(EventFanoutRepository):
    """Topic/queue fake where creation by an existing name returns the same resource."""

    def __init__(self) -> None:
        self.topics: dict[str, str] = {}
        self.queues: dict[str, str] = {}
        self.subscriptions: list[tuple[str, str, str]] = []
        self.calls: list[tuple[str, ...]] = []
        self.failing: set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise _fail(operation)

    async def create_topic(self, name: str) -> str:
        self.calls.append(("create_topic", name))
        self._check("create_topic")
        return self.topics.setdefault(name, f"arn:aws:sns:us-east-1:000000000000:{name}")

    async def create_queue(self, name: str) -> str:
        self.calls.append(("create_queue", name))
        self._check("create_queue")
        return self.queues.setdefault(name, f"http://localhost:4566/000000000000/{name}")

    async def get_queue_arn(self, queue_url: str) -> str:
        self.calls.append(("get_queue_arn", queue_url))
        self._check("get_queue_arn")
        name = queue_url.rsplit("/", 1)[-1]
        return f"arn:aws:sqs:us-east-1:000000000000:{name}"

    async def subscribe(self, topic_arn: str, protocol: str, endpoint: str) -> str | None:
        self.calls.append(("subscribe", topic_arn, protocol, endpoint))
        self._check("subscribe")
        self.subscriptions.append((topic_arn, protocol, endpoint))
        return f"{topic_arn}:sub-{len(self.subscriptions)}"


@pytest.fixture
def env_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the resource names and read path regardless of the developer's .env."""
    monkeypatch.setenv("S3_BUCKET", "task-images")
    monkeypatch.setenv("DYNAMO_TABLE", "Tasks")
    monkeypatch.setenv("TASK_READ_THROUGH", "true")
    monkeypatch.setenv("PROVISION_ON_STARTUP", "false")


@pytest.fixture
def task_table() -> FakeTaskTable:
    return FakeTaskTable()


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def event_fanout() -> FakeEventFanout:
    return FakeEventFanout()


def _patch_inject_instance(
    monkeypatch: pytest.MonkeyPatch,
    table: FakeTaskTable,
    blobs: FakeBlobStore,
    fanout: FakeEventFanout,
) -> Callable[[object], object]:
    """Patch `inject.instance` to hand out the fakes."""
    import inject

    bindings: dict[object, object] = {
        TaskTableRepository: table,
        BlobStoreRepository: blobs,
        EventFanoutRepository: fanout,
    }

    def fake_instance(interface: object) -> object:
        if interface in bindings:
            return bindings[interface]
        raise RuntimeError(f"Unexpected dependency request: {interface}")

    monkeypatch.setattr(inject, "instance", fake_instance)
    return fake_instance


@pytest.fixture
def injected_fakes(
    env_settings: None,
    monkeypatch: pytest.MonkeyPatch,
    task_table: FakeTaskTable,
    blob_store: FakeBlobStore,
    event_fanout: FakeEventFanout,
):
    _patch_inject_instance(monkeypatch, task_table, blob_store, event_fanout)
    return task_table, blob_store, event_fanout


@pytest.fixture
def api_client(injected_fakes):
    """FastAPI test client with the routes wired to the fakes."""
    # Reload so the module-level services pick up the patched injector.
    routes_module = importlib.reload(importlib.import_module("src.app.presentation.routes"))

    app = FastAPI()
    app.include_router(routes_module.router)
    client = TestClient(app)
    task_table, blob_store, _ = injected_fakes
    return client, task_table, blob_store
