"""Shared fixtures, including an in-memory stand-in for Cosmos DB containers."""

from __future__ import annotations

import asyncio
import copy
import itertools
import re
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.cosmos.exceptions import (
    CosmosBatchOperationError,
    CosmosHttpResponseError,
    CosmosResourceExistsError,
    CosmosResourceNotFoundError,
)

from wantok.config import OpenAIConfig, QueueConfig
from wantok.models.sentence import Sentence
from wantok.models.user import Role, User

_etags = itertools.count(1)


class FakeContainer:
    """Async container keeping documents in memory with etag checks.

    Every read and write yields to the event loop once so concurrent tasks
    interleave the way independent clients would.
    """

    def __init__(self, partition_field: str) -> None:
        self._partition_field = partition_field
        self.items: dict[tuple[Any, str], dict[str, Any]] = {}

    def _key(self, body: dict[str, Any]) -> tuple[Any, str]:
        return (body[self._partition_field], body["id"])

    @staticmethod
    def _stamp(body: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(body)
        stored["_etag"] = f"etag-{next(_etags)}"
        return stored

    def documents(self, doc_type: str | None = None) -> list[dict[str, Any]]:
        return [
            copy.deepcopy(doc)
            for doc in self.items.values()
            if doc_type is None or doc.get("type") == doc_type
        ]

    def seed(self, body: dict[str, Any]) -> dict[str, Any]:
        stored = self._stamp(body)
        self.items[self._key(body)] = stored
        return copy.deepcopy(stored)

    def query_items(
        self,
        query: str,
        parameters: list[dict[str, Any]] | None = None,
        partition_key: Any = None,
        **_: Any,
    ):
        """Evaluate the small SQL subset the repositories issue."""
        return self._query(query, parameters or [], partition_key)

    async def _query(self, query: str, parameters: list, partition_key: Any):
        rows = list(self.items.values())
        if partition_key is not None:
            rows = [r for r in rows if r.get(self._partition_field) == partition_key]
        doc_type = re.search(r"c\.type = '(\w+)'", query)
        if doc_type:
            rows = [r for r in rows if r.get("type") == doc_type.group(1)]
        if "NOT IS_DEFINED(c.deleted_at)" in query:
            rows = [r for r in rows if "deleted_at" not in r]
        limit = None
        for param in parameters:
            name = param["name"].lstrip("@")
            if name == "limit":
                limit = param["value"]
                continue
            rows = [r for r in rows if r.get(name) == param["value"]]
        if "GROUP BY c.status" in query:
            counts: dict[str, int] = {}
            for row in rows:
                counts[row["status"]] = counts.get(row["status"], 0) + 1
            for status, n in counts.items():
                yield {"status": status, "n": n}
            return
        order = re.search(r"ORDER BY c\.(\w+) (ASC|DESC)", query)
        if order:
            rows.sort(key=lambda r: r[order.group(1)], reverse=order.group(2) == "DESC")
        for row in rows[:limit]:
            yield copy.deepcopy(row)

    async def read_item(self, item: str, partition_key: Any) -> dict[str, Any]:
        await asyncio.sleep(0)
        doc = self.items.get((partition_key, item))
        if doc is None:
            raise CosmosResourceNotFoundError(status_code=404, message="Not found")
        return copy.deepcopy(doc)

    async def create_item(self, body: dict[str, Any]) -> dict[str, Any]:
        await asyncio.sleep(0)
        if self._key(body) in self.items:
            raise CosmosResourceExistsError(status_code=409, message="Conflict")
        return self.seed(body)

    async def upsert_item(self, body: dict[str, Any]) -> dict[str, Any]:
        await asyncio.sleep(0)
        return self.seed(body)

    async def replace_item(
        self,
        item: str,
        body: dict[str, Any],
        etag: str | None = None,
        match_condition: Any = None,
    ) -> dict[str, Any]:
        await asyncio.sleep(0)
        current = self.items.get(self._key({**body, "id": item}))
        if current is None:
            raise CosmosResourceNotFoundError(status_code=404, message="Not found")
        if etag is not None and match_condition is not None and current["_etag"] != etag:
            raise CosmosHttpResponseError(status_code=412, message="Precondition failed")
        return self.seed(body)

    def _check(self, staged: dict, op: tuple) -> tuple[int, tuple | None]:
        kind, args = op[0], op[1]
        options = op[2] if len(op) > 2 else {}
        body = args[-1]
        key = self._key(body if kind != "replace" else {**body, "id": args[0]})
        current = staged.get(key)
        if kind == "create" and current is not None:
            return 409, None
        if kind == "replace" and current is None:
            return 404, None
        if_match = options.get("if_match_etag")
        if if_match is not None and (current is None or current["_etag"] != if_match):
            return 412, None
        return 200, (key, self._stamp(body))

    async def execute_item_batch(
        self, batch_operations: list[tuple], partition_key: Any
    ) -> list[dict[str, Any]]:
        await asyncio.sleep(0)
        staged = dict(self.items)
        results: list[dict[str, Any]] = []
        for index, op in enumerate(batch_operations):
            status, write = self._check(staged, op)
            if write is None:
                responses = [{"statusCode": 424} for _ in batch_operations]
                responses[index] = {"statusCode": status}
                raise CosmosBatchOperationError(
                    error_index=index,
                    headers={},
                    status_code=status,
                    message="Batch failed",
                    operation_responses=responses,
                )
            key, stored = write
            if key[0] != partition_key:
                msg = "Batch operations must share the partition key"
                raise AssertionError(msg)
            staged[key] = stored
            results.append({"statusCode": status, "resourceBody": stored})
        self.items = staged
        return results


class FakeDatabase:
    def __init__(self) -> None:
        self.containers = {
            "corpus": FakeContainer("sentence_id"),
            "users": FakeContainer("id"),
        }

    def get_container_client(self, name: str) -> FakeContainer:
        return self.containers[name]


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def corpus(fake_db: FakeDatabase) -> FakeContainer:
    return fake_db.containers["corpus"]


@pytest.fixture
def users_container(fake_db: FakeDatabase) -> FakeContainer:
    return fake_db.containers["users"]


@pytest.fixture
def mock_db() -> MagicMock:
    """A database proxy whose containers are MagicMocks with async methods."""
    db = MagicMock()
    db.get_container_client.return_value = AsyncMock()
    return db


@pytest.fixture
def queue_config() -> QueueConfig:
    return QueueConfig(
        lock_minutes=10,
        target_redundancy=2,
        priority_window=500,
        fallback_window=100,
        experienced_threshold=200,
        language="hula",
    )


@pytest.fixture
def openai_config() -> OpenAIConfig:
    return OpenAIConfig(
        endpoint="https://oai.example.com",
        deployment="gpt-4o",
        api_key="",
    )


@pytest.fixture
def translator() -> User:
    return User(id="user-a", name="Translator A", role=Role.TRANSLATOR)


@pytest.fixture
def reviewer() -> User:
    return User(id="rev-1", name="Reviewer One", role=Role.REVIEWER)


def make_sentence(sentence_id: int, **overrides: Any) -> Sentence:
    fields: dict[str, Any] = {
        "sentence_id": sentence_id,
        "source_text": f"Sentence number {sentence_id}",
        "priority_score": 1.0,
    }
    fields.update(overrides)
    return Sentence(**fields)


@pytest.fixture
def sentence_factory():
    return make_sentence
