"""Generic repository over a single Cosmos DB container."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, cast

from azure.core import MatchConditions
from azure.cosmos.exceptions import (
    CosmosBatchOperationError,
    CosmosHttpResponseError,
    CosmosResourceNotFoundError,
)

from wantok.exceptions import ConcurrencyConflict, StaleReference
from wantok.models.base import DocumentBase

if TYPE_CHECKING:
    from azure.cosmos.aio import ContainerProxy, DatabaseProxy

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=DocumentBase)

HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409
HTTP_PRECONDITION_FAILED = 412

BatchOperation = tuple[Any, ...]


def create_op(model: DocumentBase) -> BatchOperation:
    return ("create", (model.to_document(),))


def upsert_op(model: DocumentBase) -> BatchOperation:
    """Upsert guarded by the model's etag when it was read from the store."""
    if model.etag:
        return ("upsert", (model.to_document(),), {"if_match_etag": model.etag})
    return ("upsert", (model.to_document(),))


def replace_op(model: DocumentBase) -> BatchOperation:
    if model.etag:
        return (
            "replace",
            (model.id, model.to_document()),
            {"if_match_etag": model.etag},
        )
    return ("replace", (model.id, model.to_document()))


def _batch_status(exc: CosmosBatchOperationError) -> int | None:
    """Return the status code of the operation that failed the batch."""
    responses = getattr(exc, "operation_responses", None) or []
    index = getattr(exc, "error_index", None)
    if isinstance(index, int) and 0 <= index < len(responses):
        status = responses[index].get("statusCode")
        if isinstance(status, int):
            return status
    return exc.status_code


class BaseRepository(Generic[T]):  # noqa: UP046
    """CRUD, optimistic replace and transactional batches for one document type."""

    container_name: ClassVar[str]
    model_class: type[T]

    def __init__(self, database: DatabaseProxy) -> None:
        self._container: ContainerProxy = database.get_container_client(
            self.container_name
        )

    def _to_model(self, data: object, fallback: T) -> T:
        if isinstance(data, dict):
            return self.model_class.model_validate(data)
        return fallback

    async def get(self, item_id: str, partition_key: Any) -> T | None:
        """Fetch a live document by id, or None when missing or soft-deleted."""
        try:
            data = await self._container.read_item(item=item_id, partition_key=partition_key)
        except CosmosResourceNotFoundError:
            return None
        model = self.model_class.model_validate(data)
        if model.deleted_at is not None:
            return None
        return model

    async def require(self, item_id: str, partition_key: Any) -> T:
        """Fetch a live document or raise ``StaleReference``."""
        model = await self.get(item_id, partition_key)
        if model is None:
            raise StaleReference(self.model_class.__name__, item_id)
        return model

    async def create(self, model: T) -> T:
        response = await self._container.create_item(body=model.to_document())
        return self._to_model(response, model)

    async def upsert(self, model: T) -> T:
        model.updated_at = datetime.now(UTC)
        response = await self._container.upsert_item(body=model.to_document())
        return self._to_model(response, model)

    async def update(self, model: T, partition_key: Any) -> T:  # noqa: ARG002
        """Replace a document unconditionally (last writer wins)."""
        model.updated_at = datetime.now(UTC)
        try:
            response = await self._container.replace_item(
                item=model.id, body=model.to_document()
            )
        except CosmosResourceNotFoundError as exc:
            raise StaleReference(self.model_class.__name__, model.id) from exc
        return self._to_model(response, model)

    async def replace_if_unchanged(self, model: T) -> T:
        """Replace a document only if nobody wrote it since it was read."""
        if not model.etag:
            msg = f"{self.model_class.__name__} {model.id} has no etag to match"
            raise ValueError(msg)
        model.updated_at = datetime.now(UTC)
        try:
            response = await self._container.replace_item(
                item=model.id,
                body=model.to_document(),
                etag=model.etag,
                match_condition=MatchConditions.IfNotModified,
            )
        except CosmosHttpResponseError as exc:
            if exc.status_code == HTTP_PRECONDITION_FAILED:
                msg = f"{self.model_class.__name__} {model.id} was modified concurrently"
                raise ConcurrencyConflict(msg) from exc
            if exc.status_code == HTTP_NOT_FOUND:
                raise StaleReference(self.model_class.__name__, model.id) from exc
            raise
        return self._to_model(response, model)

    async def soft_delete(self, model: T, partition_key: Any) -> T:
        model.deleted_at = datetime.now(UTC)
        return await self.update(model, partition_key)

    async def query(
        self,
        sql: str,
        parameters: list[dict[str, Any]] | None = None,
        *,
        partition_key: Any = None,
    ) -> list[T]:
        """Run a SQL query and validate each row into the model class."""
        kwargs: dict[str, Any] = {"query": sql}
        if parameters:
            kwargs["parameters"] = parameters
        if partition_key is not None:
            kwargs["partition_key"] = partition_key
        return [
            self.model_class.model_validate(item)
            async for item in self._container.query_items(**kwargs)
        ]

    async def execute_batch(
        self, operations: list[BatchOperation], partition_key: Any
    ) -> list[dict[str, Any]]:
        """Commit operations within one partition atomically.

        A failed etag precondition becomes ``ConcurrencyConflict`` and a missing
        target document becomes ``StaleReference``; nothing is written in
        either case.
        """
        try:
            results = await self._container.execute_item_batch(
                batch_operations=operations, partition_key=partition_key
            )
        except CosmosBatchOperationError as exc:
            status = _batch_status(exc)
            logger.debug(
                "Batch rejected — partition=%s status=%s index=%s",
                partition_key,
                status,
                exc.error_index,
            )
            if status in (HTTP_CONFLICT, HTTP_PRECONDITION_FAILED):
                msg = f"Partition {partition_key} was modified concurrently"
                raise ConcurrencyConflict(msg) from exc
            if status == HTTP_NOT_FOUND:
                raise StaleReference("document", str(partition_key)) from exc
            raise
        return cast("list[dict[str, Any]]", list(results or []))
