"""Repository for sentence documents in the corpus container (partitioned by /sentence_id)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, cast

from azure.core import MatchConditions
from azure.cosmos.exceptions import (
    CosmosHttpResponseError,
    CosmosResourceExistsError,
    CosmosResourceNotFoundError,
)

from wantok.database.repositories.base import HTTP_PRECONDITION_FAILED, BaseRepository
from wantok.exceptions import ConcurrencyConflict
from wantok.models.sentence import Sentence, SentenceStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

_IMPORT_CHUNK_SIZE = 100
_RELEASE_ATTEMPTS = 3


class SentenceRepository(BaseRepository[Sentence]):
    """Provide data access for sentences and their soft locks."""

    container_name = "corpus"
    model_class = Sentence

    async def get_sentence(self, sentence_id: int) -> Sentence | None:
        return await self.get(str(sentence_id), sentence_id)

    async def list_open_by_priority(self, limit: int) -> list[Sentence]:
        """Fetch the highest-priority open sentences."""
        return await self.query(
            "SELECT TOP @limit * FROM c WHERE c.type = 'sentence'"
            " AND c.status = @status"
            " AND NOT IS_DEFINED(c.deleted_at)"
            " ORDER BY c.priority_score DESC",
            [
                {"name": "@limit", "value": limit},
                {"name": "@status", "value": SentenceStatus.OPEN.value},
            ],
        )

    async def list_open(self, limit: int) -> list[Sentence]:
        """Fetch open sentences in store order, without ranking."""
        return await self.query(
            "SELECT TOP @limit * FROM c WHERE c.type = 'sentence'"
            " AND c.status = @status"
            " AND NOT IS_DEFINED(c.deleted_at)",
            [
                {"name": "@limit", "value": limit},
                {"name": "@status", "value": SentenceStatus.OPEN.value},
            ],
        )

    async def count_by_status(self) -> dict[str, int]:
        """Return the number of live sentences per status."""
        counts = {status.value: 0 for status in SentenceStatus}
        async for row in self._container.query_items(
            query="SELECT c.status, COUNT(1) AS n FROM c"
            " WHERE c.type = 'sentence' AND NOT IS_DEFINED(c.deleted_at)"
            " GROUP BY c.status",
        ):
            item = cast("dict[str, Any]", row)
            counts[str(item["status"])] = int(item["n"])
        return counts

    async def acquire_lock(
        self,
        sentence_id: int,
        user_id: str,
        *,
        duration: timedelta,
        now: datetime | None = None,
    ) -> Sentence | None:
        """Atomically lock a sentence for one user.

        Returns the locked sentence, or None when another user holds a valid
        lock or a concurrent writer changed the sentence first.
        """
        try:
            data = cast(
                "dict[str, Any]",
                await self._container.read_item(
                    item=str(sentence_id), partition_key=sentence_id
                ),
            )
        except CosmosResourceNotFoundError:
            return None

        now = now or datetime.now(UTC)
        sentence = self.model_class.model_validate(data)
        if sentence.deleted_at is not None or sentence.is_locked_by_other(user_id, now):
            return None
        etag = data.get("_etag")
        if not isinstance(etag, str):
            return None

        sentence.lock(user_id, now, duration)
        sentence.updated_at = now
        try:
            response = await self._container.replace_item(
                item=sentence.id,
                body=sentence.to_document(),
                etag=etag,
                match_condition=MatchConditions.IfNotModified,
            )
        except CosmosHttpResponseError as exc:
            if exc.status_code == HTTP_PRECONDITION_FAILED:
                logger.info(
                    "Lock race lost — sentence=%s user=%s", sentence_id, user_id
                )
                return None
            raise

        return self._to_model(response, sentence)

    async def release_lock(self, sentence_id: int) -> Sentence | None:
        """Clear the lock fields regardless of who holds the lock.

        The write is etag-guarded and re-read on conflict so a concurrent
        submission's count and status are never overwritten.
        """
        for _ in range(_RELEASE_ATTEMPTS):
            sentence = await self.get_sentence(sentence_id)
            if sentence is None:
                return None
            if sentence.locked_by is None and sentence.locked_until is None:
                return sentence
            sentence.unlock()
            try:
                return await self.replace_if_unchanged(sentence)
            except ConcurrencyConflict:
                logger.debug("Lock release raced — sentence=%s", sentence_id)
        msg = f"Could not release lock on sentence {sentence_id}"
        raise ConcurrencyConflict(msg)

    async def save_many(
        self,
        sentences: Sequence[Sentence],
        on_progress: Callable[[int], None] | None = None,
    ) -> int:
        """Create sentences in chunks, reporting progress after each chunk.

        Sentences that already exist are left untouched so re-importing a file
        never resets translation counts. Returns the number created.
        """
        created = 0
        processed = 0
        for start in range(0, len(sentences), _IMPORT_CHUNK_SIZE):
            chunk = sentences[start : start + _IMPORT_CHUNK_SIZE]
            for sentence in chunk:
                try:
                    await self._container.create_item(body=sentence.to_document())
                except CosmosResourceExistsError:
                    logger.debug("Sentence exists, skipped — sentence=%s", sentence.id)
                    continue
                created += 1
            processed += len(chunk)
            if on_progress:
                on_progress(processed)
        return created
