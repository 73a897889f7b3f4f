"""Soft, time-bounded sentence locks."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from wantok.database.repositories.sentences import SentenceRepository
    from wantok.models.sentence import Sentence

logger = logging.getLogger(__name__)

LOCK_DURATION = timedelta(minutes=10)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LockManager:
    """Acquire and release advisory per-sentence locks.

    Acquisition is a read followed by an etag-guarded write, so two users
    racing for the same sentence cannot both succeed.
    """

    def __init__(
        self,
        sentences_repo: SentenceRepository,
        *,
        duration: timedelta = LOCK_DURATION,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sentences = sentences_repo
        self._duration = duration
        self._clock = clock

    @property
    def duration(self) -> timedelta:
        return self._duration

    def now(self) -> datetime:
        return self._clock()

    async def acquire_sentence(self, sentence_id: int, user_id: str) -> Sentence | None:
        """Lock a sentence for ``user_id`` and return it as stored."""
        locked = await self._sentences.acquire_lock(
            sentence_id, user_id, duration=self._duration, now=self._clock()
        )
        if locked is None:
            logger.info("Lock unavailable — sentence=%s user=%s", sentence_id, user_id)
            return None
        logger.info(
            "Lock acquired — sentence=%s user=%s until=%s",
            sentence_id,
            user_id,
            locked.locked_until,
        )
        return locked

    async def acquire(self, sentence_id: int, user_id: str) -> bool:
        """Lock a sentence for ``user_id``. False means try another sentence."""
        return await self.acquire_sentence(sentence_id, user_id) is not None

    async def release(self, sentence_id: int) -> None:
        """Clear the lock on a sentence.

        Ownership is not checked: any caller can clear any lock.
        """
        released = await self._sentences.release_lock(sentence_id)
        if released is None:
            logger.warning("Lock release for missing sentence=%s", sentence_id)
            return
        logger.info("Lock released — sentence=%s", sentence_id)
