"""Queue allocator — hands the next untranslated sentence to a translator."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from wantok.models.translation import translation_id_for

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from wantok.config import QueueConfig
    from wantok.database.repositories.sentences import SentenceRepository
    from wantok.database.repositories.translations import TranslationRepository
    from wantok.models.sentence import Sentence
    from wantok.models.user import User
    from wantok.services.locks import LockManager

logger = logging.getLogger(__name__)


def order_candidates(
    candidates: Sequence[Sentence],
    *,
    experienced: bool,
    rng: random.Random,
) -> list[Sentence]:
    """Order candidates by difficulty, breaking ties randomly.

    New translators get easy sentences first, experienced translators hard
    ones. Shuffling before a stable sort randomizes only within a difficulty.
    """
    ordered = list(candidates)
    rng.shuffle(ordered)
    ordered.sort(key=lambda s: int(s.difficulty), reverse=experienced)
    return ordered


def first_valid(
    candidates: Iterable[Sentence],
    user: User,
    excluded_ids: set[int],
    now: datetime,
) -> Sentence | None:
    """Return the first candidate this user may be offered."""
    for sentence in candidates:
        if sentence.sentence_id in excluded_ids:
            continue
        if sentence.is_locked_by_other(user.id, now):
            continue
        if user.has_translated(sentence.sentence_id):
            continue
        return sentence
    return None


class QueueAllocator:
    """Select, lock and return the next sentence for a translator."""

    def __init__(
        self,
        sentences_repo: SentenceRepository,
        translations_repo: TranslationRepository,
        locks: LockManager,
        config: QueueConfig,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._sentences = sentences_repo
        self._translations = translations_repo
        self._locks = locks
        self._config = config
        self._rng = rng or random.Random()  # noqa: S311

    def is_experienced(self, user: User) -> bool:
        return user.translation_total >= self._config.experienced_threshold

    async def _already_translated(self, sentence: Sentence, user: User) -> bool:
        existing = await self._translations.get_translation(
            translation_id_for(sentence.sentence_id, self._config.language, user.id),
            sentence.sentence_id,
        )
        return existing is not None

    async def _pick(
        self, pool: Sequence[Sentence], user: User, excluded_ids: set[int]
    ) -> Sentence | None:
        ordered = order_candidates(
            pool, experienced=self.is_experienced(user), rng=self._rng
        )
        skipped = set(excluded_ids)
        while True:
            candidate = first_valid(ordered, user, skipped, self._locks.now())
            if candidate is None:
                return None
            if not await self._already_translated(candidate, user):
                return candidate
            skipped.add(candidate.sentence_id)

    async def get_next_task(
        self, user: User, excluded_ids: set[int] | None = None
    ) -> Sentence | None:
        """Return a sentence locked to ``user``, or None when nothing is available.

        Losing the lock race on the chosen sentence also returns None; the
        caller retries rather than this call trying further candidates.
        """
        excluded = excluded_ids or set()
        pool = await self._sentences.list_open_by_priority(self._config.priority_window)
        candidate = await self._pick(pool, user, excluded)
        if candidate is None:
            logger.debug("Priority window exhausted — user=%s", user.id)
            pool = await self._sentences.list_open(self._config.fallback_window)
            candidate = await self._pick(pool, user, excluded)
        if candidate is None:
            logger.info("No task available — user=%s", user.id)
            return None

        locked = await self._locks.acquire_sentence(candidate.sentence_id, user.id)
        if locked is None:
            return None

        logger.info("Task assigned — sentence=%s user=%s", locked.sentence_id, user.id)
        return locked
