"""Translation submission — writes a translation and its redundancy accounting together."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from wantok.database.repositories.base import create_op, replace_op
from wantok.exceptions import (
    ConcurrencyConflict,
    InvalidInput,
    InvalidTransition,
    LockContention,
    StaleReference,
)
from wantok.models.translation import (
    HistoryAction,
    HistoryDetails,
    HistoryEntry,
    Translation,
    TranslationStatus,
    translation_id_for,
)

if TYPE_CHECKING:
    from wantok.database.repositories.base import BatchOperation
    from wantok.database.repositories.sentences import SentenceRepository
    from wantok.database.repositories.translations import TranslationRepository
    from wantok.database.repositories.users import UserRepository
    from wantok.models.sentence import Sentence
    from wantok.models.user import User

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 3


def _first_submission(
    sentence: Sentence,
    user: User,
    text: str,
    language_code: str,
    now: datetime,
    *,
    is_ai_suggested: bool,
) -> tuple[Translation, list[BatchOperation]]:
    translation = Translation(
        id=translation_id_for(sentence.sentence_id, language_code, user.id),
        sentence_id=sentence.sentence_id,
        language_code=language_code,
        translator_id=user.id,
        text=text,
        timestamp=now,
        is_ai_suggested=is_ai_suggested,
        history=[
            HistoryEntry(
                timestamp=now,
                action=HistoryAction.CREATED,
                user_id=user.id,
                user_name=user.name,
                details=HistoryDetails(new_text=text),
            )
        ],
    )
    sentence.record_translation()
    sentence.updated_at = now
    return translation, [create_op(translation), replace_op(sentence)]


def _resubmission(
    existing: Translation,
    sentence: Sentence,
    user: User,
    text: str,
    now: datetime,
) -> list[BatchOperation]:
    """Rewrite the user's existing translation without counting it again.

    A rejected or flagged translation goes back to ``pending`` here. That
    status change comes from the translator, so it is recorded as an
    ``edited`` history entry and no ``TranslationReview`` is written.
    """
    if existing.status == TranslationStatus.APPROVED:
        msg = f"Translation {existing.id} is approved and can no longer be edited"
        raise InvalidTransition(msg)
    existing.history.append(
        HistoryEntry(
            timestamp=now,
            action=HistoryAction.EDITED,
            user_id=user.id,
            user_name=user.name,
            details=HistoryDetails(old_text=existing.text, new_text=text),
        )
    )
    existing.text = text
    existing.timestamp = now
    existing.status = TranslationStatus.PENDING
    existing.updated_at = now
    operations = [replace_op(existing)]
    if sentence.locked_by == user.id:
        sentence.unlock()
        sentence.updated_at = now
        operations.append(replace_op(sentence))
    return operations


async def submit_translation(  # noqa: PLR0913
    sentence_id: int,
    text: str,
    user: User,
    *,
    language_code: str,
    sentences_repo: SentenceRepository,
    translations_repo: TranslationRepository,
    users_repo: UserRepository,
    is_ai_suggested: bool = False,
) -> Translation:
    """Save a user's translation of a sentence.

    The first submission creates the translation, counts it on the sentence
    (moving the sentence to review once its redundancy target is met) and
    clears the lock in one transactional batch. Re-submission rewrites the
    same translation without counting it again. Every call also records the
    sentence in the user's history, so retrying after a failed history write
    repairs it.
    """
    text = text.strip()
    if not text:
        msg = "Translation text must not be empty"
        raise InvalidInput(msg)

    translation_id = translation_id_for(sentence_id, language_code, user.id)
    for attempt in range(1, _MAX_ATTEMPTS + 1):
        sentence = await sentences_repo.get_sentence(sentence_id)
        if sentence is None:
            raise StaleReference("Sentence", sentence_id)
        now = datetime.now(UTC)
        if sentence.is_locked_by_other(user.id, now):
            raise LockContention(sentence_id, sentence.locked_by)

        existing = await translations_repo.get_translation(translation_id, sentence_id)
        if existing is None:
            translation, operations = _first_submission(
                sentence,
                user,
                text,
                language_code,
                now,
                is_ai_suggested=is_ai_suggested,
            )
        elif existing.text == text and existing.status == TranslationStatus.PENDING:
            await users_repo.add_translated_sentence(user.id, sentence_id)
            return existing
        else:
            translation = existing
            operations = _resubmission(existing, sentence, user, text, now)

        try:
            await translations_repo.execute_batch(operations, sentence_id)
        except ConcurrencyConflict:
            logger.info(
                "Submission raced — sentence=%s user=%s attempt=%d",
                sentence_id,
                user.id,
                attempt,
            )
            continue

        await users_repo.add_translated_sentence(user.id, sentence_id)
        if existing is None:
            logger.info(
                "Translation submitted — sentence=%s user=%s count=%d/%d status=%s",
                sentence_id,
                user.id,
                sentence.translation_count,
                sentence.target_redundancy,
                sentence.status,
            )
        else:
            logger.info(
                "Translation resubmitted — sentence=%s user=%s", sentence_id, user.id
            )
        return translation

    msg = f"Could not save translation for sentence {sentence_id}, please retry"
    raise ConcurrencyConflict(msg)
