"""Spelling suggestions — community-proposed text fixes resolved by reviewers."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from wantok.database.repositories.base import replace_op
from wantok.exceptions import (
    ConcurrencyConflict,
    InvalidInput,
    InvalidTransition,
    StaleReference,
)
from wantok.models.spelling import SpellingSuggestion, SuggestionStatus
from wantok.models.translation import HistoryAction, HistoryDetails, HistoryEntry
from wantok.services.review import load_translation

if TYPE_CHECKING:
    from wantok.database.repositories.base import BatchOperation
    from wantok.database.repositories.spelling import SpellingSuggestionRepository
    from wantok.database.repositories.translations import TranslationRepository
    from wantok.models.translation import Translation
    from wantok.models.user import User

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 3


async def create_suggestion(  # noqa: PLR0913
    translation_id: str,
    user: User,
    suggested_text: str,
    *,
    translations_repo: TranslationRepository,
    suggestions_repo: SpellingSuggestionRepository,
    sentence_id: int | None = None,
    reason: str | None = None,
) -> SpellingSuggestion:
    """Propose a corrected text for a translation."""
    suggested_text = suggested_text.strip()
    translation = await load_translation(translations_repo, translation_id, sentence_id)
    if not suggested_text or suggested_text == translation.text:
        msg = "Please make a change to the text"
        raise InvalidInput(msg)

    suggestion = SpellingSuggestion(
        translation_id=translation.id,
        sentence_id=translation.sentence_id,
        original_text=translation.text,
        suggested_text=suggested_text,
        reason=(reason or "").strip() or None,
        created_by=user.id,
        created_by_name=user.name,
    )
    suggestion = await suggestions_repo.create(suggestion)
    logger.info(
        "Spelling suggestion created — suggestion=%s translation=%s user=%s",
        suggestion.id,
        translation.id,
        user.id,
    )
    return suggestion


def _apply_correction(
    translation: Translation, suggestion: SpellingSuggestion, resolver: User, now: datetime
) -> None:
    if translation.text != suggestion.original_text:
        logger.warning(
            "Translation changed since suggestion — translation=%s suggestion=%s",
            translation.id,
            suggestion.id,
        )
    translation.history.append(
        HistoryEntry(
            timestamp=now,
            action=HistoryAction.SPELL_CORRECTION,
            user_id=resolver.id,
            user_name=resolver.name,
            details=HistoryDetails(
                old_text=translation.text,
                new_text=suggestion.suggested_text,
                reason=suggestion.reason,
                suggestion_id=suggestion.id,
            ),
        )
    )
    translation.text = suggestion.suggested_text
    translation.updated_at = now


async def resolve_suggestion(  # noqa: PLR0913
    suggestion_id: str,
    status: SuggestionStatus,
    resolver: User,
    *,
    translations_repo: TranslationRepository,
    suggestions_repo: SpellingSuggestionRepository,
    rejection_reason: str | None = None,
) -> SpellingSuggestion:
    """Accept or reject a suggestion.

    Accepting rewrites the translation's text and records a
    ``spell_correction`` history entry in the same batch that resolves the
    suggestion. Rejecting leaves the translation untouched.
    """
    if status is SuggestionStatus.OPEN:
        msg = "A suggestion can only be resolved as accepted or rejected"
        raise InvalidInput(msg)

    for attempt in range(1, _MAX_ATTEMPTS + 1):
        suggestion = await suggestions_repo.find(suggestion_id)
        if suggestion is None:
            raise StaleReference("SpellingSuggestion", suggestion_id)
        if suggestion.status is not SuggestionStatus.OPEN:
            msg = f"Suggestion {suggestion_id} is already {suggestion.status}"
            raise InvalidTransition(msg)

        now = datetime.now(UTC)
        operations: list[BatchOperation] = []
        if status is SuggestionStatus.ACCEPTED:
            translation = await load_translation(
                translations_repo, suggestion.translation_id, suggestion.sentence_id
            )
            _apply_correction(translation, suggestion, resolver, now)
            operations.append(replace_op(translation))
        else:
            suggestion.rejection_reason = (rejection_reason or "").strip() or None

        suggestion.status = status
        suggestion.resolved_by = resolver.id
        suggestion.resolved_by_name = resolver.name
        suggestion.resolved_at = now
        suggestion.updated_at = now
        operations.append(replace_op(suggestion))

        try:
            await suggestions_repo.execute_batch(operations, suggestion.sentence_id)
        except ConcurrencyConflict:
            logger.info(
                "Suggestion resolution raced — suggestion=%s attempt=%d",
                suggestion_id,
                attempt,
            )
            continue

        logger.info(
            "Spelling suggestion %s — suggestion=%s resolver=%s",
            status,
            suggestion_id,
            resolver.id,
        )
        return suggestion

    msg = f"Could not resolve suggestion {suggestion_id}, please retry"
    raise ConcurrencyConflict(msg)
