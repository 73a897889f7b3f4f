"""Review state machine — reviewer actions on a translation and their audit trail."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wantok.database.repositories.base import create_op, replace_op
from wantok.exceptions import (
    ConcurrencyConflict,
    InvalidInput,
    MissingFeedback,
    StaleReference,
)
from wantok.models.review import ReviewAction, TranslationReview

if TYPE_CHECKING:
    from wantok.database.repositories.translations import TranslationRepository
    from wantok.models.translation import Translation
    from wantok.models.user import User

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 3
MINOR_FIX_COMMENT = "Minor fix applied"


def validate_review(
    action: ReviewAction, comment: str | None, new_text: str | None
) -> tuple[str | None, str | None]:
    """Normalize review input, refusing it before anything is read or written."""
    comment = (comment or "").strip() or None
    if action.requires_feedback and comment is None:
        raise MissingFeedback(action.value)
    if action is ReviewAction.EDITED:
        new_text = (new_text or "").strip()
        if not new_text:
            msg = "A minor fix needs the corrected text"
            raise InvalidInput(msg)
        return comment or MINOR_FIX_COMMENT, new_text
    return comment, None


def apply_review(translation: Translation, review: TranslationReview) -> None:
    """Move the translation to the state the review calls for.

    Every status is re-enterable: a later reviewer may approve a rejected
    translation or flag an approved one.
    """
    translation.status = review.action.resulting_status
    if review.action is ReviewAction.EDITED and review.new_text is not None:
        translation.text = review.new_text
    if review.action in (ReviewAction.APPROVED, ReviewAction.EDITED):
        translation.review_count += 1
    translation.reviewed_by = review.reviewer_id
    translation.reviewed_at = review.created_at
    translation.feedback = review.comment
    translation.updated_at = review.created_at
    translation.history.append(review.to_history_entry())


async def load_translation(
    translations_repo: TranslationRepository,
    translation_id: str,
    sentence_id: int | None,
) -> Translation:
    if sentence_id is None:
        translation = await translations_repo.find(translation_id)
    else:
        translation = await translations_repo.get_translation(translation_id, sentence_id)
    if translation is None:
        raise StaleReference("Translation", translation_id)
    return translation


async def review_translation(  # noqa: PLR0913
    translation_id: str,
    reviewer: User,
    action: ReviewAction,
    *,
    translations_repo: TranslationRepository,
    sentence_id: int | None = None,
    comment: str | None = None,
    new_text: str | None = None,
) -> TranslationReview:
    """Record a reviewer action and apply it to the translation atomically.

    The review document and the translation (new status plus the history
    entry projected from the review) are written in one batch, so the trail
    and the embedded history never disagree.
    """
    comment, new_text = validate_review(action, comment, new_text)

    for attempt in range(1, _MAX_ATTEMPTS + 1):
        translation = await load_translation(translations_repo, translation_id, sentence_id)
        if action is ReviewAction.EDITED and new_text == translation.text:
            msg = "The corrected text is identical to the current text"
            raise InvalidInput(msg)

        review = TranslationReview(
            translation_id=translation.id,
            sentence_id=translation.sentence_id,
            reviewer_id=reviewer.id,
            reviewer_name=reviewer.name,
            action=action,
            comment=comment,
            previous_text=translation.text if action is ReviewAction.EDITED else None,
            new_text=new_text,
        )
        apply_review(translation, review)

        try:
            await translations_repo.execute_batch(
                [create_op(review), replace_op(translation)], translation.sentence_id
            )
        except ConcurrencyConflict:
            logger.info(
                "Review raced — translation=%s reviewer=%s attempt=%d",
                translation_id,
                reviewer.id,
                attempt,
            )
            continue

        logger.info(
            "Translation reviewed — translation=%s reviewer=%s action=%s",
            translation_id,
            reviewer.id,
            action,
        )
        return review

    msg = f"Could not review translation {translation_id}, please retry"
    raise ConcurrencyConflict(msg)
