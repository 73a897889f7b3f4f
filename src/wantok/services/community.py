"""Voting and comments on translations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wantok.exceptions import ConcurrencyConflict, InvalidInput
from wantok.services.review import load_translation

if TYPE_CHECKING:
    from collections.abc import Callable

    from wantok.database.repositories.translations import TranslationRepository
    from wantok.models.translation import Comment, Translation, VoteType
    from wantok.models.user import User

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 5


async def _mutate(
    translations_repo: TranslationRepository,
    translation_id: str,
    sentence_id: int | None,
    change: Callable[[Translation], None],
) -> Translation:
    """Read, change and conditionally write a translation, retrying on races."""
    for _ in range(_MAX_ATTEMPTS):
        translation = await load_translation(translations_repo, translation_id, sentence_id)
        change(translation)
        try:
            return await translations_repo.replace_if_unchanged(translation)
        except ConcurrencyConflict:
            logger.debug("Translation write raced — translation=%s", translation_id)
    msg = f"Could not update translation {translation_id}, please retry"
    raise ConcurrencyConflict(msg)


async def cast_vote(
    translation_id: str,
    user: User,
    vote: VoteType,
    *,
    translations_repo: TranslationRepository,
    sentence_id: int | None = None,
) -> Translation:
    """Toggle a user's up/down vote; the total is recomputed in the same write."""
    translation = await _mutate(
        translations_repo,
        translation_id,
        sentence_id,
        lambda t: t.cast_vote(user.id, vote),
    )
    logger.info(
        "Vote cast — translation=%s user=%s vote=%s total=%d",
        translation_id,
        user.id,
        vote,
        translation.votes,
    )
    return translation


async def add_comment(
    translation_id: str,
    user: User,
    text: str,
    *,
    translations_repo: TranslationRepository,
    sentence_id: int | None = None,
) -> Comment:
    text = text.strip()
    if not text:
        msg = "Comment must not be empty"
        raise InvalidInput(msg)

    added: list[Comment] = []

    def _append(translation: Translation) -> None:
        added.clear()
        added.append(translation.add_comment(user.id, user.name, text))

    await _mutate(translations_repo, translation_id, sentence_id, _append)
    logger.info("Comment added — translation=%s user=%s", translation_id, user.id)
    return added[0]
