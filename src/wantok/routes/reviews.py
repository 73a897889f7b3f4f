"""Review routes — pending queue, reviewer actions, audit trail, spelling resolution."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from wantok.auth.middleware import require_permission
from wantok.database.repositories.reviews import TranslationReviewRepository
from wantok.database.repositories.sentences import SentenceRepository
from wantok.database.repositories.spelling import SpellingSuggestionRepository
from wantok.database.repositories.translations import TranslationRepository
from wantok.exceptions import StaleReference
from wantok.models.review import ReviewAction, TranslationReview
from wantok.models.spelling import SpellingSuggestion, SuggestionStatus
from wantok.models.translation import Translation, TranslationStatus
from wantok.models.user import Permission, User
from wantok.services.assist import QualityScore, score_translation
from wantok.services.review import load_translation, review_translation
from wantok.services.spelling import resolve_suggestion

router = APIRouter(prefix="/reviews", tags=["reviews"])

logger = logging.getLogger(__name__)

Reviewer = Annotated[User, Depends(require_permission(Permission.TRANSLATION_REVIEW))]
Approver = Annotated[User, Depends(require_permission(Permission.TRANSLATION_APPROVE))]


class ReviewBody(BaseModel):
    action: ReviewAction
    comment: str | None = None
    new_text: str | None = None


class ResolutionBody(BaseModel):
    status: SuggestionStatus
    rejection_reason: str | None = None


@router.get("/pending")
async def pending_translations(
    request: Request, user: Reviewer, language: str | None = None
) -> list[Translation]:
    """List translations waiting for a reviewer, oldest first."""
    repo = TranslationRepository(request.app.state.cosmos.database)
    return await repo.list_by_status(
        TranslationStatus.PENDING,
        language or request.app.state.settings.queue.language,
    )


@router.get("/spelling")
async def open_suggestions(request: Request, user: Reviewer) -> list[SpellingSuggestion]:
    repo = SpellingSuggestionRepository(request.app.state.cosmos.database)
    return await repo.list_open()


@router.post("/spelling/{suggestion_id}")
async def resolve_spelling(
    request: Request, suggestion_id: str, body: ResolutionBody, user: Approver
) -> SpellingSuggestion:
    """Accept (rewriting the translation) or reject a spelling suggestion."""
    database = request.app.state.cosmos.database
    return await resolve_suggestion(
        suggestion_id,
        body.status,
        user,
        rejection_reason=body.rejection_reason,
        translations_repo=TranslationRepository(database),
        suggestions_repo=SpellingSuggestionRepository(database),
    )


@router.post("/{translation_id}", status_code=status.HTTP_201_CREATED)
async def review(
    request: Request, translation_id: str, body: ReviewBody, user: Approver
) -> TranslationReview:
    """Approve, reject, flag or minor-fix a translation."""
    return await review_translation(
        translation_id,
        user,
        body.action,
        comment=body.comment,
        new_text=body.new_text,
        translations_repo=TranslationRepository(request.app.state.cosmos.database),
    )


@router.get("/{translation_id}/history")
async def review_history(
    request: Request, translation_id: str, user: Reviewer
) -> list[TranslationReview]:
    """Return the full review trail of a translation."""
    repo = TranslationReviewRepository(request.app.state.cosmos.database)
    return await repo.list_by_translation(translation_id)


@router.post("/{translation_id}/score")
async def ai_score(
    request: Request, translation_id: str, user: Reviewer
) -> QualityScore | None:
    """Attach an advisory AI quality score to a translation."""
    chat_client = request.app.state.chat_client
    if chat_client is None:
        return None
    database = request.app.state.cosmos.database
    translations = TranslationRepository(database)
    translation = await load_translation(translations, translation_id, None)
    sentence = await SentenceRepository(database).get_sentence(translation.sentence_id)
    if sentence is None:
        raise StaleReference("Sentence", translation.sentence_id)
    logger.info("AI score requested — translation=%s user=%s", translation_id, user.id)
    return await score_translation(
        chat_client,
        translation,
        sentence,
        translation.language_code,
        translations_repo=translations,
    )
