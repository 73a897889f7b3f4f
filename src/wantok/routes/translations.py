"""Translation routes — listing, votes, comments, spelling suggestions."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from wantok.auth.middleware import get_current_user
from wantok.database.repositories.spelling import SpellingSuggestionRepository
from wantok.database.repositories.translations import TranslationRepository
from wantok.models.spelling import SpellingSuggestion
from wantok.models.translation import Comment, Translation, VoteType
from wantok.models.user import User
from wantok.services import community, spelling

router = APIRouter(prefix="/translations", tags=["translations"])

Member = Annotated[User, Depends(get_current_user)]


class VoteBody(BaseModel):
    vote: VoteType


class CommentBody(BaseModel):
    text: str


class SpellingBody(BaseModel):
    suggested_text: str
    reason: str | None = None


@router.get("/")
async def list_translations(
    request: Request, sentence_id: int, user: Member, language: str | None = None
) -> list[Translation]:
    """List every translation of a sentence into the target language."""
    repo = TranslationRepository(request.app.state.cosmos.database)
    return await repo.list_for_sentence(
        sentence_id, language or request.app.state.settings.queue.language
    )


@router.get("/mine")
async def my_translations(request: Request, user: Member) -> list[Translation]:
    repo = TranslationRepository(request.app.state.cosmos.database)
    return await repo.list_by_translator(user.id)


@router.post("/{translation_id}/votes")
async def vote(
    request: Request, translation_id: str, body: VoteBody, user: Member
) -> Translation:
    """Toggle the caller's vote on a translation."""
    return await community.cast_vote(
        translation_id,
        user,
        body.vote,
        translations_repo=TranslationRepository(request.app.state.cosmos.database),
    )


@router.post("/{translation_id}/comments", status_code=status.HTTP_201_CREATED)
async def comment(
    request: Request, translation_id: str, body: CommentBody, user: Member
) -> Comment:
    return await community.add_comment(
        translation_id,
        user,
        body.text,
        translations_repo=TranslationRepository(request.app.state.cosmos.database),
    )


@router.post("/{translation_id}/spelling", status_code=status.HTTP_201_CREATED)
async def suggest_spelling(
    request: Request, translation_id: str, body: SpellingBody, user: Member
) -> SpellingSuggestion:
    """Propose a spelling correction for a reviewer to accept or reject."""
    database = request.app.state.cosmos.database
    return await spelling.create_suggestion(
        translation_id,
        user,
        body.suggested_text,
        reason=body.reason,
        translations_repo=TranslationRepository(database),
        suggestions_repo=SpellingSuggestionRepository(database),
    )
