"""Task routes — next sentence, release, submit, AI draft."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wantok.auth.middleware import require_permission
from wantok.database.repositories.sentences import SentenceRepository
from wantok.database.repositories.translations import TranslationRepository
from wantok.database.repositories.users import UserRepository
from wantok.exceptions import StaleReference
from wantok.models.translation import Translation
from wantok.models.user import Permission, User
from wantok.services.assist import suggest_translation
from wantok.services.locks import LockManager
from wantok.services.queue import QueueAllocator
from wantok.services.submission import submit_translation

router = APIRouter(prefix="/tasks", tags=["tasks"])

logger = logging.getLogger(__name__)

Translator = Annotated[User, Depends(require_permission(Permission.TRANSLATION_CREATE))]


class SubmissionBody(BaseModel):
    text: str
    is_ai_suggested: bool = False


class SuggestionOut(BaseModel):
    text: str


def _lock_manager(request: Request, sentences: SentenceRepository) -> LockManager:
    return LockManager(sentences, duration=request.app.state.settings.queue.lock_duration)


@router.get("/next", response_model=None)
async def next_task(
    request: Request,
    user: Translator,
    exclude: Annotated[list[int] | None, Query()] = None,
) -> Response:
    """Lock and return the next sentence for the caller; 204 when none is free."""
    database = request.app.state.cosmos.database
    settings = request.app.state.settings
    sentences = SentenceRepository(database)
    allocator = QueueAllocator(
        sentences,
        TranslationRepository(database),
        _lock_manager(request, sentences),
        settings.queue,
        rng=request.app.state.rng,
    )
    sentence = await allocator.get_next_task(user, set(exclude or []))
    if sentence is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return JSONResponse(sentence.model_dump(mode="json"))


@router.post("/{sentence_id}/release", status_code=status.HTTP_204_NO_CONTENT)
async def release_task(request: Request, sentence_id: int, user: Translator) -> None:
    """Give a sentence back to the queue (skip or leaving the task)."""
    sentences = SentenceRepository(request.app.state.cosmos.database)
    await _lock_manager(request, sentences).release(sentence_id)
    logger.info("Task released — sentence=%s user=%s", sentence_id, user.id)


@router.post("/{sentence_id}/translation")
async def submit_task(
    request: Request, sentence_id: int, body: SubmissionBody, user: Translator
) -> Translation:
    """Submit (or resubmit) the caller's translation of a sentence."""
    database = request.app.state.cosmos.database
    return await submit_translation(
        sentence_id,
        body.text,
        user,
        language_code=request.app.state.settings.queue.language,
        sentences_repo=SentenceRepository(database),
        translations_repo=TranslationRepository(database),
        users_repo=UserRepository(database),
        is_ai_suggested=body.is_ai_suggested,
    )


@router.get("/{sentence_id}/suggestion")
async def ai_suggestion(
    request: Request, sentence_id: int, user: Translator
) -> SuggestionOut:
    """Ask the AI assistant for a draft translation of a sentence."""
    chat_client = request.app.state.chat_client
    if chat_client is None:
        return SuggestionOut(text="")
    sentence = await SentenceRepository(request.app.state.cosmos.database).get_sentence(
        sentence_id
    )
    if sentence is None:
        raise StaleReference("Sentence", sentence_id)
    text = await suggest_translation(
        chat_client, sentence.source_text, request.app.state.settings.queue.language
    )
    logger.debug("AI suggestion served — sentence=%s user=%s", sentence_id, user.id)
    return SuggestionOut(text=text)
