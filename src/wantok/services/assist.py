"""AI assistance — translation suggestions and advisory quality scores.

Both calls are best effort. A failing model call never blocks translation or
review; it only leaves the suggestion empty or the score unset.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel, Field, ValidationError

from wantok.agents.prompts import render_prompt
from wantok.exceptions import ConcurrencyConflict

if TYPE_CHECKING:
    from wantok.database.repositories.translations import TranslationRepository
    from wantok.models.sentence import Sentence
    from wantok.models.translation import Translation

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 3


class ChatClient(Protocol):
    """The subset of the chat client used here."""

    async def get_response(self, messages: str, **kwargs: Any) -> Any:  # noqa: ANN401
        ...


class QualityScore(BaseModel):
    score: float = Field(ge=0, le=10)
    feedback: str = ""


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.strip("`")
        text = text.removeprefix("json").strip()
    return text


async def suggest_translation(
    chat_client: ChatClient, source_text: str, language: str
) -> str:
    """Ask the model for a draft translation. Returns "" on any failure."""
    prompt = render_prompt("suggest", language=language, source_text=source_text)
    try:
        response = await chat_client.get_response(prompt)
    except Exception:  # noqa: BLE001
        logger.warning("Translation suggestion failed", exc_info=True)
        return ""
    return (getattr(response, "text", None) or "").strip()


async def score_translation(
    chat_client: ChatClient,
    translation: Translation,
    sentence: Sentence,
    language: str,
    *,
    translations_repo: TranslationRepository,
) -> QualityScore | None:
    """Score a translation and store the advisory result on it.

    Only ``ai_quality_score`` and ``ai_quality_feedback`` are written; the
    review status is never touched. Returns None when scoring failed.
    """
    prompt = render_prompt(
        "quality",
        language=language,
        source_text=sentence.source_text,
        translation=translation.text,
    )
    try:
        response = await chat_client.get_response(prompt)
        raw = _strip_fences(getattr(response, "text", None) or "")
        result = QualityScore.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError):
        logger.warning(
            "Unparseable quality score — translation=%s", translation.id, exc_info=True
        )
        return None
    except Exception:  # noqa: BLE001
        logger.warning("Quality scoring failed — translation=%s", translation.id, exc_info=True)
        return None

    for _ in range(_MAX_ATTEMPTS):
        current = await translations_repo.get_translation(
            translation.id, translation.sentence_id
        )
        if current is None:
            logger.warning("Scored translation disappeared — translation=%s", translation.id)
            return result
        current.ai_quality_score = result.score
        current.ai_quality_feedback = result.feedback
        try:
            await translations_repo.replace_if_unchanged(current)
        except ConcurrencyConflict:
            continue
        logger.info(
            "Quality scored — translation=%s score=%.1f", translation.id, result.score
        )
        return result

    logger.warning("Could not store quality score — translation=%s", translation.id)
    return result
