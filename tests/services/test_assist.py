"""Tests for AI suggestions and quality scoring."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from wantok.database.repositories.translations import TranslationRepository
from wantok.models.translation import Translation, TranslationStatus
from wantok.services.assist import score_translation, suggest_translation


def _client(text: str | None = None, error: Exception | None = None) -> AsyncMock:
    client = AsyncMock()
    if error is not None:
        client.get_response.side_effect = error
    else:
        client.get_response.return_value = SimpleNamespace(text=text)
    return client


@pytest.fixture
def repo(fake_db) -> TranslationRepository:
    return TranslationRepository(fake_db)


@pytest.fixture
def translation(corpus) -> Translation:
    translation = Translation(
        sentence_id=5, language_code="hula", translator_id="user-a", text="Vada namo"
    )
    corpus.seed(translation.to_document())
    return translation


async def test_suggest_returns_model_text():
    client = _client(" Namo herea \n")

    text = await suggest_translation(client, "Good morning", "hula")

    assert text == "Namo herea"
    prompt = client.get_response.call_args[0][0]
    assert "Good morning" in prompt
    assert "hula" in prompt


async def test_suggest_failure_returns_empty():
    assert await suggest_translation(_client(error=RuntimeError("down")), "Hi", "hula") == ""


async def test_score_is_stored_without_touching_status(repo, translation, sentence_factory):
    client = _client('```json\n{"score": 7.5, "feedback": "Mostly right"}\n```')

    result = await score_translation(
        client, translation, sentence_factory(5), "hula", translations_repo=repo
    )

    assert result.score == 7.5
    stored = await repo.get_translation(translation.id, 5)
    assert stored.ai_quality_score == 7.5
    assert stored.ai_quality_feedback == "Mostly right"
    assert stored.status is TranslationStatus.PENDING


@pytest.mark.parametrize("reply", ["not json", '{"score": 42}', '{"feedback": "x"}'])
async def test_unusable_score_leaves_translation_alone(repo, translation, sentence_factory, corpus, reply):
    before = corpus.documents("translation")

    result = await score_translation(
        _client(reply), translation, sentence_factory(5), "hula", translations_repo=repo
    )

    assert result is None
    assert corpus.documents("translation") == before


async def test_model_failure_returns_none(repo, translation, sentence_factory):
    result = await score_translation(
        _client(error=RuntimeError("quota")),
        translation,
        sentence_factory(5),
        "hula",
        translations_repo=repo,
    )

    assert result is None
