"""Tests for spelling suggestions."""

import pytest

from wantok.database.repositories.spelling import SpellingSuggestionRepository
from wantok.database.repositories.translations import TranslationRepository
from wantok.exceptions import InvalidInput, InvalidTransition, StaleReference
from wantok.models.spelling import SuggestionStatus
from wantok.models.translation import HistoryAction, Translation
from wantok.models.user import User
from wantok.services.spelling import create_suggestion, resolve_suggestion


@pytest.fixture
def repos(fake_db):
    return {
        "translations_repo": TranslationRepository(fake_db),
        "suggestions_repo": SpellingSuggestionRepository(fake_db),
    }


@pytest.fixture
def translation(corpus) -> Translation:
    translation = Translation(
        sentence_id=2, language_code="hula", translator_id="user-a", text="Vada namo"
    )
    corpus.seed(translation.to_document())
    return translation


@pytest.fixture
def member() -> User:
    return User(id="member", name="Member")


async def test_create_suggestion(repos, translation, member):
    suggestion = await create_suggestion(
        translation.id, member, " Vada namona ", reason="spelling", **repos
    )

    assert suggestion.status is SuggestionStatus.OPEN
    assert suggestion.original_text == "Vada namo"
    assert suggestion.suggested_text == "Vada namona"
    assert suggestion.sentence_id == 2
    assert suggestion.created_by_name == "Member"


@pytest.mark.parametrize("text", ["", "  ", "Vada namo"])
async def test_suggestion_must_change_text(repos, translation, member, text):
    with pytest.raises(InvalidInput):
        await create_suggestion(translation.id, member, text, **repos)


async def test_accepting_rewrites_translation(repos, translation, member, reviewer):
    suggestion = await create_suggestion(translation.id, member, "Vada namona", reason="typo", **repos)

    resolved = await resolve_suggestion(suggestion.id, SuggestionStatus.ACCEPTED, reviewer, **repos)

    assert resolved.status is SuggestionStatus.ACCEPTED
    assert resolved.resolved_by == reviewer.id
    assert resolved.resolved_at is not None
    stored = await repos["translations_repo"].get_translation(translation.id, 2)
    assert stored.text == "Vada namona"
    entry = stored.history[-1]
    assert entry.action is HistoryAction.SPELL_CORRECTION
    assert entry.details.old_text == "Vada namo"
    assert entry.details.new_text == "Vada namona"
    assert entry.details.reason == "typo"
    assert entry.details.suggestion_id == suggestion.id


async def test_rejecting_leaves_translation_untouched(repos, translation, member, reviewer, corpus):
    suggestion = await create_suggestion(translation.id, member, "Vada namona", **repos)
    before = corpus.documents("translation")

    resolved = await resolve_suggestion(
        suggestion.id, SuggestionStatus.REJECTED, reviewer, rejection_reason=" not a typo ", **repos
    )

    assert resolved.status is SuggestionStatus.REJECTED
    assert resolved.rejection_reason == "not a typo"
    assert corpus.documents("translation") == before


async def test_cannot_resolve_twice(repos, translation, member, reviewer):
    suggestion = await create_suggestion(translation.id, member, "Vada namona", **repos)
    await resolve_suggestion(suggestion.id, SuggestionStatus.REJECTED, reviewer, **repos)

    with pytest.raises(InvalidTransition):
        await resolve_suggestion(suggestion.id, SuggestionStatus.ACCEPTED, reviewer, **repos)


async def test_cannot_resolve_to_open(repos, reviewer):
    with pytest.raises(InvalidInput):
        await resolve_suggestion("any", SuggestionStatus.OPEN, reviewer, **repos)


async def test_missing_suggestion(repos, reviewer):
    with pytest.raises(StaleReference):
        await resolve_suggestion("missing", SuggestionStatus.ACCEPTED, reviewer, **repos)
