"""Tests for votes and comments."""

import asyncio

import pytest

from wantok.database.repositories.translations import TranslationRepository
from wantok.exceptions import InvalidInput, StaleReference
from wantok.models.translation import Translation, VoteType
from wantok.models.user import User
from wantok.services.community import add_comment, cast_vote


@pytest.fixture
def repo(fake_db) -> TranslationRepository:
    return TranslationRepository(fake_db)


@pytest.fixture
def translation(corpus) -> Translation:
    translation = Translation(
        sentence_id=3, language_code="hula", translator_id="user-a", text="Vada namo"
    )
    corpus.seed(translation.to_document())
    return translation


def _user(n: int) -> User:
    return User(id=f"voter-{n}", name=f"Voter {n}")


async def test_vote_toggle_is_persisted(repo, translation):
    await cast_vote(translation.id, _user(1), VoteType.UP, translations_repo=repo, sentence_id=3)
    result = await cast_vote(translation.id, _user(1), VoteType.DOWN, translations_repo=repo)

    assert result.votes == -1
    stored = await repo.get_translation(translation.id, 3)
    assert stored.vote_history == {"voter-1": VoteType.DOWN}


async def test_concurrent_votes_are_all_counted(repo, translation):
    await asyncio.gather(
        *(
            cast_vote(translation.id, _user(n), VoteType.UP, translations_repo=repo, sentence_id=3)
            for n in range(4)
        )
    )

    stored = await repo.get_translation(translation.id, 3)
    assert stored.votes == 4
    assert len(stored.vote_history) == 4


async def test_add_comment(repo, translation):
    comment = await add_comment(
        translation.id, _user(1), "  Nice work  ", translations_repo=repo, sentence_id=3
    )

    assert comment.text == "Nice work"
    stored = await repo.get_translation(translation.id, 3)
    assert [c.id for c in stored.comments] == [comment.id]


async def test_empty_comment_refused(repo, translation):
    with pytest.raises(InvalidInput):
        await add_comment(translation.id, _user(1), " ", translations_repo=repo)


async def test_vote_on_missing_translation(repo):
    with pytest.raises(StaleReference):
        await cast_vote("missing", _user(1), VoteType.UP, translations_repo=repo)
