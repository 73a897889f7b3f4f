"""Tests for LockManager."""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from wantok.database.repositories.sentences import SentenceRepository
from wantok.database.repositories.translations import TranslationRepository
from wantok.database.repositories.users import UserRepository
from wantok.models.user import User
from wantok.services.locks import LOCK_DURATION, LockManager
from wantok.services.submission import submit_translation

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def repo(fake_db) -> SentenceRepository:
    return SentenceRepository(fake_db)


@pytest.fixture
def locks(repo) -> LockManager:
    return LockManager(repo, clock=lambda: NOW)


def test_default_duration_is_ten_minutes():
    assert LOCK_DURATION == timedelta(minutes=10)
    assert LockManager(MagicMock()).duration == LOCK_DURATION


async def test_acquire_and_release(locks, repo, corpus, sentence_factory):
    corpus.seed(sentence_factory(1).to_document())

    assert await locks.acquire(1, "user-a") is True
    assert await locks.acquire(1, "user-b") is False

    await locks.release(1)

    assert await locks.acquire(1, "user-b") is True
    assert (await repo.get_sentence(1)).locked_by == "user-b"


async def test_lock_expires_after_duration(repo, corpus, sentence_factory):
    corpus.seed(sentence_factory(1).to_document())
    now = [NOW]
    locks = LockManager(repo, clock=lambda: now[0])

    await locks.acquire(1, "user-a")
    now[0] = NOW + LOCK_DURATION + timedelta(seconds=1)

    assert await locks.acquire(1, "user-b") is True


async def test_release_does_not_check_ownership(locks, repo, corpus, sentence_factory):
    corpus.seed(sentence_factory(1).to_document())
    await locks.acquire(1, "user-a")

    await locks.release(1)

    assert (await repo.get_sentence(1)).locked_by is None


async def test_release_missing_sentence_is_quiet():
    repo = MagicMock()
    repo.release_lock = AsyncMock(return_value=None)

    await LockManager(repo).release(5)

    repo.release_lock.assert_awaited_once_with(5)


async def test_release_racing_submission_keeps_count(fake_db, corpus, users_container, sentence_factory):
    corpus.seed(sentence_factory(1).to_document())
    users_container.seed(User(id="alice", name="Alice").to_document())
    sentences = SentenceRepository(fake_db)
    locks = LockManager(sentences)
    await locks.acquire(1, "alice")

    async def release_soon() -> None:
        await asyncio.sleep(0)
        await locks.release(1)

    await asyncio.gather(
        submit_translation(
            1,
            "Kwanza",
            User(id="alice", name="Alice"),
            language_code="hula",
            sentences_repo=sentences,
            translations_repo=TranslationRepository(fake_db),
            users_repo=UserRepository(fake_db),
        ),
        release_soon(),
    )

    stored = await sentences.get_sentence(1)
    assert len(corpus.documents("translation")) == 1
    assert stored.translation_count == 1
    assert stored.locked_by is None


async def test_release_rereads_after_concurrent_write(repo, corpus, sentence_factory):
    corpus.seed(sentence_factory(1, locked_by="alice", locked_until=NOW + LOCK_DURATION).to_document())
    real_get = repo.get_sentence
    bumped = False

    async def get_then_bump(sentence_id):
        nonlocal bumped
        sentence = await real_get(sentence_id)
        if not bumped:
            bumped = True
            other = await real_get(sentence_id)
            other.translation_count = 1
            await repo.replace_if_unchanged(other)
        return sentence

    repo.get_sentence = get_then_bump

    released = await repo.release_lock(1)

    assert released.locked_by is None
    assert released.translation_count == 1
