"""Sentence document model — source text plus work-queue metadata."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import IntEnum, StrEnum
from typing import Any, Literal

from pydantic import Field, model_validator

from wantok.models.base import DocumentBase

DEFAULT_TARGET_REDUNDANCY = 2
_EASY_MAX_WORDS = 6
_MEDIUM_MAX_WORDS = 14


class SentenceStatus(StrEnum):
    OPEN = "open"
    NEEDS_REVIEW = "needs_review"
    APPROVED = "approved"


class Difficulty(IntEnum):
    EASY = 1
    MEDIUM = 2
    HARD = 3

    @classmethod
    def for_length(cls, word_count: int) -> Difficulty:
        if word_count <= _EASY_MAX_WORDS:
            return cls.EASY
        if word_count <= _MEDIUM_MAX_WORDS:
            return cls.MEDIUM
        return cls.HARD


class Sentence(DocumentBase):
    """An English source sentence waiting for independent translations.

    The document id is the decimal form of ``sentence_id``, which is also the
    partition key shared with the sentence's translations, reviews and
    spelling suggestions.
    """

    type: Literal["sentence"] = "sentence"
    sentence_id: int
    source_text: str
    project_id: str | None = None
    status: SentenceStatus = SentenceStatus.OPEN
    priority_score: float = 0.0
    difficulty: Difficulty = Difficulty.EASY
    length: int = 0
    translation_count: int = 0
    target_redundancy: int = Field(default=DEFAULT_TARGET_REDUNDANCY, ge=1)
    locked_by: str | None = None
    locked_until: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and "id" not in data and "sentence_id" in data:
            data = {**data, "id": str(data["sentence_id"])}
        return data

    def is_locked(self, now: datetime) -> bool:
        """Return True while a lock is set and has not expired."""
        return (
            self.locked_by is not None
            and self.locked_until is not None
            and self.locked_until > now
        )

    def is_locked_by_other(self, user_id: str, now: datetime) -> bool:
        return self.is_locked(now) and self.locked_by != user_id

    def lock(self, user_id: str, now: datetime, duration: timedelta) -> None:
        self.locked_by = user_id
        self.locked_until = now + duration

    def unlock(self) -> None:
        self.locked_by = None
        self.locked_until = None

    def record_translation(self) -> None:
        """Count one more independent translation and leave the queue when done.

        The count never decreases and a sentence that reached its redundancy
        target is never put back to ``open`` here.
        """
        self.translation_count += 1
        if (
            self.status == SentenceStatus.OPEN
            and self.translation_count >= self.target_redundancy
        ):
            self.status = SentenceStatus.NEEDS_REVIEW
            self.priority_score = 0.0
        self.unlock()
