"""Translation document model — one translator's rendering of a sentence."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from wantok.models.base import DocumentBase, utcnow

_TRANSLATION_NAMESPACE = uuid.UUID("6f1c8a52-0f3e-4d0c-9a51-3b1f2f7d6e41")


class TranslationStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    NEEDS_ATTENTION = "needs_attention"


class VoteType(StrEnum):
    UP = "up"
    DOWN = "down"

    @property
    def weight(self) -> int:
        return 1 if self is VoteType.UP else -1


class HistoryAction(StrEnum):
    CREATED = "created"
    EDITED = "edited"
    APPROVED = "approved"
    REJECTED = "rejected"
    NEEDS_ATTENTION = "needs_attention"
    SPELL_CORRECTION = "spell_correction"


class HistoryDetails(BaseModel):
    old_text: str | None = None
    new_text: str | None = None
    feedback: str | None = None
    reason: str | None = None
    suggestion_id: str | None = None
    review_id: str | None = None


class HistoryEntry(BaseModel):
    """A state change shown alongside the translation without a second query."""

    timestamp: datetime = Field(default_factory=utcnow)
    action: HistoryAction
    user_id: str
    user_name: str = ""
    details: HistoryDetails = Field(default_factory=HistoryDetails)


class Comment(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    user_name: str = ""
    text: str
    timestamp: datetime = Field(default_factory=utcnow)


def translation_id_for(sentence_id: int, language_code: str, translator_id: str) -> str:
    """Derive the single translation id allowed per sentence, language and translator."""
    name = f"{sentence_id}:{language_code}:{translator_id}"
    return str(uuid.uuid5(_TRANSLATION_NAMESPACE, name))


class Translation(DocumentBase):
    """A submitted translation, its votes, comments and review history."""

    type: Literal["translation"] = "translation"
    sentence_id: int
    language_code: str
    translator_id: str
    text: str
    timestamp: datetime = Field(default_factory=utcnow)
    status: TranslationStatus = TranslationStatus.PENDING
    votes: int = 0
    vote_history: dict[str, VoteType] = Field(default_factory=dict)
    comments: list[Comment] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)
    review_count: int = 0
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    feedback: str | None = None
    is_ai_suggested: bool = False
    ai_quality_score: float | None = None
    ai_quality_feedback: str | None = None

    def cast_vote(self, user_id: str, vote: VoteType) -> None:
        """Apply the up/down toggle rule for one user's vote.

        Repeating the current vote retracts it; the opposite vote replaces it.
        ``votes`` is always recomputed from ``vote_history``.
        """
        if self.vote_history.get(user_id) == vote:
            del self.vote_history[user_id]
        else:
            self.vote_history[user_id] = vote
        self.votes = sum(v.weight for v in self.vote_history.values())

    def add_comment(self, user_id: str, user_name: str, text: str) -> Comment:
        comment = Comment(user_id=user_id, user_name=user_name, text=text)
        self.comments.append(comment)
        return comment
