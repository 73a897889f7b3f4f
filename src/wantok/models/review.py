"""TranslationReview document model — the authoritative review trail."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import ConfigDict

from wantok.models.base import DocumentBase
from wantok.models.translation import (
    HistoryAction,
    HistoryDetails,
    HistoryEntry,
    TranslationStatus,
)


class ReviewAction(StrEnum):
    APPROVED = "approved"
    REJECTED = "rejected"
    EDITED = "edited"
    NEEDS_ATTENTION = "needs_attention"

    @property
    def requires_feedback(self) -> bool:
        return self in (ReviewAction.REJECTED, ReviewAction.NEEDS_ATTENTION)

    @property
    def resulting_status(self) -> TranslationStatus:
        if self is ReviewAction.REJECTED:
            return TranslationStatus.REJECTED
        if self is ReviewAction.NEEDS_ATTENTION:
            return TranslationStatus.NEEDS_ATTENTION
        return TranslationStatus.APPROVED


class TranslationReview(DocumentBase):
    """One reviewer action. Written once and never modified."""

    model_config = ConfigDict(frozen=True)

    type: Literal["translation_review"] = "translation_review"
    translation_id: str
    sentence_id: int
    reviewer_id: str
    reviewer_name: str = ""
    action: ReviewAction
    comment: str | None = None
    previous_text: str | None = None
    new_text: str | None = None

    def to_history_entry(self) -> HistoryEntry:
        """Project this review onto the translation's embedded history."""
        return HistoryEntry(
            timestamp=self.created_at,
            action=HistoryAction(self.action.value),
            user_id=self.reviewer_id,
            user_name=self.reviewer_name,
            details=HistoryDetails(
                old_text=self.previous_text,
                new_text=self.new_text,
                feedback=self.comment,
                review_id=self.id,
            ),
        )
