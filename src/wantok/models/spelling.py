"""SpellingSuggestion document model — community text corrections."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Literal

from wantok.models.base import DocumentBase


class SuggestionStatus(StrEnum):
    OPEN = "open"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class SpellingSuggestion(DocumentBase):
    """A proposed fix to a translation's text, resolved by a reviewer."""

    type: Literal["spelling_suggestion"] = "spelling_suggestion"
    translation_id: str
    sentence_id: int
    original_text: str
    suggested_text: str
    reason: str | None = None
    status: SuggestionStatus = SuggestionStatus.OPEN
    created_by: str
    created_by_name: str = ""
    resolved_by: str | None = None
    resolved_by_name: str | None = None
    resolved_at: datetime | None = None
    rejection_reason: str | None = None
