"""Data models for Cosmos DB document types."""

from wantok.models.review import ReviewAction, TranslationReview
from wantok.models.sentence import Difficulty, Sentence, SentenceStatus
from wantok.models.spelling import SpellingSuggestion, SuggestionStatus
from wantok.models.translation import (
    Comment,
    HistoryAction,
    HistoryDetails,
    HistoryEntry,
    Translation,
    TranslationStatus,
    VoteType,
    translation_id_for,
)
from wantok.models.user import Permission, Role, User

__all__ = [
    "Comment",
    "Difficulty",
    "HistoryAction",
    "HistoryDetails",
    "HistoryEntry",
    "Permission",
    "Role",
    "Sentence",
    "SentenceStatus",
    "SpellingSuggestion",
    "SuggestionStatus",
    "Translation",
    "TranslationReview",
    "TranslationStatus",
    "User",
    "VoteType",
    "translation_id_for",
]
