"""Repository modules for each Cosmos DB document type."""

from wantok.database.repositories.reviews import TranslationReviewRepository
from wantok.database.repositories.sentences import SentenceRepository
from wantok.database.repositories.spelling import SpellingSuggestionRepository
from wantok.database.repositories.translations import TranslationRepository
from wantok.database.repositories.users import UserRepository

__all__ = [
    "SentenceRepository",
    "SpellingSuggestionRepository",
    "TranslationRepository",
    "TranslationReviewRepository",
    "UserRepository",
]
