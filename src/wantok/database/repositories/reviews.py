"""Repository for translation review documents in the corpus container."""

from __future__ import annotations

from wantok.database.repositories.base import BaseRepository
from wantok.models.review import TranslationReview


class TranslationReviewRepository(BaseRepository[TranslationReview]):
    """Read access to the append-only review trail."""

    container_name = "corpus"
    model_class = TranslationReview

    async def list_by_translation(
        self, translation_id: str, sentence_id: int | None = None
    ) -> list[TranslationReview]:
        """Fetch every review of a translation in the order it was written."""
        return await self.query(
            "SELECT * FROM c WHERE c.type = 'translation_review'"
            " AND c.translation_id = @translation_id"
            " ORDER BY c.created_at ASC",
            [{"name": "@translation_id", "value": translation_id}],
            partition_key=sentence_id,
        )
