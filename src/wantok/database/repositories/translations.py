"""Repository for translation documents in the corpus container (partitioned by /sentence_id)."""

from __future__ import annotations

from wantok.database.repositories.base import BaseRepository
from wantok.models.translation import Translation, TranslationStatus


class TranslationRepository(BaseRepository[Translation]):
    """Provide data access for the translations of each sentence."""

    container_name = "corpus"
    model_class = Translation

    async def get_translation(self, translation_id: str, sentence_id: int) -> Translation | None:
        return await self.get(translation_id, sentence_id)

    async def list_for_sentence(self, sentence_id: int, language_code: str) -> list[Translation]:
        """Fetch every translation of a sentence into one language."""
        return await self.query(
            "SELECT * FROM c WHERE c.type = 'translation'"
            " AND c.sentence_id = @sentence_id"
            " AND c.language_code = @language_code"
            " AND NOT IS_DEFINED(c.deleted_at)"
            " ORDER BY c.timestamp ASC",
            [
                {"name": "@sentence_id", "value": sentence_id},
                {"name": "@language_code", "value": language_code},
            ],
            partition_key=sentence_id,
        )

    async def list_by_translator(self, translator_id: str) -> list[Translation]:
        """Fetch a translator's submissions, newest first."""
        return await self.query(
            "SELECT * FROM c WHERE c.type = 'translation'"
            " AND c.translator_id = @translator_id"
            " AND NOT IS_DEFINED(c.deleted_at)"
            " ORDER BY c.timestamp DESC",
            [{"name": "@translator_id", "value": translator_id}],
        )

    async def list_by_status(
        self, status: TranslationStatus, language_code: str
    ) -> list[Translation]:
        """Fetch translations in a review state, oldest first."""
        return await self.query(
            "SELECT * FROM c WHERE c.type = 'translation'"
            " AND c.status = @status"
            " AND c.language_code = @language_code"
            " AND NOT IS_DEFINED(c.deleted_at)"
            " ORDER BY c.timestamp ASC",
            [
                {"name": "@status", "value": status.value},
                {"name": "@language_code", "value": language_code},
            ],
        )

    async def find(self, translation_id: str) -> Translation | None:
        """Look a translation up by id when its sentence is not known."""
        results = await self.query(
            "SELECT * FROM c WHERE c.type = 'translation'"
            " AND c.id = @id AND NOT IS_DEFINED(c.deleted_at)",
            [{"name": "@id", "value": translation_id}],
        )
        return results[0] if results else None
