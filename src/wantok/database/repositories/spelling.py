"""Repository for spelling suggestion documents in the corpus container."""

from __future__ import annotations

from wantok.database.repositories.base import BaseRepository
from wantok.models.spelling import SpellingSuggestion, SuggestionStatus


class SpellingSuggestionRepository(BaseRepository[SpellingSuggestion]):
    container_name = "corpus"
    model_class = SpellingSuggestion

    async def list_open(self) -> list[SpellingSuggestion]:
        """Fetch unresolved suggestions, oldest first."""
        return await self.query(
            "SELECT * FROM c WHERE c.type = 'spelling_suggestion'"
            " AND c.status = @status"
            " AND NOT IS_DEFINED(c.deleted_at)"
            " ORDER BY c.created_at ASC",
            [{"name": "@status", "value": SuggestionStatus.OPEN.value}],
        )

    async def find(self, suggestion_id: str) -> SpellingSuggestion | None:
        results = await self.query(
            "SELECT * FROM c WHERE c.type = 'spelling_suggestion'"
            " AND c.id = @id AND NOT IS_DEFINED(c.deleted_at)",
            [{"name": "@id", "value": suggestion_id}],
        )
        return results[0] if results else None
