"""Repository for the users container (partitioned by /id)."""

from __future__ import annotations

import logging

from wantok.database.repositories.base import BaseRepository
from wantok.exceptions import ConcurrencyConflict, StaleReference
from wantok.models.user import User

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 3


class UserRepository(BaseRepository[User]):
    container_name = "users"
    model_class = User

    async def get_user(self, user_id: str) -> User | None:
        return await self.get(user_id, user_id)

    async def add_translated_sentence(self, user_id: str, sentence_id: int) -> User:
        """Record a translated sentence on the user, once."""
        for _ in range(_MAX_ATTEMPTS):
            user = await self.get_user(user_id)
            if user is None:
                raise StaleReference("User", user_id)
            if user.has_translated(sentence_id):
                return user
            user.translated_sentence_ids.append(sentence_id)
            try:
                return await self.replace_if_unchanged(user)
            except ConcurrencyConflict:
                logger.debug("User history write raced — user=%s", user_id)
        msg = f"Could not record sentence {sentence_id} for user {user_id}"
        raise ConcurrencyConflict(msg)
