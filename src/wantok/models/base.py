"""Shared base for Cosmos DB document models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(UTC)


class DocumentBase(BaseModel):
    """Fields common to every stored document.

    ``etag`` is read from the store's ``_etag`` system property and never
    written back as part of the document body.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    deleted_at: datetime | None = None
    etag: str | None = Field(default=None, validation_alias="_etag", exclude=True)

    def to_document(self) -> dict:
        """Serialize for the store, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)
