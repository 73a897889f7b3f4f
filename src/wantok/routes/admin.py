"""Admin routes — sentence import and queue statistics."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel

from wantok.auth.middleware import require_permission
from wantok.database.repositories.sentences import SentenceRepository
from wantok.models.user import Permission, User
from wantok.services.importer import import_sentences

router = APIRouter(prefix="/admin", tags=["admin"])

logger = logging.getLogger(__name__)

Importer = Annotated[User, Depends(require_permission(Permission.DATA_IMPORT))]


class ImportResult(BaseModel):
    received: int
    created: int


@router.post("/import")
async def import_corpus(
    request: Request,
    user: Importer,
    records: Annotated[list[Any], Body()],
    project_id: str | None = None,
) -> ImportResult:
    """Import sentences from a JSON array of ``{id, english}`` records."""
    repo = SentenceRepository(request.app.state.cosmos.database)
    created = await import_sentences(
        records,
        repo,
        project_id=project_id,
        target_redundancy=request.app.state.settings.queue.target_redundancy,
        on_progress=lambda n: logger.info("Imported %d / %d records", n, len(records)),
    )
    logger.info("Import by user=%s — %d records, %d created", user.id, len(records), created)
    return ImportResult(received=len(records), created=created)
