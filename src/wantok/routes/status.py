"""Status route — liveness and queue statistics."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from wantok.database.repositories.sentences import SentenceRepository

router = APIRouter(tags=["status"])


class StatusOut(BaseModel):
    environment: str
    sentences: dict[str, int]


@router.get("/status")
async def queue_status(request: Request) -> StatusOut:
    """Report sentence counts per queue status."""
    repo = SentenceRepository(request.app.state.cosmos.database)
    counts = await repo.count_by_status()
    return StatusOut(environment=request.app.state.settings.app.env, sentences=counts)
