"""Bulk sentence import from a JSON array."""

from __future__ import annotations

import json
import logging
import math
from typing import TYPE_CHECKING, Any

from wantok.exceptions import InvalidInput
from wantok.models.sentence import DEFAULT_TARGET_REDUNDANCY, Difficulty, Sentence

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from wantok.database.repositories.sentences import SentenceRepository

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 1.0


def _coerce_id(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def _coerce_priority(raw: object) -> float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int | float):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw)
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def build_sentences(
    records: Iterable[Any],
    *,
    project_id: str | None = None,
    target_redundancy: int = DEFAULT_TARGET_REDUNDANCY,
) -> list[Sentence]:
    """Turn raw import records into open sentences.

    Each record needs an ``id`` and an ``english`` (or ``sentence``) text;
    records missing either are skipped. An optional numeric ``priority``
    sets the queue priority; records with any other priority are skipped.
    """
    sentences: list[Sentence] = []
    skipped = 0
    for record in records:
        if not isinstance(record, dict):
            skipped += 1
            continue
        sentence_id = _coerce_id(record.get("id"))
        text = record.get("english") or record.get("sentence")
        priority = _coerce_priority(record.get("priority", DEFAULT_PRIORITY))
        if (
            sentence_id is None
            or priority is None
            or not isinstance(text, str)
            or not text.strip()
        ):
            skipped += 1
            continue
        text = text.strip()
        word_count = len(text.split())
        sentences.append(
            Sentence(
                sentence_id=sentence_id,
                source_text=text,
                project_id=project_id,
                length=word_count,
                difficulty=Difficulty.for_length(word_count),
                priority_score=priority,
                target_redundancy=target_redundancy,
            )
        )
    if skipped:
        logger.warning("Skipped %d import records without id, text or a valid priority", skipped)
    return sentences


def parse_import(raw: str | bytes) -> list[Any]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"Import file is not valid JSON: {exc.msg}"
        raise InvalidInput(msg) from exc
    if not isinstance(payload, list):
        msg = "Import file must be a JSON array"
        raise InvalidInput(msg)
    return payload


async def import_sentences(
    records: Iterable[Any],
    sentences_repo: SentenceRepository,
    *,
    project_id: str | None = None,
    target_redundancy: int = DEFAULT_TARGET_REDUNDANCY,
    on_progress: Callable[[int], None] | None = None,
) -> int:
    """Validate and store new sentences. Returns the number created."""
    sentences = build_sentences(
        records, project_id=project_id, target_redundancy=target_redundancy
    )
    if not sentences:
        msg = "No valid sentences found. Ensure 'id' and 'english' fields exist"
        raise InvalidInput(msg)

    logger.info("Importing %d sentences — project=%s", len(sentences), project_id)
    written = await sentences_repo.save_many(sentences, on_progress)
    logger.info("Import complete — %d of %d sentences created", written, len(sentences))
    return written
