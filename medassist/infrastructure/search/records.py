"""Mapping from backend records to ReferencePassage."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from medassist.domain.errors import KnowledgeSearchError
from medassist.domain.models import ReferencePassage


def _timestamp(raw: Any) -> datetime | None:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw:
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            return None
    return None


def _page(raw: Any) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _tags(raw: Any) -> tuple[str, ...]:
    if not raw:
        return ()
    if isinstance(raw, str):
        return (raw,)
    return tuple(str(t) for t in raw)


def passage_from_record(record: Mapping[str, Any], similarity: float | None = None) -> ReferencePassage:
    """Build a passage from `{id, title, content, chapter, page, tags, updated_at}`.

    `similarity` overrides the record's own `similarity` field when given.

    Raises:
        KnowledgeSearchError: If the record is not a mapping or has no id
    """
    if not isinstance(record, Mapping):
        raise KnowledgeSearchError(f"unexpected record type: {type(record).__name__}")
    if record.get("id") is None:
        raise KnowledgeSearchError("record without id")
    score = similarity if similarity is not None else record.get("similarity")
    return ReferencePassage(
        id=str(record["id"]),
        title=str(record.get("title") or ""),
        content=str(record.get("content") or ""),
        chapter=str(record.get("chapter") or ""),
        page=_page(record.get("page")),
        tags=_tags(record.get("tags")),
        updated_at=_timestamp(record.get("updated_at")),
        similarity=float(score) if isinstance(score, int | float) else None,
    )
