# Domain models must be pure (no I/O, no external libs)
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ReferencePassage:
    """
    Immutable unit of retrieved reference knowledge, owned by the search store.

    - id:          stable identifier in the reference corpus
    - title:       passage heading
    - content:     body text rendered into the prompt context
    - chapter:     chapter label of the source book
    - page:        page number in the source book (None if unknown)
    - tags:        free-form topical tags
    - updated_at:  last-updated timestamp of the record (None if unknown)
    - similarity:  backend similarity score for the query (None if not reported)
    """

    id: str
    title: str
    content: str
    chapter: str = ""
    page: int | None = None
    tags: tuple[str, ...] = ()
    updated_at: datetime | None = None
    similarity: float | None = None


@dataclass(frozen=True)
class Citation:
    """Citation reference for a generated answer."""

    source: str
    relevance: float
    page: int | None = None
    chapter: str | None = None


@dataclass(frozen=True)
class ConversationTurn:
    """One prior message of a conversation, attributed to a single role."""

    role: Role
    content: str


@dataclass(frozen=True)
class GeneratedAnswer:
    """Sole output of the orchestrator; never mutated after construction."""

    response: str
    citations: tuple[Citation, ...] = field(default_factory=tuple)
