# medassist/domain/services/ranking.py
# Pure domain services: no I/O, deterministic, no external libraries.
from __future__ import annotations

from collections.abc import Sequence

from medassist.domain.models import Citation, ReferencePassage


def rank_passages(
    passages: Sequence[ReferencePassage],
    threshold: float | None = None,
    limit: int | None = None,
) -> list[ReferencePassage]:
    """
    Order passages best match first and apply the search contract.

    - Descending similarity; the sort is stable so ties keep backend order.
    - Passages without a similarity keep their backend position relative to
      each other and sort after all scored passages.
    - `threshold` drops scored passages below it (unscored ones are trusted,
      the backend already filtered them).
    - `limit` caps the result length.
    """
    kept = [
        p
        for p in passages
        if threshold is None or p.similarity is None or p.similarity >= threshold
    ]
    kept.sort(key=lambda p: (p.similarity is None, -(p.similarity or 0.0)))
    if limit is not None:
        kept = kept[: max(limit, 0)]
    return kept


def to_citation(
    passage: ReferencePassage,
    source: str,
    relevance: float,
    use_similarity: bool = False,
) -> Citation:
    """
    Derive the citation for one consulted passage.

    The relevance is a fixed placeholder unless `use_similarity` is set and
    the backend reported a score, which is then clamped into [0, 1].
    """
    score = relevance
    if use_similarity and passage.similarity is not None:
        score = min(max(passage.similarity, 0.0), 1.0)
    return Citation(
        source=f"{source}, {passage.chapter}" if passage.chapter else source,
        relevance=score,
        page=passage.page,
        chapter=passage.chapter or None,
    )


def citations_for(
    passages: Sequence[ReferencePassage],
    source: str,
    relevance: float,
    use_similarity: bool = False,
) -> tuple[Citation, ...]:
    """Map passages 1:1 to citations, preserving their order."""
    return tuple(to_citation(p, source, relevance, use_similarity) for p in passages)
