"""In-process knowledge search over a small list of embedded passages.

Used for offline development and as the backend of last resort in tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from medassist.domain.errors import ValidationError
from medassist.domain.models import ReferencePassage
from medassist.domain.services.ranking import rank_passages
from medassist.domain.similarity import cosine
from medassist.domain.types import Degradable, Vector


@dataclass
class InMemoryKnowledgeSearchAdapter:
    dim: int = 384
    _entries: list[tuple[Vector, ReferencePassage]] = field(
        default_factory=list, init=False, repr=False
    )

    @property
    def dimension(self) -> int:
        return self.dim

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, passage: ReferencePassage, vector: Sequence[float]) -> None:
        if len(vector) != self.dim:
            raise ValidationError(f"expected {self.dim} dimensions, got {len(vector)}")
        self._entries.append((tuple(float(x) for x in vector), passage))

    async def search(
        self,
        query_vector: Sequence[float],
        limit: int = 5,
        similarity_threshold: float = 0.7,
    ) -> Degradable[list[ReferencePassage]]:
        if len(query_vector) != self.dim:
            return Degradable.fallback(
                [], f"query vector has {len(query_vector)} dimensions, index has {self.dim}"
            )
        scored = [
            replace(passage, similarity=cosine(query_vector, vector))
            for vector, passage in self._entries
        ]
        return Degradable.exact(rank_passages(scored, similarity_threshold, limit))
