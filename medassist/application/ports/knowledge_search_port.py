from collections.abc import Sequence
from typing import Protocol, runtime_checkable

# Import domain model and re-export for convenience
from medassist.domain.models import ReferencePassage
from medassist.domain.types import Degradable

__all__ = ["KnowledgeSearchPort", "ReferencePassage"]


@runtime_checkable
class KnowledgeSearchPort(Protocol):
    """Similarity search over the persisted reference corpus.

    Returns at most `limit` passages meeting `similarity_threshold`, best match
    first. Backend errors degrade to an empty list.
    """

    @property
    def dimension(self) -> int: ...

    async def search(
        self,
        query_vector: Sequence[float],
        limit: int = 5,
        similarity_threshold: float = 0.7,
    ) -> Degradable[list[ReferencePassage]]: ...
