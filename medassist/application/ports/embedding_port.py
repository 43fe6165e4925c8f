from typing import Protocol, runtime_checkable

from medassist.domain.types import Degradable, Vector


@runtime_checkable
class EmbeddingPort(Protocol):
    """Turns free text into a fixed-length vector; never raises.

    Adapters return `Degradable.fallback(...)` with a placeholder vector of
    the configured dimensionality when the backend cannot be used.
    """

    @property
    def dimension(self) -> int: ...

    async def embed(self, text: str) -> Degradable[Vector]: ...
