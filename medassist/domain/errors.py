"""Domain errors (typed).

Degraded-input errors (embedding, knowledge search) are only ever carried as
the cause of a `Degradable` value. Generation errors travel inside a failed
`Result`. Configuration errors are raised at startup.
"""

from dataclasses import dataclass


class DomainError(Exception):
    """Base class for domain-specific errors."""


class ValidationError(DomainError):
    """Invalid input/domain state."""


class EmbeddingError(DomainError):
    """Embedding backend failed or returned an unusable payload."""


class KnowledgeSearchError(DomainError):
    """Vector search backend failed or returned an unusable payload."""


class GenerationError(DomainError):
    """Text-generation backend failed (transport, status or API error)."""


@dataclass(frozen=True)
class ConfigurationError(DomainError):
    """Misconfiguration that must stop the process at startup."""

    message: str
    setting: str = ""

    def __str__(self) -> str:
        if self.setting:
            return f"{self.message} (setting: {self.setting})"
        return self.message


@dataclass(frozen=True)
class DimensionMismatchError(ConfigurationError):
    """Embedding dimensionality differs from the search index."""

    embedding_dim: int = 0
    index_dim: int = 0
