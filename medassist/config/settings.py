"""Application settings with environment-driven configuration.

This is the ONLY place where environment variables are read. Settings are
built once at process start and handed to the composition root.
"""

import os
from dataclasses import dataclass, field

from medassist.domain.errors import ConfigurationError, DimensionMismatchError

EMBEDDING_BACKENDS = ("hf_api", "local")
VECTOR_BACKENDS = ("supabase", "qdrant", "memory")


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from environment variables."""

    # ===== Embedding Configuration =====
    embedding_backend: str = field(
        default_factory=lambda: os.getenv("EMBEDDING_BACKEND", "hf_api").lower()
    )
    # Supported: "hf_api" (hosted inference) | "local" (sentence-transformers)

    hf_api_key: str = field(default_factory=lambda: os.getenv("HUGGINGFACE_API_KEY", ""))
    hf_api_url: str = field(
        default_factory=lambda: os.getenv(
            "HUGGINGFACE_API_URL", "https://api-inference.huggingface.co/models"
        )
    )
    embedding_model: str = field(
        default_factory=lambda: os.getenv(
            "EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2"
        )
    )
    embedding_device: str = field(default_factory=lambda: os.getenv("EMBEDDING_DEVICE", "cpu"))
    embedding_dim: int = field(default_factory=lambda: int(os.getenv("EMBEDDING_DIM", "384")))

    # ===== Knowledge Search Configuration =====
    vector_backend: str = field(
        default_factory=lambda: os.getenv("VECTOR_BACKEND", "supabase").lower()
    )
    # Supported: "supabase" | "qdrant" | "memory"

    supabase_url: str = field(default_factory=lambda: os.getenv("SUPABASE_URL", ""))
    supabase_key: str = field(default_factory=lambda: os.getenv("SUPABASE_ANON_KEY", ""))
    supabase_search_function: str = field(
        default_factory=lambda: os.getenv("SUPABASE_SEARCH_FUNCTION", "search_medical_content")
    )

    qdrant_url: str = field(
        default_factory=lambda: os.getenv("QDRANT_URL", "http://localhost:6333")
    )
    qdrant_api_key: str = field(default_factory=lambda: os.getenv("QDRANT_API_KEY", ""))
    qdrant_collection: str = field(
        default_factory=lambda: os.getenv("QDRANT_COLLECTION", "pediatric_references")
    )

    index_dim: int = field(default_factory=lambda: int(os.getenv("VECTOR_INDEX_DIM", "384")))
    # Dimensionality of the persisted index; must equal embedding_dim

    search_limit: int = field(default_factory=lambda: int(os.getenv("SEARCH_LIMIT", "5")))
    similarity_threshold: float = field(
        default_factory=lambda: float(os.getenv("SIMILARITY_THRESHOLD", "0.7"))
    )

    # ===== LLM Configuration =====
    llm_base_url: str = field(
        default_factory=lambda: os.getenv("LLM_BASE_URL", "https://api.mistral.ai/v1")
    )
    llm_api_key: str = field(default_factory=lambda: os.getenv("MISTRAL_API_KEY", ""))
    llm_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "mistral-large-latest"))
    llm_temperature: float = field(
        default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.3"))
    )
    llm_max_tokens: int = field(default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS", "2048")))

    # ===== Conversation Window =====
    generation_history_turns: int = field(
        default_factory=lambda: int(os.getenv("GENERATION_HISTORY_TURNS", "6"))
    )
    snapshot_history_turns: int = field(
        default_factory=lambda: int(os.getenv("SNAPSHOT_HISTORY_TURNS", "10"))
    )

    # ===== Citations =====
    reference_source: str = field(
        default_factory=lambda: os.getenv("REFERENCE_SOURCE", "Nelson Textbook of Pediatrics")
    )
    citation_relevance: float = field(
        default_factory=lambda: float(os.getenv("CITATION_RELEVANCE", "0.8"))
    )
    citation_use_similarity: bool = field(
        default_factory=lambda: _flag("CITATION_USE_SIMILARITY", "false")
    )

    # ===== Transport =====
    http_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("HTTP_TIMEOUT_S", "30"))
    )

    # ===== Telemetry / Logging =====
    telemetry_enabled: bool = field(default_factory=lambda: _flag("TELEMETRY_ENABLED", "false"))
    otlp_endpoint: str = field(default_factory=lambda: os.getenv("OTLP_ENDPOINT", ""))
    telemetry_environment: str = field(
        default_factory=lambda: os.getenv("TELEMETRY_ENVIRONMENT", "production")
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    def validate(self) -> None:
        """Fail fast on settings that would make the assistant silently useless.

        Raises:
            ConfigurationError: Missing generation credential or unknown backend
            DimensionMismatchError: embedding_dim differs from index_dim
        """
        if not self.llm_api_key.strip():
            raise ConfigurationError("Missing Mistral API key", "MISTRAL_API_KEY")
        if self.embedding_backend not in EMBEDDING_BACKENDS:
            raise ConfigurationError(
                f"Unknown embedding backend '{self.embedding_backend}'", "EMBEDDING_BACKEND"
            )
        if self.vector_backend not in VECTOR_BACKENDS:
            raise ConfigurationError(
                f"Unknown vector backend '{self.vector_backend}'", "VECTOR_BACKEND"
            )
        if self.embedding_dim <= 0:
            raise ConfigurationError("Embedding dimension must be > 0", "EMBEDDING_DIM")
        if self.embedding_dim != self.index_dim:
            raise DimensionMismatchError(
                message=(
                    f"embedding dimension {self.embedding_dim} does not match "
                    f"search index dimension {self.index_dim}"
                ),
                setting="EMBEDDING_DIM",
                embedding_dim=self.embedding_dim,
                index_dim=self.index_dim,
            )
