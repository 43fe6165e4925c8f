from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from importlib import import_module
from typing import Any

from medassist.domain.errors import EmbeddingError
from medassist.domain.types import Degradable, Vector
from medassist.infrastructure.embeddings.placeholders import (
    coerce_vector,
    random_vector,
    zero_vector,
)

logger = logging.getLogger(__name__)


@dataclass
class SentenceTransformerEmbeddingAdapter:
    """Local sentence-transformers embeddings with the same fail-soft contract."""

    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    device: str = "cpu"  # switch to "cuda" when available
    dim: int = 384
    local_files_only: bool = False  # support offline deployments
    rng: random.Random | None = field(default=None, repr=False)
    _model: Any | None = field(default=None, init=False, repr=False)

    @property
    def dimension(self) -> int:
        return self.dim

    def _ensure_model(self) -> Any:
        if self._model is not None:
            return self._model
        try:
            st_module = import_module("sentence_transformers")
            self._model = st_module.SentenceTransformer(
                self.model_name,
                device=self.device,
                local_files_only=self.local_files_only,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingError(
                f"Failed to load embedding model '{self.model_name}': {ex}"
            ) from ex
        return self._model

    def _encode(self, text: str) -> Vector:
        model = self._ensure_model()
        raw = model.encode(
            text,
            normalize_embeddings=True,
            convert_to_numpy=True,
            show_progress_bar=False,
        )
        values = raw.tolist() if hasattr(raw, "tolist") else list(raw)
        return coerce_vector(values, self.dim)

    async def embed(self, text: str) -> Degradable[Vector]:
        if not text or not text.strip():
            return Degradable.fallback(zero_vector(self.dim), "empty text")
        try:
            return Degradable.exact(await asyncio.to_thread(self._encode, text))
        except Exception as ex:  # noqa: BLE001
            cause = str(ex) if isinstance(ex, EmbeddingError) else f"local embedding failed: {ex}"
            logger.warning("embedding degraded to random vector: %s", cause)
            return Degradable.fallback(random_vector(self.dim, self.rng), cause)
