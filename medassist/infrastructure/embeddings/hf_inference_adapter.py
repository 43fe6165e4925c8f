"""HuggingFace Inference API embedding adapter (fail-soft)."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Any

import requests

from medassist.domain.errors import EmbeddingError
from medassist.domain.types import Degradable, Vector
from medassist.infrastructure.embeddings.placeholders import (
    coerce_vector,
    random_vector,
    zero_vector,
)

logger = logging.getLogger(__name__)


@dataclass
class HFInferenceEmbeddingAdapter:
    """Embeds text through the hosted feature-extraction endpoint.

    The request asks the service to hold the call while the model warms up
    (`wait_for_model`) instead of answering 503. Missing credentials, transport
    errors, error statuses and malformed payloads all degrade to a random
    vector of the configured dimensionality; nothing is raised.
    """

    api_key: str = ""
    model: str = "sentence-transformers/all-MiniLM-L6-v2"
    base_url: str = "https://api-inference.huggingface.co/models"
    dim: int = 384
    timeout_s: float = 30.0
    session: Any | None = field(default=None, repr=False)
    rng: random.Random | None = field(default=None, repr=False)

    @property
    def dimension(self) -> int:
        return self.dim

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.model}"

    def _placeholder(self, cause: str) -> Degradable[Vector]:
        logger.warning("embedding degraded to random vector: %s", cause)
        return Degradable.fallback(random_vector(self.dim, self.rng), cause)

    def _post(self, text: str) -> Any:
        http = self.session or requests
        resp = http.post(
            self.url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={"inputs": text, "options": {"wait_for_model": True}},
            timeout=self.timeout_s,
        )
        if resp.status_code >= 400:
            raise EmbeddingError(f"HuggingFace API error {resp.status_code}: {resp.text[:200]}")
        return resp.json()

    async def embed(self, text: str) -> Degradable[Vector]:
        if not text or not text.strip():
            return Degradable.fallback(zero_vector(self.dim), "empty text")
        if not self.api_key:
            return self._placeholder("HuggingFace API key not configured")
        try:
            payload = await asyncio.to_thread(self._post, text)
            return Degradable.exact(coerce_vector(payload, self.dim))
        except EmbeddingError as ex:
            return self._placeholder(str(ex))
        except Exception as ex:  # noqa: BLE001
            return self._placeholder(f"embedding request failed: {ex}")
