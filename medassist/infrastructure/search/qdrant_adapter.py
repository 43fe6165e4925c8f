"""Qdrant knowledge search adapter (async client).

Passage fields live in the point payload; the point score is the cosine
similarity reported by Qdrant.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from importlib import import_module
from typing import Any

from medassist.domain.errors import ConfigurationError
from medassist.domain.models import ReferencePassage
from medassist.domain.services.ranking import rank_passages
from medassist.domain.types import Degradable
from medassist.infrastructure.search.records import passage_from_record

logger = logging.getLogger(__name__)


@dataclass
class QdrantConfig:
    """Configuration for Qdrant client connection."""

    url: str = "http://localhost:6333"
    api_key: str | None = None
    collection: str = "pediatric_references"
    timeout_s: int = 30


class QdrantKnowledgeSearchAdapter:
    def __init__(self, cfg: QdrantConfig, dim: int = 384, client: Any | None = None) -> None:
        """Initialize Qdrant adapter.

        Args:
            cfg: QdrantConfig with connection parameters
            dim: Dimensionality of the collection vectors
            client: Pre-built AsyncQdrantClient (tests inject fakes)

        Raises:
            ConfigurationError: If qdrant-client is not installed
        """
        self._cfg = cfg
        self._dim = dim
        self._client = client or self._init_client(cfg)

    @staticmethod
    def _init_client(cfg: QdrantConfig) -> Any:
        try:
            qdrant_client = import_module("qdrant_client")
        except Exception as ex:  # pragma: no cover
            raise ConfigurationError(
                "qdrant-client not available; install runtime deps", "VECTOR_BACKEND"
            ) from ex
        return qdrant_client.AsyncQdrantClient(
            url=cfg.url, api_key=cfg.api_key, timeout=cfg.timeout_s
        )

    @property
    def dimension(self) -> int:
        return self._dim

    async def search(
        self,
        query_vector: Sequence[float],
        limit: int = 5,
        similarity_threshold: float = 0.7,
    ) -> Degradable[list[ReferencePassage]]:
        try:
            resp: Any = await self._client.query_points(
                collection_name=self._cfg.collection,
                query=[float(x) for x in query_vector],
                limit=limit,
                score_threshold=similarity_threshold,
                with_payload=True,
            )
            passages = [
                passage_from_record({"id": p.id, **(p.payload or {})}, similarity=p.score)
                for p in resp.points
            ]
        except Exception as ex:  # noqa: BLE001
            cause = f"Qdrant search failed: {ex}"
            logger.warning("knowledge search degraded to no results: %s", cause)
            return Degradable.fallback([], cause)
        return Degradable.exact(rank_passages(passages, similarity_threshold, limit))
