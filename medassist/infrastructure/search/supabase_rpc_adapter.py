"""Supabase (PostgREST RPC) knowledge search adapter.

Calls a Postgres function over `POST {url}/rest/v1/rpc/{function}` with
`{query_embedding, match_count, similarity_threshold}`. Any failure degrades
to an empty passage list.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import requests

from medassist.domain.errors import KnowledgeSearchError
from medassist.domain.models import ReferencePassage
from medassist.domain.services.ranking import rank_passages
from medassist.domain.types import Degradable
from medassist.infrastructure.search.records import passage_from_record

logger = logging.getLogger(__name__)


@dataclass
class SupabaseKnowledgeSearchAdapter:
    url: str = ""
    api_key: str = ""
    function: str = "search_medical_content"
    dim: int = 384
    timeout_s: float = 30.0
    session: Any | None = field(default=None, repr=False)

    @property
    def dimension(self) -> int:
        return self.dim

    @property
    def endpoint(self) -> str:
        return f"{self.url.rstrip('/')}/rest/v1/rpc/{self.function}"

    def _call(self, body: dict[str, Any]) -> Any:
        http = self.session or requests
        resp = http.post(
            self.endpoint,
            headers={
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json=body,
            timeout=self.timeout_s,
        )
        if resp.status_code >= 400:
            raise KnowledgeSearchError(f"Supabase RPC error {resp.status_code}: {resp.text[:200]}")
        return resp.json()

    def _empty(self, cause: str) -> Degradable[list[ReferencePassage]]:
        logger.warning("knowledge search degraded to no results: %s", cause)
        return Degradable.fallback([], cause)

    async def search(
        self,
        query_vector: Sequence[float],
        limit: int = 5,
        similarity_threshold: float = 0.7,
    ) -> Degradable[list[ReferencePassage]]:
        if not self.url or not self.api_key:
            return self._empty("Supabase URL or key not configured")
        if len(query_vector) != self.dim:
            return self._empty(f"query vector has {len(query_vector)} dimensions, index has {self.dim}")
        body = {
            "query_embedding": [float(x) for x in query_vector],
            "match_count": limit,
            "similarity_threshold": similarity_threshold,
        }
        try:
            rows = await asyncio.to_thread(self._call, body)
            if rows is None:
                rows = []
            if not isinstance(rows, list):
                raise KnowledgeSearchError(f"unexpected RPC payload: {type(rows).__name__}")
            passages = [passage_from_record(r) for r in rows]
        except Exception as ex:  # noqa: BLE001
            return self._empty(f"Supabase search failed: {ex}")
        return Degradable.exact(rank_passages(passages, similarity_threshold, limit))
