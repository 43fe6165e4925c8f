# medassist/application/use_cases/answer_medical_query.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from medassist.application.dto.answer_dto import AnswerRequest
from medassist.application.ports.embedding_port import EmbeddingPort
from medassist.application.ports.knowledge_search_port import KnowledgeSearchPort
from medassist.application.ports.llm_port import LLMPort
from medassist.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from medassist.application.services.response_composer import DEFAULT_SOURCE, ResponseComposer
from medassist.domain.errors import DimensionMismatchError
from medassist.domain.models import ConversationTurn, GeneratedAnswer
from medassist.domain.services.ranking import citations_for

logger = logging.getLogger(__name__)

APOLOGY_TEXT = (
    "I apologize, but I encountered an error while processing your request. "
    "Please try again or contact support if the issue persists."
)
EMPTY_QUERY_TEXT = "Please enter a question so I can help."


@dataclass(frozen=True)
class AnswerOptions:
    """
    Tunables for one orchestrator instance.

    - search_limit / similarity_threshold: knowledge search cap and cut-off
    - temperature / max_tokens: generation sampling
    - citation_source: label prefix of every citation
    - citation_relevance: placeholder relevance carried by each citation
    - citation_use_similarity: carry the backend similarity instead, when reported
    """

    search_limit: int = 5
    similarity_threshold: float = 0.7
    temperature: float = 0.3
    max_tokens: int = 2048
    citation_source: str = DEFAULT_SOURCE
    citation_relevance: float = 0.8
    citation_use_similarity: bool = False


class AnswerMedicalQuery:
    """
    RAG orchestrator: embed -> search -> cite -> compose -> generate.
    Uses only ports. Embedding and search degrade on their own; a generation
    failure becomes the fixed apology with no citations. Never raises.
    """

    def __init__(
        self,
        embedding: EmbeddingPort,
        knowledge_search: KnowledgeSearchPort,
        llm: LLMPort,
        composer: ResponseComposer | None = None,
        options: AnswerOptions | None = None,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        if embedding.dimension != knowledge_search.dimension:
            raise DimensionMismatchError(
                message=(
                    f"embedding dimension {embedding.dimension} does not match "
                    f"search index dimension {knowledge_search.dimension}"
                ),
                setting="EMBEDDING_DIM",
                embedding_dim=embedding.dimension,
                index_dim=knowledge_search.dimension,
            )
        self.embedding = embedding
        self.knowledge_search = knowledge_search
        self.llm = llm
        self.options = options or AnswerOptions()
        self.composer = composer or ResponseComposer(source=self.options.citation_source)
        self.telemetry = telemetry or NullTelemetry()

    async def answer(
        self, query: str, history: Iterable[ConversationTurn] = ()
    ) -> GeneratedAnswer:
        return await self.execute(AnswerRequest.build(query, history))

    async def execute(self, req: AnswerRequest) -> GeneratedAnswer:
        if not req.query or not req.query.strip():
            return GeneratedAnswer(response=EMPTY_QUERY_TEXT)
        try:
            return await self._run(req)
        except Exception:
            logger.exception("answer pipeline failed unexpectedly; returning fallback")
            self.telemetry.incr("medassist.answers.total", {"status": "fallback"})
            return GeneratedAnswer(response=APOLOGY_TEXT)

    async def _run(self, req: AnswerRequest) -> GeneratedAnswer:
        opts = self.options

        # 1) Embed query (fail-soft)
        vector = await self.embedding.embed(req.query)
        if vector.degraded:
            logger.warning("continuing with placeholder query vector: %s", vector.cause)
            self.telemetry.incr("medassist.retrieval.degraded", {"stage": "embedding"})

        # 2) Retrieve passages (fail-soft)
        found = await self.knowledge_search.search(
            vector.value, opts.search_limit, opts.similarity_threshold
        )
        if found.degraded:
            logger.warning("continuing without reference passages: %s", found.cause)
            self.telemetry.incr("medassist.retrieval.degraded", {"stage": "search"})
        passages = found.value

        # 3) One citation per consulted passage, same order
        citations = citations_for(
            passages,
            source=opts.citation_source,
            relevance=opts.citation_relevance,
            use_similarity=opts.citation_use_similarity,
        )

        # 4) Compose and 5) generate
        messages = self.composer.compose(req.query, passages, req.history)
        result = await self.llm.complete(
            messages, temperature=opts.temperature, max_tokens=opts.max_tokens
        )
        if not result.ok or result.value is None:
            logger.error("generation failed, returning fallback answer: %s", result.error)
            self.telemetry.incr("medassist.answers.total", {"status": "fallback"})
            return GeneratedAnswer(response=APOLOGY_TEXT)

        # 6) Package
        status = "grounded" if citations else "ungrounded"
        self.telemetry.incr("medassist.answers.total", {"status": status})
        self.telemetry.observe("medassist.citations.count", float(len(citations)), {})
        logger.info("answered query with %d citation(s)", len(citations))
        return GeneratedAnswer(response=result.value, citations=citations)
