"""Composition root: the only place that turns settings into adapters.

Every builder takes an AppSettings instance; `build_answer_use_case` and
`build_chat_session` validate it first so misconfiguration stops startup.
"""

import logging

from medassist.application.ports.clock_port import ClockPort
from medassist.application.ports.embedding_port import EmbeddingPort
from medassist.application.ports.knowledge_search_port import KnowledgeSearchPort
from medassist.application.ports.llm_port import LLMPort
from medassist.application.ports.telemetry_port import NullTelemetry, TelemetryPort
from medassist.application.services.response_composer import ResponseComposer
from medassist.application.use_cases.answer_medical_query import AnswerMedicalQuery, AnswerOptions
from medassist.application.use_cases.chat_session import ChatSession
from medassist.config.settings import AppSettings
from medassist.infrastructure.embeddings.hf_inference_adapter import HFInferenceEmbeddingAdapter
from medassist.infrastructure.embeddings.sentence_transformers_adapter import (
    SentenceTransformerEmbeddingAdapter,
)
from medassist.infrastructure.llm.mistral_chat_adapter import MistralChatAdapter
from medassist.infrastructure.search.memory_adapter import InMemoryKnowledgeSearchAdapter
from medassist.infrastructure.search.qdrant_adapter import (
    QdrantConfig,
    QdrantKnowledgeSearchAdapter,
)
from medassist.infrastructure.search.supabase_rpc_adapter import SupabaseKnowledgeSearchAdapter
from medassist.infrastructure.telemetry.otel_adapter import OpenTelemetryAdapter, OtelConfig
from medassist.infrastructure.time.system_clock import SystemClock

logger = logging.getLogger(__name__)


def build_embedding(settings: AppSettings) -> EmbeddingPort:
    if settings.embedding_backend == "local":
        return SentenceTransformerEmbeddingAdapter(
            model_name=settings.embedding_model,
            device=settings.embedding_device,
            dim=settings.embedding_dim,
        )
    if not settings.hf_api_key:
        logger.warning("HUGGINGFACE_API_KEY not set; query embeddings will be placeholders")
    return HFInferenceEmbeddingAdapter(
        api_key=settings.hf_api_key,
        model=settings.embedding_model,
        base_url=settings.hf_api_url,
        dim=settings.embedding_dim,
        timeout_s=settings.http_timeout_s,
    )


def build_knowledge_search(settings: AppSettings) -> KnowledgeSearchPort:
    backend = settings.vector_backend

    if backend == "qdrant":
        cfg = QdrantConfig(
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key or None,
            collection=settings.qdrant_collection,
            timeout_s=int(settings.http_timeout_s),
        )
        return QdrantKnowledgeSearchAdapter(cfg, dim=settings.index_dim)

    if backend == "memory":
        logger.warning("using empty in-memory knowledge search; answers will carry no citations")
        return InMemoryKnowledgeSearchAdapter(dim=settings.index_dim)

    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase URL/key not set; knowledge search will return no passages")
    return SupabaseKnowledgeSearchAdapter(
        url=settings.supabase_url,
        api_key=settings.supabase_key,
        function=settings.supabase_search_function,
        dim=settings.index_dim,
        timeout_s=settings.http_timeout_s,
    )


def build_llm(settings: AppSettings) -> LLMPort:
    return MistralChatAdapter(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        model=settings.llm_model,
        timeout_s=settings.http_timeout_s,
    )


def build_telemetry(settings: AppSettings) -> TelemetryPort:
    """Build telemetry adapter; a no-op unless TELEMETRY_ENABLED=true."""
    if not settings.telemetry_enabled:
        return NullTelemetry()
    cfg = OtelConfig(
        service_name="medassist",
        otlp_endpoint=settings.otlp_endpoint or None,
        environment=settings.telemetry_environment,
    )
    return OpenTelemetryAdapter(cfg)


def build_clock() -> ClockPort:
    return SystemClock()


def build_composer(settings: AppSettings) -> ResponseComposer:
    return ResponseComposer(
        source=settings.reference_source,
        history_turns=settings.generation_history_turns,
    )


def build_answer_options(settings: AppSettings) -> AnswerOptions:
    return AnswerOptions(
        search_limit=settings.search_limit,
        similarity_threshold=settings.similarity_threshold,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        citation_source=settings.reference_source,
        citation_relevance=settings.citation_relevance,
        citation_use_similarity=settings.citation_use_similarity,
    )


def build_answer_use_case(settings: AppSettings | None = None) -> AnswerMedicalQuery:
    """Build the RAG orchestrator.

    Raises:
        ConfigurationError: If the settings fail validation
    """
    settings = settings or AppSettings()
    settings.validate()
    return AnswerMedicalQuery(
        embedding=build_embedding(settings),
        knowledge_search=build_knowledge_search(settings),
        llm=build_llm(settings),
        composer=build_composer(settings),
        options=build_answer_options(settings),
        telemetry=build_telemetry(settings),
    )


def build_chat_session(settings: AppSettings | None = None) -> ChatSession:
    settings = settings or AppSettings()
    return ChatSession(
        answerer=build_answer_use_case(settings),
        clock=build_clock(),
        snapshot_turns=settings.snapshot_history_turns,
    )
