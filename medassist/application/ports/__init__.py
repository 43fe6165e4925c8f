"""Application ports package."""

from medassist.application.ports.clock_port import ClockPort
from medassist.application.ports.embedding_port import EmbeddingPort
from medassist.application.ports.knowledge_search_port import (
    KnowledgeSearchPort,
    ReferencePassage,
)
from medassist.application.ports.llm_port import NO_RESPONSE_TEXT, ChatMessage, LLMPort
from medassist.application.ports.telemetry_port import NullTelemetry, TelemetryPort

__all__ = [
    "ClockPort",
    "EmbeddingPort",
    "KnowledgeSearchPort",
    "ReferencePassage",
    "LLMPort",
    "ChatMessage",
    "NO_RESPONSE_TEXT",
    "TelemetryPort",
    "NullTelemetry",
]
