from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from medassist.domain.errors import GenerationError
from medassist.domain.types import Result

NO_RESPONSE_TEXT = "I apologize, but I was unable to generate a response."


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "system" | "user" | "assistant"
    content: str


@runtime_checkable
class LLMPort(Protocol):
    async def complete(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.3,
        max_tokens: int = 2048,
    ) -> Result[str, GenerationError]:
        """Single request/response chat completion.

        Args:
            messages: Ordered chat messages (system first)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            Result with the generated text, or GenerationError on any
            transport/API failure. A response without usable text succeeds
            with NO_RESPONSE_TEXT.
        """
        ...
