"""Mistral chat-completion adapter over the OpenAI-compatible endpoint."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from importlib import import_module
from typing import Any, cast

from medassist.application.ports.llm_port import NO_RESPONSE_TEXT, ChatMessage
from medassist.domain.errors import GenerationError
from medassist.domain.types import Result

logger = logging.getLogger(__name__)


@dataclass
class MistralChatAdapter:
    api_key: str
    base_url: str = "https://api.mistral.ai/v1"
    model: str = "mistral-large-latest"
    timeout_s: float = 60.0
    client: Any | None = field(default=None, repr=False)

    def _ensure_client(self) -> Any:
        # Deferred import keeps the openai SDK out of tests that inject a client
        if self.client is None:
            module = import_module("openai")
            self.client = module.AsyncOpenAI(
                base_url=self.base_url,
                api_key=self.api_key,
                timeout=self.timeout_s,
                max_retries=0,
            )
        return self.client

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.3,
        max_tokens: int = 2048,
    ) -> Result[str, GenerationError]:
        try:
            client = self._ensure_client()
            payload: Any = [{"role": m.role, "content": m.content} for m in messages]
            resp: Any = await client.chat.completions.create(
                model=self.model,
                messages=cast(Any, payload),
                temperature=temperature,
                max_tokens=max_tokens,
                extra_body={"safe_prompt": False},
            )
            choices = resp.choices or []
            content = choices[0].message.content if choices else None
        except Exception as ex:  # noqa: BLE001
            # Translate external errors to domain-specific errors
            logger.error("Mistral API error: %s", ex)
            return Result.failure(GenerationError(f"LLM communication failed: {ex}"))

        if not isinstance(content, str) or not content.strip():
            logger.warning("completion carried no usable text")
            return Result.success(NO_RESPONSE_TEXT)
        return Result.success(content)
