"""Tests for the Mistral chat adapter (OpenAI-compatible client)."""

import asyncio
import sys
from types import SimpleNamespace

from medassist.application.ports.llm_port import NO_RESPONSE_TEXT, ChatMessage
from medassist.domain.errors import GenerationError
from medassist.infrastructure.llm.mistral_chat_adapter import MistralChatAdapter


class FakeCompletions:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.kwargs: dict = {}

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.exc is not None:
            raise self.exc
        return self.response


def fake_client(completions: FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def completion(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason="stop")]
    )


MESSAGES = [
    ChatMessage(role="system", content="be precise"),
    ChatMessage(role="user", content="Fever?"),
]


def complete(adapter, **kwargs):
    return asyncio.run(adapter.complete(MESSAGES, **kwargs))


def test_success_passes_model_messages_and_sampling():
    completions = FakeCompletions(response=completion("Antipyretics..."))
    adapter = MistralChatAdapter(api_key="k", model="mistral-large-latest", client=fake_client(completions))

    result = complete(adapter, temperature=0.3, max_tokens=2048)

    assert result.ok
    assert result.value == "Antipyretics..."
    assert completions.kwargs["model"] == "mistral-large-latest"
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "be precise"},
        {"role": "user", "content": "Fever?"},
    ]
    assert completions.kwargs["temperature"] == 0.3
    assert completions.kwargs["max_tokens"] == 2048


def test_transport_error_becomes_generation_error():
    completions = FakeCompletions(exc=TimeoutError("timed out"))
    result = complete(MistralChatAdapter(api_key="k", client=fake_client(completions)))

    assert not result.ok
    assert isinstance(result.error, GenerationError)
    assert "timed out" in str(result.error)


def test_empty_content_returns_fixed_sentence():
    for response in (completion(None), completion("   "), SimpleNamespace(choices=[])):
        adapter = MistralChatAdapter(api_key="k", client=fake_client(FakeCompletions(response=response)))
        result = complete(adapter)
        assert result.ok
        assert result.value == NO_RESPONSE_TEXT


def test_client_built_lazily_from_openai(monkeypatch):
    created: dict = {}
    completions = FakeCompletions(response=completion("ok"))

    class FakeAsyncOpenAI:
        def __init__(self, **kwargs):
            created.update(kwargs)
            self.chat = SimpleNamespace(completions=completions)

    module = type(sys)("openai")
    module.AsyncOpenAI = FakeAsyncOpenAI
    monkeypatch.setitem(sys.modules, "openai", module)

    adapter = MistralChatAdapter(api_key="secret", base_url="https://api.mistral.ai/v1")
    result = complete(adapter)

    assert result.value == "ok"
    assert created["api_key"] == "secret"
    assert created["base_url"] == "https://api.mistral.ai/v1"
    assert created["max_retries"] == 0
