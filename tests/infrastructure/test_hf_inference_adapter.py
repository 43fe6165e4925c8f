"""Tests for the hosted embedding adapter: it must never raise."""

import asyncio
import random

import pytest
import requests

from medassist.domain.errors import EmbeddingError
from medassist.infrastructure.embeddings.hf_inference_adapter import HFInferenceEmbeddingAdapter
from medassist.infrastructure.embeddings.placeholders import coerce_vector

DIM = 384


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, exc: Exception | None = None) -> None:
        self.response = response
        self.exc = exc
        self.calls: list[dict] = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


def make_adapter(session: FakeSession, api_key: str = "hf_test") -> HFInferenceEmbeddingAdapter:
    return HFInferenceEmbeddingAdapter(
        api_key=api_key, dim=DIM, session=session, rng=random.Random(7), timeout_s=5
    )


def embed(adapter, text="fever in neonates"):
    return asyncio.run(adapter.embed(text))


def test_flat_vector_payload():
    session = FakeSession(FakeResponse(payload=[0.5] * DIM))
    result = embed(make_adapter(session))

    assert result.degraded is False
    assert result.value == tuple([0.5] * DIM)
    call = session.calls[0]
    assert call["url"].endswith("/sentence-transformers/all-MiniLM-L6-v2")
    assert call["headers"]["Authorization"] == "Bearer hf_test"
    assert call["json"] == {"inputs": "fever in neonates", "options": {"wait_for_model": True}}
    assert call["timeout"] == 5


def test_batched_vector_payload():
    session = FakeSession(FakeResponse(payload=[[0.25] * DIM]))
    result = embed(make_adapter(session))

    assert result.degraded is False
    assert len(result.value) == DIM


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(exc=requests.Timeout("read timed out")),
        FakeSession(exc=requests.ConnectionError("unreachable")),
        FakeSession(FakeResponse(status_code=503, text="Service Unavailable")),
        FakeSession(FakeResponse(status_code=500, text="Internal Server Error")),
        FakeSession(FakeResponse(payload={"error": "Model is currently loading"})),
        FakeSession(FakeResponse(payload=[0.1] * 10)),
        FakeSession(FakeResponse(payload=["a", "b"])),
        FakeSession(FakeResponse(payload=ValueError("not json"))),
    ],
)
def test_failures_degrade_to_vector_of_configured_dimension(session):
    result = embed(make_adapter(session))

    assert result.degraded is True
    assert result.cause
    assert len(result.value) == DIM
    assert all(0.0 <= x < 1.0 for x in result.value)


def test_missing_api_key_skips_request():
    session = FakeSession(FakeResponse(payload=[0.5] * DIM))
    result = embed(make_adapter(session, api_key=""))

    assert session.calls == []
    assert result.degraded is True
    assert "API key" in result.cause
    assert len(result.value) == DIM


def test_empty_text_returns_zero_vector():
    session = FakeSession(FakeResponse(payload=[0.5] * DIM))
    result = embed(make_adapter(session), text="  ")

    assert session.calls == []
    assert result.degraded is True
    assert result.value == (0.0,) * DIM


def test_coerce_vector_rejects_bool_and_wrong_length():
    with pytest.raises(EmbeddingError):
        coerce_vector([True, False], 2)
    with pytest.raises(EmbeddingError):
        coerce_vector([1.0, 2.0, 3.0], 2)
    assert coerce_vector([1, 2], 2) == (1.0, 2.0)
