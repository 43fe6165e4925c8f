import asyncio
import sys

import pytest

from medassist.infrastructure.embeddings.sentence_transformers_adapter import (
    SentenceTransformerEmbeddingAdapter,
)


class _FakeArray:
    def __init__(self, data):
        self.data = data

    def tolist(self):
        return list(self.data)


class _FakeST:
    init_kwargs: dict = {}

    def __init__(self, model_name, **kwargs):  # noqa: ANN001
        type(self).init_kwargs = {"model_name": model_name, **kwargs}

    def encode(self, inputs, normalize_embeddings=True, convert_to_numpy=True, show_progress_bar=False):
        return _FakeArray([0.05] * 384)


@pytest.fixture
def fake_sentence_transformers(monkeypatch):
    module = type(sys)("sentence_transformers")
    module.SentenceTransformer = _FakeST
    monkeypatch.setitem(sys.modules, "sentence_transformers", module)
    return module


def test_local_embedding_exact(fake_sentence_transformers):
    adapter = SentenceTransformerEmbeddingAdapter(device="cpu")
    result = asyncio.run(adapter.embed("Kawasaki disease"))

    assert result.degraded is False
    assert len(result.value) == 384
    assert _FakeST.init_kwargs["model_name"] == "sentence-transformers/all-MiniLM-L6-v2"
    assert _FakeST.init_kwargs["device"] == "cpu"


def test_model_load_failure_degrades(monkeypatch):
    broken = type(sys)("sentence_transformers")
    monkeypatch.setitem(sys.modules, "sentence_transformers", broken)  # no SentenceTransformer attr

    adapter = SentenceTransformerEmbeddingAdapter(dim=384)
    result = asyncio.run(adapter.embed("measles"))

    assert result.degraded is True
    assert "Failed to load embedding model" in result.cause
    assert len(result.value) == 384


def test_dimension_mismatch_degrades(fake_sentence_transformers):
    adapter = SentenceTransformerEmbeddingAdapter(dim=768)
    result = asyncio.run(adapter.embed("measles"))

    assert result.degraded is True
    assert len(result.value) == 768
