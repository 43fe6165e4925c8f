"""Placeholder vectors and payload checks shared by the embedding adapters."""

from __future__ import annotations

import random
from typing import Any

from medassist.domain.errors import EmbeddingError
from medassist.domain.types import Vector


def zero_vector(dim: int) -> Vector:
    return (0.0,) * dim


def random_vector(dim: int, rng: random.Random | None = None) -> Vector:
    """Uniform [0, 1) values: valid shape, no meaning."""
    r = rng or random
    return tuple(r.random() for _ in range(dim))


def _is_number(x: Any) -> bool:
    return isinstance(x, int | float) and not isinstance(x, bool)


def coerce_vector(payload: Any, dim: int) -> Vector:
    """Accept a flat vector or a one-element batch `[vector]`.

    Raises:
        EmbeddingError: If the payload is an error object, has the wrong
            shape, or its length differs from `dim`
    """
    if isinstance(payload, dict):
        raise EmbeddingError(f"embedding service error: {payload.get('error', payload)}")
    if not isinstance(payload, list | tuple) or not payload:
        raise EmbeddingError(f"unexpected embedding payload type: {type(payload).__name__}")
    if all(_is_number(x) for x in payload):
        vector = payload
    elif isinstance(payload[0], list | tuple) and all(_is_number(x) for x in payload[0]):
        vector = payload[0]
    else:
        raise EmbeddingError("embedding payload is neither a vector nor a batch of vectors")
    if len(vector) != dim:
        raise EmbeddingError(f"expected {dim} dimensions, got {len(vector)}")
    return tuple(float(x) for x in vector)
