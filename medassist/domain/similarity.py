"""Pure similarity helpers for the in-process search backend."""

from collections.abc import Sequence
from math import sqrt

from .types import Score


def cosine(u: Sequence[float], v: Sequence[float]) -> Score:
    """Compute cosine similarity between two vectors.

    Args:
        u: First vector
        v: Second vector

    Returns:
        Cosine similarity score between -1 and 1
    """
    dot = sum(a * b for a, b in zip(u, v, strict=False))
    nu = sqrt(sum(a * a for a in u)) or 1.0
    nv = sqrt(sum(b * b for b in v)) or 1.0
    return dot / (nu * nv)
