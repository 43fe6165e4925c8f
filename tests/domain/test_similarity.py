import pytest

from medassist.domain.similarity import cosine


def test_cosine_identical_vectors():
    assert cosine((1.0, 2.0, 3.0), (1.0, 2.0, 3.0)) == pytest.approx(1.0)


def test_cosine_orthogonal_vectors():
    assert cosine((1.0, 0.0), (0.0, 1.0)) == pytest.approx(0.0)


def test_cosine_zero_vector_does_not_divide_by_zero():
    assert cosine((0.0, 0.0), (1.0, 1.0)) == 0.0
