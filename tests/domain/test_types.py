"""Tests for the two result kinds: fallible Result and fail-soft Degradable."""

from medassist.domain.types import Degradable, Result


class TestResult:
    def test_result_success(self) -> None:
        result = Result.success("test value")

        assert result.ok is True
        assert result.value == "test value"
        assert result.error is None

    def test_result_failure(self) -> None:
        error = ValueError("test error")
        result = Result.failure(error)

        assert result.ok is False
        assert result.value is None
        assert result.error is error


class TestDegradable:
    def test_exact_is_not_degraded(self) -> None:
        d = Degradable.exact([1, 2])

        assert d.value == [1, 2]
        assert d.degraded is False
        assert d.cause is None

    def test_fallback_keeps_usable_value_and_cause(self) -> None:
        d = Degradable.fallback([], "backend down")

        assert d.value == []
        assert d.degraded is True
        assert d.cause == "backend down"
