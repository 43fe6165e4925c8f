import sys

from medassist.infrastructure.telemetry.otel_adapter import OpenTelemetryAdapter, OtelConfig


def test_missing_sdk_makes_metrics_noop(monkeypatch):
    monkeypatch.setitem(sys.modules, "opentelemetry.sdk.metrics", None)

    adapter = OpenTelemetryAdapter(OtelConfig())

    assert adapter.enabled is False
    adapter.incr("medassist.answers.total", {"status": "grounded"})
    adapter.observe("medassist.citations.count", 2.0, {})


class _Instrument:
    def __init__(self):
        self.calls = []

    def add(self, value, attributes=None):
        self.calls.append((value, attributes))

    def record(self, value, attributes=None):
        self.calls.append((value, attributes))


class _Meter:
    def __init__(self):
        self.instruments = {}

    def create_counter(self, name, description=""):
        return self.instruments.setdefault(name, _Instrument())

    def create_histogram(self, name, description=""):
        return self.instruments.setdefault(name, _Instrument())


def test_counters_and_histograms_are_cached():
    adapter = OpenTelemetryAdapter.__new__(OpenTelemetryAdapter)
    adapter._cfg = OtelConfig()
    adapter._meter = _Meter()
    adapter._counters = {}
    adapter._histograms = {}

    adapter.incr("a", {"status": "fallback"})
    adapter.incr("a", {"status": "grounded"})
    adapter.observe("h", 3.0, None)

    assert adapter._meter.instruments["a"].calls == [
        (1, {"status": "fallback"}),
        (1, {"status": "grounded"}),
    ]
    assert adapter._meter.instruments["h"].calls == [(3.0, {})]
