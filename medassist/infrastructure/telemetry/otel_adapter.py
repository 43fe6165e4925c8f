"""OpenTelemetry adapter for answer-pipeline metrics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import import_module
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class OtelConfig:
    """Configuration for OpenTelemetry."""

    service_name: str = "medassist"
    otlp_endpoint: str | None = None  # e.g., "http://localhost:4317"
    environment: str = "production"
    enable_console: bool = False  # Debug: print metrics to console


class OpenTelemetryAdapter:
    """OpenTelemetry adapter for counters and histograms.

    Metrics:
    - incr() for events (answers by status, degraded retrieval stages)
    - observe() for distributions (citations per answer)

    Metrics become no-ops when opentelemetry-sdk is not installed or fails to
    initialize; metric errors never reach the answer pipeline.
    """

    def __init__(self, cfg: OtelConfig) -> None:
        self._cfg = cfg
        self._meter: Any | None = None
        self._counters: dict[str, Any] = {}
        self._histograms: dict[str, Any] = {}
        self._init_otel()

    @property
    def enabled(self) -> bool:
        return self._meter is not None

    def _init_otel(self) -> None:
        try:
            otel_sdk = import_module("opentelemetry.sdk.metrics")
            otel_export = import_module("opentelemetry.sdk.metrics.export")
            otel_metrics = import_module("opentelemetry.metrics")
            otel_resources = import_module("opentelemetry.sdk.resources")

            resource = otel_resources.Resource.create(
                {
                    "service.name": self._cfg.service_name,
                    "deployment.environment": self._cfg.environment,
                }
            )

            readers = []
            if self._cfg.otlp_endpoint:
                otel_otlp = import_module("opentelemetry.exporter.otlp.proto.grpc.metric_exporter")
                exporter = otel_otlp.OTLPMetricExporter(endpoint=self._cfg.otlp_endpoint)
                readers.append(otel_export.PeriodicExportingMetricReader(exporter))
            if self._cfg.enable_console:
                readers.append(
                    otel_export.PeriodicExportingMetricReader(otel_export.ConsoleMetricExporter())
                )

            provider = otel_sdk.MeterProvider(resource=resource, metric_readers=readers)
            otel_metrics.set_meter_provider(provider)
            self._meter = otel_metrics.get_meter(__name__)
        except Exception as ex:  # noqa: BLE001
            logger.info("OpenTelemetry unavailable, metrics disabled: %s", ex)
            self._meter = None

    def incr(self, name: str, tags: dict[str, Any] | None = None) -> None:
        if self._meter is None:
            return
        try:
            if name not in self._counters:
                self._counters[name] = self._meter.create_counter(
                    name=name, description=f"Counter for {name}"
                )
            self._counters[name].add(1, attributes=tags or {})
        except Exception as ex:  # noqa: BLE001
            logger.debug("dropping metric %s: %s", name, ex)

    def observe(self, name: str, value: float, tags: dict[str, Any] | None = None) -> None:
        if self._meter is None:
            return
        try:
            if name not in self._histograms:
                self._histograms[name] = self._meter.create_histogram(
                    name=name, description=f"Histogram for {name}"
                )
            self._histograms[name].record(value, attributes=tags or {})
        except Exception as ex:  # noqa: BLE001
            logger.debug("dropping metric %s: %s", name, ex)
