"""Logging and tracing setup for aws-s3-service.

Both are configured once on import from ``core.config.settings``:
    - structlog over stdlib logging, rendered as JSON or console lines
    - OpenTelemetry tracing when ``otel_enabled`` is set, exporting spans over
      OTLP/gRPC to ``otel_exporter_endpoint`` or to the console
"""

import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)

from .config import Settings, settings


def build_span_exporter(config: Settings) -> SpanExporter:
    """Create the span exporter selected by ``otel_exporter``."""
    if config.otel_exporter == "console":
        return ConsoleSpanExporter()
    return OTLPSpanExporter(endpoint=config.otel_exporter_endpoint)


def build_tracer_provider(config: Settings) -> TracerProvider:
    """Create a tracer provider exporting through a batch span processor."""
    resource = Resource.create({"service.name": config.otel_service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(build_span_exporter(config)))
    return provider


def setup_tracing(config: Settings = settings) -> None:
    if not config.otel_enabled:
        return
    trace.set_tracer_provider(build_tracer_provider(config))


def _renderer(config: Settings) -> Any:
    if config.log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(config: Settings = settings) -> None:
    """Route structlog through stdlib logging at ``log_level``."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _renderer(config),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a logger instance."""
    return structlog.get_logger(name)


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer instance."""
    return trace.get_tracer(name)


setup_logging()
setup_tracing()
