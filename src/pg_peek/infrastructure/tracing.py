"""OpenTelemetry tracing configuration.

Until setup_tracing() installs a provider, spans come from the API's no-op
tracer.
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from pathlib import PurePath
from typing import TYPE_CHECKING, Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

if TYPE_CHECKING:
    from pg_peek.infrastructure.config import ObservabilityConfig

TRACER_NAME = "pg_peek"

_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str | None = None,
    otlp_endpoint: str | None = None,
    console_export: bool = False,
    *,
    config: ObservabilityConfig | None = None,
) -> trace.Tracer:
    """
    Set up OpenTelemetry tracing.

    Args:
        service_name: Name of the service; defaults to config.otel_service_name
        otlp_endpoint: OTLP collector endpoint (e.g., "http://localhost:4317");
            defaults to config.otel_endpoint
        console_export: Whether to also export to console (for debugging)
        config: Observability settings to take defaults from

    Returns:
        Configured tracer instance
    """
    global _tracer

    from pg_peek import __version__

    if config is not None:
        service_name = service_name or config.otel_service_name
        otlp_endpoint = otlp_endpoint or config.otel_endpoint
    service_name = service_name or TRACER_NAME

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": __version__,
        }
    )
    provider = TracerProvider(resource=resource)

    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(TRACER_NAME, __version__)

    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the global tracer instance."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def _attribute_value(value: Any) -> Any:
    # OpenTelemetry accepts only str, bool, int, float and sequences of them
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, Enum):
        return value.name.lower() if value.name else str(value.value)
    return value


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Context manager for creating a trace span.

    None-valued attributes are skipped; paths and byte-order enums are
    converted to strings.

    Args:
        name: Name of the span
        attributes: Optional attributes to add to the span

    Yields:
        The created span
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, _attribute_value(value))
        yield span
