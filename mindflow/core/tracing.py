"""
OpenTelemetry tracing for the journaling service.

Disabled unless OTEL_ENABLED=true. When enabled it installs a
TracerProvider named after the service, exports spans to the console (or
to OTLP when OTEL_EXPORTER_OTLP_ENDPOINT is set) and instruments FastAPI.
The analysis client opens a ``journal.analyze`` span around each call;
with tracing disabled that span is a no-op.

Environment Variables:
    OTEL_ENABLED: Set to "true" to enable tracing (default: false)
    OTEL_SERVICE_NAME: Override service name (default: mindflow-journal-service)
    OTEL_EXPORTER_OTLP_ENDPOINT: OTLP endpoint (optional)
"""

import logging
import os
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.trace import Tracer
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

logger = logging.getLogger("Mindflow.Tracing")

DEFAULT_SERVICE_NAME = "mindflow-journal-service"

_tracer_provider: Optional[TracerProvider] = None
_is_initialized = False


def is_tracing_enabled() -> bool:
    return os.getenv("OTEL_ENABLED", "false").lower() == "true"


def _build_exporter():
    otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not otlp_endpoint:
        logger.info("Using Console exporter for trace output")
        return ConsoleSpanExporter()

    # The grpc exporter is an optional extra of opentelemetry.
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    except ImportError:
        logger.warning("OTLP exporter requested but grpc dependencies not installed, falling back to console")
        return ConsoleSpanExporter()

    logger.info("Using OTLP exporter with endpoint: %s", otlp_endpoint)
    return OTLPSpanExporter(endpoint=otlp_endpoint)


def setup_tracing(service_name: Optional[str] = None) -> Optional[TracerProvider]:
    """
    Initialize tracing once per process.

    Returns:
        The configured TracerProvider, or None if tracing is disabled.
    """
    global _tracer_provider, _is_initialized

    if _is_initialized:
        return _tracer_provider

    _is_initialized = True
    if not is_tracing_enabled():
        logger.info("OpenTelemetry tracing is disabled (set OTEL_ENABLED=true to enable)")
        return None

    effective_service_name = (
        service_name
        or os.getenv("OTEL_SERVICE_NAME")
        or DEFAULT_SERVICE_NAME
    )

    _tracer_provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: effective_service_name})
    )
    _tracer_provider.add_span_processor(BatchSpanProcessor(_build_exporter()))
    trace.set_tracer_provider(_tracer_provider)

    logger.info("OpenTelemetry tracing initialized for service: %s", effective_service_name)
    return _tracer_provider


def get_tracer(name: str) -> Tracer:
    """Return a tracer; a no-op one while tracing is disabled."""
    return trace.get_tracer(name)


def instrument_app(app) -> None:
    """Add automatic request spans to a FastAPI application."""
    if not is_tracing_enabled():
        return

    FastAPIInstrumentor.instrument_app(app)
    logger.info("FastAPI instrumentation enabled")


def shutdown_tracing() -> None:
    """Flush pending spans and reset the module state."""
    global _tracer_provider, _is_initialized

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        logger.info("OpenTelemetry tracing shut down")

    _tracer_provider = None
    _is_initialized = False
