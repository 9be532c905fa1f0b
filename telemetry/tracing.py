"""
OpenTelemetry tracing setup and log correlation helpers.
"""

from __future__ import annotations

import signal
import sys

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter

from utils.logger import get_logger

logger = get_logger(__name__)


def setup_tracing(app, settings, exporter: SpanExporter | None = None) -> TracerProvider:
    """Export spans over OTLP/HTTP unless another exporter is given."""
    resource = Resource.create({
        "service.name":           settings.service_name,
        "deployment.environment": settings.environment,
        "service.version":        settings.service_version,
    })

    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(exporter or OTLPSpanExporter(endpoint=settings.otlp_endpoint))
    )
    trace.set_tracer_provider(provider)

    FlaskInstrumentor().instrument_app(app, tracer_provider=provider)
    logger.info("tracing initialized", extra={"endpoint": settings.otlp_endpoint})
    return provider


def current_trace_ids() -> dict[str, str]:
    """Return ``{"traceId", "spanId"}`` of the active span, or ``{}`` if there is none."""
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return {}
    return {
        "traceId": trace.format_trace_id(ctx.trace_id),
        "spanId":  trace.format_span_id(ctx.span_id),
    }


def install_shutdown_hooks(provider: TracerProvider) -> None:
    """Flush pending spans on SIGTERM/SIGINT, then exit."""

    def _shutdown(signum, frame):
        try:
            provider.shutdown()
        except Exception:
            logger.exception("error during tracing shutdown")
            sys.exit(1)
        sys.exit(0)

    signal.signal(signal.SIGTERM, _shutdown)
    signal.signal(signal.SIGINT, _shutdown)
