from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
import logging

# Configure logger
logger = logging.getLogger(__name__)


def setup_tracing(app, settings):
    """
    Set up OpenTelemetry tracing.

    Args:
        app (FastAPI): FastAPI application to instrument
        settings (Settings): Replica settings; tracing runs only when
            `enable_tracing` is set

    Returns:
        bool: True if the app was instrumented
    """
    if not settings.enable_tracing:
        logger.info("Tracing is disabled")
        return False

    try:
        # Set up tracer provider
        resource = Resource.create({"service.name": settings.app_name})
        tracer_provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(tracer_provider)

        # Set up exporter
        otlp_exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint)
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumented for tracing")
        return True
    except Exception as e:
        logger.error(f"Failed to set up tracing: {e}")
        return False
