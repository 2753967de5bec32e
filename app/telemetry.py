from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from models import db

# The global tracer provider can only be installed once per process
_provider = None


def _exporter(app):
    kind = (app.config.get("TRACING_EXPORTER") or "otlp").lower()
    if kind == "none":
        return None
    if kind == "console":
        return ConsoleSpanExporter()
    return OTLPSpanExporter(endpoint=app.config.get("OTEL_EXPORTER_OTLP_ENDPOINT"))


def _install_provider(app):
    global _provider
    if _provider is not None:
        return _provider
    service_name = app.config.get("OTEL_SERVICE_NAME", "zerowaste-backend")
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    exporter = _exporter(app)
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())
    RequestsInstrumentor().instrument()
    _provider = provider
    return provider


def init_tracing(app):
    """Trace requests and SQL for this app.

    Spans are still created with TRACING_EXPORTER=none so trace ids reach the
    logs and the ``traceparent`` response header; they are just not exported.
    """
    _install_provider(app)
    FlaskInstrumentor().instrument_app(app)
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(engine=db.engine)


def get_tracer(name: str):
    return trace.get_tracer(name)
