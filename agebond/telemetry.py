"""Arize Phoenix tracing for template runs and natural-language questions.

Tracing is opt-in. When it is off, get_tracer() hands out OpenTelemetry's
no-op tracer, so the spans opened in templates.py and query.py cost nothing.

Environment Variables:
    PHOENIX_ENABLED: Set to 'true' to enable tracing (default: false)
    PHOENIX_ENDPOINT: Phoenix collector URL (default: http://localhost:6006)
    PHOENIX_PROJECT_NAME: Project name in Phoenix UI (default: agebond-server)
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

if TYPE_CHECKING:
    from .models import CalculationResult

# OpenInference semantic conventions for Phoenix
OPENINFERENCE_SPAN_KIND = "openinference.span.kind"
PHOENIX_PROJECT_ATTRIBUTE = "openinference.project.name"

DEFAULT_PHOENIX_ENDPOINT = "http://localhost:6006"
DEFAULT_PROJECT_NAME = "agebond-server"
TRACER_NAME = "agebond"

# Span name prefix -> OpenInference kind; anything else is a CHAIN
SPAN_KIND_PREFIXES = (
    ("llm", "LLM"),
    ("template", "TOOL"),
)


def is_tracing_enabled() -> bool:
    return os.getenv("PHOENIX_ENABLED", "false").lower() == "true"


def get_phoenix_endpoint() -> str:
    return os.getenv("PHOENIX_ENDPOINT", DEFAULT_PHOENIX_ENDPOINT)


def get_project_name() -> str:
    return os.getenv("PHOENIX_PROJECT_NAME", DEFAULT_PROJECT_NAME)


def span_kind_for(span_name: str) -> str:
    """OpenInference kind for a span, e.g. 'template.when_personA_turns_18' -> 'TOOL'."""
    name = span_name.lower()
    for prefix, kind in SPAN_KIND_PREFIXES:
        if name.startswith(prefix):
            return kind
    return "CHAIN"


def set_result_attributes(span: Any, template_id: str, result: CalculationResult) -> None:
    """Record the outcome of a template run on its span."""
    span.set_attribute("agebond.template.id", template_id)
    span.set_attribute("agebond.template.ok", result.ok)
    if result.error_type:
        span.set_attribute("agebond.template.error_type", result.error_type)
    if result.date is not None:
        span.set_attribute("agebond.template.date", result.date.isoformat())


class OpenInferenceKindProcessor(SpanProcessor):
    """Tags every span with its OpenInference kind so Phoenix can group them."""

    def on_start(self, span: Any, parent_context: Any = None) -> None:
        if not hasattr(span, "name") or not hasattr(span, "set_attribute"):
            return
        span.set_attribute(OPENINFERENCE_SPAN_KIND, span_kind_for(span.name))

    def on_end(self, span: ReadableSpan) -> None:
        pass

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True


_tracer_provider: TracerProvider | None = None


def initialize_tracing() -> TracerProvider | None:
    """Install a Phoenix-bound tracer provider as the global provider.

    Returns:
        The provider if tracing is enabled, None otherwise. Repeated calls
        return the provider built by the first one.
    """
    global _tracer_provider

    if not is_tracing_enabled():
        return None
    if _tracer_provider is not None:
        return _tracer_provider

    provider = TracerProvider(
        resource=Resource.create({PHOENIX_PROJECT_ATTRIBUTE: get_project_name()})
    )
    # Kind tagging must run before the exporter sees the span
    provider.add_span_processor(OpenInferenceKindProcessor())
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{get_phoenix_endpoint()}/v1/traces"))
    )

    trace.set_tracer_provider(provider)
    _tracer_provider = provider
    return provider


def get_tracer(name: str = TRACER_NAME) -> trace.Tracer:
    return trace.get_tracer(name)
