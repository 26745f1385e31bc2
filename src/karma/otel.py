"""Karma OpenTelemetry integration.

Spans come from opentelemetry-api and are no-ops until a provider is
configured. The SDK and OTLP exporters live in the ``otel`` extra.

Install: pip install karma[otel]
"""

from __future__ import annotations

import os
from typing import Any

from opentelemetry import trace

_DEFAULT_GRPC_ENDPOINT = "http://localhost:4317"


def _is_provider_configured() -> bool:
    """Check whether an SDK TracerProvider is already set."""
    from opentelemetry.sdk.trace import TracerProvider

    return isinstance(trace.get_tracer_provider(), TracerProvider)


def configure_otel(
    *,
    service_name: str = "karma",
    endpoint: str = _DEFAULT_GRPC_ENDPOINT,
    protocol: str = "grpc",
    resource_attributes: dict[str, str] | None = None,
    force: bool = False,
) -> None:
    """Configure OpenTelemetry span export for karma.

    Call this once at startup. If a TracerProvider is already configured
    by the host application, this is a no-op unless *force=True*.

    Standard OTel env vars take precedence over arguments:
    - OTEL_SERVICE_NAME overrides *service_name*
    - OTEL_EXPORTER_OTLP_ENDPOINT overrides *endpoint*
    - OTEL_EXPORTER_OTLP_PROTOCOL overrides *protocol*
    - OTEL_RESOURCE_ATTRIBUTES merged with *resource_attributes*

    Raises ImportError when the ``otel`` extra is not installed.
    """
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    if _is_provider_configured() and not force:
        return

    actual_service = os.environ.get("OTEL_SERVICE_NAME", service_name)
    actual_endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT", endpoint)
    actual_protocol = os.environ.get("OTEL_EXPORTER_OTLP_PROTOCOL", protocol)
    use_grpc = actual_protocol == "grpc"

    if not use_grpc and actual_endpoint == _DEFAULT_GRPC_ENDPOINT:
        actual_endpoint = "http://localhost:4318/v1/traces"

    attrs: dict[str, str] = {"service.name": actual_service}
    if resource_attributes:
        attrs.update(resource_attributes)
    env_attrs = os.environ.get("OTEL_RESOURCE_ATTRIBUTES", "")
    for pair in env_attrs.split(","):
        if "=" in pair:
            k, v = pair.split("=", 1)
            attrs[k.strip()] = v.strip()

    provider = TracerProvider(resource=Resource.create(attrs))
    if use_grpc:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        exporter = OTLPSpanExporter(endpoint=actual_endpoint, insecure=True)
    else:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        exporter = OTLPSpanExporter(endpoint=actual_endpoint)

    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)


def get_tracer(name: str = "karma") -> Any:
    """Get an OTel tracer. Spans are no-ops until a provider is configured."""
    return trace.get_tracer(name)
