"""
Tracing Setup

OpenTelemetry provider for the HTTP transport. Every Jenkins request is
wrapped in a "jenkins.request" span by the client.
"""
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from loguru import logger

from jenkins_mcp.core.constants import APP_NAME, APP_VERSION

_provider: Optional[TracerProvider] = None


def setup_tracing() -> TracerProvider:
    """
    Install the global tracer provider once per process.

    Spans stay in-process: no exporter is attached.
    """
    global _provider
    if _provider is not None:
        return _provider

    _provider = TracerProvider(resource=Resource(attributes={
        "service.name": APP_NAME,
        "service.version": APP_VERSION,
    }))
    trace.set_tracer_provider(_provider)

    logger.debug(f"Tracer provider installed for {APP_NAME}")
    return _provider


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)
