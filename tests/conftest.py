"""Shared fixtures for envtracing tests."""

from __future__ import annotations

import opentracing
import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from envtracing.core import settings
from envtracing.tracing.tracer_setup import get_installed_provider


JAEGER_ENV_VARS = [
    settings.ENV_JAEGER_ENDPOINT,
    settings.ENV_JAEGER_AGENT_HOST,
    settings.ENV_JAEGER_AGENT_PORT,
    settings.ENV_JAEGER_SAMPLER_TYPE,
    settings.ENV_JAEGER_SAMPLER_PARAM,
    settings.ENV_JAEGER_SAMPLING_ENDPOINT,
    settings.ENV_JAEGER_SAMPLER_MANAGER_HOST_PORT,
    settings.ENV_JAEGER_TAGS,
]


@pytest.fixture(autouse=True)
def clean_jaeger_env(monkeypatch):
    """Start every test without any JAEGER_* variable set."""
    for name in JAEGER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_installed_provider():
    """Close whatever provider a test left installed."""
    yield
    closer = get_installed_provider()
    if closer is not None:
        closer.close(timeout_millis=1000)
    opentracing.set_global_tracer(opentracing.Tracer())


@pytest.fixture
def memory_exporter():
    return InMemorySpanExporter()
