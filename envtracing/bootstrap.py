"""
envtracing - Bootstrap
One-call tracing initialization from JAEGER_* environment variables
"""

import logging
from typing import Optional

from opentelemetry.sdk.trace.export import SpanExporter

from .core.settings import TracingSettings
from .errors import BlankTraceConfigurationError
from .tracing.config import resolve_config
from .tracing.sampler import select_sampler
from .tracing.tracer_setup import TracerCloser, build_tracer_provider, install_tracer_provider

logger = logging.getLogger(__name__)

def initialize(
    service_name: str,
    settings: Optional[TracingSettings] = None,
    exporter: Optional[SpanExporter] = None,
    bridge_opentracing: bool = True
) -> TracerCloser:
    """Configure and install tracing from the environment.

    Tracing is enabled when at least one of JAEGER_ENDPOINT, JAEGER_AGENT_HOST,
    JAEGER_AGENT_PORT, JAEGER_SAMPLING_ENDPOINT or
    JAEGER_SAMPLER_MANAGER_HOST_PORT is set; otherwise
    BlankTraceConfigurationError is raised so the caller can run untraced.

    Run once at startup and close the returned handle on shutdown::

        with initialize("ingester"):
            serve()
    """

    config = resolve_config(settings)
    if config.is_blank:
        raise BlankTraceConfigurationError()

    sampler = select_sampler(
        config.sampler_type,
        config.sampler_param,
        service_name,
        config.sampling_server_url
    )

    try:
        closer = build_tracer_provider(config, sampler, service_name, exporter)
    except Exception:
        # Stop a remote sampler poller started for a provider that never came up
        close_sampler = getattr(sampler, "close", None)
        if callable(close_sampler):
            close_sampler()
        raise

    install_tracer_provider(closer, bridge_opentracing)

    logger.info(
        f"Tracing initialized for {service_name}: backend={config.backend_target()}, "
        f"sampler={sampler.get_description()}"
    )
    return closer
