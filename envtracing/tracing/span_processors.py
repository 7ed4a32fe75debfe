"""
envtracing - Span Processors
Jaeger agent / collector exporter behind a batching span processor
"""

import logging
from typing import Optional

from opentelemetry.exporter.jaeger.thrift import JaegerExporter
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter

from ..core.settings import ENV_JAEGER_AGENT_PORT, ENV_JAEGER_ENDPOINT
from ..errors import ExporterInitError
from .config import ResolvedConfig

logger = logging.getLogger(__name__)

def create_jaeger_exporter(config: ResolvedConfig) -> JaegerExporter:
    """Create a Jaeger exporter for the agent or the collector, never both"""

    target = config.backend_target()

    if target[0] == "collector":
        endpoint = target[1]
        try:
            exporter = JaegerExporter(collector_endpoint=endpoint)
        except Exception as e:
            raise ExporterInitError(
                f"cannot create Jaeger collector exporter for {endpoint}: {e}", ENV_JAEGER_ENDPOINT
            ) from e
        logger.info(f"Jaeger exporter reporting to collector {endpoint}")
        return exporter

    _, host, port = target
    try:
        agent_port = int(port)
    except ValueError as e:
        raise ExporterInitError(f"invalid Jaeger agent port {port!r}", ENV_JAEGER_AGENT_PORT) from e

    try:
        exporter = JaegerExporter(agent_host_name=host, agent_port=agent_port)
    except Exception as e:
        raise ExporterInitError(f"cannot create Jaeger agent exporter for {host}:{port}: {e}") from e

    logger.info(f"Jaeger exporter reporting to agent {host}:{agent_port}")
    return exporter

def create_span_processor(
    config: ResolvedConfig,
    exporter: Optional[SpanExporter] = None
) -> BatchSpanProcessor:
    """Create the batching pipeline in front of the exporter"""

    exporter = exporter or create_jaeger_exporter(config)
    return BatchSpanProcessor(exporter)
