"""
envtracing - Trace Propagators
W3C trace context and baggage plus Jaeger propagation for OpenTracing era peers
"""

import logging
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.propagate import set_global_textmap
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.jaeger import JaegerPropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

logger = logging.getLogger(__name__)

def get_composite_propagator() -> CompositePropagator:
    """W3C first, Jaeger (uber-trace-id) for OpenTracing backwards compatibility"""

    return CompositePropagator([
        TraceContextTextMapPropagator(),
        W3CBaggagePropagator(),
        JaegerPropagator()
    ])

def setup_propagation() -> CompositePropagator:
    """Install the composite propagator as the global text map propagator"""

    propagator = get_composite_propagator()
    set_global_textmap(propagator)

    logger.info(f"Trace propagation configured with {sorted(propagator.fields)}")
    return propagator
