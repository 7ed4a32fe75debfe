"""
envtracing - Tracer Setup
Tracer provider construction, process-wide installation and shutdown handle
"""

import logging
import threading
import time
from typing import Optional

import opentracing
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SpanExporter
from opentelemetry.sdk.trace.sampling import Sampler
from opentelemetry.shim.opentracing_shim import create_tracer

from ..core.resource_manager import create_resource, get_sampler_resource_attributes
from .config import ResolvedConfig
from .propagators import setup_propagation
from .span_processors import create_span_processor

logger = logging.getLogger(__name__)

DEFAULT_SHUTDOWN_TIMEOUT_MILLIS = 30000

class ActiveTracerProvider(trace.TracerProvider):
    """Process-wide provider that forwards to the currently installed SDK provider.

    OpenTelemetry only accepts one global provider per process, so this object
    is registered once and installations swap its delegate.
    """

    def __init__(self):
        self.delegate: trace.TracerProvider = trace.NoOpTracerProvider()

    def get_tracer(self, instrumenting_module_name, *args, **kwargs) -> trace.Tracer:
        return self.delegate.get_tracer(instrumenting_module_name, *args, **kwargs)

class TracerCloser:
    """Shutdown handle for an installed tracer provider.

    Use as a context manager, or call ``close()`` in a ``finally`` block, so
    buffered spans are flushed on every exit path.
    """

    def __init__(self, provider: TracerProvider, sampler: Sampler):
        self.provider = provider
        self.sampler = sampler
        self.opentracing_tracer: Optional[opentracing.Tracer] = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self, timeout_millis: int = DEFAULT_SHUTDOWN_TIMEOUT_MILLIS) -> bool:
        """Flush buffered spans and release the provider within timeout_millis.

        The whole close shares one deadline. Returns False when flushing or
        shutdown did not complete in time; a stuck exporter is left to its
        daemon thread.
        """
        with self._lock:
            if self._closed:
                return True
            self._closed = True

        deadline = time.monotonic() + timeout_millis / 1000
        uninstall_tracer_provider(self)

        outcome = {"flushed": False}

        def flush_and_shutdown():
            outcome["flushed"] = self.provider.force_flush(timeout_millis)
            self.provider.shutdown()

        # Both calls can block on an exporter stuck in export
        shutdown_thread = threading.Thread(
            target=flush_and_shutdown,
            name="tracer-provider-shutdown",
            daemon=True
        )
        shutdown_thread.start()
        shutdown_thread.join(max(deadline - time.monotonic(), 0.0))
        shut_down = not shutdown_thread.is_alive()
        flushed = outcome["flushed"]
        if not shut_down:
            logger.warning(f"Tracer provider shutdown did not complete within {timeout_millis}ms")
        elif not flushed:
            logger.warning(f"Tracer provider flush did not complete within {timeout_millis}ms")

        close_sampler = getattr(self.sampler, "close", None)
        if callable(close_sampler):
            close_sampler(max(deadline - time.monotonic(), 0.0))

        logger.info("Tracer provider shut down")
        return flushed and shut_down

    def __enter__(self) -> "TracerCloser":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

# Process-wide tracing state, written once at startup
_active_provider = ActiveTracerProvider()
_installed: Optional[TracerCloser] = None
_registered = False
_install_lock = threading.Lock()

def build_tracer_provider(
    config: ResolvedConfig,
    sampler: Sampler,
    service_name: str,
    exporter: Optional[SpanExporter] = None
) -> TracerCloser:
    """Build an SDK tracer provider for the resolved backend and sampler"""

    attributes = list(config.tags)
    attributes.extend(get_sampler_resource_attributes(
        config.sampler_type,
        config.sampler_param,
        config.sampling_server_url
    ).items())
    resource = create_resource(service_name, attributes)

    span_processor = create_span_processor(config, exporter)

    provider = TracerProvider(resource=resource, sampler=sampler)
    provider.add_span_processor(span_processor)

    return TracerCloser(provider, sampler)

def install_opentracing_bridge(provider: TracerProvider) -> opentracing.Tracer:
    """Route OpenTracing call sites into the OpenTelemetry provider"""

    shim = create_tracer(provider)
    opentracing.set_global_tracer(shim)
    logger.info("OpenTracing bridge installed as global tracer")
    return shim

def install_tracer_provider(closer: TracerCloser, bridge_opentracing: bool = True) -> TracerCloser:
    """Make closer's provider the single process-wide tracer provider.

    A previously installed provider is superseded, not merged; its owner still
    has to close it.
    """
    global _installed, _registered

    with _install_lock:
        previous = _installed
        _active_provider.delegate = closer.provider
        _installed = closer

        if not _registered:
            trace.set_tracer_provider(_active_provider)
            _registered = True
            if trace.get_tracer_provider() is not _active_provider:
                logger.warning("A global tracer provider was already set, use get_tracer() for installed tracing")

    setup_propagation()

    if bridge_opentracing:
        closer.opentracing_tracer = install_opentracing_bridge(closer.provider)

    if previous is not None and previous is not closer:
        logger.info("Previously installed tracer provider superseded")
    return closer

def uninstall_tracer_provider(closer: TracerCloser):
    """Remove closer's provider if it is still the installed one"""
    global _installed

    with _install_lock:
        if _installed is not closer:
            return
        _active_provider.delegate = trace.NoOpTracerProvider()
        _installed = None

    if closer.opentracing_tracer is not None and opentracing.global_tracer() is closer.opentracing_tracer:
        opentracing.set_global_tracer(opentracing.Tracer())

def get_installed_provider() -> Optional[TracerCloser]:
    """Currently installed provider handle, if any"""
    return _installed

def get_tracer(instrumenting_module_name: str) -> trace.Tracer:
    """Tracer from the installed provider, for span creation helpers"""
    return _active_provider.get_tracer(instrumenting_module_name)
