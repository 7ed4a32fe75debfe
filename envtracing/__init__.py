"""
envtracing - Jaeger/OpenTelemetry Tracing Bootstrap
Environment-driven tracer provider setup and trace id extraction for log correlation
"""

from .errors import (
    TracingError, ConfigError, BlankTraceConfigurationError,
    ParseError, UnknownSamplerError, ExporterInitError
)
from .bootstrap import initialize
from .tracing import (
    ResolvedConfig, TracerCloser, TraceIdentity,
    resolve_config, get_installed_provider, get_tracer,
    extract_trace_id, extract_sampled_trace_id
)
from .core.logging_config import TraceIdLogFilter, setup_logging

__version__ = "0.1.0"

__all__ = [
    'initialize',
    'extract_trace_id',
    'extract_sampled_trace_id',
    'resolve_config',
    'get_installed_provider',
    'get_tracer',
    'ResolvedConfig',
    'TracerCloser',
    'TraceIdentity',
    'TraceIdLogFilter',
    'setup_logging',
    'TracingError',
    'ConfigError',
    'BlankTraceConfigurationError',
    'ParseError',
    'UnknownSamplerError',
    'ExporterInitError'
]
