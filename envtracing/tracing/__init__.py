"""
envtracing - Distributed Tracing
Jaeger environment configuration, samplers, provider setup and trace id extraction
"""

from .tags import parse_tags
from .config import ResolvedConfig, resolve_config
from .sampler import TraceIdRatioSampler, select_sampler
from .remote_sampler import JaegerRemoteSampler, sampler_from_strategy
from .span_processors import create_jaeger_exporter, create_span_processor
from .propagators import get_composite_propagator, setup_propagation
from .tracer_setup import (
    TracerCloser, build_tracer_provider, install_tracer_provider,
    get_installed_provider, get_tracer
)
from .extract import TraceIdentity, active_span_identity, extract_trace_id, extract_sampled_trace_id

__all__ = [
    'parse_tags',
    'ResolvedConfig',
    'resolve_config',
    'TraceIdRatioSampler',
    'select_sampler',
    'JaegerRemoteSampler',
    'sampler_from_strategy',
    'create_jaeger_exporter',
    'create_span_processor',
    'get_composite_propagator',
    'setup_propagation',
    'TracerCloser',
    'build_tracer_provider',
    'install_tracer_provider',
    'get_installed_provider',
    'get_tracer',
    'TraceIdentity',
    'active_span_identity',
    'extract_trace_id',
    'extract_sampled_trace_id'
]
