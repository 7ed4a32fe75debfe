"""
envtracing - Trace Identifier Extraction
Trace id and sampling flag of the active span, for OpenTelemetry and bridged OpenTracing spans
"""

from functools import singledispatch
from typing import Any, NamedTuple, Optional, Tuple

import opentracing
from opentelemetry import trace
from opentelemetry.context import Context

class TraceIdentity(NamedTuple):
    """What log correlation needs from an active span"""
    trace_id: str
    sampled: bool

EMPTY_IDENTITY = TraceIdentity("", False)

@singledispatch
def span_context_of(carrier: Any) -> Optional[trace.SpanContext]:
    """Adapt a context, span or span context of either API to an OTel SpanContext.

    Unknown carriers have no span context.
    """
    return None

@span_context_of.register(type(None))
@span_context_of.register(Context)
def _(carrier: Optional[Context]) -> Optional[trace.SpanContext]:
    # None means the current context
    return trace.get_current_span(carrier).get_span_context()

@span_context_of.register(trace.Span)
def _(span: trace.Span) -> Optional[trace.SpanContext]:
    return span.get_span_context()

@span_context_of.register(trace.SpanContext)
def _(span_context: trace.SpanContext) -> Optional[trace.SpanContext]:
    return span_context

@span_context_of.register(opentracing.Scope)
def _(scope: opentracing.Scope) -> Optional[trace.SpanContext]:
    return span_context_of(scope.span)

@span_context_of.register(opentracing.Span)
def _(span: opentracing.Span) -> Optional[trace.SpanContext]:
    return span_context_of(span.context)

@span_context_of.register(opentracing.SpanContext)
def _(span_context: opentracing.SpanContext) -> Optional[trace.SpanContext]:
    # Only bridged (shim) span contexts wrap OpenTelemetry data
    unwrap = getattr(span_context, "unwrap", None)
    if callable(unwrap):
        return unwrap()
    return None

def active_span_identity(carrier: Any = None) -> TraceIdentity:
    """Trace identity of the span carried by ``carrier`` (default: current context)"""

    span_context = span_context_of(carrier)
    # A no-op span carries the invalid trace id
    if span_context is None or span_context.trace_id == trace.INVALID_TRACE_ID:
        return EMPTY_IDENTITY
    return TraceIdentity(trace.format_trace_id(span_context.trace_id), span_context.trace_flags.sampled)

def extract_sampled_trace_id(carrier: Any = None) -> Tuple[str, bool]:
    """Return (trace_id, sampled); ("", False) when no valid span is active"""
    identity = active_span_identity(carrier)
    return identity.trace_id, identity.sampled

def extract_trace_id(carrier: Any = None) -> Tuple[str, bool]:
    """Return (trace_id, found), regardless of the sampling decision"""
    trace_id, _ = extract_sampled_trace_id(carrier)
    return trace_id, trace_id != ""
