"""
envtracing - Sampler Selection
Maps Jaeger sampler type/param pairs onto OpenTelemetry samplers
"""

import logging
from typing import Optional, Sequence

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.sdk.trace.sampling import (
    ALWAYS_OFF, ALWAYS_ON, Decision, Sampler, SamplingResult, TraceIdRatioBased
)
from opentelemetry.trace import Link, SpanKind
from opentelemetry.trace.span import TraceState
from opentelemetry.util.types import Attributes

from ..core.settings import ENV_JAEGER_SAMPLER_TYPE
from ..errors import UnknownSamplerError

logger = logging.getLogger(__name__)

SAMPLER_TYPE_CONST = "const"
SAMPLER_TYPE_PROBABILISTIC = "probabilistic"
SAMPLER_TYPE_REMOTE = "remote"

def parent_trace_state(parent_context: Optional[Context]) -> Optional[TraceState]:
    """Trace state of the parent span, carried over into sampling results"""
    span_context = trace.get_current_span(parent_context).get_span_context()
    if span_context is None or not span_context.is_valid:
        return None
    return span_context.trace_state

class TraceIdRatioSampler(Sampler):
    """Trace id ratio sampler that keeps the ratio as given.

    Unlike ``TraceIdRatioBased`` the ratio is not validated: a ratio above 1
    samples every trace and a negative ratio samples none.
    """

    def __init__(self, rate: float):
        self._rate = rate
        self._bound = TraceIdRatioBased.get_bound_for_rate(rate)

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def bound(self) -> int:
        return self._bound

    def should_sample(
        self,
        parent_context: Optional[Context],
        trace_id: int,
        name: str,
        kind: Optional[SpanKind] = None,
        attributes: Attributes = None,
        links: Optional[Sequence[Link]] = None,
        trace_state: Optional[TraceState] = None,
    ) -> SamplingResult:
        if trace_id & TraceIdRatioBased.TRACE_ID_LIMIT < self._bound:
            return SamplingResult(Decision.RECORD_AND_SAMPLE, attributes, parent_trace_state(parent_context))
        return SamplingResult(Decision.DROP, None, parent_trace_state(parent_context))

    def get_description(self) -> str:
        return f"TraceIdRatioSampler{{{self._rate}}}"

def select_sampler(
    sampler_type: str,
    sampler_param: float,
    service_name: str = "",
    sampling_server_url: str = ""
) -> Sampler:
    """Select the sampling strategy for a resolved sampler type"""

    if sampler_type == "":
        return ALWAYS_ON

    if sampler_type == SAMPLER_TYPE_CONST:
        return ALWAYS_OFF if sampler_param == 0 else ALWAYS_ON

    if sampler_type == SAMPLER_TYPE_PROBABILISTIC:
        if not 0.0 <= sampler_param <= 1.0:
            logger.warning(f"Probabilistic sampler param {sampler_param} is outside [0, 1], using it unclamped")
        return TraceIdRatioSampler(sampler_param)

    if sampler_type == SAMPLER_TYPE_REMOTE:
        from .remote_sampler import JaegerRemoteSampler

        return JaegerRemoteSampler(
            service_name,
            sampling_server_url,
            initial_sampler=TraceIdRatioSampler(sampler_param)
        )

    raise UnknownSamplerError(sampler_type, ENV_JAEGER_SAMPLER_TYPE)
