"""
envtracing - Jaeger Remote Sampler
Sampling strategies polled from a Jaeger sampling manager in the background
"""

import logging
import math
import threading
import time
from typing import Any, Callable, Dict, Optional, Sequence

import requests
from opentelemetry.context import Context
from opentelemetry.sdk.trace.sampling import Decision, Sampler, SamplingResult
from opentelemetry.trace import Link, SpanKind
from opentelemetry.trace.span import TraceState
from opentelemetry.util.types import Attributes

from .sampler import TraceIdRatioSampler, parent_trace_state

logger = logging.getLogger(__name__)

DEFAULT_POLLING_INTERVAL = 60.0
DEFAULT_MAX_OPERATIONS = 2000
DEFAULT_INITIAL_SAMPLING_RATE = 0.001
FETCH_TIMEOUT_SECONDS = 5.0

Clock = Callable[[], float]

class RateLimiter:
    """Credit based token bucket, refilled continuously at credits_per_second"""

    def __init__(self, credits_per_second: float, max_balance: float, clock: Clock = time.monotonic):
        self.credits_per_second = credits_per_second
        self.max_balance = max_balance
        self._balance = max_balance
        self._clock = clock
        self._last_tick = clock()
        self._lock = threading.Lock()

    def check_credit(self, item_cost: float = 1.0) -> bool:
        with self._lock:
            now = self._clock()
            elapsed = now - self._last_tick
            self._last_tick = now
            self._balance = min(self._balance + elapsed * self.credits_per_second, self.max_balance)
            if self._balance >= item_cost:
                self._balance -= item_cost
                return True
            return False

class RateLimitingSampler(Sampler):
    """Samples at most max_traces_per_second traces"""

    def __init__(self, max_traces_per_second: float, clock: Clock = time.monotonic):
        self.max_traces_per_second = max_traces_per_second
        self._limiter = RateLimiter(max_traces_per_second, max(max_traces_per_second, 1.0), clock)

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
        if self._limiter.check_credit(1.0):
            return SamplingResult(Decision.RECORD_AND_SAMPLE, attributes, parent_trace_state(parent_context))
        return SamplingResult(Decision.DROP, None, parent_trace_state(parent_context))

    def get_description(self) -> str:
        return f"RateLimitingSampler{{{self.max_traces_per_second}}}"

class GuaranteedThroughputSampler(Sampler):
    """Ratio sampler with a lower bound rate so rare operations still get traced"""

    def __init__(self, sampling_rate: float, lower_bound: float, clock: Clock = time.monotonic):
        self.probabilistic = TraceIdRatioSampler(sampling_rate)
        self.lower_bound = lower_bound
        self._limiter = RateLimiter(lower_bound, 1.0, clock)

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
        result = self.probabilistic.should_sample(parent_context, trace_id, name, kind, attributes, links, trace_state)
        if result.decision is Decision.RECORD_AND_SAMPLE:
            # Keep the limiter in step with sampled traffic
            self._limiter.check_credit(1.0)
            return result
        if self._limiter.check_credit(1.0):
            return SamplingResult(Decision.RECORD_AND_SAMPLE, attributes, parent_trace_state(parent_context))
        return result

    def get_description(self) -> str:
        return f"GuaranteedThroughputSampler{{{self.probabilistic.rate}, {self.lower_bound}}}"

class PerOperationSampler(Sampler):
    """Per span name sampling with a default for unknown operations"""

    def __init__(
        self,
        default_sampling_rate: float,
        default_lower_bound: float,
        operation_rates: Dict[str, float],
        max_operations: int = DEFAULT_MAX_OPERATIONS,
        clock: Clock = time.monotonic
    ):
        self.default_sampling_rate = default_sampling_rate
        self.default_lower_bound = default_lower_bound
        self.max_operations = max_operations
        self._clock = clock
        self._default_sampler = TraceIdRatioSampler(default_sampling_rate)
        self._samplers: Dict[str, GuaranteedThroughputSampler] = {}
        self._lock = threading.Lock()

        for operation, rate in operation_rates.items():
            if len(self._samplers) >= max_operations:
                break
            self._samplers[operation] = GuaranteedThroughputSampler(rate, default_lower_bound, clock)

    def _sampler_for(self, operation: str) -> Sampler:
        sampler = self._samplers.get(operation)
        if sampler is not None:
            return sampler

        with self._lock:
            sampler = self._samplers.get(operation)
            if sampler is None:
                if len(self._samplers) >= self.max_operations:
                    return self._default_sampler
                sampler = GuaranteedThroughputSampler(
                    self.default_sampling_rate, self.default_lower_bound, self._clock
                )
                self._samplers[operation] = sampler
            return sampler

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
        return self._sampler_for(name).should_sample(
            parent_context, trace_id, name, kind, attributes, links, trace_state
        )

    def get_description(self) -> str:
        return f"PerOperationSampler{{{self.default_sampling_rate}, {self.default_lower_bound}, {len(self._samplers)}}}"

def _finite(value: Any) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite value {value!r} in sampling strategy")
    return number

def sampler_from_strategy(
    strategy: Dict[str, Any],
    max_operations: int = DEFAULT_MAX_OPERATIONS,
    clock: Clock = time.monotonic
) -> Sampler:
    """Build a sampler from a Jaeger sampling strategy response"""

    operation_sampling = strategy.get("operationSampling")
    if operation_sampling:
        operation_rates = {
            item["operation"]: _finite(item["probabilisticSampling"]["samplingRate"])
            for item in operation_sampling.get("perOperationStrategies") or []
        }
        return PerOperationSampler(
            _finite(operation_sampling.get("defaultSamplingProbability", 0.0)),
            _finite(operation_sampling.get("defaultLowerBoundTracesPerSecond", 0.0)),
            operation_rates,
            max_operations,
            clock
        )

    probabilistic = strategy.get("probabilisticSampling")
    if probabilistic:
        return TraceIdRatioSampler(_finite(probabilistic["samplingRate"]))

    rate_limiting = strategy.get("rateLimitingSampling")
    if rate_limiting:
        return RateLimitingSampler(_finite(rate_limiting["maxTracesPerSecond"]), clock)

    raise ValueError(f"unsupported sampling strategy {strategy!r}")

class JaegerRemoteSampler(Sampler):
    """Delegates sampling to strategies fetched from a Jaeger sampling manager.

    The initial sampler is used until the first strategy fetch succeeds. Fetches
    run on a daemon thread every ``polling_interval`` seconds; failures keep the
    current strategy.
    """

    def __init__(
        self,
        service_name: str,
        sampling_server_url: str,
        initial_sampler: Optional[Sampler] = None,
        polling_interval: float = DEFAULT_POLLING_INTERVAL,
        max_operations: int = DEFAULT_MAX_OPERATIONS,
        session: Optional[requests.Session] = None,
        start: bool = True
    ):
        self.service_name = service_name
        self.sampling_server_url = sampling_server_url
        self.polling_interval = polling_interval
        self.max_operations = max_operations

        self._sampler = initial_sampler or TraceIdRatioSampler(DEFAULT_INITIAL_SAMPLING_RATE)
        self._strategy: Optional[Dict[str, Any]] = None
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

        if start:
            self.start()

    @property
    def sampler(self) -> Sampler:
        """Sampler currently making decisions"""
        return self._sampler

    @property
    def fetch_url(self) -> str:
        if "://" in self.sampling_server_url:
            return self.sampling_server_url
        return f"http://{self.sampling_server_url}"

    def start(self):
        """Start background strategy polling"""
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._poll,
            name=f"jaeger-remote-sampler-{self.service_name}",
            daemon=True
        )
        self._thread.start()

    def _poll(self):
        while not self._stop.is_set():
            self.update_sampler()
            if self._stop.wait(self.polling_interval):
                break

    def fetch_strategy(self) -> Dict[str, Any]:
        response = self._session.get(
            self.fetch_url,
            params={"service": self.service_name},
            timeout=FETCH_TIMEOUT_SECONDS
        )
        response.raise_for_status()
        return response.json()

    def update_sampler(self) -> bool:
        """Fetch the strategy once and swap samplers if it changed"""

        try:
            strategy = self.fetch_strategy()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Failed to fetch sampling strategy from {self.fetch_url}: {e}")
            return False

        with self._lock:
            if strategy == self._strategy:
                return False
            try:
                sampler = sampler_from_strategy(strategy, self.max_operations)
            except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as e:
                logger.warning(f"Failed to apply sampling strategy for {self.service_name}: {e}")
                return False

            self._strategy = strategy
            self._sampler = sampler

        logger.info(f"Sampling strategy for {self.service_name} updated: {sampler.get_description()}")
        return True

    def close(self, timeout: Optional[float] = None):
        """Stop polling"""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self._session.close()

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
        return self._sampler.should_sample(parent_context, trace_id, name, kind, attributes, links, trace_state)

    def get_description(self) -> str:
        return f"JaegerRemoteSampler{{{self._sampler.get_description()}}}"
