"""
envtracing - Config Resolver
Jaeger environment precedence rules resolved into a single tracing configuration
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlsplit

from ..core.settings import (
    TracingSettings,
    ENV_JAEGER_ENDPOINT, ENV_JAEGER_SAMPLER_PARAM, ENV_JAEGER_TAGS,
    DEFAULT_AGENT_HOST, DEFAULT_AGENT_PORT, DEFAULT_SAMPLING_SERVER_PORT
)
from ..errors import ConfigError, ParseError
from .tags import parse_tags

logger = logging.getLogger(__name__)

def join_host_port(host: str, port: str) -> str:
    """Combine host and port, bracketing IPv6 literals"""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"

@dataclass(frozen=True)
class ResolvedConfig:
    """Tracing configuration after environment precedence has been applied"""
    agent_host: str = ""
    agent_port: str = ""
    agent_host_port: str = ""
    collector_endpoint: str = ""
    sampler_type: str = ""
    sampler_param: float = 0.0
    sampling_server_url: str = ""
    tags: Tuple[Tuple[str, str], ...] = ()

    @property
    def is_blank(self) -> bool:
        """True when no way to report spans or fetch strategies was configured"""
        return not (self.sampling_server_url or self.agent_host_port or self.collector_endpoint)

    def backend_target(self) -> Tuple[str, ...]:
        """Return ("collector", endpoint) or ("agent", host, port)"""
        if self.collector_endpoint:
            return ("collector", self.collector_endpoint)
        return ("agent", self.agent_host or DEFAULT_AGENT_HOST, self.agent_port or DEFAULT_AGENT_PORT)

def _parse_collector_endpoint(value: str) -> str:
    try:
        parts = urlsplit(value)
    except ValueError as e:
        raise ConfigError(f"cannot parse env var {ENV_JAEGER_ENDPOINT}={value}: {e}", ENV_JAEGER_ENDPOINT) from e

    if not parts.scheme or not parts.netloc:
        raise ConfigError(
            f"cannot parse env var {ENV_JAEGER_ENDPOINT}={value}: not an absolute URI",
            ENV_JAEGER_ENDPOINT
        )
    return parts.geturl()

def resolve_config(settings: Optional[TracingSettings] = None) -> ResolvedConfig:
    """Resolve tracing configuration from JAEGER_* environment variables"""

    settings = settings or TracingSettings()
    agent_host = agent_port = agent_host_port = collector_endpoint = ""

    # Span reporting: collector endpoint wins over the agent
    if settings.JAEGER_ENDPOINT:
        collector_endpoint = _parse_collector_endpoint(settings.JAEGER_ENDPOINT)
    elif settings.JAEGER_AGENT_HOST or settings.JAEGER_AGENT_PORT:
        agent_host = settings.JAEGER_AGENT_HOST or DEFAULT_AGENT_HOST
        agent_port = settings.JAEGER_AGENT_PORT or DEFAULT_AGENT_PORT
        agent_host_port = join_host_port(agent_host, agent_port)

    # Sampler
    sampler_type = settings.JAEGER_SAMPLER_TYPE or ""
    sampler_param = 0.0
    if settings.JAEGER_SAMPLER_PARAM:
        try:
            sampler_param = float(settings.JAEGER_SAMPLER_PARAM)
        except ValueError as e:
            raise ConfigError(
                f"cannot parse env var {ENV_JAEGER_SAMPLER_PARAM}={settings.JAEGER_SAMPLER_PARAM}",
                ENV_JAEGER_SAMPLER_PARAM
            ) from e
        if not math.isfinite(sampler_param):
            raise ConfigError(
                f"env var {ENV_JAEGER_SAMPLER_PARAM}={settings.JAEGER_SAMPLER_PARAM} is not a finite number",
                ENV_JAEGER_SAMPLER_PARAM
            )

    if settings.JAEGER_SAMPLING_ENDPOINT:
        sampling_server_url = settings.JAEGER_SAMPLING_ENDPOINT
    elif settings.JAEGER_SAMPLER_MANAGER_HOST_PORT:
        sampling_server_url = settings.JAEGER_SAMPLER_MANAGER_HOST_PORT
    elif settings.JAEGER_AGENT_HOST:
        # Known agent host: try its sampling endpoint
        host_port = join_host_port(settings.JAEGER_AGENT_HOST, str(DEFAULT_SAMPLING_SERVER_PORT))
        sampling_server_url = f"http://{host_port}/sampling"
    else:
        sampling_server_url = ""

    if sampling_server_url and not sampler_type:
        sampler_type = "remote"

    # Spans from a sampling-server-only setup go to the default agent
    if sampling_server_url and not (collector_endpoint or agent_host_port):
        agent_host, agent_port = DEFAULT_AGENT_HOST, DEFAULT_AGENT_PORT
        agent_host_port = join_host_port(agent_host, agent_port)

    try:
        tags = parse_tags(settings.JAEGER_TAGS or "", ENV_JAEGER_TAGS)
    except ParseError as e:
        raise ConfigError(f"could not parse {ENV_JAEGER_TAGS}: {e}", ENV_JAEGER_TAGS) from e

    config = ResolvedConfig(
        agent_host=agent_host,
        agent_port=agent_port,
        agent_host_port=agent_host_port,
        collector_endpoint=collector_endpoint,
        sampler_type=sampler_type,
        sampler_param=sampler_param,
        sampling_server_url=sampling_server_url,
        tags=tuple(tags),
    )
    logger.debug(f"Resolved tracing configuration: {config}")
    return config
