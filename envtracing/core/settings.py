"""
envtracing - Environment Settings
Jaeger client environment variables read through pydantic-settings
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

ENV_JAEGER_ENDPOINT = "JAEGER_ENDPOINT"
ENV_JAEGER_AGENT_HOST = "JAEGER_AGENT_HOST"
ENV_JAEGER_AGENT_PORT = "JAEGER_AGENT_PORT"
ENV_JAEGER_SAMPLER_TYPE = "JAEGER_SAMPLER_TYPE"
ENV_JAEGER_SAMPLER_PARAM = "JAEGER_SAMPLER_PARAM"
ENV_JAEGER_SAMPLING_ENDPOINT = "JAEGER_SAMPLING_ENDPOINT"
ENV_JAEGER_SAMPLER_MANAGER_HOST_PORT = "JAEGER_SAMPLER_MANAGER_HOST_PORT"
ENV_JAEGER_TAGS = "JAEGER_TAGS"

DEFAULT_AGENT_HOST = "localhost"
DEFAULT_AGENT_PORT = "6831"
DEFAULT_SAMPLING_SERVER_PORT = 5778


class TracingSettings(BaseSettings):
    """Raw Jaeger tracing settings.

    Values are kept as strings; numeric parsing happens in the resolver so
    errors can name the offending variable. Empty strings count as unset.
    """

    # Span reporting
    JAEGER_ENDPOINT: Optional[str] = Field(default=None, description="Absolute collector URI, overrides the agent")
    JAEGER_AGENT_HOST: Optional[str] = Field(default=None, description="Jaeger agent host")
    JAEGER_AGENT_PORT: Optional[str] = Field(default=None, description="Jaeger agent UDP port")

    # Sampling
    JAEGER_SAMPLER_TYPE: Optional[str] = Field(default=None, description="Sampler type (const/probabilistic/remote)")
    JAEGER_SAMPLER_PARAM: Optional[str] = Field(default=None, description="Sampler parameter")
    JAEGER_SAMPLING_ENDPOINT: Optional[str] = Field(default=None, description="Remote sampling manager URL")
    JAEGER_SAMPLER_MANAGER_HOST_PORT: Optional[str] = Field(
        default=None,
        description="Remote sampling manager address (legacy)"
    )

    # Resource tags
    JAEGER_TAGS: Optional[str] = Field(default=None, description="Comma separated key=value tags")

    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")
