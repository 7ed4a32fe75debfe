"""
envtracing - Error Taxonomy
Configuration, parsing, sampler and exporter failures raised during initialization
"""

from typing import Optional


class TracingError(Exception):
    """Base class for tracing initialization failures"""

    def __init__(self, message: str, env_var: Optional[str] = None):
        super().__init__(message)
        self.env_var = env_var


class ConfigError(TracingError):
    """Malformed tracing configuration"""


class BlankTraceConfigurationError(ConfigError):
    """No trace report agent, sampling server, or collector endpoint configured.

    Callers can catch this to run without tracing instead of failing startup.
    """

    def __init__(self, message: str = "no trace report agent, config server, or collector endpoint specified"):
        super().__init__(message)


class ParseError(TracingError, ValueError):
    """Malformed key=value tag entry"""

    def __init__(self, tag: str, env_var: Optional[str] = None):
        super().__init__(f"invalid tag {tag!r}, expected key=value", env_var)
        self.tag = tag


class UnknownSamplerError(TracingError, ValueError):
    """Unrecognized sampler type"""

    def __init__(self, sampler_type: str, env_var: Optional[str] = None):
        super().__init__(f"unknown sampler type {sampler_type!r}", env_var)
        self.sampler_type = sampler_type


class ExporterInitError(TracingError):
    """Span exporter could not be constructed for the configured backend"""
