"""Tests for resolving JAEGER_* environment variables."""

from __future__ import annotations

import pytest

from envtracing.core.settings import TracingSettings
from envtracing.errors import ConfigError, ParseError
from envtracing.tracing.config import ResolvedConfig, join_host_port, resolve_config


class TestBackendTarget:
    """Tests for agent / collector precedence."""

    def test_agent_host_only(self, monkeypatch):
        monkeypatch.setenv("JAEGER_AGENT_HOST", "localhost")

        config = resolve_config()

        assert config.agent_host_port == "localhost:6831"
        assert config.collector_endpoint == ""
        assert config.sampling_server_url == "http://localhost:5778/sampling"
        assert config.sampler_type == "remote"
        assert config.backend_target() == ("agent", "localhost", "6831")

    def test_agent_port_only_uses_default_host(self, monkeypatch):
        monkeypatch.setenv("JAEGER_AGENT_PORT", "6832")

        config = resolve_config()

        assert config.agent_host_port == "localhost:6832"
        assert config.sampling_server_url == ""
        assert config.sampler_type == ""

    def test_ipv6_agent_host(self, monkeypatch):
        monkeypatch.setenv("JAEGER_AGENT_HOST", "::1")

        config = resolve_config()

        assert config.agent_host_port == "[::1]:6831"
        assert config.sampling_server_url == "http://[::1]:5778/sampling"

    def test_collector_endpoint_overrides_agent(self, monkeypatch):
        monkeypatch.setenv("JAEGER_ENDPOINT", "http://jaeger:14268/api/traces")
        monkeypatch.setenv("JAEGER_AGENT_HOST", "agent")

        config = resolve_config()

        assert config.collector_endpoint == "http://jaeger:14268/api/traces"
        assert config.agent_host_port == ""
        assert config.agent_host == ""
        assert config.backend_target() == ("collector", "http://jaeger:14268/api/traces")

    @pytest.mark.parametrize("endpoint", ["not a uri", "/api/traces", "http://[::1"])
    def test_invalid_collector_endpoint(self, monkeypatch, endpoint):
        monkeypatch.setenv("JAEGER_ENDPOINT", endpoint)

        with pytest.raises(ConfigError) as exc_info:
            resolve_config()

        assert exc_info.value.env_var == "JAEGER_ENDPOINT"
        assert "JAEGER_ENDPOINT" in str(exc_info.value)

    def test_nothing_set_is_blank(self):
        config = resolve_config()

        assert config.is_blank
        assert config == ResolvedConfig()

    def test_empty_values_count_as_unset(self, monkeypatch):
        monkeypatch.setenv("JAEGER_AGENT_HOST", "")
        monkeypatch.setenv("JAEGER_ENDPOINT", "")

        assert resolve_config().is_blank


class TestSamplerConfig:
    """Tests for sampler type, param and sampling server resolution."""

    def test_const_sampler(self, monkeypatch):
        monkeypatch.setenv("JAEGER_AGENT_HOST", "localhost")
        monkeypatch.setenv("JAEGER_SAMPLER_TYPE", "const")
        monkeypatch.setenv("JAEGER_SAMPLER_PARAM", "0")

        config = resolve_config()

        assert config.sampler_type == "const"
        assert config.sampler_param == 0.0

    def test_invalid_sampler_param(self, monkeypatch):
        monkeypatch.setenv("JAEGER_SAMPLER_PARAM", "half")

        with pytest.raises(ConfigError) as exc_info:
            resolve_config()

        assert exc_info.value.env_var == "JAEGER_SAMPLER_PARAM"

    @pytest.mark.parametrize("value", ["inf", "-inf", "nan", "1e400"])
    def test_non_finite_sampler_param(self, monkeypatch, value):
        monkeypatch.setenv("JAEGER_AGENT_HOST", "localhost")
        monkeypatch.setenv("JAEGER_SAMPLER_PARAM", value)

        with pytest.raises(ConfigError) as exc_info:
            resolve_config()

        assert exc_info.value.env_var == "JAEGER_SAMPLER_PARAM"

    def test_out_of_range_sampler_param_passes_through(self, monkeypatch):
        monkeypatch.setenv("JAEGER_AGENT_HOST", "localhost")
        monkeypatch.setenv("JAEGER_SAMPLER_PARAM", "1e300")

        assert resolve_config().sampler_param == 1e300

    def test_sampling_endpoint_preferred(self, monkeypatch):
        monkeypatch.setenv("JAEGER_SAMPLING_ENDPOINT", "http://sampling:5778/sampling")
        monkeypatch.setenv("JAEGER_SAMPLER_MANAGER_HOST_PORT", "manager:5778")
        monkeypatch.setenv("JAEGER_AGENT_HOST", "agent")

        config = resolve_config()

        assert config.sampling_server_url == "http://sampling:5778/sampling"
        assert config.sampler_type == "remote"

    def test_manager_host_port_fallback(self, monkeypatch):
        monkeypatch.setenv("JAEGER_SAMPLER_MANAGER_HOST_PORT", "manager:5778")
        monkeypatch.setenv("JAEGER_AGENT_HOST", "agent")

        config = resolve_config()

        assert config.sampling_server_url == "manager:5778"

    def test_sampling_server_alone_is_not_blank(self, monkeypatch):
        monkeypatch.setenv("JAEGER_SAMPLER_MANAGER_HOST_PORT", "manager:5778")

        config = resolve_config()

        assert not config.is_blank
        assert config.agent_host_port == "localhost:6831"
        assert config.backend_target() == ("agent", "localhost", "6831")

    def test_sampling_server_does_not_replace_collector(self, monkeypatch):
        monkeypatch.setenv("JAEGER_ENDPOINT", "http://jaeger:14268/api/traces")
        monkeypatch.setenv("JAEGER_SAMPLING_ENDPOINT", "http://sampling:5778/sampling")

        config = resolve_config()

        assert config.agent_host_port == ""
        assert config.backend_target() == ("collector", "http://jaeger:14268/api/traces")

    def test_explicit_type_not_replaced_by_remote(self, monkeypatch):
        monkeypatch.setenv("JAEGER_AGENT_HOST", "agent")
        monkeypatch.setenv("JAEGER_SAMPLER_TYPE", "probabilistic")
        monkeypatch.setenv("JAEGER_SAMPLER_PARAM", "0.25")

        config = resolve_config()

        assert config.sampler_type == "probabilistic"
        assert config.sampler_param == 0.25


class TestTagsConfig:
    """Tests for JAEGER_TAGS resolution."""

    def test_tags_resolved_in_order(self, monkeypatch):
        monkeypatch.setenv("JAEGER_TAGS", "cluster=eu-1,zone=b")

        assert resolve_config().tags == (("cluster", "eu-1"), ("zone", "b"))

    def test_invalid_tags_name_variable(self, monkeypatch):
        monkeypatch.setenv("JAEGER_TAGS", "a=1,b")

        with pytest.raises(ConfigError) as exc_info:
            resolve_config()

        assert exc_info.value.env_var == "JAEGER_TAGS"
        assert isinstance(exc_info.value.__cause__, ParseError)
        assert exc_info.value.__cause__.env_var == "JAEGER_TAGS"


class TestExplicitSettings:
    """Tests for passing settings instead of reading the environment."""

    def test_settings_object(self):
        settings = TracingSettings(JAEGER_AGENT_HOST="tracing", JAEGER_AGENT_PORT="7000")

        config = resolve_config(settings)

        assert config.agent_host_port == "tracing:7000"
        assert config.sampling_server_url == "http://tracing:5778/sampling"

    def test_join_host_port(self):
        assert join_host_port("example.com", "80") == "example.com:80"
        assert join_host_port("fe80::1", "80") == "[fe80::1]:80"
