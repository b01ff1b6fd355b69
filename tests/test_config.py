"""Tests for configuration loading."""

import json
import pytest

from assistants_mcp.config import ServerConfig, create_sample_config, load_config


class TestConfig:
    """Test configuration management."""

    def test_defaults(self, config):
        assert config.server_name == "openai-assistants-mcp"
        assert config.server_version == "3.0.0"
        assert config.transport.type == "stdio"
        assert config.transport.min_api_key_length == 10
        assert config.transport.max_message_bytes == 16 * 1024 * 1024
        assert not config.strict_initialization

    def test_sample_config_is_loadable(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(create_sample_config()))

        config = load_config(str(path), use_env=False)
        assert config.metrics_port == 9090
        assert config.transport.port == 8787

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/config.json")

    def test_unknown_transport_rejected(self):
        with pytest.raises(ValueError):
            ServerConfig(_env_file=None, transport={"type": "carrier-pigeon"})

    def test_env_shorthands(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("TRANSPORT_TYPE", "HTTP")
        monkeypatch.setenv("TRANSPORT_PORT", "9000")

        config = load_config()
        assert config.debug
        assert config.transport.type == "http"
        assert config.transport.port == 9000

    def test_nested_env(self, monkeypatch):
        monkeypatch.setenv("PROVIDER__BASE_URL", "http://localhost:1234/v1")
        assert ServerConfig(_env_file=None).provider.base_url == "http://localhost:1234/v1"

    def test_to_dict_redacts_key(self):
        config = ServerConfig(_env_file=None, openai_api_key="sk-secret")
        assert config.to_dict()["openai_api_key"] == "[REDACTED]"
        assert config.to_dict(redact=False)["openai_api_key"] == "sk-secret"

    def test_capabilities(self):
        config = ServerConfig(_env_file=None, capabilities={"prompts": False})
        capabilities = config.capabilities.to_capabilities().model_dump(exclude_none=True)
        assert "prompts" not in capabilities
        assert capabilities["tools"] == {"listChanged": False}
