"""Tests for server wiring and the command line entry point."""

import json
import pytest
from starlette.applications import Starlette

from assistants_mcp.main import main
from assistants_mcp.protocol.server import MCPServer
from assistants_mcp.providers import OpenAIProvider
from assistants_mcp.transport import StdioTransportAdapter


class TestMCPServer:
    """Test server construction per transport."""

    def test_stdio_router_without_key(self, config):
        config.openai_api_key = None
        server = MCPServer(config)
        router = server.create_stdio_router()

        assert isinstance(router.adapter, StdioTransportAdapter)
        assert router.provider_registry.get_default_provider() is None

    @pytest.mark.asyncio
    async def test_stdio_router_with_key(self, config):
        config.openai_api_key = "sk-test-key-1234567890"
        async with MCPServer(config) as server:
            router = server.create_stdio_router()
            assert isinstance(router.provider_registry.get_default_provider(), OpenAIProvider)

    @pytest.mark.asyncio
    async def test_http_app(self, config):
        async with MCPServer(config) as server:
            app = server.create_http_app()
            assert isinstance(app, Starlette)
            assert server.router.adapter.name == "http"

            provider = server.create_provider("sk-test-key-1234567890")
            assert isinstance(provider, OpenAIProvider)
            await provider.aclose()


class TestMain:
    """Test the command line."""

    def test_sample_config(self, capsys):
        main(["--sample-config"])
        sample = json.loads(capsys.readouterr().out)
        assert sample["transport"]["type"] == "stdio"

    def test_validate_config_redacts_key(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"openai_api_key": "sk-very-secret"}))

        main(["--validate-config", "--config", str(path)])
        out = capsys.readouterr().out
        assert "Configuration is valid" in out
        assert "sk-very-secret" not in out

    def test_missing_config_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--validate-config", "--config", "/nonexistent.json"])
        assert exc_info.value.code == 1
        assert "Configuration error" in capsys.readouterr().err
