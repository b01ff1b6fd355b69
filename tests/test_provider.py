"""Tests for the OpenAI provider."""

import json
import httpx
import pytest

from assistants_mcp.protocol.errors import MCPError
from assistants_mcp.protocol.messages import ErrorCode, LegacyErrorCode
from assistants_mcp.providers import OpenAIProvider, ProviderRegistry, create_openai_registry

THREAD_ID = "thread_abc123def456ghi789jkl012"


def make_provider(handler):
    return OpenAIProvider("sk-test", "https://api.example.test/v1/", transport=httpx.MockTransport(handler))


class TestOpenAIProvider:
    """Test request shaping and error mapping."""

    @pytest.mark.asyncio
    async def test_headers_and_path(self):
        seen = {}

        def handler(request):
            seen["request"] = request
            return httpx.Response(200, json={"id": THREAD_ID, "object": "thread"})

        async with make_provider(handler) as provider:
            result = await provider.get_thread(THREAD_ID)

        request = seen["request"]
        assert result["id"] == THREAD_ID
        assert request.method == "GET"
        assert str(request.url) == f"https://api.example.test/v1/threads/{THREAD_ID}"
        assert request.headers["authorization"] == "Bearer sk-test"
        assert request.headers["openai-beta"] == "assistants=v2"

    @pytest.mark.asyncio
    async def test_list_query_drops_unknown_and_none(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"object": "list", "data": []})

        async with make_provider(handler) as provider:
            await provider.list_assistants({"limit": 5, "order": None, "bogus": "x"})

        assert seen["params"] == {"limit": "5"}

    @pytest.mark.asyncio
    async def test_create_body_drops_none(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "asst_1"})

        async with make_provider(handler) as provider:
            await provider.create_assistant({"model": "gpt-4o", "name": None})

        assert seen["body"] == {"model": "gpt-4o"}

    @pytest.mark.asyncio
    async def test_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"error": {"message": "No thread found"}})

        async with make_provider(handler) as provider:
            with pytest.raises(MCPError) as exc_info:
                await provider.get_thread(THREAD_ID)

        error = exc_info.value
        assert error.code == ErrorCode.INVALID_PARAMS
        assert error.data["originalCode"] == LegacyErrorCode.NOT_FOUND
        assert error.data["context"] == f"GET /threads/{THREAD_ID}"

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        def handler(request):
            return httpx.Response(401, text="nope")

        async with make_provider(handler) as provider:
            with pytest.raises(MCPError) as exc_info:
                await provider.list_assistants()

        assert exc_info.value.code == ErrorCode.INTERNAL_ERROR
        assert exc_info.value.data["providerError"] == {"raw": "nope"}

    def test_requires_api_key(self):
        with pytest.raises(MCPError):
            OpenAIProvider("")


class TestProviderRegistry:
    @pytest.mark.asyncio
    async def test_openai_registry(self):
        registry = create_openai_registry("sk-test")
        assert registry.names() == ["openai"]
        assert isinstance(registry.get_default_provider(), OpenAIProvider)
        await registry.aclose()

    def test_empty_registry(self):
        assert ProviderRegistry().get_default_provider() is None

    def test_duplicate_and_default(self, mock_provider):
        registry = ProviderRegistry()
        registry.register("a", mock_provider)
        registry.register("b", mock_provider)
        assert registry.get_default_provider() is mock_provider

        with pytest.raises(MCPError):
            registry.register("a", mock_provider)
        with pytest.raises(MCPError) as exc_info:
            registry.set_default("missing")
        assert exc_info.value.data["availableProviders"] == ["a", "b"]
