"""Tests for tool handlers and the tool registry."""

import pytest
from dataclasses import FrozenInstanceError

from assistants_mcp.protocol.errors import MCPError, RegistrationError
from assistants_mcp.protocol.messages import ErrorCode
from assistants_mcp.tools import (
    TOOL_DEFINITIONS,
    ToolContext,
    ToolHandler,
    ToolRegistry,
    create_tool_handlers,
    find_similar_tools,
    generate_tool_definitions,
    sanitize_arguments,
    validate_tool_definitions,
)

ASSISTANT_ID = "asst_abc123def456ghi789jkl012"
THREAD_ID = "thread_abc123def456ghi789jkl012"
RUN_ID = "run_abc123def456ghi789jkl012"
CALL_ID = "call_abc123def456ghi789jkl012"


class EchoTool(ToolHandler):
    """Mock tool for testing."""

    def __init__(self, name="echo"):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def category(self) -> str:
        return "test"

    def validate(self, arguments):
        if "message" not in arguments:
            raise self.create_validation_error("is required", "message")

    async def execute(self, arguments, context):
        if arguments["message"] == "explode":
            raise RuntimeError("kaboom")
        return {"echo": arguments["message"], "tool": context.tool_name, "request": context.request_id}


@pytest.fixture
def registry():
    registry = ToolRegistry()
    registry.register_batch(create_tool_handlers())
    return registry


class TestToolRegistry:
    """Test tool registry functionality."""

    def test_all_tools_registered(self, registry):
        assert len(registry) == 22
        assert registry.get_stats()["handlersByCategory"] == {
            "assistant": 5,
            "thread": 4,
            "message": 5,
            "run": 6,
            "run-step": 2,
        }

    def test_duplicate_registration_leaves_registry_unchanged(self):
        """Test duplicates are rejected before the store changes."""
        registry = ToolRegistry()
        original = EchoTool()
        registry.register("echo", original)

        with pytest.raises(RegistrationError, match="already registered"):
            registry.register("echo", EchoTool())
        assert registry.get_handler("echo") is original
        assert len(registry) == 1

    def test_name_mismatch_is_rejected(self):
        registry = ToolRegistry()
        with pytest.raises(RegistrationError, match="does not match"):
            registry.register("other", EchoTool())
        assert not registry.is_registered("other")

    def test_register_batch_stops_at_first_failure(self):
        """Test entries after a rejected one are never inserted."""
        registry = ToolRegistry()
        handlers = {"alpha": EchoTool("alpha"), "beta": EchoTool("not-beta"), "gamma": EchoTool("gamma")}

        with pytest.raises(RegistrationError, match="does not match"):
            registry.register_batch(handlers)
        assert registry.get_registered_tools() == ["alpha"]

    def test_register_batch_duplicate(self):
        registry = ToolRegistry()
        registry.register("alpha", EchoTool("alpha"))

        with pytest.raises(RegistrationError, match="already registered"):
            registry.register_batch({"alpha": EchoTool("alpha"), "gamma": EchoTool("gamma")})
        assert not registry.is_registered("gamma")

    def test_unregister_and_clear(self, registry):
        assert registry.unregister("thread-get")
        assert not registry.unregister("thread-get")
        registry.clear()
        assert registry.get_registered_tools() == []

    @pytest.mark.asyncio
    async def test_execute_sets_tool_name(self):
        """Test the registry hands each call a context naming the tool."""
        registry = ToolRegistry()
        registry.register("echo", EchoTool())
        context = ToolContext(provider=None, request_id=5)

        result = await registry.execute("echo", {"message": "hi"}, context)

        assert result == {"echo": "hi", "tool": "echo", "request": 5}
        assert context.tool_name == ""

    def test_context_is_frozen(self):
        context = ToolContext(provider=None)
        with pytest.raises(FrozenInstanceError):
            context.tool_name = "changed"

    @pytest.mark.asyncio
    async def test_execute_wraps_unexpected_errors(self):
        registry = ToolRegistry()
        registry.register("echo", EchoTool())

        with pytest.raises(MCPError) as exc_info:
            await registry.execute("echo", {"message": "explode", "api_key": "sk-123"}, ToolContext(None))

        error = exc_info.value
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert "Tool execution failed for 'echo': kaboom" in error.message
        assert error.data["args"]["api_key"] == "[REDACTED]"

    @pytest.mark.asyncio
    async def test_unknown_tool_suggestions(self, registry):
        with pytest.raises(MCPError) as exc_info:
            await registry.execute("thread", {}, ToolContext(None))

        error = exc_info.value
        assert error.code == ErrorCode.METHOD_NOT_FOUND
        assert error.data["suggestions"] == ["thread-create", "thread-delete", "thread-get"]
        assert "Did you mean: thread-create, thread-delete, thread-get?" in error.message

    @pytest.mark.asyncio
    async def test_unknown_tool_empty_registry(self):
        with pytest.raises(MCPError, match="No tools are currently registered"):
            await ToolRegistry().execute("anything", {}, ToolContext(None))


class TestHelpers:
    """Test suggestion and sanitization helpers."""

    def test_prefix_matches_rank_first(self):
        candidates = ["message-get", "run-get", "get"]
        assert find_similar_tools("get", candidates) == ["get", "message-get", "run-get"]
        assert find_similar_tools("run-get-extra", candidates) == ["run-get", "get"]

    def test_empty_name_has_no_suggestions(self):
        assert find_similar_tools("", ["thread-get"]) == []

    def test_sanitize_nested(self):
        arguments = {
            "name": "bot",
            "Authorization_Token": "abc",
            "nested": {"password": "x", "items": [{"client_secret": "y", "ok": 1}]},
        }
        assert sanitize_arguments(arguments) == {
            "name": "bot",
            "Authorization_Token": "[REDACTED]",
            "nested": {"password": "[REDACTED]", "items": [{"client_secret": "[REDACTED]", "ok": 1}]},
        }
        assert arguments["nested"]["password"] == "x"


class TestDefinitions:
    """Test advertised tool definitions."""

    def test_definitions_cover_registry(self, registry):
        report = validate_tool_definitions(registry)
        assert report == {"isComplete": True, "missingDefinitions": [], "extraDefinitions": []}

    def test_generated_definitions(self, registry):
        definitions = generate_tool_definitions(registry)
        names = [definition["name"] for definition in definitions]
        assert names == sorted(TOOL_DEFINITIONS)

        thread_get = next(definition for definition in definitions if definition["name"] == "thread-get")
        assert thread_get["inputSchema"]["required"] == ["thread_id"]
        assert thread_get["annotations"]["readOnlyHint"] is True

    def test_fallback_definition(self):
        registry = ToolRegistry()
        registry.register("echo", EchoTool())
        [definition] = generate_tool_definitions(registry)
        assert definition == {
            "name": "echo",
            "title": "Echo",
            "description": "Execute echo operation",
            "inputSchema": {"type": "object", "properties": {}},
        }


class TestHandlers:
    """Test individual handlers against a mock provider."""

    @pytest.mark.asyncio
    async def test_assistant_create(self, registry, mock_provider):
        arguments = {"model": "gpt-4o", "name": "Helper", "instructions": "Be nice", "unknown": 1}
        await registry.execute("assistant-create", arguments, ToolContext(mock_provider))

        mock_provider.create_assistant.assert_awaited_once_with(
            {"model": "gpt-4o", "name": "Helper", "instructions": "Be nice"}
        )

    @pytest.mark.asyncio
    async def test_assistant_create_rejects_unknown_model(self, registry, mock_provider):
        with pytest.raises(MCPError, match="Unsupported model"):
            await registry.execute("assistant-create", {"model": "gpt-0"}, ToolContext(mock_provider))
        mock_provider.create_assistant.assert_not_called()

    @pytest.mark.asyncio
    async def test_assistant_list_limit(self, registry, mock_provider):
        with pytest.raises(MCPError, match="between 1 and 100"):
            await registry.execute("assistant-list", {"limit": 500}, ToolContext(mock_provider))

    @pytest.mark.asyncio
    async def test_assistant_delete(self, registry, mock_provider):
        await registry.execute("assistant-delete", {"assistant_id": ASSISTANT_ID}, ToolContext(mock_provider))
        mock_provider.delete_assistant.assert_awaited_once_with(ASSISTANT_ID)

    @pytest.mark.asyncio
    async def test_message_create(self, registry, mock_provider):
        arguments = {"thread_id": THREAD_ID, "role": "user", "content": "Hello"}
        await registry.execute("message-create", arguments, ToolContext(mock_provider))
        mock_provider.create_message.assert_awaited_once_with(THREAD_ID, {"role": "user", "content": "Hello"})

    @pytest.mark.asyncio
    async def test_message_create_rejects_role(self, registry, mock_provider):
        arguments = {"thread_id": THREAD_ID, "role": "system", "content": "Hello"}
        with pytest.raises(MCPError, match="'role'"):
            await registry.execute("message-create", arguments, ToolContext(mock_provider))

    @pytest.mark.asyncio
    async def test_run_create_requires_assistant(self, registry, mock_provider):
        with pytest.raises(MCPError) as exc_info:
            await registry.execute("run-create", {"thread_id": THREAD_ID}, ToolContext(mock_provider))
        assert exc_info.value.code == ErrorCode.INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_submit_tool_outputs(self, registry, mock_provider):
        arguments = {
            "thread_id": THREAD_ID,
            "run_id": RUN_ID,
            "tool_outputs": [{"tool_call_id": CALL_ID, "output": "42"}],
        }
        await registry.execute("run-submit-tool-outputs", arguments, ToolContext(mock_provider))
        mock_provider.submit_tool_outputs.assert_awaited_once()
        thread_id, run_id, body = mock_provider.submit_tool_outputs.await_args.args
        assert (thread_id, run_id) == (THREAD_ID, RUN_ID)
        assert body["tool_outputs"] == [{"tool_call_id": CALL_ID, "output": "42"}]

    @pytest.mark.asyncio
    async def test_submit_tool_outputs_bad_call_id(self, registry, mock_provider):
        arguments = {
            "thread_id": THREAD_ID,
            "run_id": RUN_ID,
            "tool_outputs": [{"tool_call_id": "call_1", "output": "42"}],
        }
        with pytest.raises(MCPError, match="tool_call_id"):
            await registry.execute("run-submit-tool-outputs", arguments, ToolContext(mock_provider))
