"""Shared fixtures."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from assistants_mcp.config import ServerConfig
from assistants_mcp.protocol.router import ProtocolRouter
from assistants_mcp.providers import Provider, ProviderRegistry
from assistants_mcp.transport import StdioTransportAdapter

THREAD_ID = "thread_abc123def456ghi789jkl012"
ASSISTANT_ID = "asst_abc123def456ghi789jkl012"
RUN_ID = "run_abc123def456ghi789jkl012"


@pytest.fixture
def config():
    """Configuration isolated from the environment and any .env file."""
    return ServerConfig(_env_file=None)


@pytest.fixture
def mock_provider():
    """Provider whose every operation is an AsyncMock."""
    provider = MagicMock(spec=Provider)
    for name in (
        "create_assistant", "list_assistants", "get_assistant", "update_assistant", "delete_assistant",
        "create_thread", "get_thread", "update_thread", "delete_thread",
        "create_message", "list_messages", "get_message", "update_message", "delete_message",
        "create_run", "list_runs", "get_run", "update_run", "cancel_run", "submit_tool_outputs",
        "list_run_steps", "get_run_step", "aclose",
    ):
        setattr(provider, name, AsyncMock(return_value={"id": "obj_1", "object": name}))
    return provider


@pytest.fixture
def provider_registry(mock_provider):
    registry = ProviderRegistry()
    registry.register("mock", mock_provider, default=True)
    return registry


@pytest.fixture
def router(config, provider_registry):
    return ProtocolRouter.with_provider_registry(config, provider_registry, StdioTransportAdapter())
