"""Assistant management tools."""

from typing import Any, Dict

from .base import ToolContext, ToolHandler
from .validation import (
    validate_id,
    validate_list_params,
    validate_metadata,
    validate_model,
    validate_string,
)

ASSISTANT_FIELDS = (
    "model",
    "name",
    "description",
    "instructions",
    "tools",
    "tool_resources",
    "metadata",
    "temperature",
    "top_p",
    "response_format",
)


def _assistant_body(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {key: arguments[key] for key in ASSISTANT_FIELDS if key in arguments}


class AssistantCreateTool(ToolHandler):
    """Create a new assistant."""

    @property
    def name(self) -> str:
        return "assistant-create"

    @property
    def category(self) -> str:
        return "assistant"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_model(arguments.get("model"))
        for key in ("name", "description", "instructions"):
            validate_string(arguments.get(key), key)
        validate_metadata(arguments.get("metadata"))

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.create_assistant(_assistant_body(arguments))


class AssistantListTool(ToolHandler):
    """List assistants."""

    @property
    def name(self) -> str:
        return "assistant-list"

    @property
    def category(self) -> str:
        return "assistant"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_list_params(arguments)

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.list_assistants(arguments)


class AssistantGetTool(ToolHandler):
    @property
    def name(self) -> str:
        return "assistant-get"

    @property
    def category(self) -> str:
        return "assistant"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("assistant_id"), "assistant", "assistant_id")

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.get_assistant(arguments["assistant_id"])


class AssistantUpdateTool(ToolHandler):
    @property
    def name(self) -> str:
        return "assistant-update"

    @property
    def category(self) -> str:
        return "assistant"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("assistant_id"), "assistant", "assistant_id")
        if arguments.get("model") is not None:
            validate_model(arguments["model"])
        validate_metadata(arguments.get("metadata"))

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.update_assistant(arguments["assistant_id"], _assistant_body(arguments))


class AssistantDeleteTool(ToolHandler):
    @property
    def name(self) -> str:
        return "assistant-delete"

    @property
    def category(self) -> str:
        return "assistant"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("assistant_id"), "assistant", "assistant_id")

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.delete_assistant(arguments["assistant_id"])


def create_assistant_tools() -> Dict[str, ToolHandler]:
    tools = [
        AssistantCreateTool(),
        AssistantListTool(),
        AssistantGetTool(),
        AssistantUpdateTool(),
        AssistantDeleteTool(),
    ]
    return {tool.name: tool for tool in tools}
