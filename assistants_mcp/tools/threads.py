"""Thread and message management tools."""

from typing import Any, Dict

from .base import ToolContext, ToolHandler
from .validation import (
    validate_id,
    validate_list_params,
    validate_message_content,
    validate_message_role,
    validate_metadata,
)


class ThreadCreateTool(ToolHandler):
    """Create a thread, optionally seeded with messages."""

    @property
    def name(self) -> str:
        return "thread-create"

    @property
    def category(self) -> str:
        return "thread"

    def validate(self, arguments: Dict[str, Any]) -> None:
        messages = arguments.get("messages")
        if messages is not None:
            if not isinstance(messages, list):
                raise self.create_validation_error("must be an array of messages", "messages")
            for message in messages:
                if not isinstance(message, dict):
                    raise self.create_validation_error("each message must be an object", "messages")
                validate_message_role(message.get("role"))
                validate_message_content(message.get("content"))
        validate_metadata(arguments.get("metadata"))

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        request = {key: arguments[key] for key in ("messages", "metadata", "tool_resources") if key in arguments}
        return await provider.create_thread(request)


class ThreadGetTool(ToolHandler):
    @property
    def name(self) -> str:
        return "thread-get"

    @property
    def category(self) -> str:
        return "thread"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.get_thread(arguments["thread_id"])


class ThreadUpdateTool(ToolHandler):
    @property
    def name(self) -> str:
        return "thread-update"

    @property
    def category(self) -> str:
        return "thread"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")
        validate_metadata(arguments.get("metadata"))

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        request = {key: arguments[key] for key in ("metadata", "tool_resources") if key in arguments}
        return await provider.update_thread(arguments["thread_id"], request)


class ThreadDeleteTool(ToolHandler):
    @property
    def name(self) -> str:
        return "thread-delete"

    @property
    def category(self) -> str:
        return "thread"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.delete_thread(arguments["thread_id"])


class MessageCreateTool(ToolHandler):
    """Append a message to a thread."""

    @property
    def name(self) -> str:
        return "message-create"

    @property
    def category(self) -> str:
        return "message"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")
        validate_message_role(arguments.get("role"))
        validate_message_content(arguments.get("content"))
        validate_metadata(arguments.get("metadata"))

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        request = {
            key: arguments[key]
            for key in ("role", "content", "attachments", "metadata")
            if key in arguments
        }
        return await provider.create_message(arguments["thread_id"], request)


class MessageListTool(ToolHandler):
    @property
    def name(self) -> str:
        return "message-list"

    @property
    def category(self) -> str:
        return "message"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")
        validate_list_params(arguments)
        if arguments.get("run_id") is not None:
            validate_id(arguments["run_id"], "run", "run_id")

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        request = {key: value for key, value in arguments.items() if key != "thread_id"}
        return await provider.list_messages(arguments["thread_id"], request)


class MessageGetTool(ToolHandler):
    @property
    def name(self) -> str:
        return "message-get"

    @property
    def category(self) -> str:
        return "message"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")
        validate_id(arguments.get("message_id"), "message", "message_id")

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.get_message(arguments["thread_id"], arguments["message_id"])


class MessageUpdateTool(ToolHandler):
    @property
    def name(self) -> str:
        return "message-update"

    @property
    def category(self) -> str:
        return "message"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")
        validate_id(arguments.get("message_id"), "message", "message_id")
        validate_metadata(arguments.get("metadata"))

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        request = {"metadata": arguments.get("metadata")}
        return await provider.update_message(arguments["thread_id"], arguments["message_id"], request)


class MessageDeleteTool(ToolHandler):
    @property
    def name(self) -> str:
        return "message-delete"

    @property
    def category(self) -> str:
        return "message"

    def validate(self, arguments: Dict[str, Any]) -> None:
        validate_id(arguments.get("thread_id"), "thread", "thread_id")
        validate_id(arguments.get("message_id"), "message", "message_id")

    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        provider = self.require_provider(context)
        return await provider.delete_message(arguments["thread_id"], arguments["message_id"])


def create_thread_tools() -> Dict[str, ToolHandler]:
    tools = [ThreadCreateTool(), ThreadGetTool(), ThreadUpdateTool(), ThreadDeleteTool()]
    return {tool.name: tool for tool in tools}


def create_message_tools() -> Dict[str, ToolHandler]:
    tools = [
        MessageCreateTool(),
        MessageListTool(),
        MessageGetTool(),
        MessageUpdateTool(),
        MessageDeleteTool(),
    ]
    return {tool.name: tool for tool in tools}
