"""MCP tools for the OpenAI Assistants API."""

from typing import Dict

from .assistants import create_assistant_tools
from .base import ToolContext, ToolHandler, ToolRegistry, find_similar_tools, sanitize_arguments
from .definitions import TOOL_DEFINITIONS, generate_tool_definitions, validate_tool_definitions
from .runs import create_run_tools
from .threads import create_message_tools, create_thread_tools


def create_tool_handlers() -> Dict[str, ToolHandler]:
    """Every tool handler keyed by its tool name."""
    handlers: Dict[str, ToolHandler] = {}
    handlers.update(create_assistant_tools())
    handlers.update(create_thread_tools())
    handlers.update(create_message_tools())
    handlers.update(create_run_tools())
    return handlers


__all__ = [
    "TOOL_DEFINITIONS",
    "ToolContext",
    "ToolHandler",
    "ToolRegistry",
    "create_tool_handlers",
    "find_similar_tools",
    "generate_tool_definitions",
    "sanitize_arguments",
    "validate_tool_definitions",
]
