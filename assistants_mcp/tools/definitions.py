"""Static MCP metadata for the registered tools.

Handlers only know how to run; the titles, descriptions, input schemas and
behaviour hints advertised through ``tools/list`` live here.
"""

from typing import Any, Dict, List, Optional

import structlog

from ..protocol.messages import ToolDefinition
from .base import ToolRegistry

logger = structlog.get_logger()


def _id(kind: str, prefix: str) -> Dict[str, Any]:
    return {
        "type": "string",
        "description": f"The unique identifier of the {kind} (format: \"{prefix}abc123...\").",
    }


def _schema(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


METADATA = {
    "type": "object",
    "description": "Up to 16 key-value pairs for storing additional information.",
}

LIST_PARAMS = {
    "limit": {
        "type": "number",
        "description": "Maximum number of items to return (1-100, default: 20).",
    },
    "order": {
        "type": "string",
        "enum": ["asc", "desc"],
        "description": "Sort order by creation date: \"desc\" for newest first, \"asc\" for oldest first.",
    },
    "after": {"type": "string", "description": "Cursor: return items after this ID."},
    "before": {"type": "string", "description": "Cursor: return items before this ID."},
}

ASSISTANT_PROPERTIES = {
    "model": {
        "type": "string",
        "description": "The model used by the assistant (e.g., \"gpt-4o\", \"gpt-4\", \"gpt-3.5-turbo\").",
    },
    "name": {"type": "string", "description": "A descriptive name for the assistant."},
    "description": {"type": "string", "description": "What the assistant does."},
    "instructions": {
        "type": "string",
        "description": "System instructions that define the assistant's behaviour.",
    },
    "tools": {
        "type": "array",
        "description": "Tools enabled for the assistant: code_interpreter, file_search or function.",
        "items": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": ["code_interpreter", "file_search", "function"]},
            },
        },
    },
    "tool_resources": {
        "type": "object",
        "description": "Resources for tools, such as file_search vector stores and code_interpreter files.",
    },
    "metadata": METADATA,
}

MESSAGE_CONTENT = {
    "type": "string",
    "description": "The message text.",
}

THREAD_ID = _id("thread", "thread_")
RUN_ID = _id("run", "run_")

TOOL_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "assistant-create": {
        "title": "Create AI Assistant",
        "description": (
            "Create a new AI assistant with custom instructions and capabilities. "
            "The assistant keeps its configuration and can be reused across threads. "
            "Returns the assistant ID for future operations."
        ),
        "inputSchema": _schema(ASSISTANT_PROPERTIES, ["model"]),
    },
    "assistant-list": {
        "title": "List All Assistants",
        "description": "List your assistants with pagination support.",
        "readOnlyHint": True,
        "inputSchema": _schema(dict(LIST_PARAMS)),
    },
    "assistant-get": {
        "title": "Get Assistant Details",
        "description": "Retrieve the configuration, tools and metadata of one assistant.",
        "readOnlyHint": True,
        "inputSchema": _schema({"assistant_id": _id("assistant", "asst_")}, ["assistant_id"]),
    },
    "assistant-update": {
        "title": "Update Assistant",
        "description": "Modify an existing assistant. Only the provided fields change.",
        "inputSchema": _schema(
            {"assistant_id": _id("assistant", "asst_"), **ASSISTANT_PROPERTIES},
            ["assistant_id"],
        ),
    },
    "assistant-delete": {
        "title": "Delete Assistant",
        "description": "Permanently delete an assistant. This cannot be undone.",
        "destructiveHint": True,
        "inputSchema": _schema({"assistant_id": _id("assistant", "asst_")}, ["assistant_id"]),
    },
    "thread-create": {
        "title": "Create Conversation Thread",
        "description": "Create a conversation thread, optionally seeded with initial messages.",
        "inputSchema": _schema(
            {
                "messages": {
                    "type": "array",
                    "description": "Initial messages for the thread.",
                    "items": {
                        "type": "object",
                        "properties": {
                            "role": {"type": "string", "enum": ["user", "assistant"]},
                            "content": MESSAGE_CONTENT,
                        },
                        "required": ["role", "content"],
                    },
                },
                "metadata": METADATA,
            }
        ),
    },
    "thread-get": {
        "title": "Get Thread Details",
        "description": "Retrieve a conversation thread and its metadata.",
        "readOnlyHint": True,
        "inputSchema": _schema({"thread_id": THREAD_ID}, ["thread_id"]),
    },
    "thread-update": {
        "title": "Update Thread",
        "description": "Replace the metadata of a conversation thread.",
        "inputSchema": _schema({"thread_id": THREAD_ID, "metadata": METADATA}, ["thread_id"]),
    },
    "thread-delete": {
        "title": "Delete Thread",
        "description": "Permanently delete a thread and all of its messages.",
        "destructiveHint": True,
        "inputSchema": _schema({"thread_id": THREAD_ID}, ["thread_id"]),
    },
    "message-create": {
        "title": "Create Message",
        "description": "Add a message to a thread.",
        "inputSchema": _schema(
            {
                "thread_id": THREAD_ID,
                "role": {
                    "type": "string",
                    "enum": ["user", "assistant"],
                    "description": "Who the message is from.",
                },
                "content": MESSAGE_CONTENT,
                "metadata": METADATA,
            },
            ["thread_id", "role", "content"],
        ),
    },
    "message-list": {
        "title": "List Thread Messages",
        "description": "List the messages of a thread, optionally filtered by run.",
        "readOnlyHint": True,
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, **LIST_PARAMS, "run_id": RUN_ID},
            ["thread_id"],
        ),
    },
    "message-get": {
        "title": "Get Message Details",
        "description": "Retrieve one message of a thread.",
        "readOnlyHint": True,
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "message_id": _id("message", "msg_")},
            ["thread_id", "message_id"],
        ),
    },
    "message-update": {
        "title": "Update Message",
        "description": "Replace the metadata of a message.",
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "message_id": _id("message", "msg_"), "metadata": METADATA},
            ["thread_id", "message_id"],
        ),
    },
    "message-delete": {
        "title": "Delete Message",
        "description": "Permanently delete a message from a thread.",
        "destructiveHint": True,
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "message_id": _id("message", "msg_")},
            ["thread_id", "message_id"],
        ),
    },
    "run-create": {
        "title": "Create Assistant Run",
        "description": "Run an assistant on a thread. The run is processed asynchronously.",
        "inputSchema": _schema(
            {
                "thread_id": THREAD_ID,
                "assistant_id": _id("assistant", "asst_"),
                "model": ASSISTANT_PROPERTIES["model"],
                "instructions": {
                    "type": "string",
                    "description": "Overrides the assistant's instructions for this run.",
                },
                "additional_instructions": {
                    "type": "string",
                    "description": "Appended to the assistant's instructions for this run.",
                },
                "tools": ASSISTANT_PROPERTIES["tools"],
                "metadata": METADATA,
            },
            ["thread_id", "assistant_id"],
        ),
    },
    "run-list": {
        "title": "List Thread Runs",
        "description": "List the runs of a thread.",
        "readOnlyHint": True,
        "inputSchema": _schema({"thread_id": THREAD_ID, **LIST_PARAMS}, ["thread_id"]),
    },
    "run-get": {
        "title": "Get Run Details",
        "description": "Retrieve the status and details of a run.",
        "readOnlyHint": True,
        "inputSchema": _schema({"thread_id": THREAD_ID, "run_id": RUN_ID}, ["thread_id", "run_id"]),
    },
    "run-update": {
        "title": "Update Run",
        "description": "Replace the metadata of a run.",
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "run_id": RUN_ID, "metadata": METADATA},
            ["thread_id", "run_id"],
        ),
    },
    "run-cancel": {
        "title": "Cancel Run",
        "description": "Cancel a run that is queued or in progress.",
        "inputSchema": _schema({"thread_id": THREAD_ID, "run_id": RUN_ID}, ["thread_id", "run_id"]),
    },
    "run-submit-tool-outputs": {
        "title": "Submit Tool Outputs",
        "description": "Submit function-call outputs for a run whose status is requires_action.",
        "inputSchema": _schema(
            {
                "thread_id": THREAD_ID,
                "run_id": RUN_ID,
                "tool_outputs": {
                    "type": "array",
                    "description": "Outputs of the requested tool calls.",
                    "items": {
                        "type": "object",
                        "properties": {
                            "tool_call_id": _id("tool call", "call_"),
                            "output": {"type": "string", "description": "The tool call result."},
                        },
                        "required": ["tool_call_id", "output"],
                    },
                },
            },
            ["thread_id", "run_id", "tool_outputs"],
        ),
    },
    "run-step-list": {
        "title": "List Run Steps",
        "description": "List the steps a run went through.",
        "readOnlyHint": True,
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "run_id": RUN_ID, **LIST_PARAMS},
            ["thread_id", "run_id"],
        ),
    },
    "run-step-get": {
        "title": "Get Run Step Details",
        "description": "Retrieve one step of a run.",
        "readOnlyHint": True,
        "inputSchema": _schema(
            {"thread_id": THREAD_ID, "run_id": RUN_ID, "step_id": _id("step", "step_")},
            ["thread_id", "run_id", "step_id"],
        ),
    },
}

HINT_KEYS = ("readOnlyHint", "destructiveHint", "idempotentHint", "openWorldHint")


def _fallback_definition(name: str) -> ToolDefinition:
    return ToolDefinition(
        name=name,
        title=" ".join(word.capitalize() for word in name.split("-")),
        description=f"Execute {name} operation",
        input_schema={"type": "object", "properties": {}},
    )


def build_tool_definition(name: str) -> ToolDefinition:
    """Build the advertised definition of ``name``, falling back to a generic one."""
    definition = TOOL_DEFINITIONS.get(name)
    if definition is None:
        logger.warning("No definition found for tool", tool=name)
        return _fallback_definition(name)

    annotations = {key: definition[key] for key in HINT_KEYS if key in definition}
    return ToolDefinition(
        name=name,
        title=definition["title"],
        description=definition["description"],
        input_schema=definition["inputSchema"],
        annotations=annotations or None,
    )


def generate_tool_definitions(registry: ToolRegistry) -> List[Dict[str, Any]]:
    """Definitions for every registered tool, sorted by name."""
    definitions = [build_tool_definition(name) for name in registry.get_registered_tools()]
    definitions.sort(key=lambda definition: definition.name)
    return [definition.model_dump(exclude_none=True) for definition in definitions]


def validate_tool_definitions(registry: ToolRegistry) -> Dict[str, Any]:
    """Compare the registry against the static definitions."""
    registered = registry.get_registered_tools()
    missing = [name for name in registered if name not in TOOL_DEFINITIONS]
    extra = [name for name in TOOL_DEFINITIONS if name not in registered]
    return {"isComplete": not missing, "missingDefinitions": missing, "extraDefinitions": extra}
