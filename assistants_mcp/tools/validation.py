"""Argument validation shared by the tool handlers."""

import re
from typing import Any, Dict, Optional

from ..protocol.errors import MCPError
from ..protocol.messages import ErrorCode

SUPPORTED_MODELS = (
    "gpt-4",
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-4-turbo",
    "gpt-4-turbo-preview",
    "gpt-4-0125-preview",
    "gpt-4-1106-preview",
    "gpt-3.5-turbo",
    "gpt-3.5-turbo-0125",
    "gpt-3.5-turbo-1106",
    "gpt-3.5-turbo-16k",
)

ID_PREFIXES = {
    "assistant": "asst_",
    "thread": "thread_",
    "message": "msg_",
    "run": "run_",
    "step": "step_",
    "tool_call": "call_",
}
ID_PATTERNS = {
    kind: re.compile(rf"^{re.escape(prefix)}[a-zA-Z0-9]{{24}}$")
    for kind, prefix in ID_PREFIXES.items()
}

MAX_METADATA_ENTRIES = 16
MAX_LIST_LIMIT = 100


def _invalid(message: str, **data: Any) -> MCPError:
    return MCPError(ErrorCode.INVALID_PARAMS, message, data or None)


def validate_id(value: Any, kind: str, param_name: str) -> None:
    """Check that ``value`` looks like an Assistants API identifier of ``kind``."""
    prefix = ID_PREFIXES[kind]
    example = f"{prefix}abc123def456ghi789jkl012"
    if not value:
        raise _invalid(
            f"Required parameter '{param_name}' is missing. Provide a valid {kind} ID "
            f"in format '{prefix}' followed by 24 characters (e.g., '{example}').",
            parameter=param_name,
        )
    if not isinstance(value, str) or not ID_PATTERNS[kind].match(value):
        raise _invalid(
            f"Invalid id for parameter '{param_name}': expected a {kind} ID in format "
            f"'{prefix}' followed by 24 characters (e.g., '{example}'), but received: {value!r}.",
            parameter=param_name,
            received=value if isinstance(value, str) else repr(value),
        )


def validate_model(model: Any, param_name: str = "model") -> None:
    if not model:
        raise _invalid(
            f"Required parameter '{param_name}' is missing. "
            f"Specify a supported model like {', '.join(SUPPORTED_MODELS[:4])}.",
            parameter=param_name,
        )
    if not isinstance(model, str) or model not in SUPPORTED_MODELS:
        raise _invalid(
            f"Unsupported model for parameter '{param_name}': {model!r}. "
            f"Supported models: {', '.join(SUPPORTED_MODELS)}.",
            parameter=param_name,
            supportedModels=list(SUPPORTED_MODELS),
        )


def validate_metadata(metadata: Any, param_name: str = "metadata") -> None:
    if metadata is None:
        return
    if not isinstance(metadata, dict):
        raise _invalid(f"Parameter '{param_name}' must be an object of key-value pairs.", parameter=param_name)
    if len(metadata) > MAX_METADATA_ENTRIES:
        raise _invalid(
            f"Parameter '{param_name}' may hold at most {MAX_METADATA_ENTRIES} entries, got {len(metadata)}.",
            parameter=param_name,
        )


def validate_list_params(arguments: Optional[Dict[str, Any]]) -> None:
    """Check ``limit``/``order``/``after``/``before`` list arguments."""
    arguments = arguments or {}
    limit = arguments.get("limit")
    if limit is not None:
        if isinstance(limit, bool) or not isinstance(limit, (int, float)) or int(limit) != limit:
            raise _invalid("Parameter 'limit' must be an integer.", parameter="limit")
        if not 1 <= limit <= MAX_LIST_LIMIT:
            raise _invalid(
                f"Parameter 'limit' must be between 1 and {MAX_LIST_LIMIT}, got {limit}.",
                parameter="limit",
            )
    order = arguments.get("order")
    if order is not None and order not in ("asc", "desc"):
        raise _invalid("Parameter 'order' must be 'asc' or 'desc'.", parameter="order")
    for key in ("after", "before"):
        value = arguments.get(key)
        if value is not None and not isinstance(value, str):
            raise _invalid(f"Parameter '{key}' must be a string cursor.", parameter=key)


def validate_string(value: Any, param_name: str, required: bool = False) -> None:
    if value is None:
        if required:
            raise _invalid(f"Required parameter '{param_name}' is missing.", parameter=param_name)
        return
    if not isinstance(value, str):
        raise _invalid(f"Parameter '{param_name}' must be a string.", parameter=param_name)


def validate_message_role(role: Any) -> None:
    if role not in ("user", "assistant"):
        raise _invalid(
            f"Parameter 'role' must be 'user' or 'assistant', got {role!r}.",
            parameter="role",
        )


def validate_message_content(content: Any) -> None:
    if isinstance(content, str):
        if not content.strip():
            raise _invalid("Parameter 'content' must not be empty.", parameter="content")
        return
    if isinstance(content, list) and content:
        return
    raise _invalid(
        "Parameter 'content' must be a non-empty string or a list of content parts.",
        parameter="content",
    )


def validate_tool_outputs(tool_outputs: Any) -> None:
    if not isinstance(tool_outputs, list) or not tool_outputs:
        raise _invalid("Parameter 'tool_outputs' must be a non-empty array.", parameter="tool_outputs")
    for index, item in enumerate(tool_outputs):
        if not isinstance(item, dict):
            raise _invalid(f"tool_outputs[{index}] must be an object.", parameter="tool_outputs")
        validate_id(item.get("tool_call_id"), "tool_call", f"tool_outputs[{index}].tool_call_id")
        if not isinstance(item.get("output"), str):
            raise _invalid(f"tool_outputs[{index}].output must be a string.", parameter="tool_outputs")
