"""Handlers for the prompts/list, prompts/get and completion/complete methods."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import structlog

from ..pagination import DEFAULT_LIMIT, create_pagination_metadata, paginate
from ..protocol.errors import MCPError
from ..protocol.messages import ErrorCode, MCPMethods
from ..resources import get_all_resources
from .templates import get_prompt_template, get_prompt_templates

logger = structlog.get_logger()

MAX_COMPLETION_VALUES = 100

MODEL_VALUES = ["gpt-4", "gpt-4-turbo", "gpt-3.5-turbo", "gpt-4o", "gpt-4o-mini"]
TOOL_VALUES = ["code_interpreter", "file_search", "function"]

PROMPT_ARGUMENT_VALUES: Dict[str, Dict[str, List[str]]] = {
    "create-coding-assistant": {
        "specialization": [
            "Python web development",
            "React frontend development",
            "Node.js backend development",
            "DevOps and infrastructure",
            "Mobile app development",
            "Machine learning and AI",
            "Database design and optimization",
            "API development and integration",
            "Cloud architecture",
            "Data engineering",
            "Cybersecurity",
        ],
        "experience_level": ["beginner", "intermediate", "expert", "senior"],
        "additional_tools": ["code_interpreter", "file_search", "code_interpreter, file_search", "function"],
    },
    "create-data-analyst": {
        "domain": [
            "business intelligence",
            "scientific research",
            "marketing",
            "finance",
            "healthcare",
            "operations",
        ],
        "tools_focus": ["python", "r", "sql", "visualization"],
    },
    "create-writing-assistant": {
        "writing_type": [
            "blog posts",
            "technical documentation",
            "marketing copy",
            "academic papers",
            "email campaigns",
            "product descriptions",
        ],
        "tone": ["professional", "casual", "academic", "creative"],
        "audience": ["general public", "technical experts", "students", "customers"],
    },
    "configure-assistant-run": {
        "task_type": ["code_review", "data_analysis", "writing", "general_qa"],
        "complexity": ["simple", "moderate", "complex"],
        "time_sensitivity": ["low", "medium", "high"],
        "tool_choice": ["auto", "none", "required"],
    },
}

# Argument name to identifier prefix
ID_ARGUMENTS = {
    "assistant_id": "asst_",
    "thread_id": "thread_",
    "message_id": "msg_",
    "run_id": "run_",
    "file_id": "file-",
}

GENERIC_ARGUMENT_VALUES: Dict[str, List[str]] = {
    "model": MODEL_VALUES,
    "tools": TOOL_VALUES,
    "additional_tools": TOOL_VALUES,
    "order": ["asc", "desc"],
    "limit": ["10", "20", "50", "100"],
    "organization_type": ["chronological", "by_topic", "by_importance"],
    "detail_level": ["basic", "intermediate", "advanced"],
    "run_status": ["failed", "cancelled", "requires_action", "expired", "incomplete"],
}

EXTRA_RESOURCE_URIS = ["assistant://templates/", "docs://", "examples://workflows/"]


class PromptHandler(ABC):
    """Base class for method-level handlers outside the tool registry."""

    @property
    @abstractmethod
    def method(self) -> str:
        pass

    def validate(self, params: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        pass

    async def handle(self, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        params = params or {}
        if not isinstance(params, dict):
            raise self.create_validation_error("Parameters must be an object")
        self.validate(params)
        try:
            return await self.execute(params)
        except MCPError:
            raise
        except Exception as e:
            raise MCPError(
                ErrorCode.INTERNAL_ERROR,
                f"[{self.method}] Execution failed: {e}",
                {"originalError": {"type": type(e).__name__, "message": str(e)}},
            ) from e

    def create_validation_error(self, message: str, param_name: Optional[str] = None) -> MCPError:
        data = {"parameter": param_name} if param_name else None
        return MCPError(ErrorCode.INVALID_PARAMS, f"[{self.method}] {message}", data)


class PromptsListHandler(PromptHandler):
    """List prompt definitions, paginated."""

    @property
    def method(self) -> str:
        return MCPMethods.PROMPTS_LIST

    def validate(self, params: Dict[str, Any]) -> None:
        cursor = params.get("cursor")
        if cursor is not None and not isinstance(cursor, str):
            raise self.create_validation_error("Cursor must be a string", "cursor")

    async def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        prompts = [template.to_definition().model_dump() for template in get_prompt_templates()]
        page = paginate(prompts, cursor=params.get("cursor"), limit=DEFAULT_LIMIT)
        logger.debug(
            "Prompts page",
            **create_pagination_metadata(params.get("cursor"), DEFAULT_LIMIT, page),
        )

        result: Dict[str, Any] = {"prompts": page.items}
        if page.next_cursor:
            result["nextCursor"] = page.next_cursor
        return result


class PromptsGetHandler(PromptHandler):
    """Render a prompt template into messages."""

    @property
    def method(self) -> str:
        return MCPMethods.PROMPTS_GET

    def validate(self, params: Dict[str, Any]) -> None:
        name = params.get("name")
        if not name or not isinstance(name, str):
            raise self.create_validation_error("Name is required and must be a string", "name")

        arguments = params.get("arguments")
        if arguments is None:
            return
        if not isinstance(arguments, dict):
            raise self.create_validation_error("Arguments must be an object", "arguments")
        for key, value in arguments.items():
            if not isinstance(value, str):
                raise self.create_validation_error(
                    f"Argument '{key}' must be a string, got {type(value).__name__}", "arguments"
                )

    async def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params["name"]
        template = get_prompt_template(name)
        if template is None:
            raise self.create_validation_error(f"Prompt not found: {name}", "name")

        arguments = params.get("arguments") or {}
        missing = [key for key in template.required_arguments() if not arguments.get(key)]
        if missing:
            raise self.create_validation_error(
                f"Missing required arguments for prompt '{name}': {', '.join(missing)}", "arguments"
            )

        return {
            "description": template.description,
            "messages": template.generate_messages(arguments),
        }


class CompletionHandler(PromptHandler):
    """Suggest values for prompt arguments and resource URIs."""

    @property
    def method(self) -> str:
        return MCPMethods.COMPLETION_COMPLETE

    def validate(self, params: Dict[str, Any]) -> None:
        ref = params.get("ref")
        if not isinstance(ref, dict) or not isinstance(ref.get("type"), str):
            raise self.create_validation_error("ref with a type is required", "ref")
        argument = params.get("argument")
        if not isinstance(argument, dict) or not isinstance(argument.get("name"), str):
            raise self.create_validation_error("argument with a name is required", "argument")

    async def execute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        ref = params["ref"]
        argument = params["argument"]
        value = argument.get("value") or ""

        if ref["type"] == "ref/prompt":
            candidates = self.prompt_candidates(ref.get("name", ""), argument["name"], value)
        elif ref["type"] == "ref/resource":
            candidates = [resource.uri for resource in get_all_resources()] + EXTRA_RESOURCE_URIS
        else:
            raise MCPError(ErrorCode.INVALID_PARAMS, f"Unsupported reference type: {ref['type']}")

        values = filter_completions(candidates, value)
        return {
            "completion": {
                "values": values[:MAX_COMPLETION_VALUES],
                "total": len(values),
                "hasMore": len(values) > MAX_COMPLETION_VALUES,
            }
        }

    def prompt_candidates(self, prompt_name: str, argument_name: str, value: str) -> List[str]:
        specific = PROMPT_ARGUMENT_VALUES.get(prompt_name, {}).get(argument_name)
        if specific is not None:
            return list(specific)
        if argument_name in ID_ARGUMENTS:
            prefix = ID_ARGUMENTS[argument_name]
            candidates = [] if len(value) >= len(prefix) else [prefix]
            return candidates + [f"{prefix}{suffix}" for suffix in ("abc123", "def456", "ghi789")]
        return list(GENERIC_ARGUMENT_VALUES.get(argument_name, []))


def filter_completions(candidates: List[str], value: str) -> List[str]:
    """Unique candidates starting with ``value`` (case-insensitive), sorted."""
    wanted = value.lower()
    return sorted({candidate for candidate in candidates if candidate.lower().startswith(wanted)})


def create_prompt_handlers() -> Dict[str, PromptHandler]:
    """Handlers keyed by the method they serve."""
    handlers: List[PromptHandler] = [PromptsListHandler(), PromptsGetHandler(), CompletionHandler()]
    return {handler.method: handler for handler in handlers}
