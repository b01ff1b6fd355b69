"""Base tool handler interface and registry."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Union
import structlog

from ..protocol.errors import MCPError, RegistrationError
from ..protocol.messages import ErrorCode
from ..providers.base import Provider

logger = structlog.get_logger()

SENSITIVE_FIELDS = ("api_key", "token", "password", "secret")
REDACTED = "[REDACTED]"
MAX_SUGGESTIONS = 3


def sanitize_arguments(arguments: Any) -> Any:
    """Return a copy of ``arguments`` with secret-looking fields redacted."""
    if isinstance(arguments, dict):
        sanitized = {}
        for key, value in arguments.items():
            lowered = str(key).lower()
            if any(field in lowered for field in SENSITIVE_FIELDS):
                sanitized[key] = REDACTED
            else:
                sanitized[key] = sanitize_arguments(value)
        return sanitized
    if isinstance(arguments, list):
        return [sanitize_arguments(item) for item in arguments]
    return arguments


@dataclass(frozen=True)
class ToolContext:
    """Per-call context handed to a tool handler."""
    provider: Optional[Provider]
    tool_name: str = ""
    request_id: Optional[Union[int, str]] = None


class ToolHandler(ABC):
    """Abstract base class for MCP tool handlers.

    Handlers are stateless: everything call-specific arrives through the
    ``ToolContext`` argument, so one instance can serve concurrent calls.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name."""
        pass

    @property
    @abstractmethod
    def category(self) -> str:
        """Tool category used for registry statistics."""
        pass

    def validate(self, arguments: Dict[str, Any]) -> None:
        """Validate input arguments, raising MCPError on failure."""
        pass

    @abstractmethod
    async def execute(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        """Perform the tool operation."""
        pass

    async def handle(self, arguments: Dict[str, Any], context: ToolContext) -> Any:
        """Validate then execute, logging failures."""
        try:
            self.validate(arguments)
            return await self.execute(arguments, context)
        except Exception as e:
            logger.error(
                "Tool handler failed",
                tool=self.name,
                category=self.category,
                request_id=context.request_id,
                error=str(e),
                arguments=sanitize_arguments(arguments),
            )
            raise

    def require_provider(self, context: ToolContext) -> Provider:
        if context.provider is None:
            raise MCPError(ErrorCode.INTERNAL_ERROR, f"[{self.name}] No provider available")
        return context.provider

    def create_validation_error(self, message: str, param_name: Optional[str] = None) -> MCPError:
        if param_name:
            return MCPError(ErrorCode.INVALID_PARAMS, f"[{self.name}] Parameter '{param_name}': {message}")
        return MCPError(ErrorCode.INVALID_PARAMS, f"[{self.name}] {message}")

    def create_execution_error(self, message: str, original: Optional[BaseException] = None) -> MCPError:
        data = None
        if original is not None:
            data = {"originalError": {"type": type(original).__name__, "message": str(original)}}
        return MCPError(ErrorCode.INTERNAL_ERROR, f"[{self.name}] Execution failed: {message}", data)


class ToolRegistry:
    """Registry mapping tool names to handlers."""

    def __init__(self):
        self._handlers: Dict[str, ToolHandler] = {}

    def __len__(self) -> int:
        return len(self._handlers)

    def register(self, name: str, handler: ToolHandler) -> None:
        """Register a handler under ``name``.

        Both the duplicate check and the name cross-check run before the
        store is touched, so a failed call leaves the registry unchanged.
        """
        if name in self._handlers:
            raise RegistrationError(
                f"Tool '{name}' is already registered. Cannot register duplicate handlers.",
                {"toolName": name},
            )
        if handler.name != name:
            raise RegistrationError(
                f"Handler tool name '{handler.name}' does not match registration name '{name}'.",
                {"toolName": name, "handlerName": handler.name},
            )

        self._handlers[name] = handler
        logger.debug("Tool registered", tool=name, category=handler.category, total=len(self._handlers))

    def register_batch(self, handlers: Mapping[str, ToolHandler]) -> None:
        """Register several handlers, stopping at the first failure."""
        for name, handler in handlers.items():
            self.register(name, handler)

    def unregister(self, name: str) -> bool:
        removed = self._handlers.pop(name, None) is not None
        if removed:
            logger.debug("Tool unregistered", tool=name)
        return removed

    def is_registered(self, name: str) -> bool:
        return name in self._handlers

    def get_handler(self, name: str) -> Optional[ToolHandler]:
        return self._handlers.get(name)

    def get_registered_tools(self) -> List[str]:
        """Registered tool names in lexical order."""
        return sorted(self._handlers)

    def get_stats(self) -> Dict[str, Any]:
        by_category: Dict[str, int] = {}
        for handler in self._handlers.values():
            by_category[handler.category] = by_category.get(handler.category, 0) + 1
        return {
            "totalHandlers": len(self._handlers),
            "handlersByCategory": by_category,
            "registeredTools": self.get_registered_tools(),
        }

    def clear(self) -> None:
        """Drop every handler. Only meant for tests."""
        count = len(self._handlers)
        self._handlers.clear()
        logger.debug("Tool registry cleared", removed=count)

    async def execute(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]],
        context: ToolContext,
    ) -> Any:
        """Run the handler registered under ``name``."""
        handler = self._handlers.get(name)
        if handler is None:
            raise self._unknown_tool_error(name)

        arguments = arguments or {}
        call_context = replace(context, tool_name=name)
        try:
            return await handler.handle(arguments, call_context)
        except MCPError:
            raise
        except Exception as e:
            raise MCPError(
                ErrorCode.INTERNAL_ERROR,
                f"Tool execution failed for '{name}': {e}",
                {
                    "originalError": {"type": type(e).__name__, "message": str(e)},
                    "toolName": name,
                    "args": sanitize_arguments(arguments),
                },
            ) from e

    def _unknown_tool_error(self, name: str) -> MCPError:
        registered = self.get_registered_tools()
        if not registered:
            return MCPError(
                ErrorCode.METHOD_NOT_FOUND,
                f"Tool not found: '{name}'. No tools are currently registered.",
            )

        suggestions = find_similar_tools(name, registered)
        suggestion_text = f" Did you mean: {', '.join(suggestions)}?" if suggestions else ""
        return MCPError(
            ErrorCode.METHOD_NOT_FOUND,
            f"Tool not found: '{name}'.{suggestion_text} Available tools: {', '.join(registered)}.",
            {"toolName": name, "suggestions": suggestions, "availableTools": registered},
        )


def find_similar_tools(name: str, candidates: List[str], limit: int = MAX_SUGGESTIONS) -> List[str]:
    """Suggest tool names sharing a prefix with, or containing, ``name``."""
    wanted = name.lower()
    if not wanted:
        return []

    prefix_matches = []
    substring_matches = []
    for candidate in candidates:
        lowered = candidate.lower()
        if lowered.startswith(wanted) or wanted.startswith(lowered):
            prefix_matches.append(candidate)
        elif wanted in lowered or lowered in wanted:
            substring_matches.append(candidate)

    return (prefix_matches + substring_matches)[:limit]
