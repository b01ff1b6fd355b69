"""Protocol router: dispatches MCP requests by method."""

import json
import traceback
from typing import Any, Awaitable, Callable, Dict, List, Optional
import structlog
from prometheus_client import Counter, Histogram
from pydantic import ValidationError

from ..config import ServerConfig
from ..pagination import DEFAULT_LIMIT, create_pagination_metadata, paginate
from ..prompts import PromptHandler, create_prompt_handlers
from ..providers import Provider, ProviderRegistry, create_openai_registry
from ..resources import get_all_resources, get_resource, get_resource_content
from ..tools import ToolContext, ToolRegistry, create_tool_handlers, generate_tool_definitions
from ..transport.base import AdapterCapability, TransportAdapter
from .errors import (
    MCPError,
    RequestId,
    create_enhanced_error,
    error_response,
    success_response,
    to_mcp_error,
)
from .messages import (
    PROTOCOL_VERSION,
    ErrorCode,
    InitializeResult,
    LegacyErrorCode,
    MCPMethods,
    MCPRequest,
    ToolCallParams,
    ToolCallResult,
)

logger = structlog.get_logger()

# Metrics
request_count = Counter('mcp_requests_total', 'Total MCP requests', ['method', 'status'])
request_duration = Histogram('mcp_request_duration_seconds', 'Request duration', ['method'])
tool_calls = Counter('mcp_tool_calls_total', 'Total tool calls', ['tool', 'status'])
tool_duration = Histogram('mcp_tool_duration_seconds', 'Tool execution duration', ['tool'])

MethodHandler = Callable[[MCPRequest, Optional[Provider]], Awaitable[Dict[str, Any]]]

DELEGATED_HANDLER_LABELS = {
    MCPMethods.PROMPTS_LIST: "Prompts list",
    MCPMethods.PROMPTS_GET: "Prompts get",
    MCPMethods.COMPLETION_COMPLETE: "Completion",
}


class ProtocolRouter:
    """Routes JSON-RPC requests to the MCP method handlers.

    One router serves every request of a process. Nothing call-specific is
    stored on it: the provider for a request is passed to
    ``handle_request`` and reaches tool handlers through a fresh
    ``ToolContext``.
    """

    def __init__(
        self,
        config: ServerConfig,
        adapter: TransportAdapter,
        provider_registry: Optional[ProviderRegistry] = None,
        tool_registry: Optional[ToolRegistry] = None,
        prompt_handlers: Optional[Dict[str, PromptHandler]] = None,
    ):
        self.config = config
        self.debug = config.debug
        self.adapter = adapter
        self.provider_registry = provider_registry

        if tool_registry is None:
            tool_registry = ToolRegistry()
            tool_registry.register_batch(create_tool_handlers())
        self.tool_registry = tool_registry
        self.prompt_handlers = create_prompt_handlers() if prompt_handlers is None else prompt_handlers

        self._initialized = False
        self._methods: Dict[str, MethodHandler] = {
            MCPMethods.INITIALIZE: self._handle_initialize,
            MCPMethods.TOOLS_LIST: self._handle_tools_list,
            MCPMethods.TOOLS_CALL: self._handle_tools_call,
            MCPMethods.RESOURCES_LIST: self._handle_resources_list,
            MCPMethods.RESOURCES_READ: self._handle_resources_read,
            MCPMethods.PROMPTS_LIST: self._handle_delegated,
            MCPMethods.PROMPTS_GET: self._handle_delegated,
            MCPMethods.COMPLETION_COMPLETE: self._handle_delegated,
        }

        logger.info(
            "Protocol router ready",
            transport=adapter.name,
            tools=len(self.tool_registry),
            strict_initialization=config.strict_initialization,
        )

    @classmethod
    def with_provider_registry(
        cls,
        config: ServerConfig,
        registry: ProviderRegistry,
        adapter: TransportAdapter,
    ) -> "ProtocolRouter":
        """Router whose tools use the default provider of ``registry``."""
        return cls(config, adapter, provider_registry=registry)

    @classmethod
    def with_api_key(
        cls,
        config: ServerConfig,
        api_key: str,
        adapter: TransportAdapter,
    ) -> "ProtocolRouter":
        """Router backed by a single OpenAI provider for ``api_key``."""
        registry = create_openai_registry(api_key, config.provider.base_url, config.provider.model_dump())
        return cls(config, adapter, provider_registry=registry)

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def methods(self) -> List[str]:
        return sorted(self._methods)

    @staticmethod
    def requires_initialization(method: str) -> bool:
        """Whether ``method`` may only run after a successful initialize."""
        return method != MCPMethods.INITIALIZE and not method.startswith(MCPMethods.NOTIFICATION_PREFIX)

    async def handle_request(
        self,
        request: MCPRequest,
        provider: Optional[Provider] = None,
    ) -> Dict[str, Any]:
        """Handle one request and return the response envelope. Never raises."""
        method_label = request.method if request.method in self._methods else "unknown"

        with request_duration.labels(method=method_label).time():
            try:
                if self.adapter.supports(AdapterCapability.PREPROCESS):
                    request = await self.adapter.preprocess(request)

                logger.debug("Request received", method=request.method, request_id=request.id)
                result = await self._dispatch(request, provider)
                response = success_response(request.id, result)

                if self.adapter.supports(AdapterCapability.POSTPROCESS):
                    response = await self.adapter.postprocess(response)

                request_count.labels(method=method_label, status='success').inc()
                return response

            except Exception as e:
                request_count.labels(method=method_label, status='error').inc()
                return self.handle_error(e, request.id)

    def handle_error(self, error: BaseException, request_id: RequestId) -> Dict[str, Any]:
        """Render any exception as a JSON-RPC error response."""
        mcp_error = to_mcp_error(error, request_id, self.debug)
        if isinstance(error, MCPError):
            logger.warning("Request failed", code=mcp_error.code, error=mcp_error.message, request_id=request_id)
        else:
            logger.error(
                "Unexpected error handling request",
                error=str(error),
                type=type(error).__name__,
                request_id=request_id,
                exc_info=error,
            )

        try:
            if self.adapter.supports(AdapterCapability.FORMAT_ERROR):
                return self.adapter.format_error(mcp_error, request_id)
        except Exception as e:
            logger.error("Adapter failed to format error", error=str(e))
        return error_response(request_id, mcp_error.code, mcp_error.message, mcp_error.data)

    async def _dispatch(self, request: MCPRequest, provider: Optional[Provider]) -> Dict[str, Any]:
        handler = self._methods.get(request.method)
        if handler is None:
            raise MCPError(
                ErrorCode.METHOD_NOT_FOUND,
                f"Method not found: {request.method}",
                {"method": request.method, "supportedMethods": self.methods},
            )

        if (
            self.config.strict_initialization
            and not self._initialized
            and self.requires_initialization(request.method)
        ):
            raise MCPError(
                ErrorCode.INVALID_REQUEST,
                "Server not initialized",
                {"method": request.method, "hint": "Send an initialize request first"},
            )

        return await handler(request, provider)

    async def _handle_initialize(self, request: MCPRequest, provider: Optional[Provider]) -> Dict[str, Any]:
        logger.info(
            "Client initializing",
            protocol_version=request.params.get("protocolVersion"),
            client_info=request.params.get("clientInfo"),
        )
        self._initialized = True

        result = InitializeResult(
            protocol_version=PROTOCOL_VERSION,
            capabilities=self.config.capabilities.to_capabilities(),
            server_info={"name": self.config.server_name, "version": self.config.server_version},
        )
        return result.model_dump(exclude_none=True)

    async def _handle_tools_list(self, request: MCPRequest, provider: Optional[Provider]) -> Dict[str, Any]:
        cursor = request.params.get("cursor")
        definitions = generate_tool_definitions(self.tool_registry)
        page = paginate(definitions, cursor=cursor, limit=DEFAULT_LIMIT)
        logger.debug("Tools page", **create_pagination_metadata(cursor, DEFAULT_LIMIT, page))

        result: Dict[str, Any] = {"tools": page.items}
        if page.next_cursor:
            result["nextCursor"] = page.next_cursor
        return result

    async def _handle_tools_call(self, request: MCPRequest, provider: Optional[Provider]) -> Dict[str, Any]:
        try:
            params = ToolCallParams.model_validate(request.params)
        except ValidationError as e:
            raise MCPError(
                ErrorCode.INVALID_PARAMS,
                "Invalid tool call parameters: name must be a non-empty string and arguments an object",
                {"details": e.errors(include_url=False, include_input=False)},
            ) from e
        name = params.name
        arguments = params.arguments or {}

        if provider is None and self.provider_registry is not None:
            provider = self.provider_registry.get_default_provider()
        context = ToolContext(provider=provider, request_id=request.id)

        tool_label = name if self.tool_registry.is_registered(name) else "unknown"
        logger.info("Tool call requested", tool=name, request_id=request.id)
        try:
            with tool_duration.labels(tool=tool_label).time():
                result = await self.tool_registry.execute(name, arguments, context)
        except Exception as e:
            tool_calls.labels(tool=tool_label, status='error').inc()
            logger.warning("Tool call failed", tool=name, error=str(e), request_id=request.id)
            return self._tool_error_result(name, e)

        tool_calls.labels(tool=tool_label, status='success').inc()
        text = json.dumps(result, indent=2 if self.debug else None, default=str)
        return ToolCallResult(content=[{"type": "text", "text": text}]).model_dump(exclude_defaults=True)

    def _tool_error_result(self, name: str, error: BaseException) -> Dict[str, Any]:
        """Tool failures are reported as a result flagged with isError."""
        message = error.message if isinstance(error, MCPError) else str(error)
        if self.debug:
            stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
            text = f"Error in {name}: {message}\nStack: {stack}"
        else:
            text = f"Error: {message}"

        result = ToolCallResult(
            content=[{"type": "text", "text": text, "isError": True}],
            is_error=True,
        )
        return result.model_dump()

    async def _handle_resources_list(self, request: MCPRequest, provider: Optional[Provider]) -> Dict[str, Any]:
        cursor = request.params.get("cursor")
        resources = [resource.model_dump(exclude_none=True) for resource in get_all_resources()]
        page = paginate(resources, cursor=cursor, limit=DEFAULT_LIMIT)
        logger.debug("Resources page", **create_pagination_metadata(cursor, DEFAULT_LIMIT, page))

        result: Dict[str, Any] = {"resources": page.items}
        if page.next_cursor:
            result["nextCursor"] = page.next_cursor
        return result

    async def _handle_resources_read(self, request: MCPRequest, provider: Optional[Provider]) -> Dict[str, Any]:
        uri = request.params.get("uri")
        if not isinstance(uri, str) or not uri:
            raise MCPError(
                ErrorCode.INVALID_PARAMS,
                "Resource URI is required and must be a string",
                {"parameter": "uri"},
            )

        resource = get_resource(uri)
        if resource is None:
            raise create_enhanced_error(
                LegacyErrorCode.NOT_FOUND,
                f"Resource not found: {uri}",
                {
                    "resourceUri": uri,
                    "availableResources": [item.uri for item in get_all_resources()],
                },
            )

        content = get_resource_content(uri)
        text = content if isinstance(content, str) else json.dumps(content, indent=2)
        return {
            "contents": [
                {
                    "uri": resource.uri,
                    "name": resource.name,
                    "mimeType": resource.mimeType,
                    "text": text,
                }
            ]
        }

    async def _handle_delegated(self, request: MCPRequest, provider: Optional[Provider]) -> Dict[str, Any]:
        handler = self.prompt_handlers.get(request.method)
        if handler is None:
            label = DELEGATED_HANDLER_LABELS.get(request.method, request.method)
            raise MCPError(ErrorCode.INTERNAL_ERROR, f"{label} handler not found")
        return await handler.handle(request.params)
