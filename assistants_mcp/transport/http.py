"""HTTP transport adapter and ASGI application for MCP."""

import json
from typing import Any, Callable, Dict, Optional
import structlog
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from ..protocol.errors import MCPError, RequestId, create_enhanced_error, to_mcp_error
from ..protocol.messages import ErrorCode, LegacyErrorCode, MCPMethods, MCPRequest
from ..providers.base import Provider
from .base import AdapterCapability, TransportAdapter, TransportError

logger = structlog.get_logger()

DEFAULT_MIN_API_KEY_LENGTH = 10
EXPECTED_PATH_FORMAT = "/mcp/{api-key}"

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class HTTPTransportAdapter(TransportAdapter):
    """JSON-RPC over HTTP POST to ``/mcp/{api-key}``."""

    name = "http"
    capabilities = frozenset({AdapterCapability.FORMAT_ERROR})

    def __init__(self, min_api_key_length: int = DEFAULT_MIN_API_KEY_LENGTH, debug: bool = False):
        self.min_api_key_length = min_api_key_length
        self.debug = debug

    def extract_api_key(self, path: str) -> str:
        """Pull the credential out of a ``/mcp/{key}`` path."""
        segments = path.strip("/").split("/")
        if len(segments) != 2 or segments[0] != "mcp" or not segments[1]:
            raise TransportError(
                ErrorCode.INVALID_REQUEST,
                f"Invalid URL format. Expected {EXPECTED_PATH_FORMAT}",
                {"receivedPath": path, "expectedFormat": EXPECTED_PATH_FORMAT},
                status_code=400,
            )

        api_key = segments[1]
        if len(api_key) < self.min_api_key_length:
            error = create_enhanced_error(
                LegacyErrorCode.UNAUTHORIZED,
                f"Invalid API key: must be at least {self.min_api_key_length} characters",
                {"keyLength": len(api_key), "minLength": self.min_api_key_length},
            )
            raise TransportError.from_error(error, status_code=401)
        return api_key

    def parse_request(self, body: bytes) -> MCPRequest:
        """Decode and shape-check a JSON-RPC request body."""
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise TransportError(
                ErrorCode.PARSE_ERROR, "Parse error", {"details": str(e)}, status_code=400
            ) from e

        if not isinstance(payload, dict):
            raise TransportError(
                ErrorCode.INVALID_REQUEST, "Invalid Request: expected a JSON object", status_code=400
            )

        request_id = payload.get("id")
        if not isinstance(request_id, (int, str)) or isinstance(request_id, bool):
            request_id = None

        missing = [field for field in ("jsonrpc", "method") if field not in payload]
        invalid = []
        if "jsonrpc" in payload and payload["jsonrpc"] != "2.0":
            invalid.append("jsonrpc")
        if "method" in payload and not isinstance(payload["method"], str):
            invalid.append("method")
        if missing or invalid:
            raise TransportError(
                ErrorCode.INVALID_REQUEST,
                f"Invalid Request: missing or invalid fields: {', '.join(missing + invalid)}",
                {"missingFields": missing, "invalidFields": invalid},
                status_code=400,
                request_id=request_id,
            )

        try:
            return MCPRequest.model_validate(payload)
        except ValidationError as e:
            raise TransportError(
                ErrorCode.INVALID_REQUEST,
                "Invalid Request",
                {"details": e.errors(include_url=False, include_input=False)},
                status_code=400,
                request_id=request_id,
            ) from e

    def format_error(self, error: MCPError, request_id: RequestId) -> Dict[str, Any]:
        if self.debug:
            logger.debug("Request failed", code=error.code, error=error.message)
        return super().format_error(error, request_id)

    def create_response(self, payload: Dict[str, Any], status_code: int = 200) -> Response:
        return JSONResponse(payload, status_code=status_code, headers=CORS_HEADERS)

    def create_cors_response(self) -> Response:
        return Response(status_code=200, headers=PREFLIGHT_HEADERS)

    def create_method_not_allowed_response(self) -> Response:
        return PlainTextResponse(
            "Method not allowed",
            status_code=405,
            headers={**CORS_HEADERS, "Allow": "POST, OPTIONS"},
        )

    def create_error_response(
        self,
        error: MCPError,
        request_id: RequestId = None,
        status_code: int = 400,
    ) -> Response:
        return self.create_response(self.format_error(error, request_id), status_code)


ProxyTransportAdapter = HTTPTransportAdapter


def create_app(
    router,
    provider_factory: Callable[[str], Provider],
    adapter: Optional[HTTPTransportAdapter] = None,
    debug: bool = False,
) -> Starlette:
    """Build the ASGI application serving ``router``.

    ``provider_factory`` builds a provider for the API key found in the
    request path. The provider lives for one request.
    """
    adapter = adapter or HTTPTransportAdapter(debug=debug)

    async def handle(request: Request) -> Response:
        if request.method == "OPTIONS":
            return adapter.create_cors_response()
        if request.method != "POST":
            return adapter.create_method_not_allowed_response()

        try:
            api_key = adapter.extract_api_key(request.url.path)
            mcp_request = adapter.parse_request(await request.body())
        except TransportError as e:
            logger.warning("Rejected HTTP request", code=e.code, error=e.message, status=e.status_code)
            return adapter.create_error_response(e, e.request_id, e.status_code)

        if mcp_request.id is None and mcp_request.method.startswith(MCPMethods.NOTIFICATION_PREFIX):
            return Response(status_code=202, headers=CORS_HEADERS)

        try:
            async with provider_factory(api_key) as provider:
                payload = await router.handle_request(mcp_request, provider=provider)
        except Exception as e:
            logger.exception("Unhandled error serving HTTP request", method=mcp_request.method)
            error = to_mcp_error(e, mcp_request.id, debug)
            if not isinstance(e, MCPError):
                error = MCPError(ErrorCode.INTERNAL_ERROR, "Internal error", error.data)
            return adapter.create_error_response(error, mcp_request.id, 500)

        return adapter.create_response(payload)

    return Starlette(debug=debug, routes=[Route("/{path:path}", handle, methods=ALL_METHODS)])
