"""Error taxonomy and JSON-RPC error envelopes."""

import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from .messages import ErrorCode, ErrorObject, LegacyErrorCode, MCPResponse

RequestId = Optional[Union[int, str]]

# Legacy application codes travel in error.data; the top-level code is a standard one.
ERROR_CODE_MAPPING: Dict[int, Dict[str, Any]] = {
    LegacyErrorCode.UNAUTHORIZED: {
        "standard_code": ErrorCode.INTERNAL_ERROR,
        "category": "authentication",
        "documentation": "https://platform.openai.com/docs/api-reference/authentication",
    },
    LegacyErrorCode.FORBIDDEN: {
        "standard_code": ErrorCode.INTERNAL_ERROR,
        "category": "authorization",
        "documentation": "https://platform.openai.com/docs/guides/error-codes",
    },
    LegacyErrorCode.NOT_FOUND: {
        "standard_code": ErrorCode.INVALID_PARAMS,
        "category": "resource",
        "documentation": "https://platform.openai.com/docs/api-reference/assistants",
    },
    LegacyErrorCode.RATE_LIMITED: {
        "standard_code": ErrorCode.INVALID_PARAMS,
        "category": "rate_limiting",
        "documentation": "https://platform.openai.com/docs/guides/rate-limits",
    },
}


class MCPError(Exception):
    """Typed protocol error with a JSON-RPC code and optional diagnostic data."""

    def __init__(self, code: int, message: str, data: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = int(code)
        self.message = message
        self.data = data

    def with_context(self, **context: Any) -> "MCPError":
        """Return a copy of this error with extra diagnostic fields merged into data."""
        data = dict(self.data or {})
        data.update(context)
        error = type(self).__new__(type(self))
        MCPError.__init__(error, self.code, self.message, data)
        error.__cause__ = self
        return error

    def to_error_object(self) -> ErrorObject:
        return ErrorObject(code=self.code, message=self.message, data=self.data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"


class RegistrationError(MCPError):
    """Raised when a tool handler cannot be registered."""

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None):
        super().__init__(ErrorCode.INTERNAL_ERROR, message, data)


def create_enhanced_error(
    legacy_code: int,
    message: str,
    additional_data: Optional[Dict[str, Any]] = None,
) -> MCPError:
    """Create an error whose code is standard and whose data carries the legacy code."""
    mapping = ERROR_CODE_MAPPING.get(legacy_code)
    if mapping is None:
        return MCPError(legacy_code, message, additional_data)

    data = {
        "originalCode": int(legacy_code),
        "category": mapping["category"],
        "documentation": mapping["documentation"],
    }
    data.update(additional_data or {})
    return MCPError(mapping["standard_code"], message, data)


def format_provider_error(
    http_status: int,
    body: Any = None,
    context: Optional[str] = None,
) -> MCPError:
    """Translate a failed remote API response into an MCPError."""
    legacy_messages = {
        401: (LegacyErrorCode.UNAUTHORIZED, "Authentication failed. Please check your API key."),
        403: (LegacyErrorCode.FORBIDDEN, "Access forbidden. Please check your permissions."),
        404: (LegacyErrorCode.NOT_FOUND, "Resource not found. Please check the ID and try again."),
        429: (LegacyErrorCode.RATE_LIMITED, "Rate limit exceeded. Please wait and try again."),
    }
    data = {"httpStatus": http_status, "providerError": body, "context": context}

    if http_status not in legacy_messages:
        remote_message = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            remote_message = body["error"].get("message")
        return MCPError(
            ErrorCode.INTERNAL_ERROR,
            remote_message or f"HTTP {http_status}: Request failed",
            data,
        )

    legacy_code, message = legacy_messages[http_status]
    if http_status == 429:
        data["retryAfter"] = "60s"
    return create_enhanced_error(legacy_code, message, data)


def success_response(request_id: RequestId, result: Dict[str, Any]) -> Dict[str, Any]:
    """Build a JSON-RPC success envelope."""
    return MCPResponse(id=request_id, result=result).to_wire()


def error_response(
    request_id: RequestId,
    code: int,
    message: str,
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a JSON-RPC error envelope."""
    error = ErrorObject(code=int(code), message=message, data=data)
    return MCPResponse(id=request_id, error=error).to_wire()


def to_mcp_error(error: BaseException, request_id: RequestId = None, debug: bool = False) -> MCPError:
    """Normalize any exception into an MCPError."""
    if isinstance(error, MCPError):
        return error

    original: Dict[str, Any] = {"type": type(error).__name__, "message": str(error)}
    if debug:
        original["stack"] = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    return MCPError(
        ErrorCode.INTERNAL_ERROR,
        str(error) or "Unknown error",
        {
            "originalError": original,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "requestId": request_id,
        },
    )


def to_error_response(error: BaseException, request_id: RequestId = None, debug: bool = False) -> Dict[str, Any]:
    """Render any exception as a JSON-RPC error envelope."""
    mcp_error = to_mcp_error(error, request_id, debug)
    return error_response(request_id, mcp_error.code, mcp_error.message, mcp_error.data)
