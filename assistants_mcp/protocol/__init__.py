"""MCP protocol: message models, error taxonomy and method routing.

The router lives in ``assistants_mcp.protocol.router`` and is not imported
here, so the message and error modules stay importable from every layer.
"""

from .errors import (
    MCPError,
    RegistrationError,
    create_enhanced_error,
    error_response,
    success_response,
    to_error_response,
    to_mcp_error,
)
from .messages import PROTOCOL_VERSION, ErrorCode, LegacyErrorCode, MCPMethods, MCPRequest, MCPResponse

__all__ = [
    "PROTOCOL_VERSION",
    "ErrorCode",
    "LegacyErrorCode",
    "MCPError",
    "MCPMethods",
    "MCPRequest",
    "MCPResponse",
    "RegistrationError",
    "create_enhanced_error",
    "error_response",
    "success_response",
    "to_error_response",
    "to_mcp_error",
]
