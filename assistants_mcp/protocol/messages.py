"""MCP message types and JSON-RPC 2.0 protocol definitions."""

from enum import IntEnum
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field


PROTOCOL_VERSION = "2024-11-05"


class ErrorCode(IntEnum):
    """JSON-RPC 2.0 error codes."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class LegacyErrorCode(IntEnum):
    """Application error codes, carried in ``error.data.originalCode``."""
    UNAUTHORIZED = -32001
    FORBIDDEN = -32002
    NOT_FOUND = -32003
    RATE_LIMITED = -32004


class ErrorObject(BaseModel):
    """JSON-RPC 2.0 error object."""
    code: int
    message: str
    data: Optional[Dict[str, Any]] = None


class MCPMessage(BaseModel):
    """Base MCP message."""
    jsonrpc: str = Field(default="2.0", pattern=r"^2\.0$")


class MCPRequest(MCPMessage):
    """JSON-RPC 2.0 request message."""
    id: Optional[Union[int, str]] = None
    method: str
    params: Dict[str, Any] = Field(default_factory=dict)


class MCPResponse(MCPMessage):
    """JSON-RPC 2.0 response message."""
    id: Optional[Union[int, str]] = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[ErrorObject] = None

    def model_post_init(self, __context: Any) -> None:
        """Validate that either result or error is present, but not both."""
        if self.result is None and self.error is None:
            raise ValueError("Either 'result' or 'error' must be present")
        if self.result is not None and self.error is not None:
            raise ValueError("Both 'result' and 'error' cannot be present")

    def to_wire(self) -> Dict[str, Any]:
        """Dump the response keeping ``id`` even when it is null."""
        payload: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result
        return payload


# MCP-specific method names
class MCPMethods:
    """Standard MCP method names."""
    INITIALIZE = "initialize"

    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"

    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"

    PROMPTS_LIST = "prompts/list"
    PROMPTS_GET = "prompts/get"

    COMPLETION_COMPLETE = "completion/complete"

    NOTIFICATION_PREFIX = "notifications/"


class ToolDefinition(BaseModel):
    """Tool definition schema."""
    name: str
    title: str
    description: str
    inputSchema: Dict[str, Any] = Field(alias="input_schema")
    annotations: Optional[Dict[str, Any]] = None

    model_config = {"populate_by_name": True}


class ResourceDefinition(BaseModel):
    """Resource definition schema."""
    uri: str
    name: str
    description: Optional[str] = None
    mimeType: Optional[str] = Field(default=None, alias="mime_type")

    model_config = {"populate_by_name": True}


class PromptArgument(BaseModel):
    """Prompt argument schema."""
    name: str
    description: str = ""
    required: bool = False


class PromptDefinition(BaseModel):
    """Prompt definition schema."""
    name: str
    title: str
    description: str
    arguments: List[PromptArgument] = Field(default_factory=list)


class ServerCapabilities(BaseModel):
    """Server capabilities schema."""
    tools: Optional[Dict[str, Any]] = None
    resources: Optional[Dict[str, Any]] = None
    prompts: Optional[Dict[str, Any]] = None
    completions: Optional[Dict[str, Any]] = None


class InitializeResult(BaseModel):
    """Initialize response result."""
    protocolVersion: str = Field(alias="protocol_version")
    capabilities: ServerCapabilities
    serverInfo: Dict[str, str] = Field(alias="server_info")

    model_config = {"populate_by_name": True}


class ToolCallParams(BaseModel):
    """Tool call request parameters."""
    name: str = Field(min_length=1)
    arguments: Optional[Dict[str, Any]] = None


class ToolCallResult(BaseModel):
    """Tool call response result."""
    content: List[Dict[str, Any]]
    isError: bool = Field(default=False, alias="is_error")

    model_config = {"populate_by_name": True}
