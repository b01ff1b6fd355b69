"""Base transport adapter interface for MCP communication."""

from enum import Enum
from typing import Any, Dict, FrozenSet, Optional
import structlog

from ..protocol.errors import MCPError, RequestId, error_response
from ..protocol.messages import MCPRequest

logger = structlog.get_logger()


class TransportError(MCPError):
    """An MCPError raised at the channel boundary, before dispatch.

    Carries the channel status to answer with (HTTP status for the HTTP
    adapter) and whatever request id could be recovered from the input.
    """

    def __init__(
        self,
        code: int,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
        request_id: RequestId = None,
    ):
        super().__init__(code, message, data)
        self.status_code = status_code
        self.request_id = request_id

    @classmethod
    def from_error(cls, error: MCPError, status_code: int, request_id: RequestId = None) -> "TransportError":
        return cls(error.code, error.message, error.data, status_code, request_id)


class AdapterCapability(str, Enum):
    """Optional hooks a transport adapter may implement."""
    PREPROCESS = "preprocess"
    POSTPROCESS = "postprocess"
    FORMAT_ERROR = "format_error"


class TransportAdapter:
    """Translate between protocol values and a concrete I/O channel.

    Every hook is optional. An adapter lists the hooks it implements in
    ``capabilities`` and the router only calls hooks the adapter supports.
    """

    name: str = "transport"
    capabilities: FrozenSet[AdapterCapability] = frozenset()

    def supports(self, capability: AdapterCapability) -> bool:
        return capability in self.capabilities

    async def preprocess(self, request: MCPRequest) -> MCPRequest:
        """Adjust or reject a request before dispatch."""
        return request

    async def postprocess(self, response: Dict[str, Any]) -> Dict[str, Any]:
        """Adjust a response envelope before it is written."""
        return response

    def format_error(self, error: MCPError, request_id: RequestId) -> Dict[str, Any]:
        """Render an error as a JSON-RPC error envelope."""
        return error_response(request_id, error.code, error.message, error.data)
