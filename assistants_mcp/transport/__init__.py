"""Transport adapters for MCP communication."""

from .base import AdapterCapability, TransportAdapter, TransportError
from .http import HTTPTransportAdapter, ProxyTransportAdapter, create_app
from .stdio import LocalDevTransportAdapter, StdioTransportAdapter

__all__ = [
    "AdapterCapability",
    "HTTPTransportAdapter",
    "LocalDevTransportAdapter",
    "ProxyTransportAdapter",
    "StdioTransportAdapter",
    "TransportAdapter",
    "TransportError",
    "create_app",
]
