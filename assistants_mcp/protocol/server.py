"""MCP server: runs the protocol router over stdio or HTTP."""

from typing import Optional
import structlog
import uvicorn
from prometheus_client import start_http_server
from starlette.applications import Starlette

from ..config import ServerConfig
from ..providers import OpenAIProvider, Provider, ProviderRegistry
from ..transport import HTTPTransportAdapter, StdioTransportAdapter, create_app
from .router import ProtocolRouter

logger = structlog.get_logger()


class MCPServer:
    """Assistants MCP gateway server."""

    def __init__(self, config: ServerConfig):
        self.config = config
        self.router: Optional[ProtocolRouter] = None
        self._provider_registry: Optional[ProviderRegistry] = None
        self._stdio: Optional[StdioTransportAdapter] = None
        self._uvicorn: Optional[uvicorn.Server] = None
        self._running = False

        # Start metrics server if configured
        if config.metrics_enabled and config.metrics_port:
            start_http_server(config.metrics_port)
            logger.info("Metrics server started", port=config.metrics_port)

    @property
    def running(self) -> bool:
        return self._running

    def create_provider(self, api_key: str) -> Provider:
        """Provider for one HTTP request's API key."""
        return OpenAIProvider(api_key, self.config.provider.base_url, self.config.provider.model_dump())

    def create_http_app(self) -> Starlette:
        adapter = HTTPTransportAdapter(
            min_api_key_length=self.config.transport.min_api_key_length,
            debug=self.config.debug,
        )
        self._provider_registry = ProviderRegistry()
        self.router = ProtocolRouter.with_provider_registry(self.config, self._provider_registry, adapter)
        return create_app(self.router, self.create_provider, adapter, debug=self.config.debug)

    def create_stdio_router(self) -> ProtocolRouter:
        self._stdio = StdioTransportAdapter(
            debug=self.config.debug,
            max_message_bytes=self.config.transport.max_message_bytes,
        )
        if self.config.openai_api_key:
            self.router = ProtocolRouter.with_api_key(self.config, self.config.openai_api_key, self._stdio)
            self._provider_registry = self.router.provider_registry
        else:
            logger.warning("No OpenAI API key configured; tool calls will fail until one is set")
            self._provider_registry = ProviderRegistry()
            self.router = ProtocolRouter.with_provider_registry(self.config, self._provider_registry, self._stdio)
        return self.router

    async def run_forever(self) -> None:
        """Serve until the input closes or a shutdown signal arrives."""
        self._running = True
        transport_type = self.config.transport.type
        logger.info(
            "MCP server starting",
            server_name=self.config.server_name,
            version=self.config.server_version,
            transport=transport_type,
        )

        try:
            if transport_type == "http":
                app = self.create_http_app()
                uvicorn_config = uvicorn.Config(
                    app,
                    host=self.config.transport.host,
                    port=self.config.transport.port,
                    log_level=self.config.log_level.lower(),
                    access_log=False,
                    log_config=None,
                )
                self._uvicorn = uvicorn.Server(uvicorn_config)
                await self._uvicorn.serve()
            else:
                router = self.create_stdio_router()
                await self._stdio.serve(router.handle_request)
        finally:
            self._running = False

    async def stop(self) -> None:
        """Stop serving and release provider connections."""
        if self._stdio is not None:
            self._stdio.stop()
        if self._uvicorn is not None:
            self._uvicorn.should_exit = True
        if self._provider_registry is not None:
            await self._provider_registry.aclose()
            self._provider_registry = None
        logger.info("MCP server stopped")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.stop()
