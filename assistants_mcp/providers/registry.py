"""Registry of configured providers."""

from typing import Dict, List, Optional
import structlog

from ..protocol.errors import MCPError
from ..protocol.messages import ErrorCode
from .base import Provider

logger = structlog.get_logger()


class ProviderRegistry:
    """Keeps provider instances by name and tracks the default one."""

    def __init__(self, default_provider: Optional[str] = None):
        self._providers: Dict[str, Provider] = {}
        self._default = default_provider

    def register(self, name: str, provider: Provider, default: bool = False) -> None:
        """Register a provider instance."""
        if name in self._providers:
            raise MCPError(
                ErrorCode.INTERNAL_ERROR,
                f"Provider '{name}' is already registered",
            )
        self._providers[name] = provider
        if default or self._default is None:
            self._default = name
        logger.debug("Provider registered", provider=name, default=self._default == name)

    def get(self, name: str) -> Optional[Provider]:
        return self._providers.get(name)

    def get_default_provider(self) -> Optional[Provider]:
        """Return the default provider, or None when nothing is registered."""
        if self._default is None:
            return None
        return self._providers.get(self._default)

    def set_default(self, name: str) -> None:
        if name not in self._providers:
            raise MCPError(
                ErrorCode.INVALID_PARAMS,
                f"Unknown provider: '{name}'",
                {"availableProviders": self.names()},
            )
        self._default = name

    def names(self) -> List[str]:
        return sorted(self._providers)

    async def aclose(self) -> None:
        """Close every registered provider."""
        for provider in self._providers.values():
            await provider.aclose()
