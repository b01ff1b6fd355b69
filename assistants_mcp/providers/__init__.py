"""Remote API providers used by tool handlers."""

from .base import Provider
from .openai import OpenAIProvider, create_openai_registry
from .registry import ProviderRegistry

__all__ = ["Provider", "OpenAIProvider", "ProviderRegistry", "create_openai_registry"]
