"""OpenAI Assistants MCP gateway."""

__version__ = "3.0.0"
