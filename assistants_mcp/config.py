"""Configuration management for the Assistants MCP gateway."""

import json
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .protocol.messages import ServerCapabilities

TRANSPORT_TYPES = ("stdio", "http")


class CapabilitiesConfig(BaseModel):
    """Which MCP capabilities the server advertises."""
    tools: bool = True
    resources: bool = True
    prompts: bool = True
    completions: bool = True
    list_changed: bool = False
    subscribe: bool = False

    def to_capabilities(self) -> ServerCapabilities:
        """Build the capabilities object; disabled ones are omitted."""
        return ServerCapabilities(
            tools={"listChanged": self.list_changed} if self.tools else None,
            resources=(
                {"subscribe": self.subscribe, "listChanged": self.list_changed}
                if self.resources
                else None
            ),
            prompts={"listChanged": self.list_changed} if self.prompts else None,
            completions={} if self.completions else None,
        )


class ProviderConfig(BaseModel):
    """OpenAI provider configuration."""
    base_url: str = "https://api.openai.com/v1"
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    write_timeout: float = 10.0
    pool_timeout: float = 10.0
    max_connections: int = 100
    max_keepalive: int = 20


class TransportConfig(BaseModel):
    """Transport configuration."""
    type: str = "stdio"  # stdio, http
    host: str = "127.0.0.1"
    port: int = 8787
    min_api_key_length: int = 10
    # Longest accepted stdio line
    max_message_bytes: int = 16 * 1024 * 1024

    @field_validator("type")
    @classmethod
    def check_type(cls, value: str) -> str:
        value = value.lower()
        if value not in TRANSPORT_TYPES:
            raise ValueError(f"Unknown transport type: {value}. Expected one of {', '.join(TRANSPORT_TYPES)}")
        return value


class ServerConfig(BaseSettings):
    """Main server configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Server settings
    server_name: str = "openai-assistants-mcp"
    server_version: str = "3.0.0"
    debug: bool = False
    log_level: str = "info"

    # Reject methods other than initialize until the client has initialized
    strict_initialization: bool = False

    # Metrics
    metrics_enabled: bool = False
    metrics_port: Optional[int] = None

    # Credentials for the stdio transport; HTTP requests carry their own key
    openai_api_key: Optional[str] = None

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    capabilities: CapabilitiesConfig = Field(default_factory=CapabilitiesConfig)

    @classmethod
    def from_file(cls, config_file: str) -> "ServerConfig":
        """Load configuration from JSON file."""
        with open(config_file, "r") as f:
            config_data = json.load(f)
        return cls(**config_data)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        return cls()

    def to_dict(self, redact: bool = True) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        data = self.model_dump()
        if redact and data.get("openai_api_key"):
            data["openai_api_key"] = "[REDACTED]"
        return data


def load_config(
    config_file: Optional[str] = None,
    use_env: bool = True
) -> ServerConfig:
    """Load configuration from file or environment."""
    if config_file and not os.path.exists(config_file):
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    if config_file:
        config = ServerConfig.from_file(config_file)
    elif use_env:
        config = ServerConfig.from_env()
    else:
        config = ServerConfig(_env_file=None)

    if use_env:
        # Shorthand variables used by MCP client launch configurations
        if os.getenv("DEBUG"):
            config.debug = os.getenv("DEBUG", "false").lower() == "true"
        if os.getenv("TRANSPORT_TYPE"):
            config.transport.type = os.getenv("TRANSPORT_TYPE").lower()
        if os.getenv("TRANSPORT_PORT"):
            config.transport.port = int(os.getenv("TRANSPORT_PORT"))
        if os.getenv("METRICS_PORT"):
            config.metrics_port = int(os.getenv("METRICS_PORT"))

    return config


def create_sample_config() -> Dict[str, Any]:
    """Create a sample configuration for reference."""
    return {
        "server_name": "openai-assistants-mcp",
        "server_version": "3.0.0",
        "debug": False,
        "log_level": "info",
        "strict_initialization": False,
        "metrics_enabled": False,
        "metrics_port": 9090,
        "openai_api_key": "sk-your-openai-api-key",
        "provider": {
            "base_url": "https://api.openai.com/v1",
            "connect_timeout": 10.0,
            "read_timeout": 60.0,
            "write_timeout": 10.0,
            "pool_timeout": 10.0,
            "max_connections": 100,
            "max_keepalive": 20
        },
        "transport": {
            "type": "stdio",
            "host": "127.0.0.1",
            "port": 8787,
            "min_api_key_length": 10,
            "max_message_bytes": 16777216
        },
        "capabilities": {
            "tools": True,
            "resources": True,
            "prompts": True,
            "completions": True,
            "list_changed": False,
            "subscribe": False
        }
    }
