#!/usr/bin/env python3
"""Main entry point for the OpenAI Assistants MCP gateway."""

import asyncio
import argparse
import json
import logging
import os
import sys
from typing import Optional
import structlog
from structlog.contextvars import clear_contextvars

from .config import ServerConfig, create_sample_config, load_config
from .protocol.errors import RegistrationError
from .protocol.server import MCPServer


def setup_logging(level: str = "info", debug: bool = False) -> None:
    """Setup structured logging.

    Logs go to stderr: stdout belongs to the stdio transport.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr, force=True)


async def run_server(config: ServerConfig) -> None:
    """Run the MCP server until its transport closes."""
    logger = structlog.get_logger()

    logger.info(
        "Starting MCP server",
        server_name=config.server_name,
        version=config.server_version,
        transport_type=config.transport.type,
    )

    try:
        async with MCPServer(config) as server:
            await server.run_forever()
    finally:
        clear_contextvars()


def main(argv: Optional[list] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="OpenAI Assistants MCP gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with stdio transport (default)
  OPENAI_API_KEY=sk-... assistants-mcp

  # Serve HTTP on /mcp/{api-key}
  assistants-mcp --transport http

  # Run with custom config file
  assistants-mcp --config config.json

  # Generate sample config
  assistants-mcp --sample-config
"""
    )

    parser.add_argument(
        "--config",
        "-c",
        help="Configuration file path (JSON format)"
    )
    parser.add_argument(
        "--transport",
        "-t",
        choices=["stdio", "http"],
        help="Transport to serve (overrides configuration)"
    )
    parser.add_argument(
        "--sample-config",
        action="store_true",
        help="Generate sample configuration and exit"
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration and exit"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    if args.sample_config:
        print(json.dumps(create_sample_config(), indent=2))
        return

    if args.validate_config:
        try:
            config = load_config(args.config)
            print("Configuration is valid")
            print(json.dumps(config.to_dict(), indent=2))
        except Exception as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    # Set debug from command line if specified
    if args.debug:
        os.environ["DEBUG"] = "true"
        os.environ["LOG_LEVEL"] = "debug"

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    if args.transport:
        config.transport.type = args.transport
    if args.debug:
        config.log_level = "debug"

    setup_logging(config.log_level, config.debug)
    logger = structlog.get_logger()

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        pass
    except RegistrationError as e:
        logger.error("Tool registration failed", error=str(e), data=e.data)
        sys.exit(1)
    except Exception as e:
        logger.error("Server error", error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
