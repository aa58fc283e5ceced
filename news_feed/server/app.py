"""news_feed - MCP Server

This module implements the MCP server using FastMCP with multi-transport support
(STDIO, SSE, and Streamable HTTP). Feed tools are registered with the exception
handling and logging decorators applied.
"""

import asyncio
import os
import sys
from typing import Optional

import click
from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from news_feed.config import ServerConfig, get_config, validate_config
from news_feed.decorators.exception_handler import exception_handler
from news_feed.decorators.tool_logger import tool_logger
from news_feed.exceptions import ConfigurationError
from news_feed.logging_config import get_logger, logger, setup_logging
from news_feed.services.assets import AssetURLResolver
from news_feed.services.protocols import QueryClient
from news_feed.services.query_client import DocumentQueryClient
from news_feed.tools.feed_tools import build_feed_tools


def create_mcp_server(
    config: Optional[ServerConfig] = None,
    client: Optional[QueryClient] = None,
) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        config: Optional server configuration
        client: Optional query client (a DocumentQueryClient is built from
            the configuration if omitted)

    Returns:
        Configured FastMCP server instance
    """
    if config is None:
        config = get_config()

    setup_logging(config)
    server_logger = get_logger(__name__)
    server_logger.info(f"Server config: {config.name} at log level {config.log_level}")
    server_logger.info(f"Content store: project={config.project_id or '<unset>'} dataset={config.dataset}")

    # Configure DNS rebinding protection (disabled by default for development)
    dns_protection = os.getenv("MCP_DNS_REBINDING_PROTECTION", "false").lower() == "true"
    allowed_hosts_env = os.getenv("MCP_ALLOWED_HOSTS", "")
    allowed_hosts = [h.strip() for h in allowed_hosts_env.split(",") if h.strip()] if allowed_hosts_env else []

    server_logger.info(f"DNS rebinding protection: {'enabled' if dns_protection else 'disabled'}")

    mcp_server = FastMCP(
        config.name or "news_feed",
        transport_security=TransportSecuritySettings(
            enable_dns_rebinding_protection=dns_protection,
            allowed_hosts=allowed_hosts
        )
    )

    if client is None:
        client = DocumentQueryClient.from_config(config)

    register_tools(mcp_server, config, client)

    server_logger.info("Server initialization complete")
    return mcp_server


def register_tools(mcp_server: FastMCP, config: ServerConfig, client: QueryClient) -> None:
    """Register the feed tools with the server.

    Decorated functions are registered directly so their signatures stay
    visible to MCP parameter introspection.
    """
    server_logger = get_logger(__name__)
    assets = AssetURLResolver.from_config(config)

    for tool_func in build_feed_tools(client, assets, config):
        # Apply decorator chain: exception_handler → tool_logger
        decorated_func = exception_handler(tool_logger(tool_func, config.__dict__))

        tool_name = tool_func.__name__
        mcp_server.tool(name=tool_name)(decorated_func)

        server_logger.info(f"Registered feed tool: {tool_name}")

    server_logger.info(f"Server '{mcp_server.name}' initialized with decorators")


@click.command()
@click.option(
    "--port",
    default=3001,
    help="Port to listen on for SSE or Streamable HTTP transport"
)
@click.option(
    "--host",
    default="127.0.0.1",
    help="Host to bind to (use 0.0.0.0 for Docker)"
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    default="stdio",
    help="Transport type (stdio, sse, or streamable-http)"
)
def main(port: int, host: str, transport: str) -> int:
    """Run the news_feed server with specified transport."""
    try:
        config = get_config()
    except ConfigurationError as e:
        setup_logging()
        logger.error(str(e))
        sys.exit(1)

    setup_logging(config)

    try:
        validate_config(config)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    server = create_mcp_server(config)

    async def run_server():
        """Inner async function to run the server and manage the event loop."""
        if transport == "stdio":
            logger.info("Starting server with STDIO transport")
            await server.run_stdio_async()
        elif transport == "sse":
            logger.info(f"Starting server with SSE transport on {host}:{port}")
            server.settings.host = host
            server.settings.port = port
            await server.run_sse_async()
        elif transport == "streamable-http":
            logger.info(f"Starting server with Streamable HTTP transport on {host}:{port}")
            server.settings.host = host
            server.settings.port = port
            server.settings.streamable_http_path = "/mcp"
            await server.run_streamable_http_async()
        else:
            raise ValueError(f"Unknown transport: {transport}")

    try:
        asyncio.run(run_server())
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        sys.exit(1)


def main_stdio() -> int:
    """Entry point for STDIO transport (convenience wrapper)."""
    return main.callback(port=3001, host="127.0.0.1", transport="stdio")


def main_http() -> int:
    """Entry point for Streamable HTTP transport (convenience wrapper)."""
    return main.callback(port=3001, host="127.0.0.1", transport="streamable-http")


def main_sse() -> int:
    """Entry point for SSE transport (convenience wrapper)."""
    return main.callback(port=3001, host="127.0.0.1", transport="sse")


if __name__ == "__main__":
    sys.exit(main())
