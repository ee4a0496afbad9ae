"""
Reddit MCP Server - Main Entry Point

Configures logging, registers the tools and runs the FastMCP server on
the transport named by MCP_TRANSPORT (stdio by default).
"""
import os
import sys

from reddit_mcp.server import SERVER_VERSION, mcp
from reddit_mcp.utils.logger import get_logger, setup_logging

# Import tools to register them with the MCP server
import reddit_mcp.tools  # noqa: F401

logger = get_logger(__name__)

TRANSPORTS = ("stdio", "sse", "streamable-http")


def main() -> None:
    """
    Main entry point (console script ``reddit-json-mcp``).

    Blocks until the transport closes.
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    setup_logging(level=log_level)

    transport = os.getenv("MCP_TRANSPORT", "stdio")
    if transport not in TRANSPORTS:
        logger.error(
            "invalid_transport",
            transport=transport,
            supported=list(TRANSPORTS),
        )
        sys.exit(2)

    logger.info(
        "server_starting",
        name=mcp.name,
        version=SERVER_VERSION,
        environment=os.getenv("ENVIRONMENT", "production"),
        log_level=log_level,
        transport=transport,
    )

    try:
        mcp.run(transport=transport)
    except KeyboardInterrupt:
        logger.info("shutdown_signal_received")
    except Exception as e:
        logger.error(
            "server_error",
            error=str(e),
            exc_info=True,
        )
        raise
    finally:
        logger.info("server_shutdown_complete")


if __name__ == "__main__":
    main()
