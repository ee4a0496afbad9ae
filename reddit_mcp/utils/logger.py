"""
Logging setup for the MCP server.

structlog events with ISO UTC timestamps, rendered as JSON lines.
Everything is written to stderr: with the stdio transport, stdout
carries MCP protocol messages.
"""
import logging
import os
import sys
from typing import Any

import structlog


def setup_logging(level: str = "INFO") -> None:
    """
    Point structlog and the stdlib root logger at stderr.

    Renders JSON lines unless ENVIRONMENT=development, which switches to
    the console renderer. Called once by main() before the transport
    starts; anything logged earlier uses structlog defaults (stdout).

    Args:
        level: LOG_LEVEL value; unknown names fall back to INFO
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # httpx and the mcp SDK log through the stdlib root logger
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )

    is_dev = os.getenv("ENVIRONMENT", "production") == "development"

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if is_dev:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """Return a structlog logger bound to ``name`` (usually the module)."""
    return structlog.get_logger(name)


def log_tool_execution(
    tool_name: str,
    duration_ms: float,
    error: str | None = None,
    **extra: Any,
) -> None:
    """
    Emit one ``tool_execution_success`` or ``tool_execution_failed`` event.

    Every tool calls this once per invocation. On failure ``error`` holds the
    exception class name (UpstreamError or ValidationError); ``extra``
    carries counters such as ``result_count``.
    """
    logger = get_logger("tool_execution")

    log_data = {
        "tool": tool_name,
        "duration_ms": round(duration_ms, 2),
        "error": error,
        **extra,
    }

    if error:
        logger.error("tool_execution_failed", **log_data)
    else:
        logger.info("tool_execution_success", **log_data)
