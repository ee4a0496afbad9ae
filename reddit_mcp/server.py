"""
FastMCP server initialization and error rendering.

Creates the MCP server the tools register against and converts the
errors tools can raise (UpstreamError, pydantic validation errors) into
ToolError results whose text is the JSON-rendered error.
"""
import json
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import ValidationError

from reddit_mcp import __version__
from reddit_mcp.models.responses import ErrorResponse
from reddit_mcp.reddit.exceptions import ErrorKind, UpstreamError
from reddit_mcp.utils.logger import get_logger

logger = get_logger(__name__)

# Server metadata
SERVER_NAME = "reddit-json-mcp"
SERVER_VERSION = __version__
SERVER_INSTRUCTIONS = (
    "Read-only access to public Reddit data through reddit.com JSON endpoints. "
    "Use list_subreddit_posts and search_reddit to find posts (pass next_cursor "
    "back as `after` to page), then get_post and get_comments for one thread."
)


class RedditMCP(FastMCP):
    """
    FastMCP server whose tool errors always carry the rendered error JSON.

    FastMCP validates arguments against each tool's signature before the
    tool runs and wraps every failure as ``Error executing tool ...``.
    Argument validation failures are converted to BAD_INPUT here, and
    ToolErrors raised by the tools themselves are passed on unwrapped.
    """

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> Any:
        try:
            return await super().call_tool(name, arguments)
        except ToolError as exc:
            cause = exc.__cause__
            if isinstance(cause, ValidationError):
                raise to_tool_error(cause, tool=name) from cause
            if isinstance(cause, ToolError):
                raise cause
            raise


def create_mcp_server() -> RedditMCP:
    """
    Create and configure the FastMCP server instance.

    Nothing is logged here: the global instance is created at import
    time, before setup_logging has pointed structlog at stderr.

    Returns:
        RedditMCP server; tools are registered by importing reddit_mcp.tools

    Example:
        >>> server = create_mcp_server()
        >>> server.run(transport="stdio")
    """
    return RedditMCP(name=SERVER_NAME, instructions=SERVER_INSTRUCTIONS)


def validation_error_to_upstream(error: ValidationError) -> UpstreamError:
    """
    Convert a pydantic validation error into a BAD_INPUT UpstreamError.

    Messages of all failing fields are joined with ``"; "``.
    """
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)

    return UpstreamError(
        "; ".join(messages) or "Invalid arguments", ErrorKind.BAD_INPUT
    )


def render_error(error: UpstreamError) -> str:
    """Render an UpstreamError as the indented JSON shown to MCP clients."""
    payload = ErrorResponse.from_error(error)
    return json.dumps(payload.model_dump(mode="json"), indent=2)


def to_tool_error(error: Exception, tool: Optional[str] = None) -> ToolError:
    """
    Build the ToolError a tool raises for a failed call.

    Args:
        error: UpstreamError or pydantic ValidationError
        tool: Tool name, for logging

    Returns:
        ToolError whose message is the rendered error JSON

    Example:
        >>> try:
        ...     page = await client.list_subreddit_posts("python")
        ... except UpstreamError as exc:
        ...     raise to_tool_error(exc, tool="list_subreddit_posts") from exc
    """
    if isinstance(error, ValidationError):
        error = validation_error_to_upstream(error)

    if not isinstance(error, UpstreamError):
        raise TypeError(f"Cannot render {type(error).__name__} as a tool error")

    log = logger.warning if error.kind == ErrorKind.BAD_INPUT else logger.error
    log(
        "tool_error",
        tool=tool,
        kind=error.kind.value,
        status=error.status,
        retriable=error.retriable,
        message=error.message,
    )

    return ToolError(render_error(error))


# Create global MCP server instance (singleton)
mcp = create_mcp_server()
