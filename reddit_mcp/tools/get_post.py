"""
Get Post MCP Tool.

Implements the get_post tool for fetching a single public Reddit post
by ID (``abc123`` or ``t3_abc123``) or by reddit.com URL.
"""

import time
from typing import Annotated, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from reddit_mcp.models.responses import ResponseMetadata, ToolResponse
from reddit_mcp.reddit import UpstreamError, get_reddit_json_client
from reddit_mcp.server import mcp, to_tool_error
from reddit_mcp.utils.logger import get_logger, log_tool_execution
from reddit_mcp.utils.output import render_tool_output

logger = get_logger(__name__)

TOOL_NAME = "get_post"
MAX_STRING_CHARS = 8_000
MAX_ARRAY_ITEMS = 50


class GetPostInput(BaseModel):
    """
    Input schema for get_post tool.

    At least one of post_id and post_url is required; post_id wins when
    both are given.
    """

    post_id: Optional[str] = Field(
        None,
        min_length=1,
        description="Reddit post ID, with or without t3_ prefix",
    )

    post_url: Optional[str] = Field(
        None,
        min_length=1,
        description="Full reddit.com URL of the post",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "post_url": "https://www.reddit.com/r/python/comments/1a2b3c4/title/",
            }
        }
    )

    @field_validator("post_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """
        Require an absolute http(s) URL.

        Whether the host is reddit.com is checked later by the client, so
        that error carries the same BAD_INPUT classification as others.
        """
        if v is None:
            return v
        parts = urlsplit(v.strip())
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError("post_url must be an absolute http(s) URL")
        return v

    @model_validator(mode="after")
    def require_post_reference(self) -> "GetPostInput":
        if not self.post_id and not self.post_url:
            raise ValueError("Provide post_id or post_url")
        return self


@mcp.tool()
async def get_post(
    post_id: Annotated[Optional[str], Field(min_length=1)] = None,
    post_url: Annotated[Optional[str], Field(min_length=1)] = None,
) -> str:
    """
    Get details of a single public Reddit post by ID or URL.

    Args:
        post_id: Post ID such as "abc123" or "t3_abc123"
        post_url: reddit.com URL of the post (used when post_id is absent)

    Returns:
        JSON with the normalized post and metadata
    """
    start_time = time.time()

    try:
        params = GetPostInput(post_id=post_id, post_url=post_url)

        logger.info(
            "get_post_started",
            post_id=params.post_id,
            post_url=params.post_url,
        )

        post = await get_reddit_json_client().get_post(
            post_id=params.post_id,
            post_url=params.post_url,
        )

    except (UpstreamError, ValidationError) as exc:
        log_tool_execution(
            TOOL_NAME,
            (time.time() - start_time) * 1000,
            error=type(exc).__name__,
        )
        raise to_tool_error(exc, tool=TOOL_NAME) from exc

    execution_time_ms = (time.time() - start_time) * 1000

    tool_response = ToolResponse(
        data={"post": post.model_dump(mode="json")},
        metadata=ResponseMetadata(execution_time_ms=round(execution_time_ms, 2)),
    )

    logger.info(
        "get_post_completed",
        post_id=post.id,
        subreddit=post.subreddit,
        execution_time_ms=tool_response.metadata.execution_time_ms,
    )
    log_tool_execution(TOOL_NAME, execution_time_ms)

    return render_tool_output(
        tool_response.model_dump(mode="json"),
        max_string_chars=MAX_STRING_CHARS,
        max_array_items=MAX_ARRAY_ITEMS,
    )
