"""
Get Comments MCP Tool.

Implements the get_comments tool for fetching the comment thread of a
public Reddit post. The thread comes back flattened in pre-order: every
comment is followed by its replies, and ``depth``/``parent_id`` describe
where it sits in the tree.
"""

import time
from typing import Annotated, Literal, Optional

from pydantic import ConfigDict, Field, ValidationError

from reddit_mcp.models.responses import ResponseMetadata, ToolResponse
from reddit_mcp.reddit import UpstreamError, get_reddit_json_client
from reddit_mcp.server import mcp, to_tool_error
from reddit_mcp.tools.get_post import GetPostInput
from reddit_mcp.utils.logger import get_logger, log_tool_execution
from reddit_mcp.utils.output import render_tool_output

logger = get_logger(__name__)

TOOL_NAME = "get_comments"
MAX_STRING_CHARS = 900
MAX_ARRAY_ITEMS = 50

CommentSort = Literal["confidence", "top", "new", "controversial", "old", "qa"]


class GetCommentsInput(GetPostInput):
    """
    Input schema for get_comments tool.

    Extends GetPostInput with the sort order and the limit/depth values
    passed through to Reddit.
    """

    sort: CommentSort = Field(
        "top",
        description="Comment sort order",
    )

    limit: int = Field(
        20,
        ge=1,
        le=50,
        description="Maximum number of comments Reddit should return",
    )

    depth: int = Field(
        3,
        ge=1,
        le=6,
        description="Maximum reply depth Reddit should return",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "post_id": "1a2b3c4",
                "sort": "top",
                "limit": 20,
                "depth": 3,
            }
        }
    )


@mcp.tool()
async def get_comments(
    post_id: Annotated[Optional[str], Field(min_length=1)] = None,
    post_url: Annotated[Optional[str], Field(min_length=1)] = None,
    sort: CommentSort = "top",
    limit: Annotated[int, Field(ge=1, le=50)] = 20,
    depth: Annotated[int, Field(ge=1, le=6)] = 3,
) -> str:
    """
    Get comments for a public Reddit post.

    Args:
        post_id: Post ID such as "abc123" or "t3_abc123"
        post_url: reddit.com URL of the post (used when post_id is absent)
        sort: confidence, top, new, controversial, old or qa (default: top)
        limit: Maximum comments, 1-50 (default: 20)
        depth: Maximum reply depth, 1-6 (default: 3)

    Returns:
        JSON with post_id, comments in thread order, and metadata
    """
    start_time = time.time()

    try:
        params = GetCommentsInput(
            post_id=post_id,
            post_url=post_url,
            sort=sort,
            limit=limit,
            depth=depth,
        )

        logger.info(
            "get_comments_started",
            post_id=params.post_id,
            post_url=params.post_url,
            sort=params.sort,
            limit=params.limit,
            depth=params.depth,
        )

        result = await get_reddit_json_client().get_comments(
            post_id=params.post_id,
            post_url=params.post_url,
            sort=params.sort,
            limit=params.limit,
            depth=params.depth,
        )

    except (UpstreamError, ValidationError) as exc:
        log_tool_execution(
            TOOL_NAME,
            (time.time() - start_time) * 1000,
            error=type(exc).__name__,
        )
        raise to_tool_error(exc, tool=TOOL_NAME) from exc

    execution_time_ms = (time.time() - start_time) * 1000
    root_comments = sum(1 for comment in result.comments if comment.depth == 0)

    tool_response = ToolResponse(
        data={
            "post_id": result.post_id,
            "comments": [comment.model_dump(mode="json") for comment in result.comments],
            "total_comments": len(result.comments),
            "root_comments": root_comments,
        },
        metadata=ResponseMetadata(execution_time_ms=round(execution_time_ms, 2)),
    )

    logger.info(
        "get_comments_completed",
        post_id=result.post_id,
        total_comments=len(result.comments),
        root_comments=root_comments,
        execution_time_ms=tool_response.metadata.execution_time_ms,
    )
    log_tool_execution(TOOL_NAME, execution_time_ms, result_count=len(result.comments))

    return render_tool_output(
        tool_response.model_dump(mode="json"),
        max_string_chars=MAX_STRING_CHARS,
        max_array_items=MAX_ARRAY_ITEMS,
    )
