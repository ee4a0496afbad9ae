"""
List Subreddit Posts MCP Tool.

Implements the list_subreddit_posts tool for fetching one page of posts
from a subreddit with hot/new/top/rising sorting and cursor pagination.
"""

import time
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from reddit_mcp.models.responses import ResponseMetadata, ToolResponse
from reddit_mcp.reddit import UpstreamError, get_reddit_json_client
from reddit_mcp.server import mcp, to_tool_error
from reddit_mcp.utils.logger import get_logger, log_tool_execution
from reddit_mcp.utils.output import render_tool_output

logger = get_logger(__name__)

TOOL_NAME = "list_subreddit_posts"
MAX_STRING_CHARS = 700
MAX_ARRAY_ITEMS = 25

ListingSort = Literal["hot", "new", "top", "rising"]
Timeframe = Literal["hour", "day", "week", "month", "year", "all"]
SUBREDDIT_PATTERN = r"^[A-Za-z0-9_/\-]+$"


class ListSubredditPostsInput(BaseModel):
    """
    Input schema for list_subreddit_posts tool.

    Subreddit names may carry an ``r/`` prefix; the client strips it and
    any other unsafe characters before building the request path.
    """

    subreddit: str = Field(
        ...,
        min_length=1,
        max_length=100,
        pattern=SUBREDDIT_PATTERN,
        description="Target subreddit name (with or without r/ prefix)",
    )

    sort: ListingSort = Field(
        "hot",
        description="Sort order for posts",
    )

    limit: int = Field(
        10,
        ge=1,
        le=25,
        description="Number of posts per page",
    )

    after: Optional[str] = Field(
        None,
        min_length=1,
        description="Cursor (next_cursor of a previous page)",
    )

    timeframe: Optional[Timeframe] = Field(
        None,
        description="Time range, only applied when sort='top'",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "subreddit": "python",
                "sort": "top",
                "timeframe": "week",
                "limit": 10,
            }
        }
    )


@mcp.tool()
async def list_subreddit_posts(
    subreddit: Annotated[
        str,
        Field(min_length=1, max_length=100, pattern=SUBREDDIT_PATTERN),
    ],
    sort: ListingSort = "hot",
    limit: Annotated[int, Field(ge=1, le=25)] = 10,
    after: Annotated[Optional[str], Field(min_length=1)] = None,
    timeframe: Optional[Timeframe] = None,
) -> str:
    """
    List public posts from a subreddit.

    Args:
        subreddit: Subreddit name, e.g. "python" or "r/python"
        sort: hot, new, top or rising (default: hot)
        limit: Posts per page, 1-25 (default: 10)
        after: next_cursor from a previous page
        timeframe: hour, day, week, month, year or all; only used with sort=top

    Returns:
        JSON with posts, next_cursor and metadata
    """
    start_time = time.time()

    try:
        params = ListSubredditPostsInput(
            subreddit=subreddit,
            sort=sort,
            limit=limit,
            after=after,
            timeframe=timeframe,
        )

        logger.info(
            "list_subreddit_posts_started",
            subreddit=params.subreddit,
            sort=params.sort,
            timeframe=params.timeframe,
            limit=params.limit,
            after=params.after,
        )

        page = await get_reddit_json_client().list_subreddit_posts(
            params.subreddit,
            sort=params.sort,
            limit=params.limit,
            after=params.after,
            timeframe=params.timeframe,
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
        data={
            "subreddit": params.subreddit,
            "sort": params.sort,
            "timeframe": params.timeframe,
            "posts": [post.model_dump(mode="json") for post in page.items],
            "next_cursor": page.next_cursor,
            "total_returned": len(page.items),
        },
        metadata=ResponseMetadata(execution_time_ms=round(execution_time_ms, 2)),
    )

    logger.info(
        "list_subreddit_posts_completed",
        subreddit=params.subreddit,
        sort=params.sort,
        posts_count=len(page.items),
        has_next_page=page.next_cursor is not None,
        execution_time_ms=tool_response.metadata.execution_time_ms,
    )
    log_tool_execution(TOOL_NAME, execution_time_ms, result_count=len(page.items))

    return render_tool_output(
        tool_response.model_dump(mode="json"),
        max_string_chars=MAX_STRING_CHARS,
        max_array_items=MAX_ARRAY_ITEMS,
    )
