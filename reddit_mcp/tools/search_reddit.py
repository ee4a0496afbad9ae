"""
Search Reddit MCP Tool.

Implements the search_reddit tool for searching Reddit posts by query with
optional subreddit scoping, time filters, sorting and cursor pagination.
"""

import time
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from reddit_mcp.models.responses import ResponseMetadata, ToolResponse
from reddit_mcp.reddit import UpstreamError, get_reddit_json_client
from reddit_mcp.server import mcp, to_tool_error
from reddit_mcp.tools.list_subreddit_posts import SUBREDDIT_PATTERN, Timeframe
from reddit_mcp.utils.logger import get_logger, log_tool_execution
from reddit_mcp.utils.output import render_tool_output

logger = get_logger(__name__)

TOOL_NAME = "search_reddit"
MAX_STRING_CHARS = 600
MAX_ARRAY_ITEMS = 25

SearchSort = Literal["relevance", "hot", "top", "new", "comments"]


class SearchRedditInput(BaseModel):
    """
    Input schema for search_reddit tool.

    Validates search parameters before they are sent to Reddit's
    search endpoint.
    """

    query: str = Field(
        ...,
        min_length=1,
        max_length=512,
        description="Search query or keywords",
    )

    subreddit: Optional[str] = Field(
        None,
        min_length=1,
        max_length=100,
        pattern=SUBREDDIT_PATTERN,
        description="Limit search to a specific subreddit (optional)",
    )

    sort: SearchSort = Field(
        "relevance",
        description="Sort order for results",
    )

    timeframe: Timeframe = Field(
        "week",
        description="Time range for search results",
    )

    limit: int = Field(
        10,
        ge=1,
        le=25,
        description="Number of results per page",
    )

    after: Optional[str] = Field(
        None,
        min_length=1,
        description="Cursor (next_cursor of a previous page)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "query": "asyncio task groups",
                "subreddit": "python",
                "sort": "top",
                "timeframe": "month",
                "limit": 10,
            }
        }
    )

    @field_validator("query")
    @classmethod
    def strip_query(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank queries."""
        v = v.strip()
        if not v:
            raise ValueError("Query cannot be blank")
        return v


@mcp.tool()
async def search_reddit(
    query: Annotated[str, Field(min_length=1, max_length=512)],
    subreddit: Annotated[
        Optional[str],
        Field(min_length=1, max_length=100, pattern=SUBREDDIT_PATTERN),
    ] = None,
    sort: SearchSort = "relevance",
    timeframe: Timeframe = "week",
    limit: Annotated[int, Field(ge=1, le=25)] = 10,
    after: Annotated[Optional[str], Field(min_length=1)] = None,
) -> str:
    """
    Search public Reddit posts globally or within a subreddit.

    Args:
        query: Search terms
        subreddit: Optional subreddit to restrict the search to
        sort: relevance, hot, top, new or comments (default: relevance)
        timeframe: hour, day, week, month, year or all (default: week)
        limit: Results per page, 1-25 (default: 10)
        after: next_cursor from a previous page

    Returns:
        JSON with matching posts, next_cursor and metadata
    """
    start_time = time.time()

    try:
        params = SearchRedditInput(
            query=query,
            subreddit=subreddit,
            sort=sort,
            timeframe=timeframe,
            limit=limit,
            after=after,
        )

        logger.info(
            "search_reddit_started",
            query=params.query,
            subreddit=params.subreddit,
            sort=params.sort,
            timeframe=params.timeframe,
            limit=params.limit,
        )

        page = await get_reddit_json_client().search(
            params.query,
            subreddit=params.subreddit,
            sort=params.sort,
            timeframe=params.timeframe,
            limit=params.limit,
            after=params.after,
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
            "query": params.query,
            "subreddit": params.subreddit,
            "posts": [post.model_dump(mode="json") for post in page.items],
            "next_cursor": page.next_cursor,
            "total_returned": len(page.items),
        },
        metadata=ResponseMetadata(execution_time_ms=round(execution_time_ms, 2)),
    )

    logger.info(
        "search_reddit_completed",
        query=params.query,
        results_count=len(page.items),
        has_next_page=page.next_cursor is not None,
        execution_time_ms=tool_response.metadata.execution_time_ms,
    )
    log_tool_execution(TOOL_NAME, execution_time_ms, result_count=len(page.items))

    return render_tool_output(
        tool_response.model_dump(mode="json"),
        max_string_chars=MAX_STRING_CHARS,
        max_array_items=MAX_ARRAY_ITEMS,
    )
