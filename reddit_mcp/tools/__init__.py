"""MCP tool implementations for Reddit data access."""

from reddit_mcp.tools.get_comments import GetCommentsInput, get_comments
from reddit_mcp.tools.get_post import GetPostInput, get_post
from reddit_mcp.tools.list_subreddit_posts import (
    ListSubredditPostsInput,
    list_subreddit_posts,
)
from reddit_mcp.tools.search_reddit import SearchRedditInput, search_reddit

__all__ = [
    # Search tool
    "search_reddit",
    "SearchRedditInput",
    # Subreddit listing tool
    "list_subreddit_posts",
    "ListSubredditPostsInput",
    # Single post tool
    "get_post",
    "GetPostInput",
    # Comments tool
    "get_comments",
    "GetCommentsInput",
]
