"""
Reddit JSON integration layer.

This package provides the read-only Reddit integration including:
- HttpClient: GET with timeout, retry/backoff and typed error classification
- Normalizer functions mapping raw listings into Post/Comment/ListingPage
- RedditJsonClient: query facade used by the MCP tools
- UpstreamError/ErrorKind: the single error type raised by all of the above

Example:
    >>> from reddit_mcp.reddit import get_reddit_json_client
    >>> client = get_reddit_json_client()
    >>> page = await client.list_subreddit_posts("python", sort="new")
"""

from reddit_mcp.reddit.client import (
    RedditJsonClient,
    get_reddit_json_client,
    reset_reddit_json_client,
    resolve_post_id,
)
from reddit_mcp.reddit.exceptions import ErrorKind, UpstreamError
from reddit_mcp.reddit.http import HttpClient, JsonResponse
from reddit_mcp.reddit.normalizer import (
    extract_listing,
    flatten_comments,
    normalize_post,
    sanitize_post_id,
    sanitize_subreddit,
)

__all__ = [
    # Client
    "RedditJsonClient",
    "get_reddit_json_client",
    "reset_reddit_json_client",
    "resolve_post_id",
    # Fetch engine
    "HttpClient",
    "JsonResponse",
    # Errors
    "ErrorKind",
    "UpstreamError",
    # Normalizers
    "extract_listing",
    "flatten_comments",
    "normalize_post",
    "sanitize_post_id",
    "sanitize_subreddit",
]
