"""
Reddit query facade over the public JSON endpoints.

RedditJsonClient composes the fetch engine (HttpClient) and the
normalizer into the read operations exposed as MCP tools: listing a
subreddit, searching, fetching a post and fetching its comments. It
holds no state beyond its HttpClient, whose configuration is fixed at
construction.
"""

import os
import re
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import httpx

from reddit_mcp.models.responses import CommentsResult, ListingPage, Post
from reddit_mcp.reddit.exceptions import ErrorKind, UpstreamError
from reddit_mcp.reddit.http import (
    DEFAULT_BASE_DELAY_SECONDS,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    HttpClient,
)
from reddit_mcp.reddit.normalizer import (
    comment_children,
    extract_listing,
    extract_post_id,
    first_child_data,
    flatten_comments,
    normalize_post,
    sanitize_post_id,
    sanitize_subreddit,
)
from reddit_mcp.utils.logger import get_logger

logger = get_logger(__name__)

REDDIT_API_URL = "https://www.reddit.com"
REDDIT_DOMAIN = "reddit.com"

_POST_ID = re.compile(r"[A-Za-z0-9]+")


class RedditJsonClient:
    """
    Read-only Reddit client built on unauthenticated ``.json`` endpoints.

    Every operation raises UpstreamError on failure and nothing else.
    Inputs are expected to be validated already (see the tool input
    models); the client only sanitizes values it interpolates into paths.

    Example:
        >>> client = RedditJsonClient(HttpClient())
        >>> page = await client.list_subreddit_posts("python", sort="top", timeframe="week")
        >>> page.items[0].title
    """

    def __init__(self, http: HttpClient) -> None:
        self.http = http

    async def list_subreddit_posts(
        self,
        subreddit: str,
        sort: str = "hot",
        limit: int = 10,
        after: Optional[str] = None,
        timeframe: Optional[str] = None,
    ) -> ListingPage:
        """
        List posts of a subreddit.

        Args:
            subreddit: Subreddit name, with or without ``r/``
            sort: hot, new, top or rising
            limit: Page size
            after: Cursor from a previous page
            timeframe: hour/day/week/month/year/all; only sent when sort is top

        Returns:
            ListingPage of normalized posts
        """
        name = _require_subreddit(subreddit)
        params: Dict[str, Any] = {"raw_json": "1", "limit": str(limit)}
        if after:
            params["after"] = after
        if timeframe and sort == "top":
            params["t"] = timeframe

        url = httpx.URL(f"{REDDIT_API_URL}/r/{name}/{sort}.json", params=params)
        response = await self.http.fetch_json(str(url))
        return extract_listing(response.data, "listing")

    async def search(
        self,
        query: str,
        subreddit: Optional[str] = None,
        sort: str = "relevance",
        timeframe: str = "week",
        limit: int = 10,
        after: Optional[str] = None,
    ) -> ListingPage:
        """
        Search posts globally or within one subreddit.

        Args:
            query: Search terms
            subreddit: Restrict results to this subreddit when given
            sort: relevance, hot, top, new or comments
            timeframe: hour/day/week/month/year/all
            limit: Page size
            after: Cursor from a previous page

        Returns:
            ListingPage of normalized posts
        """
        if subreddit:
            path = f"/r/{_require_subreddit(subreddit)}/search.json"
        else:
            path = "/search.json"

        params: Dict[str, Any] = {
            "raw_json": "1",
            "q": query,
            "sort": sort,
            "t": timeframe,
            "limit": str(limit),
            "type": "link",
        }
        if subreddit:
            params["restrict_sr"] = "1"
        if after:
            params["after"] = after

        url = httpx.URL(f"{REDDIT_API_URL}{path}", params=params)
        response = await self.http.fetch_json(str(url))
        return extract_listing(response.data, "search")

    async def get_post(
        self,
        post_id: Optional[str] = None,
        post_url: Optional[str] = None,
    ) -> Post:
        """
        Fetch a single post by ID or URL.

        Raises:
            UpstreamError: NOT_FOUND if the response carries no post
        """
        resolved = await resolve_post_id(self.http, post_id=post_id, post_url=post_url)
        url = httpx.URL(
            f"{REDDIT_API_URL}/comments/{resolved}.json",
            params={"raw_json": "1", "limit": "1"},
        )
        response = await self.http.fetch_json(str(url))

        payload = response.data
        post = first_child_data(payload[0]) if isinstance(payload, list) and payload else None
        if post is None:
            raise UpstreamError("Post not found", ErrorKind.NOT_FOUND, status=404)

        return normalize_post(post)

    async def get_comments(
        self,
        post_id: Optional[str] = None,
        post_url: Optional[str] = None,
        sort: str = "top",
        limit: int = 20,
        depth: int = 3,
    ) -> CommentsResult:
        """
        Fetch the comment thread of a post, flattened in pre-order.

        Args:
            post_id: Post ID, with or without ``t3_``
            post_url: Reddit URL of the post (used when post_id is absent)
            sort: confidence, top, new, controversial, old or qa
            limit: Maximum number of comments Reddit should return
            depth: Maximum reply depth Reddit should return

        Returns:
            CommentsResult with the resolved post ID and flattened comments
        """
        resolved = await resolve_post_id(self.http, post_id=post_id, post_url=post_url)
        url = httpx.URL(
            f"{REDDIT_API_URL}/comments/{resolved}.json",
            params={
                "raw_json": "1",
                "sort": sort,
                "limit": str(limit),
                "depth": str(depth),
            },
        )
        response = await self.http.fetch_json(str(url))

        return CommentsResult(
            post_id=resolved,
            comments=flatten_comments(comment_children(response.data), resolved),
        )


async def resolve_post_id(
    http: HttpClient,
    post_id: Optional[str] = None,
    post_url: Optional[str] = None,
) -> str:
    """
    Resolve a post ID from an explicit ID or a Reddit URL.

    An explicit ID wins and only has its ``t3_`` prefix stripped. A URL
    with a ``/comments/{id}`` path is parsed without any request; other
    reddit.com URLs are fetched as ``.json`` and the ID is read from the
    response. IDs taken from arguments must be alphanumeric.

    Args:
        http: Fetch engine used for the URL fallback
        post_id: Post ID, with or without ``t3_``
        post_url: Reddit URL of the post

    Returns:
        Bare post ID

    Raises:
        UpstreamError: BAD_INPUT if neither value is usable, the ID is not
            alphanumeric or the URL is not on reddit.com; NOT_FOUND if the
            fetched page has no post

    Example:
        >>> await resolve_post_id(http, post_id="t3_abc123")
        'abc123'
        >>> await resolve_post_id(http, post_url="https://www.reddit.com/r/x/comments/xyz987/title/")
        'xyz987'
    """
    if post_id:
        return _require_post_id(post_id)

    if not post_url:
        raise UpstreamError(
            "Either post_id or post_url is required", ErrorKind.BAD_INPUT
        )

    try:
        parts = urlsplit(post_url.strip())
        hostname = parts.hostname or ""
    except ValueError as exc:
        raise UpstreamError(
            f"post_url is not a valid URL: {exc}", ErrorKind.BAD_INPUT
        ) from exc

    if REDDIT_DOMAIN not in hostname:
        raise UpstreamError(
            "post_url must point to reddit.com", ErrorKind.BAD_INPUT
        )

    segments = [segment for segment in parts.path.split("/") if segment]
    if "comments" in segments:
        index = segments.index("comments")
        if index + 1 < len(segments):
            return _require_post_id(segments[index + 1])

    path = parts.path
    if not path.endswith(".json"):
        path = f"{path.rstrip('/')}.json"
    try:
        json_url = (
            httpx.URL(post_url.strip())
            .copy_with(path=path)
            .copy_set_param("raw_json", "1")
        )
    except httpx.InvalidURL as exc:
        raise UpstreamError(
            f"post_url is not a valid URL: {exc}", ErrorKind.BAD_INPUT
        ) from exc

    response = await http.fetch_json(str(json_url))
    resolved = extract_post_id(response.data)
    if resolved is None:
        raise UpstreamError(
            "Unable to resolve post ID", ErrorKind.NOT_FOUND, status=404
        )

    logger.debug("post_id_resolved_from_url", post_url=post_url, post_id=resolved)
    return resolved


def _require_post_id(post_id: str) -> str:
    resolved = sanitize_post_id(post_id)
    if not _POST_ID.fullmatch(resolved):
        raise UpstreamError(
            f"Invalid post ID: {post_id!r}", ErrorKind.BAD_INPUT
        )
    return resolved


def _require_subreddit(subreddit: str) -> str:
    name = sanitize_subreddit(subreddit)
    if not name:
        raise UpstreamError(
            f"Invalid subreddit name: {subreddit!r}", ErrorKind.BAD_INPUT
        )
    return name


def _env_number(name: str, default: float, cast: type = float) -> Any:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("invalid_env_value", variable=name, value=raw, default=default)
        return default


_client: Optional[RedditJsonClient] = None


def get_reddit_json_client() -> RedditJsonClient:
    """
    Return the process-wide RedditJsonClient, building it on first use.

    The HttpClient is configured from REDDIT_USER_AGENT,
    REDDIT_TIMEOUT_SECONDS, REDDIT_MAX_RETRIES and REDDIT_RETRY_BASE_DELAY.

    Example:
        >>> from reddit_mcp.reddit.client import get_reddit_json_client
        >>> client = get_reddit_json_client()
        >>> page = await client.search("asyncio", subreddit="python")
    """
    global _client
    if _client is None:
        http = HttpClient(
            user_agent=os.getenv("REDDIT_USER_AGENT"),
            timeout=_env_number("REDDIT_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            retries=_env_number("REDDIT_MAX_RETRIES", DEFAULT_RETRIES, cast=int),
            base_delay=_env_number("REDDIT_RETRY_BASE_DELAY", DEFAULT_BASE_DELAY_SECONDS),
        )
        logger.info(
            "reddit_json_client_initialized",
            user_agent=http.user_agent,
            timeout=http.timeout,
            retries=http.retries,
            base_delay=http.base_delay,
        )
        _client = RedditJsonClient(http)
    return _client


def reset_reddit_json_client() -> None:
    """Drop the cached client so the next call re-reads the environment."""
    global _client
    _client = None
