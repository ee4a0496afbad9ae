"""
Response normalization for Reddit's public JSON endpoints.

Reddit listings are loosely typed and vary across endpoints, so this
module walks the raw JSON with field-level coercion helpers instead of
strict deserialization. Missing or wrong-typed fields fall back to
empty/zero/false defaults; only a structurally absent listing container
is reported as an error.
"""

import math
import re
from typing import Any, List, Mapping, Optional, Tuple

from reddit_mcp.models.responses import Comment, ListingPage, Post
from reddit_mcp.reddit.exceptions import ErrorKind, UpstreamError

REDDIT_WEB_URL = "https://www.reddit.com"

COMMENT_KIND = "t1"

_SUBREDDIT_PREFIX = re.compile(r"^r/", re.IGNORECASE)
_SUBREDDIT_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")


def string_or(value: Any, default: str = "") -> str:
    """Return ``value`` if it is a string, else ``default``."""
    return value if isinstance(value, str) else default


def optional_string(value: Any) -> Optional[str]:
    """Return a non-empty string or None."""
    return value if isinstance(value, str) and value else None


def number_or(value: Any, default: float = 0) -> float:
    """
    Return ``value`` if it is a finite number, else ``default``.

    Booleans are rejected even though ``bool`` subclasses ``int``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return value


def bool_or(value: Any, default: bool = False) -> bool:
    """Return ``value`` if it is a bool, else ``default``."""
    return value if isinstance(value, bool) else default


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _children(listing: Any) -> Optional[List[Any]]:
    """Return ``listing.data.children`` if it is a list, else None."""
    children = _mapping(_mapping(listing).get("data")).get("children")
    return children if isinstance(children, list) else None


def first_child_data(listing: Any) -> Optional[Mapping[str, Any]]:
    """Return the ``data`` mapping of a listing's first child, if any."""
    children = _children(listing)
    if not children:
        return None
    data = _mapping(children[0]).get("data")
    return data if isinstance(data, Mapping) else None


def sanitize_subreddit(name: str) -> str:
    """
    Reduce a subreddit name to characters safe for a request path.

    Strips surrounding whitespace, a leading ``r/`` (any case) and every
    character outside ``[A-Za-z0-9_]``.

    Example:
        >>> sanitize_subreddit("r/AskReddit!")
        'AskReddit'
    """
    name = _SUBREDDIT_PREFIX.sub("", name.strip())
    return _SUBREDDIT_INVALID_CHARS.sub("", name)


def sanitize_post_id(post_id: str) -> str:
    """Strip whitespace and an optional ``t3_`` prefix from a post ID."""
    post_id = post_id.strip()
    if post_id.startswith("t3_"):
        post_id = post_id[3:]
    return post_id


def external_url(url: str, permalink: str) -> str:
    """Pick the post's outbound URL, falling back to its reddit.com permalink."""
    if url:
        return url
    if permalink:
        return f"{REDDIT_WEB_URL}{permalink}"
    return ""


def normalize_post(raw: Any) -> Post:
    """
    Normalize the ``data`` object of a ``t3`` listing child into a Post.

    Args:
        raw: Raw post data (any type; non-mappings are treated as empty)

    Returns:
        Post with every field populated

    Example:
        >>> post = normalize_post({"id": "abc123", "title": "Hello"})
        >>> post.nsfw
        False
    """
    data = _mapping(raw)
    permalink = string_or(data.get("permalink"))

    return Post(
        id=string_or(data.get("id")),
        title=string_or(data.get("title")),
        self_text=string_or(data.get("selftext")),
        author=string_or(data.get("author")),
        subreddit=string_or(data.get("subreddit")),
        url=external_url(string_or(data.get("url")), permalink),
        permalink=permalink,
        score=number_or(data.get("score")),
        num_comments=number_or(data.get("num_comments")),
        created_utc=number_or(data.get("created_utc")),
        nsfw=bool_or(data.get("over_18")),
        spoiler=bool_or(data.get("spoiler")),
        flair=optional_string(data.get("link_flair_text")),
    )


def extract_listing(payload: Any, description: str = "listing") -> ListingPage:
    """
    Convert a raw listing response into a ListingPage.

    Args:
        payload: Decoded JSON body of a listing endpoint
        description: Used in the error message (e.g. "search")

    Returns:
        ListingPage with normalized posts and the ``after`` cursor

    Raises:
        UpstreamError: UPSTREAM_ERROR if ``data.children`` is absent.
            An empty list is valid.
    """
    children = _children(payload)
    if children is None:
        raise UpstreamError(
            f"Invalid {description} response", ErrorKind.UPSTREAM_ERROR
        )

    after = _mapping(_mapping(payload).get("data")).get("after")

    return ListingPage(
        items=[normalize_post(_mapping(child).get("data")) for child in children],
        next_cursor=optional_string(after),
    )


def extract_post_id(payload: Any) -> Optional[str]:
    """
    Recover a post ID from a ``[post, comments]`` pair or a single listing.

    Returns:
        The sanitized ID, or None if the payload has neither shape
    """
    if isinstance(payload, list):
        post = first_child_data(payload[0]) if payload else None
        post_id = (post or {}).get("id")
        if isinstance(post_id, str):
            return sanitize_post_id(post_id)

    post = first_child_data(payload)
    post_id = (post or {}).get("id")
    if isinstance(post_id, str):
        return sanitize_post_id(post_id)

    return None


def flatten_comments(children: Any, post_id: str) -> List[Comment]:
    """
    Flatten a comment tree into a pre-order list.

    Only ``t1`` nodes are emitted; ``more`` stubs and other kinds are
    skipped along with their subtrees. Top-level comments have depth 0
    and ``parent_id`` None; each reply level adds one to the depth.

    Args:
        children: ``data.children`` of the comments listing
        post_id: ID of the post the comments belong to

    Returns:
        Comments ordered parent-first, siblings in upstream order

    Example:
        >>> tree = [{"kind": "t1", "data": {"id": "a", "replies": ""}}]
        >>> [c.id for c in flatten_comments(tree, "p1")]
        ['a']
    """
    out: List[Comment] = []
    nodes = children if isinstance(children, list) else []

    # (node, parent_id, depth); reversed so the first sibling pops first
    stack: List[Tuple[Any, Optional[str], int]] = [
        (node, None, 0) for node in reversed(nodes)
    ]

    while stack:
        node, parent_id, depth = stack.pop()
        node = _mapping(node)
        data = node.get("data")
        if node.get("kind") != COMMENT_KIND or not isinstance(data, Mapping):
            continue

        comment_id = string_or(data.get("id"))
        out.append(
            Comment(
                id=comment_id,
                parent_id=parent_id,
                post_id=post_id,
                subreddit=string_or(data.get("subreddit")),
                author=string_or(data.get("author")),
                body=string_or(data.get("body")),
                score=number_or(data.get("score")),
                created_utc=number_or(data.get("created_utc")),
                permalink=string_or(data.get("permalink")),
                depth=depth,
            )
        )

        replies = data.get("replies")
        if isinstance(replies, Mapping):
            reply_nodes = _children(replies) or []
            stack.extend(
                (reply, comment_id or None, depth + 1)
                for reply in reversed(reply_nodes)
            )

    return out


def comment_children(payload: Any) -> List[Any]:
    """Return the children of the comments listing in a ``[post, comments]`` pair."""
    if isinstance(payload, list) and len(payload) > 1:
        return _children(payload[1]) or []
    return []
