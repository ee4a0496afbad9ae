"""
Pydantic models for normalized Reddit data and tool responses.

Post, Comment and ListingPage are the stable internal schema produced by
the normalizer. They are frozen: every request builds fresh instances
and nothing mutates them afterwards.
"""
from typing import Any, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class Post(BaseModel):
    """
    Normalized Reddit post (``t3``).

    All fields default to empty/zero/false so a sparse upstream record
    still produces a valid Post.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str = ""
    self_text: str = ""
    author: str = ""
    subreddit: str = ""
    url: str = Field("", description="Outbound link, or the reddit.com permalink for self posts")
    permalink: str = ""
    score: Number = 0
    num_comments: Number = 0
    created_utc: Number = 0
    nsfw: bool = False
    spoiler: bool = False
    flair: Optional[str] = None


class Comment(BaseModel):
    """
    Normalized Reddit comment (``t1``) in a flattened thread.

    ``parent_id`` is None for top-level comments, whose ``depth`` is 0.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    parent_id: Optional[str] = None
    post_id: str = ""
    subreddit: str = ""
    author: str = ""
    body: str = ""
    score: Number = 0
    created_utc: Number = 0
    permalink: str = ""
    depth: int = Field(0, ge=0)


class ListingPage(BaseModel):
    """One page of posts plus the opaque cursor for the next page."""

    model_config = ConfigDict(frozen=True)

    items: List[Post] = Field(default_factory=list)
    next_cursor: Optional[str] = Field(
        None,
        description="Pass back as `after` to fetch the next page; None on the last page",
    )


class CommentsResult(BaseModel):
    """Flattened comments of a single post."""

    model_config = ConfigDict(frozen=True)

    post_id: str
    comments: List[Comment] = Field(default_factory=list)


class ResponseMetadata(BaseModel):
    """
    Metadata included in all tool responses.
    """

    source: Literal["json"] = Field(
        "json",
        description="Upstream data source (public Reddit JSON endpoints)",
    )
    execution_time_ms: float = Field(
        ...,
        ge=0,
        description="Tool execution time in milliseconds",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "source": "json",
                "execution_time_ms": 412.7,
            }
        }
    )


# Generic type for tool result data
T = TypeVar("T")


class ToolResponse(BaseModel, Generic[T]):
    """
    Generic response wrapper for all MCP tools.

    Wraps tool-specific data with standard metadata.

    Example:
        >>> response = ToolResponse(
        ...     data={"posts": [...], "next_cursor": "t3_abc123"},
        ...     metadata=ResponseMetadata(execution_time_ms=412.7),
        ... )
    """

    data: T = Field(
        ...,
        description="Tool-specific result data",
    )
    metadata: ResponseMetadata = Field(
        ...,
        description="Response metadata (source, timing)",
    )


class ErrorResponse(BaseModel):
    """
    Error payload rendered back to the MCP client.

    Mirrors UpstreamError so the client sees the kind, status, retriable
    flag and message verbatim.
    """

    kind: str = Field(
        ...,
        description="Error classification (e.g. NOT_FOUND, RATE_LIMITED)",
    )
    status: Optional[int] = Field(
        None,
        description="HTTP status code from Reddit, when known",
    )
    retriable: bool = Field(
        ...,
        description="Whether retrying the same request later may succeed",
    )
    message: str = Field(
        ...,
        min_length=1,
        description="Human-readable error message",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "kind": "RATE_LIMITED",
                "status": 429,
                "retriable": True,
                "message": "Rate limited by Reddit",
            }
        }
    )

    @classmethod
    def from_error(cls, error: Any) -> "ErrorResponse":
        """Build from an UpstreamError."""
        return cls(**error.to_dict())
