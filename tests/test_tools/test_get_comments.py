"""
Tests for the get_comments tool.

Tests cover:
- Input validation (sort enum, limit/depth ranges, inherited post reference)
- Facade call arguments and flattened response structure
- Error rendering
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import ValidationError

from reddit_mcp.models.responses import Comment, CommentsResult
from reddit_mcp.reddit.exceptions import ErrorKind, UpstreamError
from reddit_mcp.tools.get_comments import GetCommentsInput, get_comments


@pytest.fixture
def sample_result():
    return CommentsResult(
        post_id="abc123",
        comments=[
            Comment(id="c1", post_id="abc123", body="top level", depth=0),
            Comment(id="c2", parent_id="c1", post_id="abc123", body="reply", depth=1),
            Comment(id="c3", post_id="abc123", body="second top level", depth=0),
        ],
    )


@pytest.fixture
def mock_client(sample_result):
    client = MagicMock()
    client.get_comments = AsyncMock(return_value=sample_result)
    with patch("reddit_mcp.tools.get_comments.get_reddit_json_client", return_value=client):
        yield client


class TestGetCommentsInput:
    """Test suite for GetCommentsInput validation."""

    def test_defaults(self):
        params = GetCommentsInput(post_id="abc123")

        assert params.sort == "top"
        assert params.limit == 20
        assert params.depth == 3

    def test_inherits_reference_requirement(self):
        with pytest.raises(ValidationError):
            GetCommentsInput(sort="new")

    @pytest.mark.parametrize("sort", ["confidence", "top", "new", "controversial", "old", "qa"])
    def test_valid_sorts(self, sort):
        assert GetCommentsInput(post_id="abc123", sort=sort).sort == sort

    def test_invalid_sort(self):
        with pytest.raises(ValidationError):
            GetCommentsInput(post_id="abc123", sort="best")

    @pytest.mark.parametrize("field,value", [("limit", 0), ("limit", 51), ("depth", 0), ("depth", 7)])
    def test_ranges(self, field, value):
        with pytest.raises(ValidationError):
            GetCommentsInput(post_id="abc123", **{field: value})


@pytest.mark.asyncio
class TestGetCommentsTool:
    """Test suite for the get_comments tool function."""

    async def test_returns_flattened_comments(self, mock_client):
        result = json.loads(await get_comments(post_id="abc123"))

        data = result["data"]
        assert data["post_id"] == "abc123"
        assert data["total_comments"] == 3
        assert data["root_comments"] == 2
        assert [(c["id"], c["depth"], c["parent_id"]) for c in data["comments"]] == [
            ("c1", 0, None),
            ("c2", 1, "c1"),
            ("c3", 0, None),
        ]

    async def test_passes_arguments_to_client(self, mock_client):
        await get_comments(
            post_url="https://www.reddit.com/r/x/comments/abc123/t/",
            sort="new",
            limit=50,
            depth=6,
        )

        mock_client.get_comments.assert_awaited_once_with(
            post_id=None,
            post_url="https://www.reddit.com/r/x/comments/abc123/t/",
            sort="new",
            limit=50,
            depth=6,
        )

    async def test_depth_out_of_range_is_bad_input(self, mock_client):
        with pytest.raises(ToolError) as exc_info:
            await get_comments(post_id="abc123", depth=10)

        payload = json.loads(str(exc_info.value))
        assert payload["kind"] == "BAD_INPUT"
        assert "depth" in payload["message"]
        mock_client.get_comments.assert_not_awaited()

    async def test_upstream_error_rendered(self, mock_client):
        mock_client.get_comments.side_effect = UpstreamError(
            "post_url must point to reddit.com", ErrorKind.BAD_INPUT
        )

        with pytest.raises(ToolError) as exc_info:
            await get_comments(post_url="https://example.com/x")

        payload = json.loads(str(exc_info.value))
        assert payload == {
            "kind": "BAD_INPUT",
            "status": None,
            "retriable": False,
            "message": "post_url must point to reddit.com",
        }
