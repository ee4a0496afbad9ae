"""
Tests for the get_post tool.

Tests cover:
- Input validation (post_id/post_url requirement, URL shape)
- Facade call arguments and response structure
- Error rendering
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import ValidationError

from reddit_mcp.models.responses import Post
from reddit_mcp.reddit.exceptions import ErrorKind, UpstreamError
from reddit_mcp.tools.get_post import GetPostInput, get_post


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.get_post = AsyncMock(
        return_value=Post(
            id="abc123",
            title="A post",
            self_text="body " * 10,
            subreddit="python",
            flair="Showcase",
        )
    )
    with patch("reddit_mcp.tools.get_post.get_reddit_json_client", return_value=client):
        yield client


class TestGetPostInput:
    """Test suite for GetPostInput validation."""

    def test_post_id_only(self):
        params = GetPostInput(post_id="t3_abc123")
        assert params.post_id == "t3_abc123"
        assert params.post_url is None

    def test_post_url_only(self):
        params = GetPostInput(post_url="https://www.reddit.com/r/python/comments/abc123/")
        assert params.post_url.endswith("/abc123/")

    def test_requires_one_reference(self):
        with pytest.raises(ValidationError) as exc_info:
            GetPostInput()

        assert "post_id or post_url" in str(exc_info.value)

    def test_empty_post_id_rejected(self):
        with pytest.raises(ValidationError):
            GetPostInput(post_id="")

    @pytest.mark.parametrize("url", ["reddit.com/r/x", "ftp://reddit.com/x", "just text"])
    def test_relative_or_non_http_url_rejected(self, url):
        with pytest.raises(ValidationError):
            GetPostInput(post_url=url)

    def test_non_reddit_host_passes_schema(self):
        """Test the host check is left to the client (BAD_INPUT from there)."""
        params = GetPostInput(post_url="https://example.com/post/1")
        assert params.post_url == "https://example.com/post/1"


@pytest.mark.asyncio
class TestGetPostTool:
    """Test suite for the get_post tool function."""

    async def test_returns_post(self, mock_client):
        result = json.loads(await get_post(post_id="abc123"))

        post = result["data"]["post"]
        assert post["id"] == "abc123"
        assert post["title"] == "A post"
        assert post["flair"] == "Showcase"
        assert post["nsfw"] is False
        assert result["metadata"]["source"] == "json"

        mock_client.get_post.assert_awaited_once_with(post_id="abc123", post_url=None)

    async def test_url_passed_through(self, mock_client):
        url = "https://www.reddit.com/r/python/comments/abc123/title/"

        await get_post(post_url=url)

        mock_client.get_post.assert_awaited_once_with(post_id=None, post_url=url)

    async def test_missing_reference_is_bad_input(self, mock_client):
        with pytest.raises(ToolError) as exc_info:
            await get_post()

        payload = json.loads(str(exc_info.value))
        assert payload["kind"] == "BAD_INPUT"
        assert "post_id or post_url" in payload["message"]
        mock_client.get_post.assert_not_awaited()

    async def test_not_found_rendered(self, mock_client):
        mock_client.get_post.side_effect = UpstreamError(
            "Post not found", ErrorKind.NOT_FOUND, status=404
        )

        with pytest.raises(ToolError) as exc_info:
            await get_post(post_id="gone")

        payload = json.loads(str(exc_info.value))
        assert payload["kind"] == "NOT_FOUND"
        assert payload["status"] == 404
        assert payload["retriable"] is False
