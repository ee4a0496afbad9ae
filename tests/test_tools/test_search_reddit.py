"""
Tests for the search_reddit tool.

Tests cover:
- Input validation (query length, subreddit pattern, enums, limit)
- Global vs subreddit-scoped searches
- Error rendering
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import ValidationError

from reddit_mcp.models.responses import ListingPage, Post
from reddit_mcp.reddit.exceptions import ErrorKind, UpstreamError
from reddit_mcp.tools.search_reddit import SearchRedditInput, search_reddit


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.search = AsyncMock(
        return_value=ListingPage(
            items=[Post(id="s1", title="asyncio tips", subreddit="python")],
            next_cursor=None,
        )
    )
    with patch("reddit_mcp.tools.search_reddit.get_reddit_json_client", return_value=client):
        yield client


class TestSearchRedditInput:
    """Test suite for SearchRedditInput validation."""

    def test_defaults(self):
        params = SearchRedditInput(query="python")

        assert params.subreddit is None
        assert params.sort == "relevance"
        assert params.timeframe == "week"
        assert params.limit == 10
        assert params.after is None

    def test_query_is_stripped(self):
        assert SearchRedditInput(query="  machine learning  ").query == "machine learning"

    @pytest.mark.parametrize("query", ["", "   ", "q" * 513])
    def test_invalid_query(self, query):
        with pytest.raises(ValidationError):
            SearchRedditInput(query=query)

    def test_invalid_subreddit(self):
        with pytest.raises(ValidationError):
            SearchRedditInput(query="python", subreddit="bad name!")

    @pytest.mark.parametrize("sort", ["relevance", "hot", "top", "new", "comments"])
    def test_valid_sorts(self, sort):
        assert SearchRedditInput(query="python", sort=sort).sort == sort

    def test_invalid_timeframe(self):
        with pytest.raises(ValidationError):
            SearchRedditInput(query="python", timeframe="forever")


@pytest.mark.asyncio
class TestSearchRedditTool:
    """Test suite for the search_reddit tool function."""

    async def test_global_search(self, mock_client):
        result = json.loads(await search_reddit(query="asyncio"))

        data = result["data"]
        assert data["query"] == "asyncio"
        assert data["subreddit"] is None
        assert data["total_returned"] == 1
        assert data["next_cursor"] is None
        assert data["posts"][0]["title"] == "asyncio tips"

        mock_client.search.assert_awaited_once_with(
            "asyncio",
            subreddit=None,
            sort="relevance",
            timeframe="week",
            limit=10,
            after=None,
        )

    async def test_subreddit_search(self, mock_client):
        await search_reddit(
            query="gil", subreddit="python", sort="top", timeframe="all", limit=25, after="t3_a"
        )

        mock_client.search.assert_awaited_once_with(
            "gil",
            subreddit="python",
            sort="top",
            timeframe="all",
            limit=25,
            after="t3_a",
        )

    async def test_invalid_sort_is_bad_input(self, mock_client):
        with pytest.raises(ToolError) as exc_info:
            await search_reddit(query="python", sort="best")

        payload = json.loads(str(exc_info.value))
        assert payload["kind"] == "BAD_INPUT"
        assert "sort" in payload["message"]
        mock_client.search.assert_not_awaited()

    async def test_network_error_rendered(self, mock_client):
        mock_client.search.side_effect = UpstreamError(
            "connection reset", ErrorKind.NETWORK_ERROR, retriable=True
        )

        with pytest.raises(ToolError) as exc_info:
            await search_reddit(query="python")

        payload = json.loads(str(exc_info.value))
        assert payload["kind"] == "NETWORK_ERROR"
        assert payload["status"] is None
        assert payload["retriable"] is True
