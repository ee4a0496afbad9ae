"""
Tests for MCP output capping.

Tests cover:
- String and array truncation markers
- Second compaction pass and the final truncation notice
- MCP_MAX_OUTPUT_CHARS handling
"""
import json

import pytest

from reddit_mcp.utils.output import (
    DEFAULT_MAX_OUTPUT_CHARS,
    TRUNCATED_MESSAGE,
    compact_for_mcp,
    max_output_chars,
    render_tool_output,
)


class TestCompactForMcp:
    """Test suite for compact_for_mcp."""

    def test_short_values_unchanged(self):
        value = {"title": "hello", "tags": [1, 2], "score": 3, "nsfw": False, "flair": None}

        assert compact_for_mcp(value, max_string_chars=10, max_array_items=5) == value

    def test_long_string_truncated(self):
        result = compact_for_mcp("abcdefghij", max_string_chars=4, max_array_items=5)

        assert result == "abcd… [truncated 6 chars]"

    def test_long_array_truncated(self):
        result = compact_for_mcp(list(range(8)), max_string_chars=10, max_array_items=3)

        assert result == [0, 1, 2, {"_meta": "truncated array: 5 items omitted"}]

    def test_nested_values(self):
        value = {"posts": [{"body": "x" * 20}, {"body": "y"}]}

        result = compact_for_mcp(value, max_string_chars=5, max_array_items=1)

        assert result["posts"][0]["body"] == "xxxxx… [truncated 15 chars]"
        assert result["posts"][1] == {"_meta": "truncated array: 1 items omitted"}

    def test_input_not_modified(self):
        value = {"body": "x" * 20}

        compact_for_mcp(value, max_string_chars=5, max_array_items=1)

        assert value == {"body": "x" * 20}


class TestRenderToolOutput:
    """Test suite for render_tool_output."""

    def test_within_budget(self):
        text = render_tool_output({"a": "é"}, max_string_chars=10, max_array_items=5, max_chars=1000)

        assert text == '{\n  "a": "é"\n}'

    def test_second_pass_halves_caps(self):
        data = {"items": ["x" * 100 for _ in range(20)]}

        text = render_tool_output(data, max_string_chars=100, max_array_items=20, max_chars=1200)
        result = json.loads(text)

        assert len(result["items"]) == 11
        assert result["items"][0].startswith("x" * 50 + "…")
        assert result["items"][-1] == {"_meta": "truncated array: 10 items omitted"}

    def test_second_pass_keeps_at_least_five_items(self):
        data = {"items": ["x" * 200 for _ in range(8)]}

        text = render_tool_output(data, max_string_chars=200, max_array_items=8, max_chars=1000)
        result = json.loads(text)

        assert len(result["items"]) == 6
        assert all(item.startswith("x" * 100 + "…") for item in result["items"][:5])

    def test_falls_back_to_notice(self):
        data = {"body": "x" * 5000}

        result = json.loads(
            render_tool_output(data, max_string_chars=5000, max_array_items=10, max_chars=100)
        )

        assert result == {
            "truncated": True,
            "message": TRUNCATED_MESSAGE,
            "max_output_chars": 100,
        }


class TestMaxOutputChars:
    """Test suite for the MCP_MAX_OUTPUT_CHARS setting."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("MCP_MAX_OUTPUT_CHARS", raising=False)

        assert max_output_chars() == DEFAULT_MAX_OUTPUT_CHARS

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MCP_MAX_OUTPUT_CHARS", "1234")

        assert max_output_chars() == 1234

    @pytest.mark.parametrize("value", ["lots", "1.5"])
    def test_invalid_value_uses_default(self, monkeypatch, value):
        monkeypatch.setenv("MCP_MAX_OUTPUT_CHARS", value)

        assert max_output_chars() == DEFAULT_MAX_OUTPUT_CHARS
