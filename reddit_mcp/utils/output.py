"""
Output size capping for MCP tool results.

MCP clients reject or truncate oversized tool results, so every tool
renders its response through render_tool_output: long strings and
arrays are shortened first, and if the JSON text is still over budget a
short notice replaces it.
"""
import json
import os
from typing import Any, Optional

from reddit_mcp.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_OUTPUT_CHARS = 60_000

TRUNCATED_MESSAGE = (
    "Tool output exceeded MCP size limits. Narrow the query with smaller "
    "limit/after or call get_post/get_comments for a specific thread."
)


def max_output_chars() -> int:
    """Return the output budget from MCP_MAX_OUTPUT_CHARS (default: 60000)."""
    raw = os.getenv("MCP_MAX_OUTPUT_CHARS")
    if not raw:
        return DEFAULT_MAX_OUTPUT_CHARS
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            "invalid_env_value",
            variable="MCP_MAX_OUTPUT_CHARS",
            value=raw,
            default=DEFAULT_MAX_OUTPUT_CHARS,
        )
        return DEFAULT_MAX_OUTPUT_CHARS


def compact_for_mcp(value: Any, max_string_chars: int, max_array_items: int) -> Any:
    """
    Recursively shorten strings and lists in a JSON-compatible value.

    Args:
        value: JSON-compatible value (dict, list, str, number, bool, None)
        max_string_chars: Strings longer than this are cut and annotated
        max_array_items: Lists longer than this keep only their head

    Returns:
        A new value; the input is not modified

    Example:
        >>> compact_for_mcp({"body": "x" * 10}, max_string_chars=4, max_array_items=5)
        {'body': 'xxxx… [truncated 6 chars]'}
    """
    if isinstance(value, str):
        if len(value) <= max_string_chars:
            return value
        omitted = len(value) - max_string_chars
        return f"{value[:max_string_chars]}… [truncated {omitted} chars]"

    if isinstance(value, list):
        compacted = [
            compact_for_mcp(item, max_string_chars, max_array_items)
            for item in value[:max_array_items]
        ]
        if len(value) > max_array_items:
            omitted = len(value) - max_array_items
            compacted.append({"_meta": f"truncated array: {omitted} items omitted"})
        return compacted

    if isinstance(value, dict):
        return {
            key: compact_for_mcp(inner, max_string_chars, max_array_items)
            for key, inner in value.items()
        }

    return value


def _dumps(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def render_tool_output(
    data: Any,
    max_string_chars: int,
    max_array_items: int,
    max_chars: Optional[int] = None,
) -> str:
    """
    Render a tool result as JSON text that fits the output budget.

    Compacts once with the given caps; if the text is still longer than
    ``max_chars``, compacts again at half the caps (at least 5 array
    items), and finally falls back to a truncation notice.

    Args:
        data: JSON-compatible tool result
        max_string_chars: Per-string cap for the first pass
        max_array_items: Per-array cap for the first pass
        max_chars: Total budget (default: MCP_MAX_OUTPUT_CHARS)

    Returns:
        Indented JSON text
    """
    budget = max_chars if max_chars is not None else max_output_chars()

    compact = compact_for_mcp(data, max_string_chars, max_array_items)
    text = _dumps(compact)

    if len(text) > budget:
        compact = compact_for_mcp(
            compact,
            max_string_chars // 2,
            max(5, max_array_items // 2),
        )
        text = _dumps(compact)

    if len(text) > budget:
        logger.warning("tool_output_over_budget", length=len(text), budget=budget)
        text = _dumps(
            {
                "truncated": True,
                "message": TRUNCATED_MESSAGE,
                "max_output_chars": budget,
            }
        )

    return text
