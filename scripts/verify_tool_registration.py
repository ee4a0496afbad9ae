#!/usr/bin/env python3
"""
Verify that all Reddit tools are properly registered with FastMCP.

This script imports the MCP server and checks that:
1. The server instance exists
2. Every expected tool is registered
3. Each tool exposes a description and an input schema
"""

import asyncio
import sys

from reddit_mcp.server import SERVER_VERSION, mcp
import reddit_mcp.tools  # noqa: F401  Ensure tools are imported and registered

EXPECTED_TOOLS = {"list_subreddit_posts", "get_post", "get_comments", "search_reddit"}


async def verify_tool_registration() -> bool:
    """Print registered tools and return True if all expected tools exist."""
    print("=" * 60)
    print("MCP Tool Registration Verification")
    print("=" * 60)

    print(f"\n✓ MCP Server Instance: {mcp.name} v{SERVER_VERSION}")

    tools = await mcp.list_tools()
    print(f"\n✓ Total Tools Registered: {len(tools)}")

    print("\nRegistered Tools:")
    for i, tool in enumerate(tools, 1):
        params = ", ".join(tool.inputSchema.get("properties", {}).keys())
        print(f"  {i}. {tool.name}({params})")
        print(f"     {(tool.description or 'N/A').strip().splitlines()[0]}")

    missing = EXPECTED_TOOLS - {tool.name for tool in tools}

    print("\n" + "=" * 60)
    if missing:
        print(f"✗ VERIFICATION FAILED: missing {', '.join(sorted(missing))}")
        print("=" * 60)
        return False

    print("✓ VERIFICATION SUCCESSFUL")
    print("=" * 60)
    return True


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(verify_tool_registration()) else 1)
