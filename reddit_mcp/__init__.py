"""Reddit MCP server backed by Reddit's public JSON endpoints."""

__version__ = "0.1.0"
