"""MCP tools. Importing this package registers every tool on the server."""

from busfinder_mcp.tools import history_tools, search_tools, suggestion_tools

__all__ = ["history_tools", "search_tools", "suggestion_tools"]
