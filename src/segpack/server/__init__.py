"""MCP server for page packs."""

from segpack.server.mcp_server import create_mcp_server

__all__ = ["create_mcp_server"]
