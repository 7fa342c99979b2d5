"""MCP stdio server exposing the command catalog as tools."""

from pvemcp.mcp.server import MCPServer, tool_result

__all__ = ["MCPServer", "tool_result"]
