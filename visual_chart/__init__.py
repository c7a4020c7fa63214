"""Chart rendering toolkit behind the mcp-visual-chart MCP server."""

__version__ = "0.1.0"
