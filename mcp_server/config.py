"""Server configuration for the mcp-visual-chart MCP server."""

from __future__ import annotations

import os


def get_server_config() -> dict[str, str | int]:
    """
    Get server configuration from environment variables.

    STDIO is the default transport for local MCP clients; ``MCP_TRANSPORT=http``
    switches to streamable HTTP on ``HOST``:``PORT``.

    Returns:
        Configuration dictionary
    """
    return {
        "transport": os.environ.get("MCP_TRANSPORT", "stdio"),
        "port": int(os.environ.get("PORT", 8080)),
        "host": os.environ.get("HOST", "0.0.0.0"),
    }
