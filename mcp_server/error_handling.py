"""Centralized error handling for MCP tools.

Every failure inside a tool becomes a uniform error result; nothing is raised
across the tool boundary.
"""
from typing import Any

from fastmcp import Context

from mcp_server.monitoring import metrics
from visual_chart.core.exceptions import (
    CompilationError,
    RenderError,
    ValidationError,
    VegaValidationError,
)
from visual_chart.core.logging_config import get_logger

logger = get_logger(__name__)


def classify_error(error: Exception) -> str:
    """Map an exception onto the error type recorded in metrics and logs."""
    if isinstance(error, VegaValidationError):
        return "vega_validation_error"
    if isinstance(error, ValidationError):
        return "validation_error"
    if isinstance(error, CompilationError):
        return "compilation_error"
    if isinstance(error, RenderError):
        return "render_error"
    if isinstance(error, OSError):
        return "file_error"
    return "internal_error"


def error_result(message: str) -> dict[str, Any]:
    """Build a tool error result with a single text item."""
    return {
        "content": [{"type": "text", "text": message}],
        "isError": True,
    }


async def handle_tool_error(
    error: Exception,
    tool_name: str,
    prefix: str,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """
    Standardized error handling for MCP tools.

    Args:
        error: The exception that occurred
        tool_name: Name of the tool that failed
        prefix: Message prefix identifying the tool, e.g. "Error creating chart"
        ctx: MCP context for client logging

    Returns:
        Error result dict: {"content": [{"type": "text", "text": str}], "isError": True}
    """
    error_type = classify_error(error)
    message = f"{prefix}: {error}"

    # Caller mistakes are expected; only unexpected failures get a traceback
    if error_type in ("validation_error", "vega_validation_error", "compilation_error"):
        logger.warning(
            f"Tool '{tool_name}' rejected input: {error}",
            extra={"tool": tool_name, "error_type": error_type},
        )
    else:
        logger.exception(
            f"Error in tool '{tool_name}': {error}",
            extra={"tool": tool_name, "error_type": error_type},
        )

    metrics.record_error(error_type, tool_name)

    if ctx:
        await ctx.error(message)

    return error_result(message)
