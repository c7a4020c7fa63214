"""MCP tools for chart rendering."""

from __future__ import annotations

from typing import Any

from fastmcp import Context
from fastmcp.exceptions import ToolError
from mcp.types import ImageContent, TextContent

from mcp_server.error_handling import handle_tool_error
from mcp_server.monitoring import track_tool_execution
from visual_chart.core.config import get_settings
from visual_chart.core.enums import OutputFormat
from visual_chart.core.logging_config import get_logger
from visual_chart.core.models import (
    ChartDescription,
    RenderResult,
    VegaChartInput,
    parse_output_format,
)
from visual_chart.storage.files import get_default_output_path, open_chart, save_chart
from visual_chart.validation import validate_chart_description, validate_vega_input
from visual_chart.visuals import render_chart, render_vega_chart

logger = get_logger(__name__)

CHART_ERROR_PREFIX = "Error creating chart"
VEGA_ERROR_PREFIX = "Error creating Vega-Lite chart"


def _should_open(auto_open: bool | None, default: bool) -> bool:
    if auto_open is None:
        return default
    return auto_open


async def _deliver(
    result: RenderResult,
    name: str,
    output_path: str | None,
    auto_open: bool | None,
    ctx: Context | None,
) -> dict[str, Any]:
    """Save a rendered chart, optionally open it, and build the success result."""
    settings = get_settings()
    path = output_path or get_default_output_path(
        name, result.extension, settings.output_dir
    )

    # Save failures propagate to the caller as tool errors
    save_chart(result.buffer, path)

    if _should_open(auto_open, settings.auto_open):
        open_chart(path)

    if ctx:
        await ctx.info(f"Chart saved to: {path}")

    return {
        "content": [
            {"type": "image", "data": result.base64, "mimeType": result.mime_type},
            {"type": "text", "text": f"Chart saved to: {path}"},
        ],
    }


@track_tool_execution
async def create_chart_tool(
    chart_type: str,
    datasets: list[dict[str, Any]],
    labels: list[str] | None = None,
    options: dict[str, Any] | None = None,
    output_format: OutputFormat | str | None = None,
    output_path: str | None = None,
    auto_open: bool | None = None,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """
    Validate, render and save a chart described in the simple dialect.

    Args:
        chart_type: Chart family (bar, line, pie, doughnut, scatter, area, radar,
            bubble, polarArea, histogram)
        datasets: One or more data series in Chart.js dataset shape
        labels: Category labels (x-axis for bar/line, segments for pie)
        options: Display options (title, legend, size, axes, ...)
        output_format: png (default) or svg
        output_path: Custom file path; a timestamped path under ./charts otherwise
        auto_open: Open the saved file in the default viewer

    Returns:
        Success: {"content": [{"type": "image", ...}, {"type": "text", "text": "Chart saved to: ..."}]}
        Failure: {"content": [{"type": "text", "text": "Error creating chart: ..."}], "isError": True}
    """
    try:
        description = ChartDescription.from_dict(
            {
                "type": chart_type,
                "labels": labels,
                "datasets": datasets,
                "options": options,
                "outputFormat": output_format,
                "outputPath": output_path,
                "autoOpen": auto_open,
            }
        )
        validate_chart_description(description)

        if ctx:
            await ctx.info(
                f"Rendering {description.chart_type.value} chart as "
                f"{description.output_format.value}"
            )

        result = await render_chart(description)
        return await _deliver(
            result,
            description.chart_type.value,
            description.output_path,
            description.auto_open,
            ctx,
        )

    except Exception as e:
        return await handle_tool_error(e, "create_chart", CHART_ERROR_PREFIX, ctx)


@track_tool_execution
async def create_vega_chart_tool(
    spec: Any,
    width: float | None = None,
    height: float | None = None,
    background: str | None = None,
    output_format: OutputFormat | str | None = None,
    output_path: str | None = None,
    auto_open: bool | None = None,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """
    Validate, compile, render and save a Vega-Lite chart.

    Args:
        spec: Vega-Lite specification
        width: Width override in pixels (wins over spec.width)
        height: Height override in pixels (wins over spec.height)
        background: Background colour override
        output_format: png (default) or svg
        output_path: Custom file path; a timestamped path under ./charts otherwise
        auto_open: Open the saved file in the default viewer

    Returns:
        Same shape as ``create_chart_tool``; errors are prefixed with
        "Error creating Vega-Lite chart: ".
    """
    try:
        vega_input = VegaChartInput(
            spec=spec,
            width=width,
            height=height,
            background=background,
            output_format=parse_output_format(output_format),
            output_path=output_path,
            auto_open=auto_open,
        )
        validate_vega_input(vega_input)

        if ctx:
            await ctx.info(f"Rendering Vega-Lite chart as {vega_input.output_format.value}")

        result = await render_vega_chart(vega_input)
        return await _deliver(result, "vega", output_path, auto_open, ctx)

    except Exception as e:
        return await handle_tool_error(e, "create_vega_chart", VEGA_ERROR_PREFIX, ctx)


def to_content_blocks(result: dict[str, Any]) -> list[ImageContent | TextContent]:
    """Convert a tool result dict into MCP content blocks.

    Raises:
        ToolError: For error results, so the transport reports ``isError``
            with the same text
    """
    if result.get("isError"):
        raise ToolError(result["content"][0]["text"])

    blocks: list[ImageContent | TextContent] = []
    for item in result["content"]:
        if item["type"] == "image":
            blocks.append(
                ImageContent(type="image", data=item["data"], mimeType=item["mimeType"])
            )
        else:
            blocks.append(TextContent(type="text", text=item["text"]))
    return blocks
