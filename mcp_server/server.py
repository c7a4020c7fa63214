"""FastMCP server for mcp-visual-chart."""

from typing import Annotated, Any, Literal

from fastmcp import Context, FastMCP
from mcp.types import ImageContent, TextContent
from pydantic import Field
from starlette.responses import JSONResponse

from mcp_server.config import get_server_config
from mcp_server.monitoring import metrics
from mcp_server.tools import (
    create_chart_tool,
    create_vega_chart_tool,
    to_content_blocks,
)
from visual_chart import __version__
from visual_chart.core.config import get_settings
from visual_chart.core.logging_config import setup_logging

ChartType = Literal[
    "bar",
    "line",
    "pie",
    "doughnut",
    "scatter",
    "area",
    "radar",
    "bubble",
    "polarArea",
    "histogram",
]

mcp = FastMCP(
    "mcp-visual-chart",
    instructions=(
        "Render charts as PNG or SVG images. Use create_chart for Chart.js style "
        "descriptions and create_vega_chart for Vega-Lite specifications."
    ),
    version=__version__,
)


# Register Tools
@mcp.tool(output_schema=None)
async def create_chart(
    type: Annotated[ChartType, Field(description="Chart type")],  # noqa: A002
    datasets: Annotated[
        list[dict[str, Any]],
        Field(
            description=(
                "One or more data series: {label?, data, backgroundColor?, borderColor?, "
                "borderWidth?, fill?}. data holds numbers, or {x, y} objects for scatter "
                "and {x, y, r} objects for bubble charts."
            )
        ),
    ],
    labels: Annotated[
        list[str] | None,
        Field(description="Labels for data points (x-axis for bar/line, segments for pie)"),
    ] = None,
    options: Annotated[
        dict[str, Any] | None,
        Field(
            description=(
                "Display options: title, subtitle, showLegend, width (50-4096, default 800), "
                "height (50-4096, default 600), backgroundColor, xAxisLabel, yAxisLabel, "
                "stacked, indexAxis ('y' for horizontal bars), yAxisType (linear|logarithmic), "
                "beginAtZero, tension (0 straight, 0.4 smooth), showDataLabels"
            )
        ),
    ] = None,
    outputFormat: Annotated[  # noqa: N803
        Literal["png", "svg"] | None,
        Field(description="Output format: png (default) or svg"),
    ] = None,
    outputPath: Annotated[  # noqa: N803
        str | None, Field(description="Custom file path to save the chart")
    ] = None,
    autoOpen: Annotated[  # noqa: N803
        bool | None, Field(description="Open chart in default viewer (default true)")
    ] = None,
    ctx: Context | None = None,
) -> list[ImageContent | TextContent]:
    """Create a chart visualization. Renders a bar, line, pie, doughnut, scatter, area, radar, bubble, polarArea or histogram chart as PNG or SVG, saves it to disk, and returns the image."""
    result = await create_chart_tool(
        type, datasets, labels, options, outputFormat, outputPath, autoOpen, ctx
    )
    return to_content_blocks(result)


@mcp.tool(output_schema=None)
async def create_vega_chart(
    spec: Annotated[
        dict[str, Any],
        Field(description="Vega-Lite specification (unit spec with mark/encoding, or a composition)"),
    ],
    width: Annotated[
        float | None, Field(description="Width in pixels, overrides spec.width (default 400)")
    ] = None,
    height: Annotated[
        float | None, Field(description="Height in pixels, overrides spec.height (default 300)")
    ] = None,
    background: Annotated[
        str | None, Field(description="Background color, overrides spec.background (default white)")
    ] = None,
    outputFormat: Annotated[  # noqa: N803
        Literal["png", "svg"] | None,
        Field(description="Output format: png (default) or svg"),
    ] = None,
    outputPath: Annotated[  # noqa: N803
        str | None, Field(description="Custom file path to save the chart")
    ] = None,
    autoOpen: Annotated[  # noqa: N803
        bool | None, Field(description="Open chart in default viewer (default true)")
    ] = None,
    ctx: Context | None = None,
) -> list[ImageContent | TextContent]:
    """Create a chart from a Vega-Lite specification. Renders PNG or SVG, saves it to disk, and returns the image."""
    result = await create_vega_chart_tool(
        spec, width, height, background, outputFormat, outputPath, autoOpen, ctx
    )
    return to_content_blocks(result)


# Health check endpoint
@mcp.custom_route("/health", methods=["GET"])
async def health_check(request) -> JSONResponse:  # type: ignore[no-untyped-def]
    """Health check endpoint for monitoring."""
    return JSONResponse({"status": "healthy", "service": "mcp-visual-chart"})


# Metrics endpoint
@mcp.custom_route("/metrics", methods=["GET"])
async def get_metrics_endpoint(request) -> JSONResponse:  # type: ignore[no-untyped-def]
    """Metrics endpoint for monitoring."""
    return JSONResponse(metrics.get_metrics())


def main() -> None:
    """Run the server with the transport selected by MCP_TRANSPORT."""
    settings = get_settings()
    setup_logging(
        json_output=settings.json_logs,
        log_level=settings.log_level,
        log_file=settings.log_file,
    )

    config = get_server_config()
    if config["transport"] == "http":
        mcp.run(transport="streamable-http", host=str(config["host"]), port=int(config["port"]))
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
