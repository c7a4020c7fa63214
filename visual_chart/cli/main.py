from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import typer
import yaml

from .. import __version__
from ..core.config import get_settings
from ..core.enums import OutputFormat
from ..core.exceptions import ChartError
from ..core.logging_config import get_logger, setup_logging
from ..core.models import ChartDescription, RenderResult, VegaChartInput
from ..storage.files import get_default_output_path, open_chart, save_chart
from ..validation import validate_chart_description, validate_vega_input
from ..visuals import render_chart, render_vega_chart
from . import output as cli_output

app = typer.Typer(help="mcp-visual-chart CLI")

logger = get_logger(__name__)


@app.callback()
def callback(
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Configure global CLI options."""
    setup_logging(json_output=json_logs, log_level=log_level)
    logger.debug("CLI initialized", extra={"json_logs": json_logs, "log_level": log_level})


def _load_document(path: Path) -> Any:
    """Load a JSON or YAML document (YAML is a superset of JSON)."""
    if not path.exists():
        cli_output.error(f"File not found: {path}")
        raise typer.Exit(code=1)
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        cli_output.error(f"Could not parse {path}: {e}")
        raise typer.Exit(code=1) from e


def _finish(result: RenderResult, name: str, output: Path | None, open_file: bool | None) -> None:
    settings = get_settings()
    path = str(output) if output else get_default_output_path(
        name, result.extension, settings.output_dir
    )
    try:
        save_chart(result.buffer, path)
    except OSError as e:
        cli_output.error(f"Failed to save chart to {path}: {e}")
        raise typer.Exit(code=1) from e

    cli_output.success(f"Chart saved to: {path}")

    should_open = open_file if open_file is not None else settings.auto_open
    if should_open and not open_chart(path):
        cli_output.warning("Could not open the chart in a viewer.")


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(__version__)


@app.command()
def render(
    chart_file: Path = typer.Argument(..., help="JSON or YAML chart description ({type, labels, datasets, options})"),  # noqa: B008
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file path"),  # noqa: B008
    output_format: OutputFormat | None = typer.Option(  # noqa: B008
        None, "--format", case_sensitive=False, help="Output format: png or svg (overrides the file)"
    ),
    open_file: bool | None = typer.Option(
        None, "--open/--no-open", help="Open the chart in the default viewer"
    ),  # noqa: B008
) -> None:
    """Render a chart description file to an image."""
    payload = _load_document(chart_file)
    if not isinstance(payload, dict):
        cli_output.error("Chart description must be a mapping with 'type' and 'datasets'.")
        raise typer.Exit(code=1)

    try:
        description = ChartDescription.from_dict(payload)
        if output_format is not None:
            description.output_format = output_format
        validate_chart_description(description)
        result = asyncio.run(render_chart(description))
    except ChartError as e:
        logger.warning("Chart rendering failed", extra={"file": str(chart_file), "error": str(e)})
        cli_output.error(f"Error creating chart: {e}")
        raise typer.Exit(code=1) from e

    target = output or (Path(description.output_path) if description.output_path else None)
    auto_open = open_file if open_file is not None else description.auto_open
    _finish(result, description.chart_type.value, target, auto_open)


@app.command()
def vega(
    spec_file: Path = typer.Argument(..., help="JSON or YAML Vega-Lite specification"),  # noqa: B008
    width: float | None = typer.Option(None, help="Width override in pixels"),  # noqa: B008
    height: float | None = typer.Option(None, help="Height override in pixels"),  # noqa: B008
    background: str | None = typer.Option(None, help="Background colour override"),  # noqa: B008
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file path"),  # noqa: B008
    output_format: OutputFormat = typer.Option(  # noqa: B008
        OutputFormat.PNG, "--format", case_sensitive=False, help="Output format: png or svg"
    ),
    open_file: bool | None = typer.Option(
        None, "--open/--no-open", help="Open the chart in the default viewer"
    ),  # noqa: B008
) -> None:
    """Render a Vega-Lite specification file to an image."""
    vega_input = VegaChartInput(
        spec=_load_document(spec_file),
        width=width,
        height=height,
        background=background,
        output_format=output_format,
    )

    try:
        validate_vega_input(vega_input)
        result = asyncio.run(render_vega_chart(vega_input))
    except ChartError as e:
        logger.warning("Vega-Lite rendering failed", extra={"file": str(spec_file), "error": str(e)})
        cli_output.error(f"Error creating Vega-Lite chart: {e}")
        raise typer.Exit(code=1) from e

    _finish(result, "vega", output, open_file)


@app.command()
def serve() -> None:
    """Run the MCP server (transport from MCP_TRANSPORT, stdio by default)."""
    from mcp_server.server import main as run_server

    run_server()
