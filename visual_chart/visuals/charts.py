"""Chart configuration building and matplotlib rendering for the simple dialect.

``build_chart_config`` turns a validated ``ChartDescription`` into a Chart.js
style configuration (type, labelled datasets, options). ``ChartRenderer``
draws such a configuration onto a matplotlib figure and returns PNG or SVG bytes.
"""

from __future__ import annotations

import asyncio
import base64
import math
from collections.abc import Mapping
from io import BytesIO
from typing import Any

import matplotlib
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..core.enums import RADIAL_FAMILIES, ChartFamily, OutputFormat
from ..core.exceptions import RenderError
from ..core.logging_config import get_logger
from ..core.models import ChartDescription, RenderResult
from .colors import BORDER_COLORS, FILL_COLORS, apply_color_palette, to_rgba

# Use non-interactive backend for server environments
matplotlib.use("Agg")

logger = get_logger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_BACKGROUND = "white"

# Chart.js font sizes are CSS pixels; matplotlib wants points
_PX_TO_PT = 0.75


def resolve_engine_type(chart_type: ChartFamily | str) -> str:
    """Map chart families onto the engine's native chart types."""
    family = ChartFamily(chart_type)
    if family is ChartFamily.AREA:
        return "line"
    if family is ChartFamily.HISTOGRAM:
        return "bar"
    return family.value


def build_chart_config(description: ChartDescription) -> dict[str, Any]:
    """Build the engine-facing configuration for a validated description.

    Applies the default palette, turns on fill for area charts and translates
    display options into title, legend, data-label and scale settings.
    """
    datasets = apply_color_palette(description.datasets, description.chart_type)

    if description.chart_type == ChartFamily.AREA:
        for ds in datasets:
            if ds.fill is None:
                ds.fill = True

    data: dict[str, Any] = {"datasets": [ds.to_dict() for ds in datasets]}
    if description.labels is not None:
        data["labels"] = list(description.labels)

    return {
        "type": resolve_engine_type(description.chart_type),
        "data": data,
        "options": _build_options(description),
    }


def _build_options(description: ChartDescription) -> dict[str, Any]:
    opts = description.options
    plugins: dict[str, Any] = {}

    if opts.title:
        plugins["title"] = {
            "display": True,
            "text": opts.title,
            "font": {"size": 18, "weight": "bold"},
            "padding": {"bottom": 4},
        }

    if opts.subtitle:
        plugins["subtitle"] = {
            "display": True,
            "text": opts.subtitle,
            "font": {"size": 14},
            "padding": {"bottom": 10},
        }

    plugins["legend"] = {
        "display": opts.show_legend if opts.show_legend is not None else True,
    }

    if opts.show_data_labels:
        plugins["datalabels"] = {"display": True}

    result: dict[str, Any] = dict(opts.extra)
    result.update({"responsive": False, "animation": False, "plugins": plugins})

    if opts.index_axis:
        result["indexAxis"] = opts.index_axis

    if opts.tension is not None:
        result["elements"] = {"line": {"tension": opts.tension}}

    scales = _build_scales(description)
    if scales:
        result["scales"] = scales

    return result


def _build_scales(description: ChartDescription) -> dict[str, Any] | None:
    # No axes for radial/arc charts
    if description.chart_type in RADIAL_FAMILIES:
        return None

    opts = description.options
    scales: dict[str, Any] = {}

    x_scale: dict[str, Any] = {}
    if opts.x_axis_label:
        x_scale["title"] = {"display": True, "text": opts.x_axis_label}
    if opts.stacked:
        x_scale["stacked"] = True
    if description.chart_type == ChartFamily.HISTOGRAM:
        x_scale["type"] = "linear"
    if x_scale:
        scales["x"] = x_scale

    y_scale: dict[str, Any] = {}
    if opts.y_axis_label:
        y_scale["title"] = {"display": True, "text": opts.y_axis_label}
    if opts.stacked:
        y_scale["stacked"] = True
    if opts.y_axis_type == "logarithmic":
        y_scale["type"] = "logarithmic"
    if opts.begin_at_zero:
        y_scale["beginAtZero"] = True
    if y_scale:
        scales["y"] = y_scale

    return scales or None


def _color_at(value: Any, index: int, default: str) -> tuple[float, float, float, float]:
    if isinstance(value, (list, tuple)):
        if not value:
            return to_rgba(default)
        return to_rgba(value[index % len(value)], default)
    return to_rgba(value, default)


def _y_value(point: Any) -> float:
    if isinstance(point, Mapping):
        point = point.get("y")
    try:
        return float(point)
    except (TypeError, ValueError):
        return math.nan


def _xy_values(data: list[Any]) -> tuple[np.ndarray, np.ndarray]:
    xs = []
    ys = []
    for i, point in enumerate(data):
        if isinstance(point, Mapping):
            xs.append(_y_value({"y": point.get("x")}))
            ys.append(_y_value(point))
        else:
            xs.append(float(i))
            ys.append(_y_value(point))
    return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)


def _format_value(value: float) -> str:
    return f"{value:g}"


def _segment_value_formatter(total: float):
    def fmt(pct: float) -> str:
        return _format_value(round(pct * total / 100, 6))

    return fmt


def smooth_curve(
    xs: np.ndarray, ys: np.ndarray, tension: float, samples: int = 16
) -> tuple[np.ndarray, np.ndarray]:
    """Interpolate a polyline with a cardinal spline of the given tension.

    Tension 0 returns the points unchanged; 0.4 gives Chart.js-like curves.
    """
    if tension <= 0 or len(xs) < 3 or np.isnan(xs).any() or np.isnan(ys).any():
        return xs, ys

    pts = np.column_stack([xs, ys]).astype(float)
    padded = np.vstack([pts[0], pts, pts[-1]])
    tangents = tension * (padded[2:] - padded[:-2])

    t = np.linspace(0.0, 1.0, samples, endpoint=False)[:, None]
    h00 = 2 * t**3 - 3 * t**2 + 1
    h10 = t**3 - 2 * t**2 + t
    h01 = -2 * t**3 + 3 * t**2
    h11 = t**3 - t**2

    segments = [
        h00 * pts[i] + h10 * tangents[i] + h01 * pts[i + 1] + h11 * tangents[i + 1]
        for i in range(len(pts) - 1)
    ]
    curve = np.vstack(segments + [pts[-1:]])
    return curve[:, 0], curve[:, 1]


class ChartRenderer:
    """Render Chart.js style configurations with matplotlib."""

    def __init__(self, dpi: int = 100):
        """Initialize chart renderer.

        Args:
            dpi: Resolution used to convert pixel dimensions into figure inches
        """
        self.dpi = dpi

    def render(
        self,
        config: dict[str, Any],
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        background: str = DEFAULT_BACKGROUND,
        output_format: OutputFormat = OutputFormat.PNG,
    ) -> bytes:
        """Draw a chart configuration and encode it.

        Args:
            config: Configuration produced by ``build_chart_config``
            width: Image width in pixels
            height: Image height in pixels
            background: CSS background colour
            output_format: PNG or SVG

        Returns:
            Encoded image bytes

        Raises:
            RenderError: If matplotlib cannot draw or encode the chart
        """
        try:
            fig = Figure(
                figsize=(width / self.dpi, height / self.dpi),
                dpi=self.dpi,
                layout="constrained",
            )
            fig.patch.set_facecolor(to_rgba(background, DEFAULT_BACKGROUND))
            self._draw(fig, config)
            buffer = BytesIO()
            fig.savefig(
                buffer,
                format=output_format.value,
                dpi=self.dpi,
                facecolor=fig.get_facecolor(),
            )
            return buffer.getvalue()
        except (ValueError, TypeError, OverflowError) as e:
            raise RenderError(f"Chart rendering failed: {e}") from e

    def _draw(self, fig: Figure, config: dict[str, Any]) -> None:
        engine_type = config["type"]
        options = config.get("options", {})
        plugins = options.get("plugins", {})
        datasets = config["data"]["datasets"]
        labels = config["data"].get("labels")

        if engine_type in ("radar", "polarArea"):
            ax = fig.add_subplot(projection="polar")
        else:
            ax = fig.add_subplot()
        ax.set_facecolor(fig.get_facecolor())

        drawers = {
            "bar": self._draw_bar,
            "line": self._draw_line,
            "pie": self._draw_arc,
            "doughnut": self._draw_arc,
            "polarArea": self._draw_polar_area,
            "radar": self._draw_radar,
            "scatter": self._draw_scatter,
            "bubble": self._draw_scatter,
        }
        draw = drawers.get(engine_type)
        if draw is None:
            raise ValueError(f"unsupported chart type '{engine_type}'")
        draw(ax, engine_type, datasets, labels, options)

        if engine_type not in ("pie", "doughnut", "polarArea", "radar"):
            self._apply_scales(ax, options)

        title = plugins.get("title")
        if title and title.get("display"):
            fig.suptitle(
                title["text"],
                fontsize=title["font"]["size"] * _PX_TO_PT,
                fontweight=title["font"].get("weight", "normal"),
            )
        subtitle = plugins.get("subtitle")
        if subtitle and subtitle.get("display"):
            ax.set_title(subtitle["text"], fontsize=subtitle["font"]["size"] * _PX_TO_PT)

        legend = plugins.get("legend", {})
        if legend.get("display", True) and engine_type not in ("pie", "doughnut", "polarArea"):
            handles, handle_labels = ax.get_legend_handles_labels()
            if handles:
                ax.legend(handles, handle_labels, loc="best")

    @staticmethod
    def _show_data_labels(options: dict[str, Any]) -> bool:
        return bool(options.get("plugins", {}).get("datalabels", {}).get("display"))

    def _draw_bar(
        self,
        ax: Axes,
        engine_type: str,
        datasets: list[dict[str, Any]],
        labels: list[str] | None,
        options: dict[str, Any],
    ) -> None:
        scales = options.get("scales", {})
        horizontal = options.get("indexAxis") == "y"
        stacked = bool(scales.get("x", {}).get("stacked") or scales.get("y", {}).get("stacked"))
        linear_x = scales.get("x", {}).get("type") == "linear"

        count = max(len(labels or []), max(len(ds["data"]) for ds in datasets))
        categories = list(labels) if labels else [str(i + 1) for i in range(count)]
        categories += [""] * (count - len(categories))

        positions = np.arange(count, dtype=float)
        group_width = 0.8
        numeric_x = False
        if linear_x and labels:
            try:
                positions = np.asarray([float(label) for label in categories], dtype=float)
                numeric_x = True
            except ValueError:
                pass
            else:
                # Histogram bins touch: one bar spans the smallest label gap
                gaps = np.diff(np.sort(positions))
                group_width = float(gaps.min()) if len(gaps) and gaps.min() > 0 else 1.0

        bar_width = group_width if stacked else group_width / len(datasets)
        bottoms = np.zeros(count)
        show_values = self._show_data_labels(options)

        for k, ds in enumerate(datasets):
            values = np.full(count, np.nan)
            for i, point in enumerate(ds["data"][:count]):
                values[i] = _y_value(point)

            offset = 0.0 if stacked else (k - (len(datasets) - 1) / 2) * bar_width
            colors = [_color_at(ds.get("backgroundColor"), i, FILL_COLORS[0]) for i in range(count)]
            edges = [_color_at(ds.get("borderColor"), i, BORDER_COLORS[0]) for i in range(count)]
            common = {
                "color": colors,
                "edgecolor": edges,
                "linewidth": ds.get("borderWidth", 0) or 0,
                "label": ds.get("label"),
            }
            if horizontal:
                container = ax.barh(
                    positions + offset, values, height=bar_width, left=bottoms, **common
                )
            else:
                container = ax.bar(
                    positions + offset, values, width=bar_width, bottom=bottoms, **common
                )
            if stacked:
                bottoms = bottoms + np.nan_to_num(values)
            if show_values:
                ax.bar_label(container, fmt="%g", fontsize=8)

        if not numeric_x:
            if horizontal:
                ax.set_yticks(positions, categories)
                ax.invert_yaxis()
            else:
                ax.set_xticks(positions, categories)
        ax.grid(axis="x" if horizontal else "y", alpha=0.3)

    def _draw_line(
        self,
        ax: Axes,
        engine_type: str,
        datasets: list[dict[str, Any]],
        labels: list[str] | None,
        options: dict[str, Any],
    ) -> None:
        tension = float(options.get("elements", {}).get("line", {}).get("tension", 0) or 0)
        stacked = bool(options.get("scales", {}).get("y", {}).get("stacked"))
        show_values = self._show_data_labels(options)
        baseline: np.ndarray | None = None

        for ds in datasets:
            xs, ys = _xy_values(ds["data"])
            if stacked:
                lower = baseline if baseline is not None and len(baseline) == len(ys) else np.zeros(len(ys))
                ys = lower + np.nan_to_num(ys)
            else:
                lower = np.zeros(len(ys))
            baseline = ys

            line_color = _color_at(ds.get("borderColor"), 0, BORDER_COLORS[0])
            fill_color = _color_at(ds.get("backgroundColor"), 0, FILL_COLORS[0])
            curve_x, curve_y = smooth_curve(xs, ys, tension)

            ax.plot(
                curve_x,
                curve_y,
                color=line_color,
                linewidth=ds.get("borderWidth", 2) or 0,
                label=ds.get("label"),
            )
            ax.scatter(xs, ys, color=fill_color, edgecolors=[line_color], zorder=3, s=16)

            if ds.get("fill"):
                _, curve_lower = smooth_curve(xs, lower, tension)
                ax.fill_between(curve_x, curve_lower, curve_y, color=fill_color, alpha=0.4)

            if show_values:
                for x, y in zip(xs, ys, strict=True):
                    if not math.isnan(y):
                        ax.annotate(
                            _format_value(y), (x, y), textcoords="offset points",
                            xytext=(0, 6), ha="center", fontsize=8,
                        )

        if labels:
            ax.set_xticks(np.arange(len(labels), dtype=float), labels)
        ax.grid(axis="y", alpha=0.3)

    def _draw_scatter(
        self,
        ax: Axes,
        engine_type: str,
        datasets: list[dict[str, Any]],
        labels: list[str] | None,
        options: dict[str, Any],
    ) -> None:
        show_values = self._show_data_labels(options)
        # Bubble radii are in pixels; marker sizes are in points squared
        px_to_pt = 72.0 / self.dpi

        for ds in datasets:
            xs, ys = _xy_values(ds["data"])
            if engine_type == "bubble":
                radii = np.asarray(
                    [_y_value({"y": p.get("r")}) if isinstance(p, Mapping) else 3.0 for p in ds["data"]],
                    dtype=float,
                )
                sizes = (2 * np.nan_to_num(radii) * px_to_pt) ** 2
            else:
                sizes = np.full(len(xs), (2 * 3 * px_to_pt) ** 2)

            ax.scatter(
                xs,
                ys,
                s=sizes,
                color=[_color_at(ds.get("backgroundColor"), i, FILL_COLORS[0]) for i in range(len(xs))],
                edgecolors=[_color_at(ds.get("borderColor"), i, BORDER_COLORS[0]) for i in range(len(xs))],
                linewidths=ds.get("borderWidth", 1) or 0,
                label=ds.get("label"),
            )
            if show_values:
                for x, y in zip(xs, ys, strict=True):
                    ax.annotate(
                        _format_value(y), (x, y), textcoords="offset points",
                        xytext=(0, 6), ha="center", fontsize=8,
                    )
        ax.grid(alpha=0.3)

    def _draw_arc(
        self,
        ax: Axes,
        engine_type: str,
        datasets: list[dict[str, Any]],
        labels: list[str] | None,
        options: dict[str, Any],
    ) -> None:
        # Multiple datasets are drawn as concentric rings, first dataset outermost
        inner_radius = 0.5 if engine_type == "doughnut" else 0.0
        ring_width = (1.0 - inner_radius) / len(datasets)
        show_values = self._show_data_labels(options)
        legend_wedges = None

        for k, ds in enumerate(datasets):
            # Segment sizes are magnitudes; negative values draw like their absolute value
            values = np.abs(
                np.nan_to_num(np.asarray([_y_value(p) for p in ds["data"]], dtype=float))
            )
            total = float(values.sum())
            if total <= 0:
                # Nothing to apportion: keep the ring's space but draw it empty
                ax.pie(
                    [1.0],
                    radius=1.0 - k * ring_width,
                    colors=[(0.0, 0.0, 0.0, 0.0)],
                    wedgeprops={"width": ring_width, "linewidth": 0},
                )
                continue
            autopct = _segment_value_formatter(total) if show_values else None

            pie = ax.pie(
                values,
                radius=1.0 - k * ring_width,
                colors=[_color_at(ds.get("backgroundColor"), i, FILL_COLORS[0]) for i in range(len(values))],
                startangle=90,
                counterclock=False,
                autopct=autopct,
                pctdistance=1.0 - ring_width / 2,
                wedgeprops={"width": ring_width, "linewidth": ds.get("borderWidth", 1) or 0},
            )
            wedges = pie[0]
            for i, wedge in enumerate(wedges):
                wedge.set_edgecolor(_color_at(ds.get("borderColor"), i, "white"))
            if legend_wedges is None:
                legend_wedges = wedges

        ax.set_aspect("equal")
        legend = options.get("plugins", {}).get("legend", {})
        if legend.get("display", True) and labels and legend_wedges:
            ax.legend(legend_wedges, labels[: len(legend_wedges)], loc="upper right")

    def _draw_polar_area(
        self,
        ax: Axes,
        engine_type: str,
        datasets: list[dict[str, Any]],
        labels: list[str] | None,
        options: dict[str, Any],
    ) -> None:
        ax.set_theta_zero_location("N")
        ax.set_theta_direction(-1)
        bars = None

        for ds in datasets:
            values = np.nan_to_num(np.asarray([_y_value(p) for p in ds["data"]], dtype=float))
            count = len(values)
            theta = np.arange(count) * 2 * np.pi / count
            bars = ax.bar(
                theta,
                values,
                width=2 * np.pi / count,
                align="edge",
                color=[_color_at(ds.get("backgroundColor"), i, FILL_COLORS[0]) for i in range(count)],
                edgecolor=[_color_at(ds.get("borderColor"), i, "white") for i in range(count)],
                linewidth=ds.get("borderWidth", 1) or 0,
            )
            if self._show_data_labels(options):
                for angle, value in zip(theta, values, strict=True):
                    ax.annotate(_format_value(value), (angle + np.pi / count, value), ha="center", fontsize=8)

        ax.set_xticks([])
        legend = options.get("plugins", {}).get("legend", {})
        if legend.get("display", True) and labels and bars is not None:
            ax.legend(list(bars), labels[: len(bars)], loc="upper right", bbox_to_anchor=(1.25, 1.1))

    def _draw_radar(
        self,
        ax: Axes,
        engine_type: str,
        datasets: list[dict[str, Any]],
        labels: list[str] | None,
        options: dict[str, Any],
    ) -> None:
        ax.set_theta_zero_location("N")
        ax.set_theta_direction(-1)
        count = max(len(ds["data"]) for ds in datasets)
        theta = np.arange(count) * 2 * np.pi / count

        for ds in datasets:
            values = np.full(count, np.nan)
            for i, point in enumerate(ds["data"][:count]):
                values[i] = _y_value(point)
            closed_theta = np.append(theta, theta[0])
            closed_values = np.append(values, values[0])
            line_color = _color_at(ds.get("borderColor"), 0, BORDER_COLORS[0])
            ax.plot(
                closed_theta,
                closed_values,
                color=line_color,
                linewidth=ds.get("borderWidth", 2) or 0,
                label=ds.get("label"),
            )
            ax.fill(closed_theta, np.nan_to_num(closed_values), color=_color_at(ds.get("backgroundColor"), 0, FILL_COLORS[0]), alpha=0.3)
            if self._show_data_labels(options):
                for angle, value in zip(theta, values, strict=True):
                    if not math.isnan(value):
                        ax.annotate(_format_value(value), (angle, value), ha="center", fontsize=8)

        ax.set_xticks(theta, (labels or [str(i + 1) for i in range(count)])[:count])

    @staticmethod
    def _apply_scales(ax: Axes, options: dict[str, Any]) -> None:
        scales = options.get("scales", {})
        x_scale = scales.get("x", {})
        y_scale = scales.get("y", {})

        if x_scale.get("title", {}).get("display"):
            ax.set_xlabel(x_scale["title"]["text"], fontsize=11)
        if y_scale.get("title", {}).get("display"):
            ax.set_ylabel(y_scale["title"]["text"], fontsize=11)

        # Value axis follows indexAxis: horizontal bars put values on x
        horizontal = options.get("indexAxis") == "y"
        if y_scale.get("type") == "logarithmic":
            if horizontal:
                ax.set_xscale("log")
            else:
                ax.set_yscale("log")
        elif y_scale.get("beginAtZero"):
            if horizontal:
                lo, hi = ax.get_xlim()
                ax.set_xlim(min(lo, 0), max(hi, 0))
            else:
                lo, hi = ax.get_ylim()
                ax.set_ylim(min(lo, 0), max(hi, 0))


async def render_chart(
    description: ChartDescription, renderer: ChartRenderer | None = None
) -> RenderResult:
    """Render a validated chart description.

    SVG output is drawn synchronously; PNG output is drawn in a worker thread.

    Args:
        description: Description that has passed ``validate_chart_description``
        renderer: Optional renderer instance (a default one is created otherwise)

    Returns:
        RenderResult with raw bytes, base64 text, mime type and file extension
    """
    opts = description.options
    width = opts.width if opts.width is not None else DEFAULT_WIDTH
    height = opts.height if opts.height is not None else DEFAULT_HEIGHT
    background = opts.background_color or DEFAULT_BACKGROUND
    output_format = description.output_format
    renderer = renderer or ChartRenderer()

    config = build_chart_config(description)

    if output_format is OutputFormat.SVG:
        buffer = renderer.render(config, width, height, background, output_format)
    else:
        buffer = await asyncio.to_thread(
            renderer.render, config, width, height, background, output_format
        )

    logger.debug(
        "Chart rendered",
        extra={
            "chart_type": description.chart_type.value,
            "format": output_format.value,
            "bytes": len(buffer),
        },
    )

    return RenderResult(
        buffer=buffer,
        base64=base64.b64encode(buffer).decode("utf-8"),
        mime_type=output_format.mime_type,
        extension=output_format.extension,
    )
