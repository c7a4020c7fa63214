"""Default colour palette and CSS colour parsing."""

from __future__ import annotations

import dataclasses
import re

from matplotlib.colors import to_rgba as _mpl_to_rgba

from ..core.enums import SEGMENTED_FAMILIES, ChartFamily
from ..core.models import Dataset

FILL_COLORS: tuple[str, ...] = (
    "rgba(54, 162, 235, 0.8)",  # Blue
    "rgba(255, 99, 132, 0.8)",  # Red
    "rgba(75, 192, 192, 0.8)",  # Teal
    "rgba(255, 206, 86, 0.8)",  # Yellow
    "rgba(153, 102, 255, 0.8)",  # Purple
    "rgba(255, 159, 64, 0.8)",  # Orange
    "rgba(201, 203, 207, 0.8)",  # Gray
    "rgba(0, 204, 150, 0.8)",  # Emerald
    "rgba(255, 87, 51, 0.8)",  # Coral
    "rgba(100, 149, 237, 0.8)",  # Cornflower
)

BORDER_COLORS: tuple[str, ...] = (
    "rgba(54, 162, 235, 1)",
    "rgba(255, 99, 132, 1)",
    "rgba(75, 192, 192, 1)",
    "rgba(255, 206, 86, 1)",
    "rgba(153, 102, 255, 1)",
    "rgba(255, 159, 64, 1)",
    "rgba(201, 203, 207, 1)",
    "rgba(0, 204, 150, 1)",
    "rgba(255, 87, 51, 1)",
    "rgba(100, 149, 237, 1)",
)

_CSS_RGB = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)


def apply_color_palette(
    datasets: list[Dataset], chart_type: ChartFamily | str
) -> list[Dataset]:
    """Fill in colours the caller did not set.

    Segmented charts (pie, doughnut, polarArea) get one colour per data point;
    every other family gets one colour per dataset, wrapping around the palette.
    Input datasets are never modified.

    Args:
        datasets: Caller-supplied series
        chart_type: Chart family the series will be drawn as

    Returns:
        New list of shallow-copied datasets in the same order
    """
    segmented = ChartFamily(chart_type) in SEGMENTED_FAMILIES
    result: list[Dataset] = []

    for index, dataset in enumerate(datasets):
        ds = dataclasses.replace(dataset, extra=dict(dataset.extra))
        color_index = index % len(FILL_COLORS)

        if segmented:
            # A preset backgroundColor skips the whole assignment, borders included
            if not ds.background_color:
                ds.background_color = list(FILL_COLORS[: len(ds.data)])
                ds.border_color = list(BORDER_COLORS[: len(ds.data)])
                if ds.border_width is None:
                    ds.border_width = 1
        else:
            if not ds.background_color:
                ds.background_color = FILL_COLORS[color_index]
            if not ds.border_color:
                ds.border_color = BORDER_COLORS[color_index]
            if ds.border_width is None:
                ds.border_width = 2

        result.append(ds)

    return result


def to_rgba(color: str | None, default: str = "black") -> tuple[float, float, float, float]:
    """Convert a CSS colour string into a matplotlib RGBA tuple.

    Accepts ``rgb()``/``rgba()`` notation in addition to everything matplotlib
    understands (names, hex). Unparseable values fall back to ``default``.
    """
    if not color:
        return _mpl_to_rgba(default)

    match = _CSS_RGB.match(color.strip())
    if match:
        r, g, b, a = match.groups()
        alpha = 1.0
        if a is not None:
            alpha = float(a[:-1]) / 100 if a.endswith("%") else float(a)
        return (
            min(float(r), 255.0) / 255,
            min(float(g), 255.0) / 255,
            min(float(b), 255.0) / 255,
            max(0.0, min(alpha, 1.0)),
        )

    try:
        return _mpl_to_rgba(color.strip())
    except ValueError:
        return _mpl_to_rgba(default)
