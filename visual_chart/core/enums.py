from __future__ import annotations

from enum import Enum


class ChartFamily(str, Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    DOUGHNUT = "doughnut"
    SCATTER = "scatter"
    AREA = "area"
    RADAR = "radar"
    BUBBLE = "bubble"
    POLAR_AREA = "polarArea"
    HISTOGRAM = "histogram"


class OutputFormat(str, Enum):
    PNG = "png"
    SVG = "svg"

    @property
    def mime_type(self) -> str:
        return "image/svg+xml" if self is OutputFormat.SVG else "image/png"

    @property
    def extension(self) -> str:
        return self.value


# Per-point colouring, no cartesian axes
SEGMENTED_FAMILIES = frozenset(
    {ChartFamily.PIE, ChartFamily.DOUGHNUT, ChartFamily.POLAR_AREA}
)
RADIAL_FAMILIES = SEGMENTED_FAMILIES | {ChartFamily.RADAR}

# One label per data point
LABEL_KEYED_FAMILIES = frozenset(
    {
        ChartFamily.BAR,
        ChartFamily.LINE,
        ChartFamily.AREA,
        ChartFamily.RADAR,
        ChartFamily.HISTOGRAM,
    }
)

# Data points are {x, y} (bubble additionally needs r)
COORDINATE_FAMILIES = frozenset({ChartFamily.SCATTER, ChartFamily.BUBBLE})
RADIUS_FAMILIES = frozenset({ChartFamily.BUBBLE})
