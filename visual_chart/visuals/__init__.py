"""Rendering for both chart dialects.

Main Components:
    - apply_color_palette: default colours for datasets the caller left uncoloured
    - build_chart_config / ChartRenderer: Chart.js style configs drawn with matplotlib
    - render_chart: async rendering of a validated chart description
    - render_vega_chart: Vega-Lite compilation and rendering through vl-convert

Usage:
    from visual_chart.core.models import ChartDescription
    from visual_chart.visuals import render_chart

    description = ChartDescription.from_dict(
        {"type": "bar", "labels": ["A", "B"], "datasets": [{"data": [1, 2]}]}
    )
    result = await render_chart(description)

Architecture Notes:
    - Charts use the non-interactive 'Agg' backend and the object-oriented
      Figure API, so concurrent renders share no pyplot state
    - PNG rendering runs in a worker thread; SVG rendering runs inline
"""

from __future__ import annotations

from .charts import ChartRenderer, build_chart_config, render_chart
from .colors import BORDER_COLORS, FILL_COLORS, apply_color_palette
from .vega import prepare_vega_spec, render_vega_chart

__all__ = [
    "BORDER_COLORS",
    "FILL_COLORS",
    "ChartRenderer",
    "apply_color_palette",
    "build_chart_config",
    "prepare_vega_spec",
    "render_chart",
    "render_vega_chart",
]
