"""Structural validation for both chart dialects.

Validators are pure functions that fail fast: the first defect found raises a
typed error and nothing is rendered.
"""

from __future__ import annotations

from .chart import check_dimensions, validate_chart_description
from .vega import COMPOSITION_OPERATORS, is_raw_vega_schema, validate_vega_input

__all__ = [
    "COMPOSITION_OPERATORS",
    "check_dimensions",
    "is_raw_vega_schema",
    "validate_chart_description",
    "validate_vega_input",
]
