"""Validation for Vega-Lite specifications.

Only the top level of a spec is inspected. Views nested inside composition
operators are left to the Vega-Lite compiler, which reports them as
compilation failures.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.exceptions import VegaValidationError
from ..core.models import VegaChartInput
from .chart import check_dimensions

COMPOSITION_OPERATORS: tuple[str, ...] = (
    "layer",
    "hconcat",
    "vconcat",
    "concat",
    "facet",
    "repeat",
)

RAW_VEGA_SCHEMA_MARKER = "vega.github.io/schema/vega/"
VEGA_LITE_MARKER = "vega-lite"


def is_raw_vega_schema(schema: Any) -> bool:
    """Return True when ``$schema`` points at raw Vega rather than Vega-Lite."""
    return (
        isinstance(schema, str)
        and RAW_VEGA_SCHEMA_MARKER in schema
        and VEGA_LITE_MARKER not in schema
    )


def validate_vega_input(vega_input: VegaChartInput) -> None:
    """Check a Vega-Lite spec and its overrides before compilation.

    Raises:
        VegaValidationError: Describing the first defect found
    """
    spec = vega_input.spec

    if not isinstance(spec, Mapping):
        raise VegaValidationError(
            "spec must be a JSON object containing a Vega-Lite specification."
        )

    if is_raw_vega_schema(spec.get("$schema")):
        raise VegaValidationError(
            "This appears to be a raw Vega spec, not Vega-Lite. "
            "The create_vega_chart tool expects a Vega-Lite specification."
        )

    has_mark = "mark" in spec
    has_composition = any(op in spec for op in COMPOSITION_OPERATORS)

    if not has_mark and not has_composition:
        raise VegaValidationError(
            "Vega-Lite spec must contain a 'mark' field (for unit specs) or a "
            "composition operator ('layer', 'hconcat', 'vconcat', 'concat', "
            "'facet', or 'repeat')."
        )

    if has_mark and not has_composition and "encoding" not in spec:
        raise VegaValidationError(
            "Unit spec has a 'mark' but no 'encoding'. Most Vega-Lite charts "
            "require an 'encoding' to map data fields to visual channels."
        )

    data = spec.get("data")
    if data and isinstance(data, Mapping):
        if "values" in data and not isinstance(data["values"], list):
            raise VegaValidationError("data.values must be an array of data objects.")

    width = vega_input.width if vega_input.width is not None else spec.get("width")
    height = vega_input.height if vega_input.height is not None else spec.get("height")
    check_dimensions(width, height, VegaValidationError)
