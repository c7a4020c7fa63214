"""Validation for the simple chart-description dialect."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.enums import (
    COORDINATE_FAMILIES,
    LABEL_KEYED_FAMILIES,
    RADIUS_FAMILIES,
    ChartFamily,
)
from ..core.exceptions import ValidationError
from ..core.models import ChartDescription, Dataset

MIN_DIMENSION = 50
MAX_DIMENSION = 4096


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_dimensions(
    width: Any,
    height: Any,
    error_cls: type[ValidationError] = ValidationError,
) -> None:
    """Reject a width or height outside [50, 4096] pixels.

    ``None`` and non-numeric values (e.g. Vega-Lite's ``"container"``) are not
    range-checked.
    """
    for name, value in (("Width", width), ("Height", height)):
        if _is_number(value) and not MIN_DIMENSION <= value <= MAX_DIMENSION:
            raise error_cls(
                f"{name} must be between {MIN_DIMENSION} and {MAX_DIMENSION} "
                f"pixels, got {_format_number(value)}."
            )


def _dataset_name(dataset: Dataset, index: int) -> str:
    return f'"{dataset.label}"' if dataset.label else f"#{index + 1}"


def _check_points(
    dataset: Dataset, name: str, required: tuple[str, ...], family: str
) -> None:
    for j, point in enumerate(dataset.data):
        if not isinstance(point, Mapping) or any(k not in point for k in required):
            raise ValidationError(
                f"Dataset {name}, point {j + 1}: {family} charts require data "
                f"points with {{{', '.join(required)}}} properties."
            )


def validate_chart_description(description: ChartDescription) -> None:
    """Check a chart description before it is rendered.

    Checks run in a fixed order and stop at the first failure:
    dataset presence, per-dataset points and label counts, then dimensions.

    Raises:
        ValidationError: Describing the first defect found
    """
    if not description.datasets:
        raise ValidationError("At least one dataset is required.")

    chart_type = ChartFamily(description.chart_type)
    labels = description.labels

    for i, dataset in enumerate(description.datasets):
        name = _dataset_name(dataset, i)

        if not dataset.data:
            raise ValidationError(f"Dataset {name} has no data points.")

        if chart_type in RADIUS_FAMILIES:
            _check_points(dataset, name, ("x", "y", "r"), "bubble")

        if chart_type == ChartFamily.SCATTER:
            _check_points(dataset, name, ("x", "y"), "scatter")

        if (
            labels is not None
            and chart_type in LABEL_KEYED_FAMILIES
            and chart_type not in COORDINATE_FAMILIES
            and len(labels) != len(dataset.data)
        ):
            raise ValidationError(
                f"Dataset {name} has {len(dataset.data)} data points but "
                f"{len(labels)} labels were provided. These counts should match."
            )

    check_dimensions(description.options.width, description.options.height)
