"""Request-scoped records for the two chart dialects.

Wire payloads use Chart.js style camelCase keys. Known keys map onto typed
fields; anything else is kept in an ``extra`` side-map and merged back into the
engine-facing configuration by ``to_dict``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .enums import ChartFamily, OutputFormat
from .exceptions import ValidationError

DataPoint = float | int | Mapping[str, Any]

_DATASET_KEYS = {
    "label": "label",
    "backgroundColor": "background_color",
    "borderColor": "border_color",
    "borderWidth": "border_width",
    "fill": "fill",
}

_OPTION_KEYS = {
    "title": "title",
    "subtitle": "subtitle",
    "showLegend": "show_legend",
    "width": "width",
    "height": "height",
    "backgroundColor": "background_color",
    "xAxisLabel": "x_axis_label",
    "yAxisLabel": "y_axis_label",
    "stacked": "stacked",
    "indexAxis": "index_axis",
    "yAxisType": "y_axis_type",
    "beginAtZero": "begin_at_zero",
    "tension": "tension",
    "showDataLabels": "show_data_labels",
}


_NUMERIC_OPTIONS = ("width", "height", "tension")
_OPTION_CHOICES = {
    "indexAxis": ("x", "y"),
    "yAxisType": ("linear", "logarithmic"),
}
_POINT_COORDS = ("x", "y", "r")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_number(name: str, value: Any) -> None:
    if value is not None and not _is_number(value):
        raise ValidationError(f"{name} must be a number, got {value!r}.")


def _check_point(point: Any, dataset_index: int, point_index: int) -> None:
    # Shape per chart family is the validator's job; only value types are checked here
    where = f"Dataset #{dataset_index + 1}, point {point_index + 1}"
    if point is None or _is_number(point):
        return
    if not isinstance(point, Mapping):
        raise ValidationError(
            f"{where}: data points must be numbers or objects with numeric x, y and r, "
            f"got {point!r}."
        )
    for coord in _POINT_COORDS:
        _check_number(f"{where}: {coord}", point.get(coord))


def _split_known(
    payload: Mapping[str, Any], known: dict[str, str], skip: tuple[str, ...] = ()
) -> tuple[dict[str, Any], dict[str, Any]]:
    fields: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in payload.items():
        if key in skip:
            continue
        if key in known:
            fields[known[key]] = value
        else:
            extra[key] = value
    return fields, extra


def _to_wire(obj: Any, known: dict[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = dict(obj.extra)
    for wire_key, attr in known.items():
        value = getattr(obj, attr)
        if value is not None:
            out[wire_key] = value
    return out


def parse_output_format(value: OutputFormat | str | None) -> OutputFormat:
    if value is None:
        return OutputFormat.PNG
    if isinstance(value, OutputFormat):
        return value
    try:
        return OutputFormat(str(value).lower())
    except ValueError:
        raise ValidationError(
            f"Unsupported output format '{value}'. Must be one of: png, svg"
        ) from None


def parse_chart_family(value: ChartFamily | str) -> ChartFamily:
    if isinstance(value, ChartFamily):
        return value
    try:
        return ChartFamily(value)
    except ValueError:
        allowed = ", ".join(f.value for f in ChartFamily)
        raise ValidationError(
            f"Unsupported chart type '{value}'. Must be one of: {allowed}"
        ) from None


@dataclass
class Dataset:
    """One data series. Caller-owned; copied before the palette touches it."""

    data: list[DataPoint]
    label: str | None = None
    background_color: str | list[str] | None = None
    border_color: str | list[str] | None = None
    border_width: float | None = None
    fill: bool | str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], index: int = 0) -> Dataset:
        """Build a dataset from its wire shape.

        Raises:
            ValidationError: If the dataset is not an object, ``data`` is not an
                array, or a point or ``borderWidth`` has a non-numeric value
        """
        if not isinstance(payload, Mapping):
            raise ValidationError(
                f"Dataset #{index + 1} must be an object with a 'data' array, got {payload!r}."
            )
        data = payload.get("data") or []
        if not isinstance(data, (list, tuple)):
            raise ValidationError(f"Dataset #{index + 1}: data must be an array.")
        for j, point in enumerate(data):
            _check_point(point, index, j)
        _check_number(f"Dataset #{index + 1}: borderWidth", payload.get("borderWidth"))

        fields, extra = _split_known(payload, _DATASET_KEYS, skip=("data",))
        return cls(data=list(data), extra=extra, **fields)

    def to_dict(self) -> dict[str, Any]:
        out = _to_wire(self, _DATASET_KEYS)
        out["data"] = list(self.data)
        return out


@dataclass
class DisplayOptions:
    title: str | None = None
    subtitle: str | None = None
    show_legend: bool | None = None
    width: float | None = None
    height: float | None = None
    background_color: str | None = None
    x_axis_label: str | None = None
    y_axis_label: str | None = None
    stacked: bool | None = None
    index_axis: str | None = None
    y_axis_type: str | None = None
    begin_at_zero: bool | None = None
    tension: float | None = None
    show_data_labels: bool | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> DisplayOptions:
        if not payload:
            return cls()
        if not isinstance(payload, Mapping):
            raise ValidationError(f"options must be an object, got {payload!r}.")
        for key in _NUMERIC_OPTIONS:
            _check_number(key, payload.get(key))
        for key, choices in _OPTION_CHOICES.items():
            value = payload.get(key)
            if value is not None and value not in choices:
                raise ValidationError(
                    f"{key} must be one of: {', '.join(choices)}, got {value!r}."
                )
        fields, extra = _split_known(payload, _OPTION_KEYS)
        return cls(extra=extra, **fields)

    def to_dict(self) -> dict[str, Any]:
        return _to_wire(self, _OPTION_KEYS)


@dataclass
class ChartDescription:
    """A chart in the simple dialect: family, labelled series and display options."""

    chart_type: ChartFamily
    datasets: list[Dataset]
    labels: list[str] | None = None
    options: DisplayOptions = field(default_factory=DisplayOptions)
    output_format: OutputFormat = OutputFormat.PNG
    output_path: str | None = None
    auto_open: bool | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ChartDescription:
        """Build a description from the wire shape used by ``create_chart``.

        Raises:
            ValidationError: If the chart type or output format is unknown, or a
                field has the wrong type
        """
        labels = payload.get("labels")
        if labels is not None and not isinstance(labels, (list, tuple)):
            raise ValidationError("labels must be an array of strings.")
        datasets = payload.get("datasets") or []
        if not isinstance(datasets, (list, tuple)):
            raise ValidationError("datasets must be an array of dataset objects.")
        return cls(
            chart_type=parse_chart_family(payload.get("type", "")),
            datasets=[Dataset.from_dict(ds, i) for i, ds in enumerate(datasets)],
            labels=list(labels) if labels is not None else None,
            options=DisplayOptions.from_dict(payload.get("options")),
            output_format=parse_output_format(payload.get("outputFormat")),
            output_path=payload.get("outputPath"),
            auto_open=payload.get("autoOpen"),
        )


@dataclass
class VegaChartInput:
    """A Vega-Lite spec plus size/background overrides that win over the spec."""

    spec: Any
    width: float | None = None
    height: float | None = None
    background: str | None = None
    output_format: OutputFormat = OutputFormat.PNG
    output_path: str | None = None
    auto_open: bool | None = None


@dataclass(frozen=True)
class RenderResult:
    buffer: bytes
    base64: str
    mime_type: str
    extension: str
