"""Tests for wire payload parsing into chart models."""
from __future__ import annotations

import pytest

from visual_chart.core.enums import ChartFamily, OutputFormat
from visual_chart.core.exceptions import ValidationError
from visual_chart.core.models import (
    ChartDescription,
    Dataset,
    DisplayOptions,
    parse_output_format,
)


def test_description_from_dict_maps_wire_keys() -> None:
    description = ChartDescription.from_dict(
        {
            "type": "polarArea",
            "labels": ["A", "B"],
            "datasets": [{"label": "Sales", "data": [1, 2], "borderWidth": 3}],
            "options": {"title": "Q1", "showLegend": False, "yAxisType": "logarithmic"},
            "outputFormat": "svg",
            "outputPath": "out/chart.svg",
            "autoOpen": False,
        }
    )

    assert description.chart_type is ChartFamily.POLAR_AREA
    assert description.labels == ["A", "B"]
    assert description.datasets[0].label == "Sales"
    assert description.datasets[0].border_width == 3
    assert description.options.title == "Q1"
    assert description.options.show_legend is False
    assert description.options.y_axis_type == "logarithmic"
    assert description.output_format is OutputFormat.SVG
    assert description.output_path == "out/chart.svg"
    assert description.auto_open is False


def test_description_defaults() -> None:
    description = ChartDescription.from_dict({"type": "bar", "datasets": [{"data": [1]}]})

    assert description.labels is None
    assert description.options == DisplayOptions()
    assert description.output_format is OutputFormat.PNG
    assert description.output_path is None
    assert description.auto_open is None


def test_unknown_chart_type_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Unsupported chart type 'gantt'"):
        ChartDescription.from_dict({"type": "gantt", "datasets": [{"data": [1]}]})


@pytest.mark.parametrize("value,expected", [(None, OutputFormat.PNG), ("SVG", OutputFormat.SVG), ("png", OutputFormat.PNG)])
def test_parse_output_format(value: str | None, expected: OutputFormat) -> None:
    assert parse_output_format(value) is expected


def test_unknown_output_format_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Unsupported output format 'jpeg'"):
        parse_output_format("jpeg")


def test_dataset_keeps_unknown_keys() -> None:
    dataset = Dataset.from_dict({"data": [1, 2], "pointStyle": "star", "hidden": False})

    assert dataset.extra == {"pointStyle": "star", "hidden": False}
    wire = dataset.to_dict()
    assert wire["pointStyle"] == "star"
    assert wire["data"] == [1, 2]
    assert "label" not in wire


def test_dataset_missing_data_becomes_empty_list() -> None:
    assert Dataset.from_dict({"label": "x"}).data == []


def test_display_options_extra_passthrough() -> None:
    options = DisplayOptions.from_dict({"title": "T", "layout": {"padding": 8}})

    assert options.extra == {"layout": {"padding": 8}}
    assert options.to_dict() == {"layout": {"padding": 8}, "title": "T"}


def test_output_format_properties() -> None:
    assert OutputFormat.PNG.mime_type == "image/png"
    assert OutputFormat.SVG.mime_type == "image/svg+xml"
    assert OutputFormat.SVG.extension == "svg"


@pytest.mark.parametrize(
    "options,message",
    [
        ({"width": "800"}, "width must be a number, got '800'."),
        ({"height": True}, "height must be a number, got True."),
        ({"tension": "smooth"}, "tension must be a number"),
        ({"indexAxis": "z"}, "indexAxis must be one of: x, y, got 'z'."),
        ({"yAxisType": "log"}, "yAxisType must be one of: linear, logarithmic"),
    ],
)
def test_option_types_are_checked(options: dict, message: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        ChartDescription.from_dict(
            {"type": "bar", "datasets": [{"data": [1]}], "options": options}
        )
    assert message in str(exc_info.value)


def test_options_must_be_an_object() -> None:
    with pytest.raises(ValidationError, match="options must be an object"):
        DisplayOptions.from_dict(["title"])  # type: ignore[arg-type]


def test_dataset_must_be_an_object() -> None:
    with pytest.raises(ValidationError, match="Dataset #2 must be an object"):
        ChartDescription.from_dict({"type": "bar", "datasets": [{"data": [1]}, [1, 2]]})


def test_dataset_data_must_be_an_array() -> None:
    with pytest.raises(ValidationError, match="Dataset #1: data must be an array"):
        Dataset.from_dict({"data": "1,2,3"})


@pytest.mark.parametrize(
    "point,message",
    [
        ("12", "data points must be numbers or objects"),
        ({"x": "a", "y": 1}, "point 1: x must be a number"),
        ({"x": 1, "y": 2, "r": False}, "point 1: r must be a number"),
    ],
)
def test_point_values_are_checked(point: object, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        Dataset.from_dict({"data": [point]})


def test_border_width_must_be_a_number() -> None:
    with pytest.raises(ValidationError, match="borderWidth must be a number"):
        Dataset.from_dict({"data": [1], "borderWidth": "2px"})


def test_null_and_numeric_points_are_accepted() -> None:
    dataset = Dataset.from_dict({"data": [1, 2.5, None, {"x": 1, "y": None, "r": 3}]})

    assert len(dataset.data) == 4


def test_labels_and_datasets_must_be_arrays() -> None:
    with pytest.raises(ValidationError, match="labels must be an array"):
        ChartDescription.from_dict({"type": "bar", "labels": "A,B", "datasets": [{"data": [1]}]})
    with pytest.raises(ValidationError, match="datasets must be an array"):
        ChartDescription.from_dict({"type": "bar", "datasets": {"data": [1]}})
