import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from visual_chart import __version__
from visual_chart.cli.main import app
from visual_chart.core.logging_config import setup_logging

runner = CliRunner()

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture(autouse=True)
def restore_logging():
    # The CLI callback binds handlers to the runner's temporary stderr
    yield
    setup_logging()


def write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_render_json_chart(tmp_path):
    chart_file = write_json(
        tmp_path / "chart.json",
        {"type": "bar", "labels": ["A", "B"], "datasets": [{"data": [1, 2]}]},
    )
    output = tmp_path / "out" / "bar.png"

    result = runner.invoke(app, ["render", str(chart_file), "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert "Chart saved to:" in result.stdout
    assert output.read_bytes().startswith(PNG_SIGNATURE)


def test_render_yaml_chart_to_default_dir(tmp_path, isolated_output):
    chart_file = tmp_path / "chart.yaml"
    chart_file.write_text(
        yaml.safe_dump(
            {"type": "line", "labels": ["Q1", "Q2", "Q3"], "datasets": [{"data": [3, 1, 2]}]}
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["render", str(chart_file), "--format", "svg"])

    assert result.exit_code == 0, result.output
    saved = list(isolated_output.glob("line-*.svg"))
    assert len(saved) == 1
    assert b"<svg" in saved[0].read_bytes()


def test_render_invalid_chart(tmp_path):
    chart_file = write_json(tmp_path / "chart.json", {"type": "bar", "datasets": []})

    result = runner.invoke(app, ["render", str(chart_file)])

    assert result.exit_code == 1
    assert "Error creating chart: At least one dataset is required." in result.output


def test_render_missing_file(tmp_path):
    result = runner.invoke(app, ["render", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_render_non_mapping(tmp_path):
    chart_file = write_json(tmp_path / "chart.json", [1, 2, 3])

    result = runner.invoke(app, ["render", str(chart_file)])

    assert result.exit_code == 1
    assert "must be a mapping" in result.output


def test_render_open_launches_viewer(tmp_path, mock_popen):
    chart_file = write_json(tmp_path / "chart.json", {"type": "pie", "datasets": [{"data": [1, 2]}]})

    result = runner.invoke(app, ["render", str(chart_file), "--open"])

    assert result.exit_code == 0, result.output
    mock_popen.assert_called_once()


def test_vega_command(tmp_path):
    spec_file = write_json(
        tmp_path / "spec.json",
        {
            "mark": "point",
            "data": {"values": [{"x": 1, "y": 2}, {"x": 2, "y": 3}]},
            "encoding": {
                "x": {"field": "x", "type": "quantitative"},
                "y": {"field": "y", "type": "quantitative"},
            },
        },
    )
    output = tmp_path / "vega.png"

    result = runner.invoke(
        app, ["vega", str(spec_file), "--width", "300", "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    assert output.read_bytes().startswith(PNG_SIGNATURE)


def test_vega_command_rejects_raw_vega(tmp_path):
    spec_file = write_json(
        tmp_path / "spec.json", {"$schema": "https://vega.github.io/schema/vega/v5.json"}
    )

    result = runner.invoke(app, ["vega", str(spec_file)])

    assert result.exit_code == 1
    assert "Error creating Vega-Lite chart:" in result.output
    assert "raw Vega spec" in result.output


def test_render_rejects_string_width(tmp_path):
    chart_file = tmp_path / "chart.yaml"
    chart_file.write_text(
        yaml.safe_dump({"type": "bar", "datasets": [{"data": [1, 2]}], "options": {"width": "800"}}),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["render", str(chart_file), "--no-open"])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "Error creating chart: width must be a number, got '800'." in result.output


def test_render_rejects_non_object_dataset(tmp_path):
    chart_file = write_json(tmp_path / "chart.json", {"type": "bar", "datasets": [[1, 2]]})

    result = runner.invoke(app, ["render", str(chart_file), "--no-open"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Dataset #1 must be an object" in result.output
