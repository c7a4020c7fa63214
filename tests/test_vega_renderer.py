"""Tests for Vega-Lite compilation and rendering."""
from __future__ import annotations

from typing import Any

import pytest

from visual_chart.core.enums import OutputFormat
from visual_chart.core.exceptions import CompilationError, RenderError
from visual_chart.core.models import VegaChartInput
from visual_chart.visuals import vega as vega_module
from visual_chart.visuals.vega import prepare_vega_spec, render_vega_chart

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def bar_spec(**overrides: Any) -> dict[str, Any]:
    spec: dict[str, Any] = {
        "$schema": "https://vega.github.io/schema/vega-lite/v5.json",
        "mark": "bar",
        "data": {"values": [{"a": "A", "b": 28}, {"a": "B", "b": 55}, {"a": "C", "b": 43}]},
        "encoding": {
            "x": {"field": "a", "type": "nominal"},
            "y": {"field": "b", "type": "quantitative"},
        },
    }
    spec.update(overrides)
    return spec


class TestPrepareVegaSpec:
    def test_defaults(self) -> None:
        spec = prepare_vega_spec(VegaChartInput(spec=bar_spec()))

        assert spec["width"] == 400
        assert spec["height"] == 300
        assert spec["background"] == "white"

    def test_spec_values_kept_without_overrides(self) -> None:
        spec = prepare_vega_spec(
            VegaChartInput(spec=bar_spec(width=600, height=200, background="#eee"))
        )
        assert (spec["width"], spec["height"], spec["background"]) == (600, 200, "#eee")

    def test_overrides_win(self) -> None:
        spec = prepare_vega_spec(
            VegaChartInput(
                spec=bar_spec(width=600, height=200, background="#eee"),
                width=500,
                height=250,
                background="black",
            )
        )
        assert (spec["width"], spec["height"], spec["background"]) == (500, 250, "black")

    def test_caller_spec_not_mutated(self) -> None:
        original = bar_spec()
        prepare_vega_spec(VegaChartInput(spec=original, width=500))

        assert "width" not in original
        assert "background" not in original

    def test_nested_values_are_copied(self) -> None:
        original = bar_spec()
        spec = prepare_vega_spec(VegaChartInput(spec=original))
        spec["data"]["values"].append({"a": "D", "b": 1})

        assert len(original["data"]["values"]) == 3


@pytest.mark.asyncio
async def test_render_png() -> None:
    result = await render_vega_chart(VegaChartInput(spec=bar_spec()))

    assert result.buffer.startswith(PNG_SIGNATURE)
    assert result.mime_type == "image/png"
    assert result.extension == "png"


@pytest.mark.asyncio
async def test_render_svg() -> None:
    result = await render_vega_chart(
        VegaChartInput(spec=bar_spec(), output_format=OutputFormat.SVG)
    )

    assert b"<svg" in result.buffer
    assert result.mime_type == "image/svg+xml"


@pytest.mark.asyncio
async def test_render_layered_spec() -> None:
    spec = {
        "data": {"values": [{"x": 1, "y": 2}, {"x": 2, "y": 4}]},
        "layer": [
            {"mark": "line", "encoding": {"x": {"field": "x", "type": "quantitative"}, "y": {"field": "y", "type": "quantitative"}}},
            {"mark": "point", "encoding": {"x": {"field": "x", "type": "quantitative"}, "y": {"field": "y", "type": "quantitative"}}},
        ],
    }
    result = await render_vega_chart(VegaChartInput(spec=spec))

    assert result.buffer.startswith(PNG_SIGNATURE)


@pytest.mark.asyncio
async def test_compiler_rejection_is_compilation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def reject(spec: dict[str, Any]) -> dict[str, Any]:
        raise ValueError("Invalid mark type")

    monkeypatch.setattr(vega_module.vlc, "vegalite_to_vega", reject)

    with pytest.raises(CompilationError, match="Vega-Lite compilation failed: Invalid mark type"):
        await render_vega_chart(VegaChartInput(spec=bar_spec()))


@pytest.mark.asyncio
async def test_renderer_failure_is_render_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(spec: dict[str, Any]) -> str:
        raise RuntimeError("canvas unavailable")

    monkeypatch.setattr(vega_module.vlc, "vega_to_svg", fail)

    with pytest.raises(RenderError, match="canvas unavailable"):
        await render_vega_chart(
            VegaChartInput(spec=bar_spec(), output_format=OutputFormat.SVG)
        )


def test_explicit_null_size_is_kept() -> None:
    """Test only absent keys receive defaults; explicit nulls pass through."""
    spec = prepare_vega_spec(VegaChartInput(spec=bar_spec(width=None, background=None)))

    assert spec["width"] is None
    assert spec["background"] is None
    assert spec["height"] == 300
