"""Vega-Lite rendering through vl-convert.

The spec is compiled to Vega first so that compiler rejections can be told
apart from rendering failures.
"""

from __future__ import annotations

import asyncio
import base64
import copy
from typing import Any

import vl_convert as vlc

from ..core.enums import OutputFormat
from ..core.exceptions import CompilationError, RenderError
from ..core.logging_config import get_logger
from ..core.models import RenderResult, VegaChartInput

logger = get_logger(__name__)

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 300
DEFAULT_BACKGROUND = "white"


def prepare_vega_spec(vega_input: VegaChartInput) -> dict[str, Any]:
    """Return a deep copy of the spec with size and background resolved.

    Explicit overrides win over values already in the spec. Keys absent from
    the spec fall back to 400x300 on a white background; an explicit null is
    kept for the compiler.
    """
    spec = copy.deepcopy(dict(vega_input.spec))

    if vega_input.width is not None:
        spec["width"] = vega_input.width
    elif "width" not in spec:
        spec["width"] = DEFAULT_WIDTH

    if vega_input.height is not None:
        spec["height"] = vega_input.height
    elif "height" not in spec:
        spec["height"] = DEFAULT_HEIGHT

    if vega_input.background is not None:
        spec["background"] = vega_input.background
    elif "background" not in spec:
        spec["background"] = DEFAULT_BACKGROUND

    return spec


def compile_vega_lite(spec: dict[str, Any]) -> dict[str, Any]:
    """Compile a Vega-Lite spec into a Vega spec.

    Raises:
        CompilationError: If the compiler rejects the spec
    """
    try:
        compiled = vlc.vegalite_to_vega(spec)
    except Exception as e:
        raise CompilationError(f"Vega-Lite compilation failed: {e}") from e
    return compiled


def _render_vega(vega_spec: dict[str, Any], output_format: OutputFormat) -> bytes:
    try:
        if output_format is OutputFormat.SVG:
            return vlc.vega_to_svg(vega_spec).encode("utf-8")
        return vlc.vega_to_png(vega_spec)
    except Exception as e:
        raise RenderError(f"Vega rendering failed: {e}") from e


async def render_vega_chart(vega_input: VegaChartInput) -> RenderResult:
    """Compile and render a validated Vega-Lite chart.

    Args:
        vega_input: Input that has passed ``validate_vega_input``

    Returns:
        RenderResult with raw bytes, base64 text, mime type and file extension

    Raises:
        CompilationError: If Vega-Lite compilation fails
        RenderError: If the compiled Vega spec cannot be rendered
    """
    output_format = vega_input.output_format
    spec = prepare_vega_spec(vega_input)
    vega_spec = compile_vega_lite(spec)

    if output_format is OutputFormat.SVG:
        buffer = _render_vega(vega_spec, output_format)
    else:
        buffer = await asyncio.to_thread(_render_vega, vega_spec, output_format)

    logger.debug(
        "Vega-Lite chart rendered",
        extra={"format": output_format.value, "bytes": len(buffer)},
    )

    return RenderResult(
        buffer=buffer,
        base64=base64.b64encode(buffer).decode("utf-8"),
        mime_type=output_format.mime_type,
        extension=output_format.extension,
    )
