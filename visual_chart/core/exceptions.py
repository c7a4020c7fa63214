"""Exception hierarchy for chart validation and rendering."""

from __future__ import annotations


class ChartError(Exception):
    """Base exception for chart errors."""
    pass


class ValidationError(ChartError, ValueError):
    """A chart description is structurally invalid. Raised before rendering."""
    pass


class VegaValidationError(ValidationError):
    """A Vega-Lite specification is structurally invalid."""
    pass


class CompilationError(ChartError):
    """The Vega-Lite compiler rejected a structurally plausible spec."""
    pass


class RenderError(ChartError):
    """A rendering engine failed to produce an image."""
    pass
