"""Console output formatting utilities for consistent CLI user experience.

Logging Strategy:
- Use console output functions (success, error, info, warning) for user-facing messages
- Use structured logging (logger.info, logger.error, etc.) for debugging and observability
"""

from __future__ import annotations

import typer


def success(message: str, *, prefix: bool = True) -> None:
    """Display a success message in green with checkmark emoji.

    Example:
        success("Chart written to charts/bar.png")
        # Output: ✅ Chart written to charts/bar.png
    """
    formatted = f"✅ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.GREEN)


def error(message: str, *, prefix: bool = True, err: bool = True) -> None:
    """Display an error message in red with cross emoji.

    Args:
        message: The error message to display
        prefix: Whether to include the cross emoji prefix (default: True)
        err: Whether to write to stderr instead of stdout (default: True)
    """
    formatted = f"❌ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.RED, err=err)


def warning(message: str, *, prefix: bool = True) -> None:
    """Display a warning message in yellow with warning emoji."""
    formatted = f"⚠️  {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.YELLOW)
