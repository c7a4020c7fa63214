"""Tests for CLI output formatting utilities."""

from __future__ import annotations

from visual_chart.cli import output


def test_success_with_prefix(capsys) -> None:
    """Test success message includes checkmark emoji by default."""
    output.success("Chart saved to: charts/bar.png")
    captured = capsys.readouterr()
    assert "✅ Chart saved to: charts/bar.png" in captured.out


def test_success_without_prefix(capsys) -> None:
    output.success("Chart saved", prefix=False)
    captured = capsys.readouterr()
    assert "✅" not in captured.out
    assert "Chart saved" in captured.out


def test_error_writes_to_stderr(capsys) -> None:
    """Test error message writes to stderr by default."""
    output.error("Error creating chart: bad input")
    captured = capsys.readouterr()
    assert "❌ Error creating chart: bad input" in captured.err
    assert captured.out == ""


def test_error_to_stdout(capsys) -> None:
    output.error("Error message", prefix=False, err=False)
    captured = capsys.readouterr()
    assert "❌" not in captured.out
    assert "Error message" in captured.out


def test_warning_with_prefix(capsys) -> None:
    output.warning("Could not open the chart in a viewer.")
    captured = capsys.readouterr()
    assert "⚠️" in captured.out
    assert "Could not open the chart" in captured.out
