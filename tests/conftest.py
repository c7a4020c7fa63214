"""Shared fixtures for mcp-visual-chart tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from mcp_server.monitoring import metrics


@pytest.fixture(autouse=True)
def isolated_output(tmp_path, monkeypatch):
    """Send default chart output to a temp dir and never launch a viewer."""
    output_dir = tmp_path / "charts"
    monkeypatch.setenv("VISUAL_CHART_OUTPUT_DIR", str(output_dir))
    monkeypatch.setenv("VISUAL_CHART_AUTO_OPEN", "false")
    monkeypatch.chdir(tmp_path)
    return output_dir


@pytest.fixture
def mock_popen(monkeypatch):
    """Replace subprocess.Popen used by open_chart."""
    popen = MagicMock()
    monkeypatch.setattr("visual_chart.storage.files.subprocess.Popen", popen)
    return popen


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()
