"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging

import pytest

from visual_chart.core.logging_config import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    setup_logging()


def test_setup_sets_package_level() -> None:
    setup_logging(log_level="WARNING")

    assert logging.getLogger("visual_chart").level == logging.WARNING
    assert logging.getLogger("mcp_server").level == logging.WARNING


def test_json_file_handler(tmp_path) -> None:
    """Test the rotating file handler writes JSON records with extra fields."""
    log_file = tmp_path / "logs" / "chart.log"
    setup_logging(log_level="DEBUG", log_file=str(log_file))

    get_logger("visual_chart.test").info("Chart rendered", extra={"chart_type": "bar"})
    for handler in logging.getLogger("visual_chart").handlers:
        handler.flush()

    record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert record["message"] == "Chart rendered"
    assert record["chart_type"] == "bar"
    assert record["name"] == "visual_chart.test"
