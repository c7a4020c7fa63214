"""Centralized logging configuration for mcp-visual-chart.

Console logs always go to stderr: stdout carries the MCP stdio transport.
JSON output (python-json-logger) is available for hosted deployments and an
optional rotating file handler can be switched on with a log file path.
"""

import copy
import logging
import logging.config
import os
from typing import Any


# Default logging configuration
LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
        "console": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "visual_chart": {
            "level": "DEBUG",
            "handlers": ["console"],
            "propagate": False,
        },
        "mcp_server": {
            "level": "DEBUG",
            "handlers": ["console"],
            "propagate": False,
        },
    },
    "root": {
        "level": "INFO",
        "handlers": ["console"],
    },
}


def setup_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    log_file: str | None = None,
) -> None:
    """Configure logging for the application.

    Args:
        json_output: If True, use JSON formatter for console output (for production)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path for a rotating JSON log file
    """
    config = copy.deepcopy(LOGGING_CONFIG)

    # Override console formatter if JSON output requested
    if json_output:
        config["handlers"]["console"]["formatter"] = "json"

    if log_level:
        config["handlers"]["console"]["level"] = log_level
        for logger_cfg in config["loggers"].values():
            logger_cfg["level"] = log_level

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        config["handlers"]["json_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "json",
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
        }
        for logger_cfg in config["loggers"].values():
            logger_cfg["handlers"].append("json_file")

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance

    Example:
        logger = get_logger(__name__)
        logger.info("Chart rendered", extra={"chart_type": "bar", "format": "png"})
    """
    return logging.getLogger(name)
