"""
Logging Setup
=============
Configure stdlib logging and structlog for applications using poll-core.

Usage:
    from poll_core.logging_config import setup_logging

    setup_logging(level="DEBUG", json_output=False)
"""

import logging
import sys
from typing import Optional

import structlog

from poll_core.config import PollerSettings


def setup_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> logging.Logger:
    """
    Configure logging for the process.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to POLL_LOG_LEVEL.
        json_output: Render JSON lines (production) instead of console output.
            Defaults to POLL_LOG_JSON.

    Returns:
        Configured root logger
    """
    settings = PollerSettings.from_env()
    level = level or settings.log_level
    if json_output is None:
        json_output = settings.log_json

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).info("logging_configured", level=level.upper(), json=json_output)
    return root_logger
