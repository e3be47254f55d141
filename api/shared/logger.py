"""
Centralized logging for the algoviz backend.

Structured, level-based logging using Python's built-in logging module.
The level defaults to ``ALGOVIZ_LOG_LEVEL`` (see ``api.app_config``).

Usage:
    from api.shared.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Runner selected: %s", algorithm_type)
    logger.warning("Unknown algorithm requested: %s", tag)
"""

import logging
import sys
from typing import Optional

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging for the backend.

    Call once at startup (main.py). Subsequent calls are no-ops.

    Args:
        level: Level name. When omitted the configured
               ``ALGOVIZ_LOG_LEVEL`` is used.
    """
    global _configured
    if _configured:
        return

    if level is None:
        from api.app_config import app_config

        level = app_config.log_level

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger for a backend module.

    Args:
        name: Module name (typically ``__name__``).
    """
    return logging.getLogger(name)
