"""
System API routes for algoviz.

This module provides FastAPI routes for system health and information,
and keeps a short in-memory log of server errors.
"""

import platform
import sys
import traceback
from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, Optional

from fastapi import APIRouter

from .app_config import app_config
from .runners.manager import runner_manager
from .shared.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

MAX_ERROR_ENTRIES = 100

_recent_errors: Deque[Dict[str, Any]] = deque(maxlen=MAX_ERROR_ENTRIES)


def log_error(
    endpoint: str,
    message: str,
    level: str = "error",
    details: Optional[str] = None,
    exc: Optional[BaseException] = None,
) -> None:
    """Log a server error and remember it for ``/system/errors``.

    Args:
        endpoint: Request path the error occurred on
        message: Error message
        level: "error" or "critical"
        details: Optional extra context
        exc: Optional exception, whose traceback is kept
    """
    entry = {
        "timestamp": datetime.now().isoformat(),
        "endpoint": endpoint,
        "level": level,
        "message": message,
        "details": details,
        "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)) if exc else None,
    }
    _recent_errors.append(entry)

    if level == "critical":
        logger.critical("%s: %s (%s)", endpoint, message, details, exc_info=exc)
    else:
        logger.error("%s: %s (%s)", endpoint, message, details)


def _get_package_versions() -> Dict[str, str]:
    """Get versions of key packages."""
    packages = {}

    for name in ["fastapi", "uvicorn", "pydantic", "numpy", "orjson"]:
        try:
            module = __import__(name)
            packages[name] = getattr(module, "__version__", "unknown")
        except ImportError:
            pass

    return packages


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "message": "algoviz is running",
    }


@router.get("/system/info")
async def system_info():
    """Get system and environment information."""
    return {
        "python": {
            "version": sys.version,
            "platform": sys.platform,
            "executable": sys.executable,
        },
        "system": {
            "os": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "config": app_config.to_dict(),
        "session": {
            "algorithm": runner_manager.snapshot()["algorithm"],
            "running": runner_manager.is_running,
        },
        "packages": _get_package_versions(),
    }


@router.get("/system/errors")
async def recent_errors(limit: int = 20):
    """Get the most recent server errors, newest first."""
    errors = list(_recent_errors)[::-1][:max(0, limit)]
    return {"errors": errors, "total": len(_recent_errors)}
