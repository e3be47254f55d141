"""
Session API routes for algoviz.

The host shell: select an algorithm, then run, stop and reset it. Live
progress is pushed over the ``/ws/session`` WebSocket; these routes return
the session snapshot after each command.
"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from .runners.controller import AlgorithmRunner
from .runners.manager import runner_manager

router = APIRouter()


class SelectRequest(BaseModel):
    """Request model for selecting an algorithm."""

    algorithm: str
    options: Dict[str, Any] = Field(default_factory=dict)


def _require_runner() -> AlgorithmRunner:
    runner = runner_manager.runner
    if runner is None:
        raise HTTPException(status_code=409, detail="No algorithm selected")
    return runner


@router.get("/session")
async def get_session():
    """Get the current session snapshot."""
    return runner_manager.snapshot()


@router.post("/session/select")
async def select_algorithm(request: SelectRequest):
    """Select an algorithm, replacing (and cancelling) the previous one."""
    runner = runner_manager.select(request.algorithm, request.options)
    if runner is None:
        raise HTTPException(status_code=404, detail=f"Unknown algorithm: {request.algorithm}")
    return runner_manager.snapshot()


@router.post("/session/run")
async def run_algorithm():
    """Start the selected algorithm. Does nothing if it is already running."""
    _require_runner()
    started = runner_manager.start()
    return {"started": started, **runner_manager.snapshot()}


@router.post("/session/stop")
async def stop_algorithm():
    """Request the running algorithm to stop at its next check."""
    _require_runner()
    runner_manager.stop()
    return runner_manager.snapshot()


@router.post("/session/reset")
async def reset_algorithm():
    """Regenerate the working data and zero the statistics."""
    _require_runner()
    runner_manager.reset()
    return runner_manager.snapshot()


@router.get("/session/view")
async def get_view():
    """Get the selected runner's visible state."""
    return _require_runner().view()
