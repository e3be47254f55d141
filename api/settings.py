"""
Settings API routes for algoviz.

Reads and updates the visualization settings shared by every runner.
Numeric values outside their range are clamped, not rejected.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ValidationError

from .runners.manager import runner_manager
from .runners.settings import DataType, GraphType
from .shared.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


class SettingsUpdate(BaseModel):
    """Partial settings update; omitted fields keep their value.

    Sizes and speeds are accepted as any JSON number and clamped when
    applied.
    """

    array_size: Optional[float] = None
    speed: Optional[float] = None
    data_type: Optional[DataType] = None
    graph_type: Optional[GraphType] = None
    show_step_count: Optional[bool] = None


@router.get("/settings")
async def get_settings():
    """Get the current settings."""
    return runner_manager.settings.model_dump(mode="json")


@router.put("/settings")
async def update_settings(request: SettingsUpdate):
    """Apply a partial settings update.

    Any active run is stopped and the selected runner regenerates its data
    from the new settings.
    """
    try:
        settings = runner_manager.settings_store.update(**request.model_dump(exclude_none=True))
    except ValidationError as e:
        logger.warning("Rejected settings update: %s", e)
        raise HTTPException(status_code=422, detail=str(e))
    logger.info("Settings updated: %s", settings.model_dump(mode="json"))
    return settings.model_dump(mode="json")


@router.post("/settings/reset")
async def reset_settings():
    """Restore the default settings."""
    settings = runner_manager.settings_store.reset()
    return settings.model_dump(mode="json")
