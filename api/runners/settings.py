"""
Visualization settings shared between the host shell and the active runner.

AlgorithmSettings is immutable; SettingsStore replaces the whole value on
every update and notifies its subscribers with the new value. Numeric
values are clamped into range instead of being rejected, so runners never
observe out-of-range input.
"""

import math
from enum import Enum
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from api.shared.logger import get_logger

logger = get_logger(__name__)

ARRAY_SIZE_MIN = 5
ARRAY_SIZE_MAX = 50
SPEED_MIN = 50
SPEED_MAX = 2000


class DataType(str, Enum):
    """Shape of generated array data."""

    RANDOM = "random"
    SORTED = "sorted"
    REVERSE = "reverse"
    NEARLY_SORTED = "nearly-sorted"


class GraphType(str, Enum):
    """Topology of generated graphs."""

    COMPLETE = "complete"
    SPARSE = "sparse"
    CHAIN = "chain"
    TREE = "tree"


def _clamp(value: Any, low: int, high: int) -> int:
    # Infinite values clamp to the bounds; NaN and non-numbers are rejected.
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{value!r} is not a number") from None
    if math.isnan(number):
        raise ValueError("NaN is not a valid setting")
    return int(max(low, min(high, number)))


class AlgorithmSettings(BaseModel):
    """Settings a runner derives its working data and pacing from."""

    model_config = ConfigDict(frozen=True)

    array_size: int = 20
    speed: int = 300
    data_type: DataType = DataType.RANDOM
    graph_type: GraphType = GraphType.SPARSE
    show_step_count: bool = True

    @field_validator("array_size", mode="before")
    @classmethod
    def _clamp_array_size(cls, v: Any) -> int:
        return _clamp(v, ARRAY_SIZE_MIN, ARRAY_SIZE_MAX)

    @field_validator("speed", mode="before")
    @classmethod
    def _clamp_speed(cls, v: Any) -> int:
        return _clamp(v, SPEED_MIN, SPEED_MAX)


SettingsCallback = Callable[[AlgorithmSettings], None]


class SettingsStore:
    """Owner of the current settings value."""

    def __init__(self, defaults: Optional[AlgorithmSettings] = None):
        self._defaults = defaults or AlgorithmSettings()
        self._current = self._defaults
        self._subscribers: List[SettingsCallback] = []

    @property
    def current(self) -> AlgorithmSettings:
        return self._current

    def subscribe(self, callback: SettingsCallback) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: SettingsCallback) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    def update(self, **changes: Any) -> AlgorithmSettings:
        """Apply a partial update.

        Args:
            **changes: Field values to replace; ``None`` values are ignored

        Returns:
            The new settings value
        """
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            return self._current
        data = self._current.model_dump()
        data.update(changes)
        self._set(AlgorithmSettings(**data))
        return self._current

    def update_array_size(self, size: int) -> AlgorithmSettings:
        return self.update(array_size=size)

    def update_speed(self, speed: int) -> AlgorithmSettings:
        return self.update(speed=speed)

    def update_data_type(self, data_type: DataType) -> AlgorithmSettings:
        return self.update(data_type=data_type)

    def update_graph_type(self, graph_type: GraphType) -> AlgorithmSettings:
        return self.update(graph_type=graph_type)

    def update_show_step_count(self, show: bool) -> AlgorithmSettings:
        return self.update(show_step_count=show)

    def reset(self) -> AlgorithmSettings:
        self._set(self._defaults)
        return self._current

    def _set(self, settings: AlgorithmSettings) -> None:
        self._current = settings
        for callback in list(self._subscribers):
            try:
                callback(settings)
            except Exception as e:
                logger.error("Error in settings subscriber: %s", e)
