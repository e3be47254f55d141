"""
Execution statistics for algorithm runs.

ExecutionStats is the immutable snapshot handed to observers; StatsCounter
is the mutable tally owned by a RunController. Observers only ever see
snapshots, never the live counter.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ExecutionStats:
    """Snapshot of a run's counters."""

    steps: int = 0
    comparisons: int = 0
    swaps: int = 0
    time_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary for JSON serialization."""
        return asdict(self)


class StatsCounter:
    """Mutable step/comparison/swap tally for the active run."""

    __slots__ = ("steps", "comparisons", "swaps", "time_ms")

    def __init__(self):
        self.clear()

    def clear(self) -> None:
        self.steps = 0
        self.comparisons = 0
        self.swaps = 0
        self.time_ms = 0

    def snapshot(self) -> ExecutionStats:
        return ExecutionStats(
            steps=self.steps,
            comparisons=self.comparisons,
            swaps=self.swaps,
            time_ms=self.time_ms,
        )
