"""
Step-paced, cancellable algorithm runners.

The runner library is pure asyncio and does not depend on the web layer.
"""

from .cancellation import CancellationToken, StepDelay
from .controller import Algorithm, AlgorithmRunner, RunContext, RunController, Runner
from .manager import RunnerManager, runner_manager
from .registry import (
    ALGORITHM_INFO,
    AlgorithmCategory,
    AlgorithmType,
    UnknownAlgorithmError,
    create_runner,
    get_algorithm_info,
    list_algorithms,
)
from .settings import AlgorithmSettings, DataType, GraphType, SettingsStore
from .stats import ExecutionStats

__all__ = [
    "ALGORITHM_INFO",
    "Algorithm",
    "AlgorithmCategory",
    "AlgorithmRunner",
    "AlgorithmSettings",
    "AlgorithmType",
    "CancellationToken",
    "DataType",
    "ExecutionStats",
    "GraphType",
    "RunContext",
    "RunController",
    "Runner",
    "RunnerManager",
    "SettingsStore",
    "StepDelay",
    "UnknownAlgorithmError",
    "create_runner",
    "get_algorithm_info",
    "list_algorithms",
    "runner_manager",
]
