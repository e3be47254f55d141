"""
API package for the algoviz FastAPI backend.

This package provides the REST API endpoints for:
- Algorithm catalogue (algorithms.py)
- Visualization settings (settings.py)
- The interactive session: select, run, stop, reset (session.py)
- System health and info (system.py)
- The step-paced algorithm runners (runners/)
"""

from .runners import AlgorithmSettings, AlgorithmType, RunnerManager, runner_manager

__all__ = [
    "AlgorithmSettings",
    "AlgorithmType",
    "RunnerManager",
    "runner_manager",
]
