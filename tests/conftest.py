"""
Root conftest.py for algoviz tests.

This file contains shared fixtures and pytest configuration
that applies to all test modules.
"""

import os
import sys
from pathlib import Path

# Animation delays are disabled for the whole test session; must be set
# before api.app_config is first imported.
os.environ.setdefault("ALGOVIZ_TIME_SCALE", "0")

import numpy as np
import pytest

# Ensure the project root is in the path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from api.runners.cancellation import StepDelay
from api.runners.controller import AlgorithmRunner, RunController
from api.runners.registry import create_runner
from api.runners.settings import AlgorithmSettings


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "websocket: mark test as involving WebSocket communication",
    )
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow running",
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their name.

    - Tests with 'websocket' in name are marked with 'websocket'
    """
    for item in items:
        if "websocket" in item.name.lower():
            item.add_marker(pytest.mark.websocket)


# ============================================================================
# Shared Fixtures
# ============================================================================


@pytest.fixture
def settings():
    """Default settings with animation pacing at its minimum."""
    return AlgorithmSettings(speed=50)


@pytest.fixture
def rng():
    """Seeded random generator for reproducible working data."""
    return np.random.default_rng(1234)


@pytest.fixture
def instant_delay():
    """Step delay that only yields to the event loop."""
    return StepDelay(time_scale=0)


@pytest.fixture
def make_runner(settings, rng, instant_delay):
    """Factory building a reset runner with instant pacing."""

    def _make(algorithm_type, runner_settings=None, **options) -> AlgorithmRunner:
        return create_runner(
            algorithm_type,
            runner_settings or settings,
            controller=RunController(delay=instant_delay),
            rng=rng,
            options=options,
        )

    return _make
