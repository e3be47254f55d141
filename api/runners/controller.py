"""
Runner lifecycle for step-paced algorithm runs.

An algorithm implementation is a plain object with three methods:

    prepare(settings)      regenerate working data, clear highlights
    async execute(ctx)     the instrumented, cancellable body
    view()                 JSON-serializable visible state

AlgorithmRunner composes such an object with a RunController, which owns
the running flag, the statistics, the per-run CancellationToken and the
observer callbacks. The body only ever talks to the RunContext it is
handed, so it never touches lifecycle state directly.

Lifecycle:
    Idle  -> reset() -> Ready -> run() -> Running -> (completion | stop()) -> Ready
"""

import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, runtime_checkable

from api.shared.logger import get_logger

from .cancellation import CancellationToken, StepDelay
from .settings import AlgorithmSettings
from .stats import ExecutionStats, StatsCounter

logger = get_logger(__name__)

StatsListener = Callable[[ExecutionStats], None]
RunningListener = Callable[[bool], None]


@runtime_checkable
class Algorithm(Protocol):
    """Working data plus body of one algorithm."""

    def prepare(self, settings: AlgorithmSettings) -> None:
        ...

    async def execute(self, ctx: "RunContext") -> None:
        ...

    def view(self) -> Dict[str, Any]:
        ...


@runtime_checkable
class Runner(Protocol):
    """What the host shell needs from an active algorithm selection."""

    algorithm_type: str
    settings: AlgorithmSettings

    @property
    def is_running(self) -> bool:
        ...

    @property
    def stats(self) -> ExecutionStats:
        ...

    def reset(self) -> None:
        ...

    async def run(self) -> None:
        ...

    def stop(self) -> None:
        ...

    def close(self) -> None:
        ...

    def view(self) -> Dict[str, Any]:
        ...


class RunContext:
    """Handle passed to an algorithm body for the duration of one run.

    Bodies must check ``running`` before each unit of work, after every
    ``pause()`` and before committing a visible mutation. Pass the same
    context into recursive helpers.
    """

    def __init__(
        self,
        controller: "RunController",
        token: CancellationToken,
        settings: AlgorithmSettings,
    ):
        self._controller = controller
        self.token = token
        self.settings = settings

    @property
    def running(self) -> bool:
        return not self.token.cancelled and self._controller._is_current(self.token)

    def step(self) -> None:
        self._controller._increment(self.token, "steps")

    def comparison(self) -> None:
        self._controller._increment(self.token, "comparisons")

    def swap(self) -> None:
        self._controller._increment(self.token, "swaps")

    async def pause(self, factor: float = 1.0) -> None:
        """Delay for ``settings.speed * factor`` milliseconds."""
        await self._controller.delay(self.settings.speed * factor, self.token)


class RunController:
    """Running flag, statistics and notifications for one runner.

    Notifications are synchronous: every counter change emits a fresh
    ExecutionStats snapshot to the stats listeners, and every change of
    the running flag emits the new value to the running listeners.
    """

    def __init__(
        self,
        on_stats: Optional[StatsListener] = None,
        on_running: Optional[RunningListener] = None,
        delay: Optional[StepDelay] = None,
    ):
        if delay is None:
            from api.app_config import app_config

            delay = StepDelay(app_config.time_scale)

        self.delay = delay
        self._counter = StatsCounter()
        self._token: Optional[CancellationToken] = None
        self._running = False
        self._started_at = 0.0
        self._stats_listeners: List[StatsListener] = []
        self._running_listeners: List[RunningListener] = []
        self.add_listeners(on_stats, on_running)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def stats(self) -> ExecutionStats:
        return self._counter.snapshot()

    def add_listeners(
        self,
        on_stats: Optional[StatsListener] = None,
        on_running: Optional[RunningListener] = None,
    ) -> None:
        if on_stats is not None:
            self._stats_listeners.append(on_stats)
        if on_running is not None:
            self._running_listeners.append(on_running)

    def clear_listeners(self) -> None:
        self._stats_listeners.clear()
        self._running_listeners.clear()

    async def execute(
        self,
        body: Callable[[RunContext], Awaitable[None]],
        settings: AlgorithmSettings,
    ) -> None:
        """Run ``body`` as a new run unless one is already in progress.

        Args:
            body: The algorithm body
            settings: Settings snapshot the run paces itself with
        """
        if self._running:
            return

        token = CancellationToken()
        self._token = token
        self._counter.clear()
        self._started_at = time.monotonic()
        self._running = True
        self._emit_stats()
        self._emit_running()

        try:
            await body(RunContext(self, token, settings))
        finally:
            if self._token is token:
                self._counter.time_ms = int((time.monotonic() - self._started_at) * 1000)
                self._emit_stats()
                if self._running:
                    self._running = False
                    self._emit_running()

    def stop(self) -> None:
        """Request cooperative cancellation of the current run."""
        if self._token is not None:
            self._token.cancel()
        if self._running:
            self._running = False
            self._emit_running()

    def reset_stats(self) -> None:
        """Abandon any current run and zero the counters."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
        if self._running:
            self._running = False
            self._emit_running()
        self._counter.clear()
        self._emit_stats()

    def close(self) -> None:
        self.stop()
        self._token = None
        self.clear_listeners()

    def _is_current(self, token: CancellationToken) -> bool:
        return self._token is token and self._running

    def _increment(self, token: CancellationToken, field: str) -> None:
        if not self._is_current(token) or token.cancelled:
            return
        setattr(self._counter, field, getattr(self._counter, field) + 1)
        self._emit_stats()

    def _emit_stats(self) -> None:
        snapshot = self._counter.snapshot()
        for callback in list(self._stats_listeners):
            try:
                callback(snapshot)
            except Exception as e:
                logger.error("Error in stats listener: %s", e)

    def _emit_running(self) -> None:
        running = self._running
        for callback in list(self._running_listeners):
            try:
                callback(running)
            except Exception as e:
                logger.error("Error in running listener: %s", e)


class AlgorithmRunner:
    """Runner for one algorithm selection.

    Assigning ``settings`` re-derives the working data (implicit reset).
    """

    def __init__(
        self,
        algorithm_type: str,
        algorithm: Algorithm,
        settings: AlgorithmSettings,
        controller: Optional[RunController] = None,
    ):
        self.algorithm_type = algorithm_type
        self.algorithm = algorithm
        self.controller = controller or RunController()
        self._settings = settings

    @property
    def settings(self) -> AlgorithmSettings:
        return self._settings

    @settings.setter
    def settings(self, value: AlgorithmSettings) -> None:
        self._settings = value
        self.reset()

    @property
    def is_running(self) -> bool:
        return self.controller.is_running

    @property
    def stats(self) -> ExecutionStats:
        return self.controller.stats

    def reset(self) -> None:
        self.controller.reset_stats()
        self.algorithm.prepare(self._settings)

    async def run(self) -> None:
        await self.controller.execute(self.algorithm.execute, self._settings)

    def stop(self) -> None:
        self.controller.stop()

    def close(self) -> None:
        self.controller.close()

    def view(self) -> Dict[str, Any]:
        return {
            "algorithm": str(self.algorithm_type),
            "running": self.is_running,
            "stats": self.stats.to_dict(),
            "state": self.algorithm.view(),
        }
