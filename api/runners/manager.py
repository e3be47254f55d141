"""
Runner manager for the algoviz session.

Holds the settings store and at most one active runner, and fans runner
notifications out to in-process callbacks and to the WebSocket ``session``
channel.
"""

import asyncio
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from api.shared.logger import get_logger

from .cancellation import StepDelay
from .controller import AlgorithmRunner, RunController
from .registry import AlgorithmType, UnknownAlgorithmError, create_runner, parse_algorithm_type
from .settings import AlgorithmSettings, SettingsStore
from .stats import ExecutionStats

logger = get_logger(__name__)

SessionCallback = Callable[[str, Dict[str, Any]], None]

EVENT_SELECTED = "runner_selected"
EVENT_STATS = "runner_stats"
EVENT_RUNNING = "runner_running"
EVENT_SETTINGS = "settings_changed"


class RunnerManager:
    """
    Host shell for the single interactive session.

    Selecting an algorithm replaces the active runner; the previous one is
    stopped and closed before the new one is installed, so a stale run can
    never report into the new selection.
    """

    def __init__(
        self,
        settings_store: Optional[SettingsStore] = None,
        delay: Optional[StepDelay] = None,
    ):
        """Initialize the runner manager.

        Args:
            settings_store: Settings owner (a fresh store if omitted)
            delay: Step delay handed to every runner (app config if omitted)
        """
        self.settings_store = settings_store or SettingsStore()
        self._delay = delay
        self._runner: Optional[AlgorithmRunner] = None
        self._task: Optional[asyncio.Task] = None
        self._callbacks: List[SessionCallback] = []
        self._pending: Set[asyncio.Task] = set()
        self.settings_store.subscribe(self._on_settings_changed)

    @property
    def runner(self) -> Optional[AlgorithmRunner]:
        return self._runner

    @property
    def settings(self) -> AlgorithmSettings:
        return self.settings_store.current

    @property
    def algorithm_type(self) -> Optional[AlgorithmType]:
        return self._runner.algorithm_type if self._runner else None

    @property
    def is_running(self) -> bool:
        return self._runner is not None and self._runner.is_running

    def select(
        self,
        algorithm_type: Any,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[AlgorithmRunner]:
        """Make ``algorithm_type`` the active selection.

        The new runner is fully built before the previous one is closed.

        Args:
            algorithm_type: AlgorithmType or its string tag
            options: Algorithm-specific options passed to the registry

        Returns:
            The new runner, or None if the tag is unknown (the current
            selection is left untouched)
        """
        try:
            algorithm_type = parse_algorithm_type(algorithm_type)
        except UnknownAlgorithmError:
            logger.warning("Unknown algorithm type: %s", algorithm_type)
            return None

        runner = create_runner(
            algorithm_type,
            self.settings,
            controller=RunController(delay=self._delay),
            options=options,
        )

        self._close_runner()
        self._runner = runner
        runner.controller.add_listeners(
            on_stats=lambda stats: self._on_stats(runner, stats),
            on_running=lambda running: self._on_running(runner, running),
        )

        logger.info("Selected algorithm %s", algorithm_type.value)
        self._notify(EVENT_SELECTED, self.snapshot())
        return runner

    def start(self) -> bool:
        """Schedule a run of the active runner on the running event loop.

        Returns:
            True if a run was scheduled, False if nothing is selected or the
            runner is already running
        """
        runner = self._runner
        if runner is None or runner.is_running:
            return False
        # Scheduled but not yet started
        if self._task is not None and not self._task.done():
            return False

        task = asyncio.get_running_loop().create_task(runner.run())
        task.add_done_callback(self._on_task_done)
        self._task = task
        return True

    async def run(self) -> None:
        """Run the active runner and wait for it to finish or stop."""
        if self._runner is not None:
            await self._runner.run()

    def stop(self) -> None:
        if self._runner is not None:
            self._runner.stop()

    def reset(self) -> None:
        if self._runner is not None:
            self._runner.reset()

    def snapshot(self) -> Dict[str, Any]:
        """Current session state for the host shell and its clients."""
        runner = self._runner
        return {
            "algorithm": runner.algorithm_type.value if runner else None,
            "running": self.is_running,
            "stats": (runner.stats if runner else ExecutionStats()).to_dict(),
            "settings": self.settings.model_dump(mode="json"),
            "view": runner.algorithm.view() if runner else None,
        }

    def register_callback(self, callback: SessionCallback) -> None:
        """Register a callback receiving ``(event, data)`` for every notification."""
        self._callbacks.append(callback)

    def unregister_callback(self, callback: SessionCallback) -> None:
        try:
            self._callbacks.remove(callback)
        except ValueError:
            pass

    def shutdown(self) -> None:
        """Close the active runner and cancel its task and pending broadcasts."""
        self._close_runner()
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()

    def _close_runner(self) -> None:
        if self._runner is not None:
            self._runner.close()
            self._runner = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task is self._task:
            self._task = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Algorithm run failed: %s", exc, exc_info=exc)

    def _on_stats(self, runner: AlgorithmRunner, stats: ExecutionStats) -> None:
        if runner is self._runner:
            self._notify(EVENT_STATS, {"algorithm": runner.algorithm_type.value, "stats": stats.to_dict()})

    def _on_running(self, runner: AlgorithmRunner, running: bool) -> None:
        if runner is self._runner:
            self._notify(EVENT_RUNNING, {"algorithm": runner.algorithm_type.value, "running": running})

    def _on_settings_changed(self, settings: AlgorithmSettings) -> None:
        self._notify(EVENT_SETTINGS, {"settings": settings.model_dump(mode="json")})
        if self._runner is not None:
            self._runner.stop()
            self._runner.settings = settings

    def _notify(self, event: str, data: Dict[str, Any]) -> None:
        for callback in list(self._callbacks):
            try:
                callback(event, data)
            except Exception as e:
                logger.error("Error in session callback: %s", e)

        self._dispatch_websocket_notification(event, data)

    def _dispatch_websocket_notification(self, event: str, data: Dict[str, Any]) -> None:
        """
        Schedule the WebSocket broadcast for a notification.

        Notifications raised outside a running event loop (plain sync
        callers) are not broadcast.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        # Import here to avoid circular imports
        from websocket import (
            notify_runner_running,
            notify_runner_selected,
            notify_runner_stats,
            notify_settings_changed,
        )

        if event == EVENT_SELECTED:
            coro = notify_runner_selected(data["algorithm"], data)
        elif event == EVENT_STATS:
            coro = notify_runner_stats(data["algorithm"], data["stats"])
        elif event == EVENT_RUNNING:
            coro = notify_runner_running(data["algorithm"], data["running"])
        elif event == EVENT_SETTINGS:
            coro = notify_settings_changed(data["settings"])
        else:
            return

        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._on_dispatch_done)

    def _on_dispatch_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Error dispatching WebSocket notification: %s", task.exception())


# Global runner manager instance
runner_manager = RunnerManager()
