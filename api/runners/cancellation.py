"""
Cooperative cancellation and step pacing.

A CancellationToken is created for every run and passed explicitly into
the algorithm body and any recursive helper it calls. Cancelling a token
never interrupts the body; the body notices at its next poll. StepDelay is
the only place a body suspends.
"""

import asyncio
from typing import Optional


class CancellationToken:
    """Cancellation flag for a single run."""

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._event.set()

    async def wait(self, seconds: float) -> bool:
        """Suspend for up to ``seconds``, waking early if cancelled.

        Args:
            seconds: Maximum time to wait

        Returns:
            True if the token was cancelled by the time the wait ended
        """
        if self._event.is_set():
            await asyncio.sleep(0)
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
        return self._event.is_set()


class StepDelay:
    """Pacing primitive used between visible mutations.

    Durations are expressed in milliseconds and multiplied by
    ``time_scale``. A zero effective duration yields to the event loop
    exactly once and resumes without arming a timer.
    """

    def __init__(self, time_scale: float = 1.0):
        self.time_scale = max(0.0, time_scale)

    async def __call__(
        self,
        duration_ms: float,
        token: Optional[CancellationToken] = None,
    ) -> None:
        seconds = max(0.0, duration_ms) * self.time_scale / 1000.0
        if seconds == 0.0:
            await asyncio.sleep(0)
            return
        if token is None:
            await asyncio.sleep(seconds)
            return
        await token.wait(seconds)
