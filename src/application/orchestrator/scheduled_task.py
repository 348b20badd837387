"""Cancellable one-shot tasks bound to a conversation session."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

log = logging.getLogger(__name__)


class OneShotTask:
    """Runs an async callback once after a delay, unless cancelled first.

    Used for the deferred auto-send of a suggested query and for the
    optional stream stall watchdog.
    """

    def __init__(self, delay_seconds: float, callback: Callable[[], Awaitable[None]], name: str = "one-shot") -> None:
        """Initialize the task (not started).

        Args:
            delay_seconds: Seconds to wait before firing
            callback: Async function invoked once when the delay elapses
            name: Name used for the asyncio task and in logs
        """
        self._delay = delay_seconds
        self._callback = callback
        self._name = name
        self._task: asyncio.Task | None = None
        self._fired = False

    @property
    def pending(self) -> bool:
        """True while started and neither fired nor cancelled."""
        return self._task is not None and not self._task.done() and not self._fired

    @property
    def fired(self) -> bool:
        return self._fired

    def start(self) -> "OneShotTask":
        """Schedule the callback on the running loop."""
        if self._task is not None:
            return self
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)
        log.debug(f"Scheduled {self._name} in {self._delay}s")
        return self

    def cancel(self) -> bool:
        """Cancel the task, interrupting the callback if it already fired.

        Returns:
            True if a pending firing or a running callback was stopped
        """
        if self._task is None or self._task.done():
            return False
        self._task.cancel()
        log.debug(f"Cancelled {self._name}")
        return True

    async def _run(self) -> None:
        await asyncio.sleep(self._delay)
        self._fired = True
        try:
            await self._callback()
        except Exception as e:
            log.error(f"Error in scheduled task {self._name}: {e}")
