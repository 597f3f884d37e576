"""Free-running interval scheduler used by the autopost methods.

Every tick launches the action as its own task, independently of whether
the previous tick finished, unless the SKIP_IF_BUSY overlap policy is
selected. The scheduler runs until the returned handle is cancelled.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from radarcord.types.aliases import TickErrorHook
from radarcord.utils.intervals import OverlapPolicy
from radarcord.utils.logging import new_correlation_id

logger = logging.getLogger(__name__)


class IntervalScheduler:
    """Run an async action every ``interval`` seconds.

    Example:
        >>> scheduler = IntervalScheduler(client.post_stats, 120.0)
        >>> handle = scheduler.start()
        >>> ...
        >>> await handle.stop()
    """

    def __init__(
        self,
        action: Callable[[], Awaitable[object]],
        interval: float,
        *,
        overlap: OverlapPolicy = OverlapPolicy.ALLOW_CONCURRENT,
        on_error: TickErrorHook | None = None,
        name: str = "autopost",
    ) -> None:
        """Initialize scheduler.

        Args:
            action: Coroutine function run on every tick
            interval: Seconds between ticks
            overlap: Tick overlap policy
            on_error: Hook receiving exceptions raised by a tick
            name: Name used in log messages and task names
        """
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        self.action: Callable[[], Awaitable[object]] = action
        self.interval: float = interval
        self.overlap: OverlapPolicy = overlap
        self.on_error: TickErrorHook | None = on_error
        self.name: str = name

        self.ticks: int = 0
        self.skipped: int = 0
        self._task: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()

    @property
    def running(self) -> bool:
        """Whether the timer loop is active."""
        return self._task is not None and not self._task.done()

    @property
    def busy(self) -> bool:
        """Whether a tick is still in flight."""
        return bool(self._in_flight)

    def start(self) -> AutopostHandle:
        """Start the timer loop; the first tick fires after one interval.

        Returns:
            Handle used to cancel the scheduler

        Raises:
            RuntimeError: If called outside a running event loop or twice
        """
        if self._task is not None:
            raise RuntimeError(f"Scheduler {self.name!r} was already started")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=f"radarcord-{self.name}")
        logger.info("Started %s every %.1fs (overlap=%s)", self.name, self.interval, self.overlap.value)
        return AutopostHandle(self)

    def cancel(self) -> None:
        """Stop scheduling new ticks and cancel in-flight ones."""
        if self._task is not None and not self._task.done():
            _ = self._task.cancel()
            logger.info("Cancelled %s after %d ticks", self.name, self.ticks)
        for task in list(self._in_flight):
            _ = task.cancel()

    async def stop(self) -> None:
        """Cancel and wait until the loop and every in-flight tick have finished."""
        self.cancel()
        pending: list[asyncio.Task[None]] = [*self._in_flight]
        if self._task is not None:
            pending.append(self._task)
        _ = await asyncio.gather(*pending, return_exceptions=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self._fire()

    def _fire(self) -> None:
        if self.overlap is OverlapPolicy.SKIP_IF_BUSY and self._in_flight:
            self.skipped += 1
            logger.warning("Skipping %s tick, previous tick still running", self.name)
            return

        self.ticks += 1
        task = asyncio.get_running_loop().create_task(self._tick(), name=f"radarcord-{self.name}-{self.ticks}")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _tick(self) -> None:
        correlation_id = new_correlation_id()
        logger.debug("Running %s tick %d", self.name, self.ticks)
        try:
            _ = await self.action()
        except Exception as exc:
            logger.exception("Error during %s tick (correlation_id=%s)", self.name, correlation_id)
            await self._report(exc)

    async def _report(self, exc: BaseException) -> None:
        if self.on_error is None:
            return
        try:
            outcome = self.on_error(exc)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("Error hook of %s failed", self.name)


class AutopostHandle:
    """Cancellation handle returned by the autopost methods."""

    __slots__ = ("_scheduler",)

    def __init__(self, scheduler: IntervalScheduler) -> None:
        self._scheduler: IntervalScheduler = scheduler

    @property
    def running(self) -> bool:
        """Whether further ticks will fire."""
        return self._scheduler.running

    @property
    def interval(self) -> float:
        """Seconds between ticks."""
        return self._scheduler.interval

    @property
    def ticks(self) -> int:
        """Number of ticks launched so far (the immediate first post excluded)."""
        return self._scheduler.ticks

    @property
    def skipped(self) -> int:
        """Number of ticks skipped because the previous one was still running."""
        return self._scheduler.skipped

    def cancel(self) -> None:
        """Stop the repeating poster without waiting."""
        self._scheduler.cancel()

    async def stop(self) -> None:
        """Stop the repeating poster and wait for it to wind down."""
        await self._scheduler.stop()

    def __repr__(self) -> str:
        state = "running" if self.running else "stopped"
        return f"<AutopostHandle {self._scheduler.name} {state} interval={self.interval}s ticks={self.ticks}>"
