"""
Fixed-interval scheduler driving the poll cycle of one charger.

Runs the cycle once immediately on start and then once per interval.  A
tick that fires while the previous cycle is still running is skipped, never
queued, so at most one cycle per device is in flight and writes to the held
state never interleave.

Stopping cancels the timer only: a cycle already in flight runs to
completion.  Reconfiguring the interval restarts the timer without an extra
immediate cycle.

CHANGELOG:
- 2026-10-18: Skip ticks while a cycle is in flight instead of queueing
- 2026-10-18: Initial creation (STORY-009)

TODO:
- None
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

CycleFn = Callable[[], Awaitable[Any]]


class PollScheduler:
    """Periodic runner with single-in-flight semantics.

    Must be used from within a running event loop.

    Args:
        name: Label used in log messages (usually the device name).
    """

    def __init__(self, name: str = "charger") -> None:
        self._name = name
        self._interval_s: float | None = None
        self._cycle_fn: CycleFn | None = None
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: asyncio.Task[None] | None = None
        self._skipped_ticks = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        """Whether the timer is active."""
        return self._timer is not None and not self._timer.done()

    @property
    def interval_s(self) -> float | None:
        """Current interval in seconds, ``None`` before the first start."""
        return self._interval_s

    @property
    def skipped_ticks(self) -> int:
        """Number of ticks skipped because a cycle was still in flight."""
        return self._skipped_ticks

    def start(self, interval_s: float, cycle_fn: CycleFn) -> None:
        """Run ``cycle_fn`` now, then every ``interval_s`` seconds.

        Raises:
            ValueError: If ``interval_s`` is not positive.
            RuntimeError: If the scheduler is already running.
        """
        _check_interval(interval_s)
        if self.running:
            raise RuntimeError(f"Scheduler for {self._name} is already running")
        self._interval_s = interval_s
        self._cycle_fn = cycle_fn
        logger.info(
            "Poll scheduler for %s started (interval=%ss)", self._name, interval_s
        )
        self._tick()
        self._start_timer()

    def reconfigure(self, interval_s: float) -> None:
        """Restart the timer with a new interval, without an immediate cycle.

        When the scheduler is not running only the interval is recorded.
        """
        _check_interval(interval_s)
        self._interval_s = interval_s
        if not self.running:
            logger.debug(
                "Scheduler for %s not running, interval set to %ss",
                self._name,
                interval_s,
            )
            return
        self._cancel_timer()
        self._start_timer()
        logger.info(
            "Poll scheduler for %s reconfigured (interval=%ss)", self._name, interval_s
        )

    def stop(self) -> None:
        """Stop scheduling further cycles.  Idempotent.

        A cycle already in flight is not interrupted.
        """
        if self._timer is None:
            return
        self._cancel_timer()
        logger.info("Poll scheduler for %s stopped", self._name)

    async def wait_idle(self) -> None:
        """Wait for the in-flight cycle, if any, to finish."""
        task = self._in_flight
        if task is not None and not task.done():
            await asyncio.wait({task})

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _start_timer(self) -> None:
        self._timer = asyncio.get_running_loop().create_task(
            self._timer_loop(), name=f"poll-timer-{self._name}"
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _timer_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s or 0)
            self._tick()

    def _tick(self) -> None:
        """Start a cycle unless one is still in flight."""
        if self._in_flight is not None and not self._in_flight.done():
            self._skipped_ticks += 1
            logger.warning(
                "Previous poll cycle for %s still running, skipping tick", self._name
            )
            return
        self._in_flight = asyncio.get_running_loop().create_task(
            self._run_cycle(), name=f"poll-cycle-{self._name}"
        )

    async def _run_cycle(self) -> None:
        if self._cycle_fn is None:
            return
        try:
            await self._cycle_fn()
        except Exception:
            logger.error("Poll cycle error for %s", self._name, exc_info=True)


def _check_interval(interval_s: float) -> None:
    if interval_s <= 0:
        raise ValueError(f"Poll interval must be > 0 (got {interval_s})")
