"""
Convergence Driver
==================

Steps a layout strategy to completion on a cooperative scheduler.

GUARANTEES:
===========
1. Exactly one layout step per scheduler tick
2. The completion callback fires exactly once per run
3. A hard step cap bounds non-converging layouts
4. Starting a new run cancels the in-flight one; a cancelled run
   never calls its completion callback
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from typing import Callable, Deque, Optional
import asyncio
import itertools
import logging

from ..config import DriverConfig
from ..contracts.base import Error, ErrorCode
from ..observability import AuditEventType, AuditLog
from .layout.base import LayoutStrategy


logger = logging.getLogger(__name__)

Callback = Callable[[], None]


# =============================================================================
# SCHEDULERS
# =============================================================================

class Scheduler(ABC):
    """Cooperative scheduler: runs callbacks later, one at a time."""

    @abstractmethod
    def call_soon(self, callback: Callback) -> None:
        """Queue a callback for a later scheduling opportunity."""


class SynchronousScheduler(Scheduler):
    """
    Drains queued callbacks immediately, without recursion.

    A callback scheduled from inside a running callback is queued and run
    after it returns, so every layout step stays a discrete tick.
    A failing callback does not strand the rest of the queue: draining
    continues and the first error is re-raised once the queue is empty.
    """

    def __init__(self):
        self._queue: Deque[Callback] = deque()
        self._draining = False

    def call_soon(self, callback: Callback) -> None:
        self._queue.append(callback)
        if self._draining:
            return

        self._draining = True
        failure: Optional[Exception] = None
        try:
            while self._queue:
                callback = self._queue.popleft()
                try:
                    callback()
                except Exception as exc:
                    if failure is not None:
                        logger.error("Scheduled callback failed", exc_info=exc)
                    else:
                        failure = exc
        finally:
            self._draining = False

        if failure is not None:
            raise failure


class FrameScheduler(Scheduler):
    """
    Runs callbacks only when the host advances a frame.

    Callbacks queued during a frame run in the next one.
    """

    def __init__(self):
        self._queue: Deque[Callback] = deque()
        self._frames = 0

    def call_soon(self, callback: Callback) -> None:
        self._queue.append(callback)

    def tick(self) -> int:
        """Run one frame. Returns the number of callbacks run."""
        self._frames += 1
        batch = len(self._queue)
        for _ in range(batch):
            self._queue.popleft()()
        return batch

    def run_until_idle(self, max_frames: int = 100_000) -> int:
        """Advance frames until nothing is queued. Returns frames run."""
        frames = 0
        while self._queue and frames < max_frames:
            self.tick()
            frames += 1
        return frames

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def frames(self) -> int:
        return self._frames


class AsyncioScheduler(Scheduler):
    """Schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_soon(self, callback: Callback) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_soon(callback)


# =============================================================================
# DRIVER
# =============================================================================

class RunStatus(Enum):
    """Lifecycle of one driver run."""
    RUNNING = "running"
    CONVERGED = "converged"
    STEP_CAP_REACHED = "step_cap_reached"
    CANCELLED = "cancelled"


class DriverRun:
    """Handle for one in-flight or finished driver run."""

    def __init__(
        self,
        run_id: int,
        layout: LayoutStrategy,
        on_complete: Callback,
        max_steps: int
    ):
        self.run_id = run_id
        self.layout = layout
        self.max_steps = max_steps
        self._on_complete = on_complete
        self._status = RunStatus.RUNNING
        self._steps = 0

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def done(self) -> bool:
        return self._status is not RunStatus.RUNNING

    @property
    def cancelled(self) -> bool:
        return self._status is RunStatus.CANCELLED

    @property
    def hit_step_cap(self) -> bool:
        return self._status is RunStatus.STEP_CAP_REACHED

    def __repr__(self) -> str:
        return f"DriverRun(id={self.run_id}, status={self._status.value}, steps={self._steps})"


class ConvergenceDriver:
    """
    Drives a layout through repeated step() calls until it converges.

    Last writer wins: only the most recent run may complete.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        config: Optional[DriverConfig] = None,
        audit: Optional[AuditLog] = None
    ):
        self._scheduler = scheduler or SynchronousScheduler()
        self._config = config or DriverConfig()
        self._audit = audit
        self._ids = itertools.count(1)
        self._current: Optional[DriverRun] = None

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def active_run(self) -> Optional[DriverRun]:
        """The run still stepping, if any."""
        return self._current

    @property
    def in_progress(self) -> bool:
        return self._current is not None

    def run(self, layout: LayoutStrategy, on_complete: Callback) -> DriverRun:
        """Start stepping layout; on_complete fires once when done."""
        self.cancel()

        run = DriverRun(next(self._ids), layout, on_complete, self._config.max_steps)
        self._current = run
        self._record(AuditEventType.LAYOUT_STARTED, "Layout run started", run)
        self._scheduler.call_soon(lambda: self._tick(run))
        return run

    def cancel(self) -> Optional[DriverRun]:
        """Abandon the in-flight run. Returns it, or None."""
        run = self._current
        if run is None:
            return None

        run._status = RunStatus.CANCELLED
        self._current = None
        logger.debug("Cancelled layout run %d after %d steps", run.run_id, run.steps)
        self._record(AuditEventType.LAYOUT_CANCELLED, "Layout run cancelled", run)
        return run

    def _tick(self, run: DriverRun):
        if run.done:
            return

        converged = run.layout.step()
        run._steps += 1

        if converged:
            self._finish(run, RunStatus.CONVERGED)
        elif run.steps >= run.max_steps:
            logger.warning(
                "Layout %s did not converge within %d steps; using last positions",
                run.layout.layout_type.value, run.max_steps
            )
            self._finish(run, RunStatus.STEP_CAP_REACHED)
        else:
            self._scheduler.call_soon(lambda: self._tick(run))

    def _finish(self, run: DriverRun, status: RunStatus):
        run._status = status
        if self._current is run:
            self._current = None

        if status is RunStatus.CONVERGED:
            self._record(AuditEventType.LAYOUT_CONVERGED, "Layout converged", run)
        else:
            self._record(
                AuditEventType.LAYOUT_STEP_CAP_REACHED,
                "Layout step cap reached",
                run,
                Error(ErrorCode.STEP_CAP_EXHAUSTED, "Last computed positions used")
            )

        run._on_complete()

    def _record(
        self,
        event_type: AuditEventType,
        message: str,
        run: DriverRun,
        error: Optional[Error] = None
    ):
        if self._audit is None:
            return
        self._audit.record(
            event_type,
            message,
            {"run_id": run.run_id, "layout": run.layout.layout_type.value, "steps": run.steps},
            error=error
        )
