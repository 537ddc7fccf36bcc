"""Manual-clock scheduler for deferred game actions such as the opponent's turn."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from heapq import heappop, heappush

TaskCallback = Callable[[], None]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Task:
    task_id: int
    due_seconds: float
    callback: TaskCallback
    label: str
    cancelled: bool = False


class Scheduler:
    """One-shot delayed callbacks driven by an externally advanced clock.

    The owner calls `advance` (or `run_due`) from its frame loop or test;
    nothing runs on a background thread.
    """

    def __init__(self) -> None:
        self._now_seconds = 0.0
        self._next_task_id = 1
        self._tasks: dict[int, _Task] = {}
        self._queue: list[tuple[float, int]] = []

    @property
    def now_seconds(self) -> float:
        return self._now_seconds

    @property
    def pending_count(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.cancelled)

    def is_pending(self, task_id: int) -> bool:
        task = self._tasks.get(task_id)
        return task is not None and not task.cancelled

    def next_due(self) -> float | None:
        """Clock time of the earliest live task."""
        live = [task.due_seconds for task in self._tasks.values() if not task.cancelled]
        return min(live) if live else None

    def call_later(self, delay_seconds: float, callback: TaskCallback, label: str = "") -> int:
        """Schedule a one-shot callback after delay."""
        if delay_seconds < 0.0:
            raise ValueError("delay_seconds must be >= 0")
        task_id = self._next_task_id
        self._next_task_id += 1
        due_seconds = self._now_seconds + delay_seconds
        self._tasks[task_id] = _Task(
            task_id=task_id, due_seconds=due_seconds, callback=callback, label=label
        )
        heappush(self._queue, (due_seconds, task_id))
        logger.debug("task_scheduled id=%d label=%s due=%.3f", task_id, label, due_seconds)
        return task_id

    def cancel(self, task_id: int) -> None:
        """Cancel a scheduled task if it exists."""
        task = self._tasks.get(task_id)
        if task is not None:
            task.cancelled = True

    def cancel_all(self) -> None:
        for task in self._tasks.values():
            task.cancelled = True

    def advance(self, delta_seconds: float) -> int:
        """Advance the clock and run callbacks that became due."""
        if delta_seconds < 0.0:
            raise ValueError("delta_seconds must be >= 0")
        return self.run_due(self._now_seconds + delta_seconds)

    def run_due(self, now_seconds: float) -> int:
        """Run callbacks due at or before `now_seconds`."""
        if now_seconds < self._now_seconds:
            raise ValueError("now_seconds cannot move backwards")
        self._now_seconds = now_seconds
        executed = 0
        while self._queue and self._queue[0][0] <= self._now_seconds:
            _, task_id = heappop(self._queue)
            task = self._tasks.pop(task_id, None)
            if task is None or task.cancelled:
                continue
            task.callback()
            executed += 1
        return executed
