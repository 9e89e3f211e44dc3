"""Priority task queue with a concurrency ceiling."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional

from .constants import DEFAULT_HISTORY_LIMIT, DEFAULT_HISTORY_PAGE, DEFAULT_MAX_CONCURRENT
from .contracts import QueueStats, Task, TaskStatus, elapsed_ms, utcnow

logger = logging.getLogger(__name__)


class TaskQueue:
    """Schedules independent payloads on the running event loop.

    Pending tasks are kept in priority order (higher first, FIFO within a
    priority). At most ``max_concurrent`` payloads are in flight at once.
    All bookkeeping runs synchronously on the event loop thread, so the
    pending list, running map and history are never mutated concurrently.

    A steady stream of high priority work can starve lower priorities; no
    aging is applied. Running payloads are never preempted and no timeout is
    enforced, so a hung payload holds its slot until it returns.
    """

    def __init__(
        self,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        history_limit: Optional[int] = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._pending: List[Task] = []
        self._running: Dict[str, Task] = {}
        self._handles: Dict[str, asyncio.Task] = {}
        self._history: Deque[Task] = deque(maxlen=history_limit)
        self._max_concurrent = max(1, max_concurrent)
        self._paused = False
        self._scheduled = False
        self._idle = asyncio.Event()
        self._idle.set()

    # ------------------------------------------------------------------
    # Submission and scheduling
    def add(self, payload: Callable[[], Any], priority: int = 0) -> str:
        """Queue ``payload`` and return its task id.

        Must be called while an event loop is running. Payloads may be plain
        callables or return an awaitable; they start once the scheduler runs
        on the next loop iteration and a slot is free.
        """
        if not callable(payload):
            raise TypeError("Task payload must be callable")
        task = Task(payload=payload, priority=priority)

        insert_at = len(self._pending)
        for index, queued in enumerate(self._pending):
            if priority > queued.priority:
                insert_at = index
                break
        self._pending.insert(insert_at, task)
        logger.debug(f"Queued {task.id} with priority {priority} at position {insert_at}")

        self._update_idle()
        self._schedule()
        return task.id

    def _schedule(self) -> None:
        # Dequeue on the next loop iteration so back-to-back submissions are
        # ordered by priority before anything starts.
        if self._scheduled or not self._pending or self._paused:
            return
        self._scheduled = True
        asyncio.get_running_loop().call_soon(self._process)

    def _process(self) -> None:
        self._scheduled = False
        while (
            self._pending
            and not self._paused
            and len(self._running) < self._max_concurrent
        ):
            task = self._pending.pop(0)
            task.status = TaskStatus.RUNNING
            task.started_at = utcnow()
            self._running[task.id] = task
            self._handles[task.id] = asyncio.create_task(self._run(task))
            logger.info(f"Started {task.id} (priority {task.priority})")
        self._update_idle()

    async def _run(self, task: Task) -> None:
        try:
            result = task.payload()
            if inspect.isawaitable(result):
                result = await result
        except asyncio.CancelledError:
            self._finish(task, TaskStatus.FAILED, error="Task interrupted")
            raise
        except Exception as exc:
            logger.info(f"Task {task.id} failed: {exc}")
            self._finish(task, TaskStatus.FAILED, error=str(exc))
        else:
            self._finish(task, TaskStatus.COMPLETED, result=result)
        self._process()

    def _finish(
        self,
        task: Task,
        status: TaskStatus,
        result: Any = None,
        error: Optional[str] = None,
    ) -> None:
        task.status = status
        task.result = result
        task.error = error
        task.completed_at = utcnow()
        task.duration_ms = elapsed_ms(task.started_at, task.completed_at)
        self._running.pop(task.id, None)
        self._handles.pop(task.id, None)
        self._history.append(task)
        logger.info(f"Finished {task.id}: {status.value} in {task.duration_ms}ms")

    def _update_idle(self) -> None:
        if not self._running and (not self._pending or self._paused):
            self._idle.set()
        else:
            self._idle.clear()

    async def join(self) -> None:
        """Wait until nothing is running and nothing runnable is pending."""
        await self._idle.wait()

    # ------------------------------------------------------------------
    # Control
    def cancel(self, task_id: str) -> bool:
        """Cancel a pending task. Running tasks cannot be cancelled."""
        for index, task in enumerate(self._pending):
            if task.id == task_id:
                del self._pending[index]
                self._mark_cancelled(task)
                self._update_idle()
                return True
        return False

    def _mark_cancelled(self, task: Task) -> None:
        task.status = TaskStatus.CANCELLED
        task.completed_at = utcnow()
        self._history.append(task)
        logger.info(f"Cancelled {task.id}")

    def pause(self) -> None:
        self._paused = True
        self._update_idle()

    def resume(self) -> None:
        self._paused = False
        self._update_idle()
        self._schedule()

    def clear(self) -> int:
        """Cancel every pending task and return how many were dropped."""
        dropped = self._pending
        self._pending = []
        for task in dropped:
            self._mark_cancelled(task)
        self._update_idle()
        return len(dropped)

    def reorder(self) -> None:
        """Re-sort pending tasks by priority, keeping arrival order for ties."""
        self._pending.sort(key=lambda t: -t.priority)

    def set_max_concurrent(self, max_concurrent: int) -> None:
        self._max_concurrent = max(1, max_concurrent)

    def clear_history(self) -> None:
        self._history.clear()

    # ------------------------------------------------------------------
    # Read accessors
    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    def get_task_status(self, task_id: str) -> Optional[Task]:
        for task in self._pending:
            if task.id == task_id:
                return task.model_copy()
        task = self._running.get(task_id)
        if task is not None:
            return task.model_copy()
        for task in self._history:
            if task.id == task_id:
                return task.model_copy()
        return None

    def get_queue(self) -> List[Task]:
        return [task.model_copy() for task in self._pending]

    def get_running(self) -> List[Task]:
        return [task.model_copy() for task in self._running.values()]

    def get_history(self, limit: int = DEFAULT_HISTORY_PAGE) -> List[Task]:
        if limit <= 0:
            return []
        return [task.model_copy() for task in list(self._history)[-limit:]]

    def get_stats(self) -> QueueStats:
        completed = [t for t in self._history if t.status == TaskStatus.COMPLETED]
        failed = sum(1 for t in self._history if t.status == TaskStatus.FAILED)
        cancelled = sum(1 for t in self._history if t.status == TaskStatus.CANCELLED)
        durations = [t.duration_ms or 0 for t in completed]
        average = round(sum(durations) / len(durations)) if durations else 0
        return QueueStats(
            pending=len(self._pending),
            running=len(self._running),
            paused=self._paused,
            max_concurrent=self._max_concurrent,
            total=len(self._history),
            completed=len(completed),
            failed=failed,
            cancelled=cancelled,
            average_duration_ms=average,
        )
