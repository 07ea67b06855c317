"""
In-memory asyncio task queue for request side effects.

Newsletter fan-outs and notification emails must never block or fail the
request that triggered them. Routes hand the coroutine to the queue and
return; the queue runs it as an ``asyncio.Task`` on the same event loop and
records the outcome. A failing task is logged here and goes nowhere else.

Usage::

    from services.task_queue import task_queue

    task_id = await task_queue.enqueue("newsletter-blog-42", send_newsletter(...))
    info = task_queue.get_status(task_id)
    # info == {"status": "running", "result": None, "error": None, ...}

On shutdown ``drain()`` waits for in-flight tasks instead of cancelling them.
"""

import asyncio
import logging
from collections.abc import Coroutine
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

logger = logging.getLogger(__name__)


# ── Internal record stored per task ──────────────────────────────────────────


class _TaskRecord:
    __slots__ = (
        "task_id",
        "status",
        "result",
        "error",
        "created_at",
        "completed_at",
        "_asyncio_task",
    )

    def __init__(self, task_id: str) -> None:
        self.task_id: str = task_id
        self.status: str = "pending"  # pending | running | completed | failed
        self.result: Any = None
        self.error: str | None = None
        self.created_at: datetime = datetime.now(UTC)
        self.completed_at: datetime | None = None
        self._asyncio_task: asyncio.Task | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "status": self.status,
            "result": self.result,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


# ── TaskQueue class ───────────────────────────────────────────────────────────


class TaskQueue:
    """Simple in-memory asyncio task queue with an isolated error channel."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._tasks: dict[str, _TaskRecord] = {}
        self._log = log or logger

    # ── Public API ────────────────────────────────────────────────────────────

    async def enqueue(self, task_id: str | None, coro: Coroutine) -> str:
        """
        Wrap *coro* in an asyncio.Task and track its lifecycle.

        A ``None`` task_id gets a random one. If a task with the same id is
        still pending or running, the new coroutine is discarded.
        """
        task_id = task_id or uuid4().hex
        existing = self._tasks.get(task_id)
        if existing and existing.status in ("pending", "running"):
            self._log.warning(
                "task_queue.enqueue: task %s is already %s, ignoring duplicate",
                task_id,
                existing.status,
                extra={"task_id": task_id},
            )
            coro.close()  # avoid "coroutine was never awaited"
            return task_id

        record = _TaskRecord(task_id)
        record.status = "running"
        self._tasks[task_id] = record

        record._asyncio_task = asyncio.create_task(self._run(record, coro), name=f"tq-{task_id}")

        self._log.debug("task_queue: enqueued task %s", task_id, extra={"task_id": task_id})
        return task_id

    def get_status(self, task_id: str) -> dict[str, Any] | None:
        """Return the status dict for *task_id*, or None if it is unknown."""
        record = self._tasks.get(task_id)
        if record is None:
            return None
        return record.to_dict()

    async def drain(self, timeout: float | None = None) -> int:
        """
        Wait for every in-flight task to settle.

        Returns the number of tasks still running when *timeout* expired
        (0 when everything finished). Tasks are never cancelled.
        """
        pending = [
            rec._asyncio_task
            for rec in self._tasks.values()
            if rec._asyncio_task is not None and not rec._asyncio_task.done()
        ]
        if not pending:
            return 0
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        if still_running:
            self._log.warning(
                "task_queue.drain: %d tasks still running after %.1fs",
                len(still_running),
                timeout or 0.0,
            )
        return len(still_running)

    def cleanup_old(self, max_age_seconds: int = 3600) -> int:
        """
        Remove completed/failed tasks older than *max_age_seconds*.

        Returns the number of tasks removed.
        """
        now = datetime.now(UTC)
        to_delete = [
            tid
            for tid, rec in self._tasks.items()
            if rec.status in ("completed", "failed")
            and rec.completed_at is not None
            and (now - rec.completed_at).total_seconds() > max_age_seconds
        ]
        for tid in to_delete:
            del self._tasks[tid]
        if to_delete:
            self._log.debug("task_queue: cleaned up %d old tasks", len(to_delete))
        return len(to_delete)

    def stats(self) -> dict[str, int]:
        """Return counts by status (used by the health endpoint)."""
        counts: dict[str, int] = {"pending": 0, "running": 0, "completed": 0, "failed": 0}
        for rec in self._tasks.values():
            counts[rec.status] = counts.get(rec.status, 0) + 1
        return counts

    # ── Internal helpers ──────────────────────────────────────────────────────

    async def _run(self, record: _TaskRecord, coro: Coroutine) -> None:
        """Execute *coro*, update *record* with outcome."""
        try:
            record.result = await coro
            record.status = "completed"
        except Exception as exc:
            record.error = str(exc)
            record.status = "failed"
            self._log.error(
                "task_queue: task %s failed: %s",
                record.task_id,
                exc,
                exc_info=True,
                extra={"task_id": record.task_id, "outcome": "failed"},
            )
        finally:
            record.completed_at = datetime.now(UTC)
            self._log.debug(
                "task_queue: task %s finished with status=%s",
                record.task_id,
                record.status,
                extra={"task_id": record.task_id, "outcome": record.status},
            )


# ── Module-level singleton ────────────────────────────────────────────────────

task_queue = TaskQueue()


def get_task_queue() -> TaskQueue:
    """FastAPI dependency returning the process-wide task queue."""
    return task_queue
