"""Best-effort user activity logging."""

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from pixelboard.domain.activity import ActivityEntry

logger = logging.getLogger(__name__)


class ActivityRepository(Protocol):
    """Persistence interface for activity entries."""

    def create_activity(self, entry: ActivityEntry) -> None:
        """Persist an activity entry."""

    def list_for_user(self, user_id: UUID, limit: int) -> list[ActivityEntry]:
        """Return recent activity for a user, newest first."""


@dataclass
class ActivityLogger:
    """Queues activity entries and writes them from a background task.

    ``log`` never blocks and never raises; when the queue is full the entry
    is dropped.
    """

    repository: ActivityRepository
    ttl_days: int = 30
    max_queue_size: int = 1000
    _queue: asyncio.Queue[ActivityEntry] = field(init=False, repr=False)
    _worker: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self._queue = asyncio.Queue(maxsize=self.max_queue_size)

    def log(
        self,
        user_id: UUID,
        activity: str,
        metadata: dict[str, object] | None = None,
    ) -> None:
        """Enqueue an activity entry."""
        now = datetime.now(tz=UTC)
        entry = ActivityEntry(
            activity_id=f"{user_id}_{int(now.timestamp() * 1000)}_{uuid4().hex[:8]}",
            user_id=user_id,
            activity=activity,
            metadata=metadata or {},
            timestamp=now,
            expires_at=now + timedelta(days=self.ttl_days),
        )
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            logger.warning(
                "Activity queue full, dropping entry",
                extra={"user_id": str(user_id), "activity": activity},
            )

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def start(self) -> None:
        """Start draining the queue in the background."""
        if self._worker is None:
            self._worker = asyncio.create_task(self._drain())

    async def stop(self) -> None:
        """Write out queued entries and stop the worker."""
        if self._worker is None:
            return
        await self._queue.join()
        self._worker.cancel()
        with suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None

    def recent(self, user_id: UUID, limit: int = 50) -> list[ActivityEntry]:
        """Return recent activity for a user."""
        return self.repository.list_for_user(user_id, limit)

    async def _drain(self) -> None:
        while True:
            entry = await self._queue.get()
            try:
                await asyncio.to_thread(self.repository.create_activity, entry)
            except Exception:
                logger.exception(
                    "Failed to persist activity",
                    extra={"activity_id": entry.activity_id},
                )
            finally:
                self._queue.task_done()
