"""View accounting.

Reads bump an in-memory counter (``ViewCounter``); a single background task
(``ViewCountFlusher``) periodically drains the counter and adds the deltas to
the stored ``notes.views`` column.

View counts are best-effort telemetry: when a flush fails, the drained deltas
are logged and dropped instead of being put back or retried. A failing store
therefore loses the views of that interval but can never make the counter
grow without bound or double count once the store recovers.
"""

import asyncio
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .logging import get_logger
from .repositories.note_repository import NoteRepository

logger = get_logger("accounting")


class ViewCounter:
    """Thread-safe per-note view counter.

    The lock is only held for dict operations, so ``increment`` never waits
    on I/O and can be called from request handlers and worker threads alike.
    """

    def __init__(self):
        self._counts: Dict[str, int] = defaultdict(int)
        self._lock = Lock()

    def increment(self, note_id: str, amount: int = 1) -> None:
        if amount <= 0:
            return
        with self._lock:
            self._counts[note_id] += amount

    def pending(self, note_id: str) -> int:
        """Views recorded for a note since the last drain."""
        with self._lock:
            return self._counts.get(note_id, 0)

    def drain_dirty(self) -> Dict[str, int]:
        """Take all accumulated deltas and start over from zero.

        The map is swapped under the lock, so an increment either lands in
        the returned snapshot or in the next one, never in both.
        """
        with self._lock:
            snapshot, self._counts = self._counts, defaultdict(int)
        return dict(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)


@dataclass
class FlushStats:
    flushes: int = 0
    failures: int = 0
    consecutive_failures: int = 0
    flushed_views: int = 0
    dropped_views: int = 0
    last_flush_at: Optional[datetime] = None
    last_error: Optional[str] = None


class ViewCountFlusher:
    """Background task moving view deltas from a ``ViewCounter`` to the DB."""

    def __init__(
        self,
        counter: ViewCounter,
        session_factory: Callable[[], AsyncSession],
        interval_seconds: float,
    ):
        self.counter = counter
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.stats = FlushStats()
        self._task: Optional[asyncio.Task] = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="view-count-flusher")
        logger.info("View count flusher started", extra={"interval_seconds": self.interval_seconds})

    async def stop(self) -> None:
        """Stop the loop and do one last best-effort flush.

        A flush already in progress is allowed to finish first.
        """
        if self._task is not None:
            self._stopping.set()
            await self._task
            self._task = None
        await self.flush_once()
        logger.info("View count flusher stopped", extra=self.snapshot())

    async def flush_once(self) -> int:
        """Drain the counter and persist the deltas.

        Returns the number of views written; 0 when there was nothing to do
        or the flush failed.
        """
        deltas = self.counter.drain_dirty()
        if not deltas:
            return 0

        total = sum(deltas.values())
        try:
            async with self.session_factory() as session:
                touched = await NoteRepository(session).flush_counts(deltas)
        except asyncio.CancelledError as e:
            self._record_drop(deltas, e)
            raise
        except Exception as e:
            self._record_drop(deltas, e)
            return 0

        self.stats.flushes += 1
        self.stats.consecutive_failures = 0
        self.stats.flushed_views += total
        self.stats.last_flush_at = datetime.now(timezone.utc)
        logger.debug(
            "Flushed view counts",
            extra={"views": total, "notes": len(deltas), "rows": touched},
        )
        return total

    def snapshot(self) -> Dict[str, Any]:
        data = asdict(self.stats)
        if self.stats.last_flush_at is not None:
            data["last_flush_at"] = self.stats.last_flush_at.isoformat()
        data["pending_notes"] = len(self.counter)
        data["running"] = self.running
        return data

    def _record_drop(self, deltas: Dict[str, int], error: BaseException) -> None:
        total = sum(deltas.values())
        self.stats.failures += 1
        self.stats.consecutive_failures += 1
        self.stats.dropped_views += total
        self.stats.last_error = str(error) or type(error).__name__
        logger.error(
            "Dropping view counts after failed flush",
            extra={"views": total, "note_ids": sorted(deltas)},
            exc_info=error,
        )

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), self.interval_seconds)
            except asyncio.TimeoutError:
                await self.flush_once()
