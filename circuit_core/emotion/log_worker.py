"""
Analysis Log Worker

Best-effort, off-request-path persistence of analysis records. Records go
into a bounded queue consumed by one background task; a full queue drops the
record and a failed write is reported to the error sink. Neither is retried
and neither reaches the caller.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import structlog

from .base import AnalysisLogRecord
from .stores import AnalysisLogStore


logger = structlog.get_logger(__name__)


ErrorSink = Callable[[AnalysisLogRecord, Exception], None]


@dataclass
class LogWorkerMetrics:
    """Counters for the log worker."""

    submitted: int = 0
    written: int = 0
    dropped: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {
            "submitted": self.submitted,
            "written": self.written,
            "dropped": self.dropped,
            "failed": self.failed,
        }


class AnalysisLogWorker:
    """Bounded queue plus a single consumer task writing to an AnalysisLogStore."""

    def __init__(
        self,
        store: AnalysisLogStore,
        queue_size: int = 1000,
        error_sink: Optional[ErrorSink] = None,
        drain_timeout: float = 5.0,
    ):
        self.store = store
        self.error_sink = error_sink
        self.drain_timeout = drain_timeout
        self.metrics = LogWorkerMetrics()

        self._queue: "asyncio.Queue[AnalysisLogRecord]" = asyncio.Queue(maxsize=queue_size)
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Start the consumer task."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("log_worker_started", queue_size=self._queue.maxsize)

    async def stop(self, drain: bool = True) -> None:
        """Stop the consumer, optionally writing out queued records first."""
        if self._task is None:
            return

        if drain and self.is_running:
            try:
                await asyncio.wait_for(self._queue.join(), timeout=self.drain_timeout)
            except asyncio.TimeoutError:
                logger.warning("log_worker_drain_timeout", pending=self.pending)

        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
        logger.info("log_worker_stopped", **self.metrics.to_dict())

    async def flush(self) -> None:
        """Wait until every queued record has been processed."""
        if self.is_running:
            await self._queue.join()

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit(self, record: AnalysisLogRecord) -> bool:
        """
        Enqueue a record without waiting.

        Returns:
            False if the record was dropped
        """
        self.metrics.submitted += 1

        if not self.is_running:
            self.metrics.dropped += 1
            logger.warning("log_record_dropped", reason="worker_not_running")
            return False

        try:
            self._queue.put_nowait(record)
        except asyncio.QueueFull:
            self.metrics.dropped += 1
            logger.warning("log_record_dropped", reason="queue_full", pending=self.pending)
            return False
        return True

    # -------------------------------------------------------------------------
    # Consumer
    # -------------------------------------------------------------------------

    async def _run(self) -> None:
        while True:
            record = await self._queue.get()
            try:
                await self.store.append(record)
                self.metrics.written += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.metrics.failed += 1
                self._report(record, e)
            finally:
                self._queue.task_done()

    def _report(self, record: AnalysisLogRecord, error: Exception) -> None:
        logger.error(
            "log_record_write_failed",
            request_id=record.request_id,
            error=str(error),
            error_type=type(error).__name__,
        )
        if self.error_sink is None:
            return
        try:
            self.error_sink(record, error)
        except Exception as e:
            logger.error("log_error_sink_failed", error=str(e))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "running": self.is_running,
            "pending": self.pending,
            **self.metrics.to_dict(),
        }


__all__ = [
    "ErrorSink",
    "LogWorkerMetrics",
    "AnalysisLogWorker",
]
