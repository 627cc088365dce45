"""
Write queue for sampled data points.

Delivery contract: at most once, best effort. A write is attempted a
single time; failures are logged and counted, never retried. Durable
order is not guaranteed to match capture order, and writes submitted
while the queue is full are dropped.
"""
import asyncio
from dataclasses import dataclass
from typing import Optional

from dialtester.core.config import settings
from dialtester.core.logging import get_logger
from dialtester.core.metrics import data_point_writes_total
from dialtester.recorder.gateway_client import GatewayClient, GatewayError
from dialtester.recorder.sampler import DataPointWrite

logger = get_logger(__name__)


@dataclass
class WriteQueueStats:
    submitted: int = 0
    delivered: int = 0
    failed: int = 0
    dropped: int = 0


class WriteQueue:
    """Single-worker asyncio queue delivering data point inserts."""

    def __init__(self, gateway: GatewayClient, maxsize: int = settings.WRITE_QUEUE_MAXSIZE):
        self.gateway = gateway
        self.stats = WriteQueueStats()
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._worker: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> None:
        """Start the delivery worker if it is not running."""
        if not self.running:
            self._worker = asyncio.create_task(self._run())

    def submit(self, write: DataPointWrite) -> bool:
        """
        Enqueue a write without waiting.

        Returns:
            False if the queue was full and the write was dropped
        """
        try:
            self._queue.put_nowait(write)
        except asyncio.QueueFull:
            self.stats.dropped += 1
            data_point_writes_total.labels(outcome="dropped").inc()
            logger.warning(f"Write queue full, dropped value {write.value} for session {write.session_id}")
            return False
        self.stats.submitted += 1
        return True

    async def drain(self) -> None:
        """Wait until every queued write has been attempted."""
        if not self.running:
            await self.start()
        await self._queue.join()

    async def close(self) -> None:
        """Drain outstanding writes, then stop the worker."""
        if self._worker is None:
            return
        await self.drain()
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def _run(self) -> None:
        while True:
            write = await self._queue.get()
            try:
                await self.gateway.insert_data_point(write.session_id, write.value, write.timestamp)
                self.stats.delivered += 1
                data_point_writes_total.labels(outcome="delivered").inc()
            except GatewayError as e:
                self.stats.failed += 1
                data_point_writes_total.labels(outcome="failed").inc()
                get_logger(__name__, session_id=write.session_id).error(
                    f"Error saving data point: {e.message}",
                    extra={"data_point": {"value": write.value, "timestamp": write.timestamp.isoformat()}},
                )
            except Exception as e:
                # Anything unexpected still counts as one failed write; the worker keeps running
                self.stats.failed += 1
                data_point_writes_total.labels(outcome="failed").inc()
                get_logger(__name__, session_id=write.session_id).error(
                    f"Unexpected error saving data point: {e}", exc_info=True
                )
            finally:
                self._queue.task_done()
