"""
Timer-driven pump moving spans from the export queue to an exporter.

Each tick drains the queue and hands a non-empty batch to the exporter
without waiting for delivery, so a slow or failing collector never delays
the next tick. In replay mode ``finish()`` stops the timer and flushes what
is left after the input is exhausted.
"""

import asyncio
from typing import Any, Dict, List, Optional, Set

from zipkin_loader.logger import logger
from zipkin_loader.modules.export.export_queue import ExportQueue
from zipkin_loader.modules.export.exporters import SpanExporter
from zipkin_loader.modules.translation.schemas import WireSpan


class Pump:
    """
    Periodic drain-and-export loop.

    Ticks every ``interval_ms`` regardless of batch emptiness or exporter
    outcome. The timer is cancelled at most once, by ``finish()``.
    """

    def __init__(self, queue: ExportQueue, exporter: SpanExporter, interval_ms: int = 1000):
        """
        Initialize pump.

        Args:
            queue: Queue shared with the ingestion path
            exporter: Destination for drained batches
            interval_ms: Milliseconds between ticks
        """
        self.queue = queue
        self.exporter = exporter
        self.interval_ms = interval_ms
        self.ticks = 0
        self.batches = 0
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()
        self._finished = False

        logger.debug(f"Pump initialized: interval_ms={interval_ms}")

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start(self) -> None:
        """Start ticking on the running event loop."""
        if self._timer is not None:
            raise RuntimeError("pump already started")
        self._timer = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_ms / 1000)
            self.tick()

    def tick(self) -> Optional[asyncio.Task]:
        """
        Drain the queue and start exporting the batch.

        Returns:
            The export task, or None when the queue was empty
        """
        self.ticks += 1
        batch = self.queue.drain()
        if not batch:
            return None

        task = asyncio.create_task(self._export(batch))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _export(self, batch: List[WireSpan]) -> bool:
        self.batches += 1
        for span in batch:
            logger.info(span.summary())

        try:
            return await self.exporter.export_batch(batch)
        except Exception as e:
            logger.error(f"Exporter raised on a batch of {len(batch)} spans: {e}")
            return False

    async def finish(self) -> None:
        """
        Stop the timer and flush the queue one last time.

        Used once the finite input of replay mode is exhausted. Waits for
        every export started by earlier ticks.
        """
        if self._finished:
            return
        self._finished = True

        if self._timer is not None:
            self._timer.cancel()
            try:
                await self._timer
            except asyncio.CancelledError:
                pass

        batch = self.queue.drain()
        if batch:
            await self._export(batch)

        if self._in_flight:
            await asyncio.gather(*self._in_flight)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "interval_ms": self.interval_ms,
            "running": self.running,
            "ticks": self.ticks,
            "batches": self.batches,
            "in_flight": len(self._in_flight),
        }
