"""
Loader wiring: log lines -> record filter -> span translator -> export queue,
with a pump delivering queued spans to the configured exporter.
"""

import asyncio
from typing import Any, AsyncIterator, Dict, Optional, Sequence

from zipkin_loader.config import LoaderSettings
from zipkin_loader.logger import logger
from zipkin_loader.modules.export import (
    ConsoleExporter,
    ExportQueue,
    Pump,
    SpanExporter,
    ZipkinExporter,
)
from zipkin_loader.modules.ingestion import FileReplaySource, RecordFilter, TailSource
from zipkin_loader.modules.translation import SpanTranslator, WireSpan


def build_exporter(settings: LoaderSettings) -> SpanExporter:
    """Console exporter in dry-run mode, Zipkin exporter otherwise."""
    if settings.dry_run:
        return ConsoleExporter(pretty_print=True)
    if not settings.zipkin_host:
        raise ValueError("zipkin_host is required unless dry_run is set")
    return ZipkinExporter(
        settings.collector_url,
        spans_path=settings.spans_path,
        timeout_sec=settings.request_timeout_sec,
    )


class Loader:
    """
    One loader process.

    The export queue is owned here and passed by reference to the pump;
    ingestion and pumping share one event loop.
    """

    def __init__(
        self,
        settings: LoaderSettings,
        exporter: Optional[SpanExporter] = None,
        queue: Optional[ExportQueue] = None,
    ):
        self.settings = settings
        self.filter = RecordFilter(settings.translation)
        self.translator = SpanTranslator(settings.translation)
        self.queue = queue if queue is not None else ExportQueue()
        self.exporter = exporter or build_exporter(settings)
        self.pump = Pump(self.queue, self.exporter, settings.pump_interval_ms)

    def ingest_line(self, line: str) -> Optional[WireSpan]:
        """
        Filter, translate and enqueue one log line.

        Returns:
            The enqueued span, or None when the line was dropped

        Raises:
            RecordFormatError: candidate line is malformed
        """
        result = self.filter.check(line)
        if not result.accepted:
            return None

        span = self.translator.translate(result.record)
        self.queue.enqueue(span)
        return span

    async def consume(self, lines: AsyncIterator[str]) -> int:
        """Ingest every line of one source, returning the number of spans queued."""
        queued = 0
        async for line in lines:
            if self.ingest_line(line) is not None:
                queued += 1
        return queued

    async def replay(self, paths: Sequence[str]) -> Dict[str, Any]:
        """
        Load static files, then flush and stop.

        Files are read concurrently; order is kept within each file only.
        """
        source = FileReplaySource(paths)
        self.pump.start()
        counts = await asyncio.gather(*(self.consume(stream) for stream in source.streams()))
        logger.info(f"Input exhausted: {sum(counts)} spans from {len(paths)} files")

        await self.pump.finish()
        await self.exporter.shutdown()
        return self.get_stats()

    async def follow(self, paths: Sequence[str]) -> None:
        """Tail live files until the tail process exits; no final flush."""
        self.pump.start()
        try:
            await self.consume(TailSource(paths).lines())
        finally:
            await self.exporter.shutdown()

    def get_stats(self) -> Dict[str, Any]:
        return {
            "filter": self.filter.get_stats(),
            "queue": self.queue.get_stats(),
            "pump": self.pump.get_stats(),
            "exporter": self.exporter.get_stats(),
        }
