import asyncio
import logging

import pytest

from zipkin_loader.modules.export import ExportQueue, Pump

from tests.conftest import RecordingExporter
from tests.test_export_queue import make_span


class ExplodingExporter(RecordingExporter):
    async def export_batch(self, spans):
        self.batches.append(list(spans))
        raise RuntimeError("collector on fire")


@pytest.mark.asyncio
async def test_tick_exports_non_empty_batch(exporter):
    queue = ExportQueue()
    pump = Pump(queue, exporter, interval_ms=60000)
    queue.enqueue(make_span(1))

    task = pump.tick()
    await task

    assert [[s.id for s in batch] for batch in exporter.batches] == [[make_span(1).id]]
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_empty_tick_does_not_export(exporter):
    pump = Pump(ExportQueue(), exporter, interval_ms=60000)

    assert pump.tick() is None
    assert exporter.batches == []
    assert pump.ticks == 1


@pytest.mark.asyncio
async def test_pump_keeps_ticking_after_failures():
    exporter = ExplodingExporter()
    queue = ExportQueue()
    pump = Pump(queue, exporter, interval_ms=5)
    pump.start()

    for n in range(3):
        queue.enqueue(make_span(n))
        await asyncio.sleep(0.03)

    assert pump.running
    await pump.finish()

    assert sum(len(batch) for batch in exporter.batches) == 3
    assert pump.ticks >= 3


@pytest.mark.asyncio
async def test_spans_enqueued_while_running_are_exported_exactly_once(exporter):
    queue = ExportQueue()
    pump = Pump(queue, exporter, interval_ms=2)
    pump.start()

    spans = [make_span(n) for n in range(50)]
    for span in spans:
        queue.enqueue(span)
        if span.name.endswith("7"):
            await asyncio.sleep(0.005)

    await pump.finish()

    exported = [s.id for batch in exporter.batches for s in batch]
    assert sorted(exported) == sorted(s.id for s in spans)
    assert len(exported) == len(spans)


@pytest.mark.asyncio
async def test_finish_flushes_partial_batch_in_one_call(exporter):
    queue = ExportQueue()
    pump = Pump(queue, exporter, interval_ms=60000)
    pump.start()

    for n in range(4):
        queue.enqueue(make_span(n))
    await pump.finish()

    assert len(exporter.batches) == 1
    assert [s.id for s in exporter.batches[0]] == [make_span(n).id for n in range(4)]
    assert not pump.running


@pytest.mark.asyncio
async def test_finish_is_idempotent(exporter):
    queue = ExportQueue()
    pump = Pump(queue, exporter, interval_ms=60000)
    pump.start()
    queue.enqueue(make_span(1))

    await pump.finish()
    queue.enqueue(make_span(2))
    await pump.finish()

    assert len(exporter.batches) == 1
    assert len(queue) == 1


@pytest.mark.asyncio
async def test_start_twice_is_rejected(exporter):
    pump = Pump(ExportQueue(), exporter, interval_ms=60000)
    pump.start()
    with pytest.raises(RuntimeError):
        pump.start()
    await pump.finish()


@pytest.mark.asyncio
async def test_export_logs_one_line_per_span(exporter, caplog):
    queue = ExportQueue()
    pump = Pump(queue, exporter, interval_ms=60000)
    child = make_span(1).model_copy(update={"parent_id": "a1b2c3d4e5f64a7b"})
    root = make_span(2)
    queue.enqueue(child)
    queue.enqueue(root)

    with caplog.at_level(logging.INFO, logger="zipkin_loader"):
        await pump.tick()

    assert f"[{'ab' * 16}/vmapi]: a1b2c3d4e5f64a7b -> {child.id} (op-1)" in caplog.messages
    assert f"[{'ab' * 16}/vmapi]: None -> {root.id} (op-2)" in caplog.messages
