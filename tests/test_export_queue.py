from zipkin_loader.modules.export import ExportQueue
from zipkin_loader.modules.translation import WireSpan


def make_span(n: int) -> WireSpan:
    return WireSpan(trace_id="ab" * 16, id=f"{n:016x}", name=f"op-{n}", zonename="vmapi")


def test_drain_returns_spans_in_order_and_empties_queue():
    queue = ExportQueue()
    spans = [make_span(n) for n in range(3)]
    for span in spans:
        queue.enqueue(span)

    assert queue.drain() == spans
    assert len(queue) == 0
    assert queue.drain() == []


def test_enqueue_around_drain_loses_and_duplicates_nothing():
    queue = ExportQueue()
    spans = [make_span(n) for n in range(10)]

    for span in spans[:6]:
        queue.enqueue(span)
    batch = queue.drain()
    for span in spans[6:]:
        queue.enqueue(span)
    rest = queue.drain()

    ids = [span.id for span in batch + rest]
    assert ids == [span.id for span in spans]
    assert len(set(ids)) == len(spans)


def test_stats():
    queue = ExportQueue()
    queue.enqueue(make_span(1))
    queue.enqueue(make_span(2))
    queue.drain()
    queue.enqueue(make_span(3))

    assert queue.get_stats() == {"depth": 1, "enqueued": 3, "drained": 2}
