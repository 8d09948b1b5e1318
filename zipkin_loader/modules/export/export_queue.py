"""Append buffer of translated spans between pump ticks."""

from typing import Any, Dict, List

from zipkin_loader.modules.translation.schemas import WireSpan


class ExportQueue:
    """
    Unbounded ordered buffer of wire spans.

    Owned by the loader and shared by reference with the pump. Ingestion and
    the pump run on one event loop and neither awaits inside ``enqueue`` or
    ``drain``, so no lock is needed.
    """

    def __init__(self):
        self._spans: List[WireSpan] = []
        self.enqueued = 0
        self.drained = 0

    def enqueue(self, span: WireSpan) -> None:
        self._spans.append(span)
        self.enqueued += 1

    def drain(self) -> List[WireSpan]:
        """Swap out the current contents and leave the queue empty."""
        batch, self._spans = self._spans, []
        self.drained += len(batch)
        return batch

    def __len__(self) -> int:
        return len(self._spans)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "depth": len(self._spans),
            "enqueued": self.enqueued,
            "drained": self.drained,
        }
