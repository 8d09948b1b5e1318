import json
from typing import Any, Dict, List

import pytest

from zipkin_loader.config import TranslationConfig
from zipkin_loader.modules.export import SpanExporter
from zipkin_loader.modules.ingestion import RawTraceRecord
from zipkin_loader.modules.translation import WireSpan

TRACE_ID = "5c4d1d1e-9a3b-4c2d-8e7f-0a1b2c3d4e5f"
SPAN_ID = "0f1e2d3c-4b5a-4697-8877-665544332211"
PARENT_ID = "a1b2c3d4-e5f6-4a7b-8c9d-0e1f2a3b4c5d"


def make_record(**overrides: Any) -> Dict[str, Any]:
    record = {
        "TritonTracing": "TRITON",
        "spanId": SPAN_ID,
        "traceId": TRACE_ID,
        "parentSpanId": PARENT_ID,
        "operation": "getvm",
        "name": "vmapi",
        "elapsed": 12.5,
        "hostname": "headnode",
        "pid": 4242,
        "tags": {},
        "logs": [
            {"event": "server-request", "timestamp": "2.000"},
            {"event": "server-response", "timestamp": "2.050"},
        ],
    }
    record.update(overrides)
    return record


def make_line(**overrides: Any) -> str:
    return json.dumps(make_record(**overrides))


def parse_record(**overrides: Any) -> RawTraceRecord:
    return RawTraceRecord.model_validate(make_record(**overrides))


class RecordingExporter(SpanExporter):
    """Keeps every batch it is handed."""

    def __init__(self, succeed: bool = True):
        super().__init__()
        self.succeed = succeed
        self.batches: List[List[WireSpan]] = []
        self.closed = False

    async def export_batch(self, spans: List[WireSpan]) -> bool:
        self.batches.append(list(spans))
        self._record(spans, self.succeed)
        return self.succeed

    async def shutdown(self) -> None:
        self.closed = True


@pytest.fixture
def translation_config() -> TranslationConfig:
    return TranslationConfig()


@pytest.fixture
def exporter() -> RecordingExporter:
    return RecordingExporter()
