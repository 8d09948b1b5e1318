"""
Ingestion module: turning log lines into validated trace records.

Provides:
- RecordFilter: candidate detection, JSON parsing, magic and noise checks
- RawTraceRecord: validated trace record schema
- FileReplaySource / TailSource: line sources for replay and live modes
"""

from zipkin_loader.modules.ingestion.log_sources import FileReplaySource, TailSource
from zipkin_loader.modules.ingestion.record_filter import (
    FilterOutcome,
    FilterResult,
    RecordFilter,
)
from zipkin_loader.modules.ingestion.schemas import NO_PARENT, RawTraceRecord, TraceLogEntry

__all__ = [
    "RecordFilter",
    "FilterOutcome",
    "FilterResult",
    "RawTraceRecord",
    "TraceLogEntry",
    "NO_PARENT",
    "FileReplaySource",
    "TailSource",
]
