"""
Export module: batching translated spans and delivering them to Zipkin.

Provides:
- ExportQueue: unbounded span buffer with atomic drain
- Pump: periodic drain-and-export loop with final flush for replay mode
- SpanExporter / ZipkinExporter / ConsoleExporter: batch delivery backends
"""

from zipkin_loader.modules.export.export_queue import ExportQueue
from zipkin_loader.modules.export.exporters import (
    ConsoleExporter,
    SpanExporter,
    ZipkinExporter,
)
from zipkin_loader.modules.export.pump import Pump

__all__ = [
    "ExportQueue",
    "Pump",
    "SpanExporter",
    "ConsoleExporter",
    "ZipkinExporter",
]
