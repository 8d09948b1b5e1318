"""
Translation module: trace records to Zipkin v1 wire spans.

Provides:
- SpanTranslator: record -> WireSpan (ids, names, annotations, local spans)
- ServiceNameResolver: endpoint service name inference from alias tables
- TagFlattener: nested tags -> dotted binary annotation keys
- WireSpan, Annotation, BinaryAnnotation, Endpoint: wire models
"""

from zipkin_loader.modules.translation.schemas import (
    Annotation,
    BinaryAnnotation,
    Endpoint,
    WireSpan,
)
from zipkin_loader.modules.translation.service_names import ServiceNameResolver
from zipkin_loader.modules.translation.span_translator import (
    SpanTranslator,
    zipkinify_span_id,
    zipkinify_trace_id,
)
from zipkin_loader.modules.translation.tag_flattener import TagFlattener

__all__ = [
    "SpanTranslator",
    "ServiceNameResolver",
    "TagFlattener",
    "WireSpan",
    "Annotation",
    "BinaryAnnotation",
    "Endpoint",
    "zipkinify_span_id",
    "zipkinify_trace_id",
]
