"""Translation of raw trace records into Zipkin v1 wire spans."""

import ipaddress
from typing import Any, Dict, List, Optional

from zipkin_loader.config import TranslationConfig
from zipkin_loader.logger import logger
from zipkin_loader.modules.ingestion.schemas import RawTraceRecord, TraceLogEntry
from zipkin_loader.modules.translation.schemas import (
    Annotation,
    BinaryAnnotation,
    Endpoint,
    WireSpan,
)
from zipkin_loader.modules.translation.service_names import ServiceNameResolver
from zipkin_loader.modules.translation.tag_flattener import TagFlattener, escape_value

# Event timestamps in "logs" are seconds; local span markers and "elapsed"
# are milliseconds. Zipkin wants microseconds.
EVENT_TIMESTAMP_SCALE = 1_000_000
MILLIS_TO_MICROS = 1_000

LOCAL_COMPONENT_KEY = "lc"
LOCAL_COMPONENT_VALUE = "localComponent"


def zipkinify_trace_id(uuid: str) -> str:
    """128-bit trace id: the UUID without separators."""
    return uuid.replace("-", "").lower()


def zipkinify_span_id(uuid: str) -> str:
    """64-bit span id: the first 16 hex digits of the UUID.

    Version 1 UUIDs share their trailing node/clock bits across a host, so
    the leading digits are kept.
    """
    return zipkinify_trace_id(uuid)[:16]


def _valid_port(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        port = int(value)
    except (TypeError, ValueError):
        return 0
    return port if 0 < port < 65536 else 0


class SpanTranslator:
    """
    Maps one validated trace record to one wire span.

    The translator has no side effects besides diagnostic logging; records
    are never mutated.
    """

    def __init__(self, config: Optional[TranslationConfig] = None):
        self.config = config or TranslationConfig()
        self.service_names = ServiceNameResolver(self.config)
        self.flattener = TagFlattener(self.config.flatten_extra_depth)

    def annotation_code(self, event: str) -> str:
        code = self.config.annotation_codes.get(event)
        if code is None:
            logger.warning(f"assuming {event} is a local span")
            return self.config.fallback_annotation_code
        return code

    def span_name(self, record: RawTraceRecord) -> str:
        """Display name; generic HTTP request spans get "<method> <path>"."""
        if record.operation != self.config.http_request_operation:
            return record.operation

        method = record.tags.get("http.method")
        url = record.tags.get("http.url")
        if not (method and isinstance(url, str) and url):
            return record.operation

        client = self.service_names.client_service(record.tags)
        prefix = f"{client} {method}" if client else str(method)
        # /packages?xyz -> /packages
        path = url.split("?")[0][: self.config.url_path_max_length]
        return f"{prefix} {path}"

    def endpoint(self, record: RawTraceRecord, service_name: str) -> Endpoint:
        """Endpoint from peer.addr/peer.port tags, falling back to 0.0.0.0:0."""
        endpoint = Endpoint(
            service_name=service_name,
            port=_valid_port(record.tags.get("peer.port")),
        )

        addr = record.tags.get("peer.addr")
        if isinstance(addr, str) and addr:
            try:
                ip = ipaddress.ip_address(addr)
            except ValueError:
                logger.debug(f"ignoring invalid peer.addr {addr!r}")
                return endpoint
            if ip.version == 6:
                endpoint.ipv4 = None
                endpoint.ipv6 = str(ip)
            else:
                endpoint.ipv4 = str(ip)
        return endpoint

    def local_span_bounds(self, record: RawTraceRecord) -> Optional[Dict[str, float]]:
        """Begin/end timestamps when the record is a local span, else None."""
        if len(record.logs) != 2:
            return None

        bounds = {entry.event: entry.timestamp for entry in record.logs}
        begin = bounds.get(self.config.local_span_begin)
        end = bounds.get(self.config.local_span_end)
        if begin is None or end is None:
            return None
        return {"begin": float(begin), "end": float(end)}

    def _annotation(self, entry: TraceLogEntry, endpoint: Endpoint) -> Optional[Annotation]:
        if entry.timestamp is None:
            logger.warning(f"skipping {entry.event} event without a timestamp")
            return None
        return Annotation(
            endpoint=endpoint,
            timestamp=round(float(entry.timestamp) * EVENT_TIMESTAMP_SCALE),
            value=self.annotation_code(entry.event),
        )

    def binary_annotations(self, record: RawTraceRecord) -> List[BinaryAnnotation]:
        tags = dict(record.tags)

        # carried by the annotation endpoints instead
        tags.pop("peer.addr", None)
        tags.pop("peer.port", None)

        if "hostname" not in tags and record.hostname is not None:
            tags["hostname"] = record.hostname
        if record.pid is not None:
            tags["pid"] = record.pid

        # keyed first so later tags win, sent as a list
        values: Dict[str, str] = {"reqId": record.trace_id}
        for key, value in self.flattener.flatten(tags):
            values[key] = value

        return [
            BinaryAnnotation(key=key, value=escape_value(value))
            for key, value in values.items()
        ]

    def translate(self, record: RawTraceRecord) -> WireSpan:
        """
        Translate a trace record.

        Args:
            record: Validated trace record

        Returns:
            Wire span; root spans carry no parentId
        """
        trace_id = zipkinify_trace_id(record.trace_id)
        span = WireSpan(
            trace_id=trace_id,
            id=zipkinify_span_id(record.span_id),
            name=self.span_name(record),
            zonename=record.name,
        )

        if record.has_parent:
            span.parent_id = zipkinify_span_id(record.parent_span_id)
        elif record.elapsed is not None:
            span.duration = round(record.elapsed * MILLIS_TO_MICROS)

        service_name = self.service_names.resolve(record)
        endpoint = self.endpoint(record, service_name)
        span.binary_annotations = self.binary_annotations(record)

        bounds = self.local_span_bounds(record)
        if bounds is not None:
            span.timestamp = round(bounds["begin"] * MILLIS_TO_MICROS)
            # sub-millisecond work still gets a non-zero duration
            span.duration = max(1, round((bounds["end"] - bounds["begin"]) * MILLIS_TO_MICROS))
            span.binary_annotations.append(
                BinaryAnnotation(
                    key=LOCAL_COMPONENT_KEY,
                    value=LOCAL_COMPONENT_VALUE,
                    endpoint=endpoint.model_copy(update={"port": 0}),
                )
            )
            return span

        annotations = [self._annotation(entry, endpoint) for entry in record.logs]
        span.annotations = [a for a in annotations if a is not None]
        return span
