"""Zipkin v1 wire span models."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from zipkin_loader.types import ConfiguredBaseModel


class Endpoint(ConfiguredBaseModel):
    """Network endpoint attached to annotations.

    Attributes:
        service_name: Service that recorded the annotation
        ipv4: Peer IPv4 address (``0.0.0.0`` when unknown)
        ipv6: Peer IPv6 address, set instead of a real ipv4 for v6 peers
        port: Peer port (0 when unknown)
    """

    service_name: str = Field(alias="serviceName")
    ipv4: Optional[str] = "0.0.0.0"
    ipv6: Optional[str] = None
    port: int = 0


class Annotation(ConfiguredBaseModel):
    """Timestamped event within a span (cs, cr, sr, ss, lc)."""

    endpoint: Endpoint
    timestamp: int  # microseconds
    value: str


class BinaryAnnotation(ConfiguredBaseModel):
    """Key/value tag on a span."""

    key: str
    value: str
    endpoint: Optional[Endpoint] = None


class WireSpan(ConfiguredBaseModel):
    """A span in the Zipkin v1 JSON format.

    Attributes:
        trace_id: 128-bit trace id, 32 hex characters
        id: 64-bit span id, 16 hex characters
        parent_id: Parent span id, omitted for root spans
        name: Display name
        timestamp: Start time in microseconds (local spans only)
        duration: Duration in microseconds
        annotations: Point events; omitted for local spans
        binary_annotations: Flattened tags
        zonename: Emitting zone, used for diagnostics and never sent
    """

    trace_id: str = Field(alias="traceId")
    id: str
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    name: str
    timestamp: Optional[int] = None
    duration: Optional[int] = None
    annotations: Optional[List[Annotation]] = None
    binary_annotations: List[BinaryAnnotation] = Field(default_factory=list, alias="binaryAnnotations")
    zonename: str = Field(default="", exclude=True)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def to_wire(self) -> Dict[str, Any]:
        """Convert to the JSON object POSTed to the collector."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def summary(self) -> str:
        """One-line description used in batch diagnostics; roots show parentId None."""
        return f"[{self.trace_id}/{self.zonename}]: {self.parent_id} -> {self.id} ({self.name})"
