"""Schemas for raw trace records read from service logs."""
import math
import re
from typing import Any, Dict, List, Optional, Union

from pydantic import ConfigDict, Field, field_validator

from zipkin_loader.types import ConfiguredBaseModel

UUID_PATTERN = re.compile(
    r"^[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}$"
)

# parentSpanId value meaning "this span has no parent"
NO_PARENT = "0"


class TraceLogEntry(ConfiguredBaseModel):
    """One timestamped event logged inside a span"""
    event: str
    timestamp: Optional[str] = None  # numeric string

    @field_validator("timestamp", mode="before")
    @classmethod
    def _numeric_timestamp(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("timestamp must be numeric")
        if isinstance(value, (int, float)):
            value = repr(value)
        if isinstance(value, str) and not math.isfinite(float(value)):
            raise ValueError(f"timestamp must be finite: {value!r}")
        return value


class RawTraceRecord(ConfiguredBaseModel):
    """A single trace record as emitted on one log line"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    span_id: str = Field(alias="spanId")
    trace_id: str = Field(alias="traceId")
    parent_span_id: Optional[str] = Field(default=None, alias="parentSpanId")
    operation: str = Field(min_length=1)
    name: str = ""
    elapsed: Optional[float] = Field(default=None, allow_inf_nan=False)
    hostname: Optional[str] = None
    pid: Optional[Union[int, str]] = None
    tags: Dict[str, Any] = {}
    logs: List[TraceLogEntry] = []

    @field_validator("span_id", "trace_id")
    @classmethod
    def _uuid(cls, value: str) -> str:
        if not UUID_PATTERN.match(value):
            raise ValueError(f"not a UUID: {value!r}")
        return value

    @field_validator("parent_span_id", mode="before")
    @classmethod
    def _parent_uuid(cls, value: Any) -> Any:
        if value is None:
            return None
        if value == NO_PARENT or value == 0:
            return NO_PARENT
        if not isinstance(value, str) or not UUID_PATTERN.match(value):
            raise ValueError(f"parentSpanId is neither a UUID nor {NO_PARENT!r}: {value!r}")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def has_parent(self) -> bool:
        return bool(self.parent_span_id) and self.parent_span_id != NO_PARENT
