"""Recognition and validation of trace records on raw log lines."""
import json
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import ValidationError

from zipkin_loader.config import TranslationConfig
from zipkin_loader.exceptions import ErrorKind, RecordFormatError
from zipkin_loader.logger import logger
from zipkin_loader.modules.ingestion.schemas import RawTraceRecord
from zipkin_loader.types import ConfiguredBaseModel


class FilterOutcome(str, Enum):
    """What the filter decided for one line"""
    ACCEPTED = "accepted"
    NOT_CANDIDATE = "not_candidate"
    NO_MAGIC = "no_magic"
    BAD_MAGIC = "bad_magic"
    HEALTH_CHECK = "health_check"
    NOISE = "noise"


class FilterResult(ConfiguredBaseModel):
    """Filter decision plus the validated record when accepted"""
    outcome: FilterOutcome
    kind: Optional[ErrorKind] = None
    record: Optional[RawTraceRecord] = None

    @property
    def accepted(self) -> bool:
        return self.outcome == FilterOutcome.ACCEPTED


class RecordFilter:
    """
    Decides which log lines are trace records.

    A line is a candidate only if it starts with ``{`` and contains the magic
    key. Candidates must be valid JSON and, once the magic key is confirmed,
    valid trace records; anything else raises RecordFormatError.
    """

    def __init__(self, config: Optional[TranslationConfig] = None):
        self.config = config or TranslationConfig()
        self._noise = {(rule.operation, rule.service) for rule in self.config.noise}
        self.counts: Dict[str, int] = {outcome.value: 0 for outcome in FilterOutcome}

    def is_candidate(self, line: str) -> bool:
        return line.strip().startswith("{") and self.config.magic_key in line

    def parse(self, line: str) -> Dict[str, Any]:
        """Parse a candidate line, raising RecordFormatError on bad JSON."""
        try:
            obj = json.loads(line.strip())
        except json.JSONDecodeError as e:
            raise RecordFormatError(f"candidate line is not valid JSON: {e}", line=line) from e

        if not isinstance(obj, dict):
            raise RecordFormatError("candidate line is not a JSON object", line=line)
        return obj

    def validate(self, obj: Dict[str, Any], line: Optional[str] = None) -> RawTraceRecord:
        try:
            return RawTraceRecord.model_validate(obj)
        except ValidationError as e:
            raise RecordFormatError(f"invalid trace record: {e}", line=line) from e

    def _is_health_check(self, record: RawTraceRecord) -> bool:
        url = record.tags.get("http.url")
        if not isinstance(url, str):
            return False
        return any(url.startswith(prefix) for prefix in self.config.health_check_prefixes)

    def _is_noise(self, record: RawTraceRecord) -> bool:
        return (record.operation, record.name) in self._noise

    def _result(
        self,
        outcome: FilterOutcome,
        kind: Optional[ErrorKind] = None,
        record: Optional[RawTraceRecord] = None,
    ) -> FilterResult:
        self.counts[outcome.value] += 1
        return FilterResult(outcome=outcome, kind=kind, record=record)

    def check(self, line: str) -> FilterResult:
        """
        Classify one log line.

        Args:
            line: Raw text line from a log source

        Returns:
            FilterResult carrying the validated record when accepted

        Raises:
            RecordFormatError: candidate line is not JSON or not a valid record
        """
        if not self.is_candidate(line):
            return self._result(FilterOutcome.NOT_CANDIDATE)

        obj = self.parse(line)

        if self.config.magic_key not in obj:
            return self._result(FilterOutcome.NO_MAGIC, ErrorKind.FILTERED)

        magic = obj[self.config.magic_key]
        if not isinstance(magic, str) or magic.strip() != self.config.magic_value:
            logger.warning(
                f"Dropping record with bad magic {self.config.magic_key}={magic!r}"
            )
            return self._result(FilterOutcome.BAD_MAGIC, ErrorKind.FILTERED)

        record = self.validate(obj, line=line)

        if self._is_health_check(record):
            return self._result(FilterOutcome.HEALTH_CHECK, ErrorKind.FILTERED)
        if self._is_noise(record):
            return self._result(FilterOutcome.NOISE, ErrorKind.FILTERED)

        return self._result(FilterOutcome.ACCEPTED, record=record)

    def get_stats(self) -> Dict[str, Any]:
        return dict(self.counts)
