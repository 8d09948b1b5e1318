"""Error taxonomy for the trace loader.

Only ``ErrorKind.INPUT_FORMAT`` is fatal. Everything else is either a silent
drop, a logged fallback, or a logged delivery failure that leaves the pump
running.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """How a problem encountered while loading spans is handled."""

    INPUT_FORMAT = "input_format"  # fatal
    FILTERED = "filtered"  # silent drop
    SEMANTIC = "semantic"  # logged, defaulted
    DELIVERY = "delivery"  # logged, pump keeps ticking


class ZipkinLoaderError(Exception):
    """Base class for loader errors."""

    kind: ErrorKind = ErrorKind.INPUT_FORMAT


class RecordFormatError(ZipkinLoaderError):
    """A candidate line or parsed trace record is structurally invalid.

    Raised for malformed JSON on a candidate line and for records with
    missing or mistyped identifiers. These are producer bugs, so the error
    propagates and stops the process.
    """

    kind = ErrorKind.INPUT_FORMAT

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


class DeliveryError(ZipkinLoaderError):
    """The collector could not be reached or answered with a non-2xx status."""

    kind = ErrorKind.DELIVERY

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
