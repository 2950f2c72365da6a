"""Error taxonomy for the RMSSD pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    SOURCE_UNAVAILABLE = "SourceUnavailable"
    MALFORMED_SAMPLE = "MalformedSample"
    INSUFFICIENT_SAMPLES = "InsufficientSamples"


class RMSSDError(Exception):
    """Base class for recoverable per-calculation failures.

    ``kind`` tags the failure so callers can branch on it without
    ``isinstance`` chains; ``context`` is the human readable message.
    """

    kind: ErrorKind

    def __init__(self, context: str):
        self.context = context
        super().__init__(context)


class SourceUnavailable(RMSSDError, OSError):
    """Raised when the sample source cannot be opened or read."""

    kind = ErrorKind.SOURCE_UNAVAILABLE

    def __init__(self, message: str, *, source: str):
        self.source = source
        super().__init__(message)


class MalformedSample(RMSSDError, ValueError):
    """Raised when a line is not a decimal number in range for the target width."""

    kind = ErrorKind.MALFORMED_SAMPLE

    def __init__(self, message: str, *, source: str, line: int, text: Optional[str] = None):
        self.source = source
        self.line = line
        self.text = text
        super().__init__(f"{source}:{line}: {message}")


class InsufficientSamples(RMSSDError, ValueError):
    """Raised when fewer than two samples are available."""

    kind = ErrorKind.INSUFFICIENT_SAMPLES

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"too few RR intervals to calculate RMSSD (got {count}, need at least 2)"
        )


__all__ = [
    "ErrorKind",
    "RMSSDError",
    "SourceUnavailable",
    "MalformedSample",
    "InsufficientSamples",
]
