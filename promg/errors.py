"""Error types raised while querying and charting."""
from __future__ import annotations


class PromgError(RuntimeError):
    """Base class for every failure reported to the user."""


class ArgumentError(PromgError):
    """Raised when command line arguments are inconsistent."""


class TransportError(PromgError):
    """Raised when the HTTP exchange with Prometheus fails."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class DecodeError(PromgError):
    """Raised when a response body does not match the expected shape."""


class QueryError(PromgError):
    """Raised when Prometheus answers with ``status: error``."""

    def __init__(self, error_type: str | None, detail: str | None) -> None:
        super().__init__(f"query failed ({error_type or 'unknown'}): {detail or 'no detail'}")
        self.error_type = error_type
        self.detail = detail


class UnsupportedResultTypeError(PromgError):
    """Raised for any result type other than ``matrix``."""

    def __init__(self, result_type: str) -> None:
        super().__init__(f"unsupported result type {result_type!r}; only range (matrix) queries can be charted")
        self.result_type = result_type


class ValueParseError(PromgError):
    """Raised when a sample value cannot be plotted."""

    def __init__(self, raw: str, timestamp: float) -> None:
        super().__init__(f"cannot parse sample value {raw!r} at {timestamp:g} as a number")
        self.raw = raw
        self.timestamp = timestamp
