"""Classified errors raised by every capability.

All failures reach the caller as a single exception type, AuditorError,
tagged with an ErrorKind:
- CONFIGURATION: credential missing (raised before any request)
- INPUT: required user input is empty
- TRANSPORT: network failure, service rejection, or empty upstream payload
- DECODE: structured response could not be parsed into the expected shape
"""

from enum import Enum


class ErrorKind(Enum):
    """Category of a capability failure."""

    CONFIGURATION = "configuration"
    INPUT = "input"
    TRANSPORT = "transport"
    DECODE = "decode"


class AuditorError(Exception):
    """Exception raised for any capability failure.

    Attributes:
        message: Human-readable description
        kind: Failure category
        cause: Original underlying fault, if any
        capability: Name of the capability that failed (set by the capability layer)
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        cause: BaseException | None = None,
        capability: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.cause = cause
        self.capability = capability

    @property
    def retryable(self) -> bool:
        """Return True if a fresh user action may reasonably succeed."""
        return self.kind is ErrorKind.TRANSPORT

    def notification(self) -> str:
        """Single-line message naming the failed capability."""
        if self.capability:
            return f"Failed to {self.capability}: {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"AuditorError(kind={self.kind.value!r}, message={self.message!r})"
