"""
Exception hierarchy for telegraphkit.

Every error carries the pipeline phase it came from so callers (and log
readers) can tell a local validation problem from a server fault or a
caller-side deadline.
"""

from __future__ import annotations

from typing import Optional


class TelegraphError(Exception):
    """Base class for all telegraphkit errors."""

    phase: str = "client"

    def __init__(self, message: str, *, phase: Optional[str] = None) -> None:
        if phase is not None:
            self.phase = phase
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.phase}] {self.message}"


class RequestValidationError(TelegraphError, ValueError):
    """Raised when a request fails schema checks. Never sent, never retried."""

    phase = "validation"


class SerializationError(TelegraphError):
    """Raised when a request body cannot be encoded as JSON."""

    phase = "encode"


class ResponseDecodeError(TelegraphError):
    """Raised when a response envelope or payload has an unexpected shape."""

    phase = "decode"


class TransientTransportError(TelegraphError):
    """A single failed attempt that is eligible for retry."""

    phase = "network"

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class RetriesExhaustedError(TelegraphError):
    """Raised when every attempt of a dispatch failed transiently."""

    phase = "network"

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        reason = last_error.message if isinstance(last_error, TelegraphError) else str(last_error)
        super().__init__(f"request failed after {attempts} attempts: {reason}")
        self.attempts = attempts
        self.last_error = last_error


class APIError(TelegraphError):
    """Structured error reported by the remote API.

    ``code`` is 0 when the server did not supply one.
    """

    phase = "application"

    def __init__(self, description: str, code: int = 0) -> None:
        self.code = code
        self.description = description
        if code:
            message = f"Telegraph API error (code {code}): {description}"
        else:
            message = f"Telegraph API error: {description}"
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, APIError):
            return NotImplemented
        return (self.code, self.description) == (other.code, other.description)

    def __hash__(self) -> int:
        return hash((self.code, self.description))


class RequestCancelledError(TelegraphError):
    """Base for errors caused by the caller giving up, not by the server."""

    phase = "cancelled"


class DeadlineExceededError(RequestCancelledError, TimeoutError):
    """Raised when a per-call timeout fires while the dispatch was suspended."""

    def __init__(self, timeout: float, phase: str, attempt: int) -> None:
        super().__init__(f"deadline of {timeout}s exceeded on attempt {attempt}", phase=phase)
        self.timeout = timeout
        self.attempt = attempt


class MarkupParseError(TelegraphError, ValueError):
    """Raised when markup has no parseable document structure at all."""

    phase = "parse"
