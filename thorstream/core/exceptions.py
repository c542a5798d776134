"""
Application-level exceptions.

Every failure the stream client can report derives from ThorStreamError.
Only ValidationError and ConfigError stop a session before it starts; the
others are reported per frame (DecodeError, VariantMismatch), per append
(PersistenceError) or end the current stream (TransportError).
"""

from __future__ import annotations

from typing import Any


class ThorStreamError(Exception):
    """Base class for all stream client errors."""


class DecodeError(ThorStreamError):
    """A frame is not a well-formed MessageWrapper. Recoverable: skip the frame."""

    def __init__(self, message: str, *, frame_size: int | None = None) -> None:
        super().__init__(message)
        self.frame_size = frame_size


class VariantMismatch(ThorStreamError):
    """A frame carries a different (or no) variant than the subscription expects."""

    def __init__(self, expected: Any, actual: Any, *, reason: str = "kind") -> None:
        super().__init__(f"expected {expected}, got {actual} ({reason})")
        self.expected = expected
        self.actual = actual
        self.reason = reason


class ValidationError(ThorStreamError, ValueError):
    """Subscription selected with missing required filter parameters."""


class ConfigError(ThorStreamError, ValueError):
    """Client settings are missing or invalid."""


class TransportError(ThorStreamError):
    """Stream-level failure reported by the RPC runtime."""

    def __init__(self, message: str, *, code: str | None = None, details: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.details = details


class PersistenceError(ThorStreamError):
    """Appending a record to a JSON-lines log failed."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
