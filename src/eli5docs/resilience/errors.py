"""Error taxonomy and classification for the explanation pipeline.

Only :class:`InvalidSourceError` reaches the user as a hard failure.
Scan errors are isolated per file and backend errors are absorbed at
the orchestrator's tier boundaries.
"""

from __future__ import annotations

from enum import Enum


class ErrorClass(Enum):
    """Coarse failure category recorded on transport errors and logs."""

    TRANSIENT = "transient"  # 429, dropped connection
    SERVER = "server"  # 5xx from the provider
    TIMEOUT = "timeout"  # 408 or local deadline
    CLIENT = "client"  # other 4xx, e.g. bad key or model
    UNKNOWN = "unknown"


class Eli5Error(Exception):
    """Base class for every error raised by eli5docs."""


class InvalidSourceError(Eli5Error):
    """Source directory is missing or not a directory."""


class ScanError(Eli5Error):
    """A single source file could not be read or scanned."""


class BackendError(Eli5Error):
    """An explanation backend could not produce text."""


class BackendUnavailableError(BackendError):
    """Backend is not configured (e.g. no API key)."""


class BackendTransportError(BackendError):
    """Network, timeout or non-2xx failure talking to a provider."""

    def __init__(
        self,
        message: str,
        *,
        error_class: ErrorClass = ErrorClass.UNKNOWN,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_class = error_class
        self.status_code = status_code

    @classmethod
    def wrap(cls, error: Exception) -> BackendTransportError:
        """Build a transport error carrying the cause's classification."""
        status_code = getattr(error, "status_code", None)
        wrapped = cls(
            f"{type(error).__name__}: {error}",
            error_class=classify_error(error),
            status_code=status_code if isinstance(status_code, int) else None,
        )
        wrapped.__cause__ = error
        return wrapped


# Substrings checked in order against the lowercased message of an
# exception that carries no HTTP status.
_MESSAGE_HINTS: tuple[tuple[tuple[str, ...], ErrorClass], ...] = (
    (("timeout", "timed out"), ErrorClass.TIMEOUT),
    (("429", "rate limit", "rate_limit"), ErrorClass.TRANSIENT),
    (("500", "502", "503", "504"), ErrorClass.SERVER),
    (("econnrefused", "connection"), ErrorClass.TRANSIENT),
    (("400", "401", "403", "404"), ErrorClass.CLIENT),
)


def classify_error(error: Exception) -> ErrorClass:
    """Classify a provider failure for log fields and error wrapping.

    A transport error keeps the class it was wrapped with. Otherwise the
    provider's ``status_code`` decides (408 is a timeout, 429 a rate
    limit), then Python timeouts, then hints in the message text.
    """
    if isinstance(error, BackendTransportError):
        return error.error_class

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        if status_code == 408:
            return ErrorClass.TIMEOUT
        if status_code == 429:
            return ErrorClass.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.SERVER

    if isinstance(error, TimeoutError):
        return ErrorClass.TIMEOUT

    msg = str(error).lower()
    for needles, error_class in _MESSAGE_HINTS:
        if any(n in msg for n in needles):
            return error_class
    return ErrorClass.UNKNOWN
