"""Error taxonomy for the zoo console.

TransportFailure and ServiceRejection never escape a controller operation:
they are logged and turned into an error notification. PreconditionViolation
signals a caller bug and is raised as-is.
"""

from __future__ import annotations


class ZooConsoleError(Exception):
    """Base class for every error raised by this package."""


class TransportFailure(ZooConsoleError):
    """The service could not be reached or replied with something unreadable."""


class ServiceRejection(ZooConsoleError):
    """The service answered with a non-success status."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = int(status_code)
        self.message = message
        super().__init__(message or f"HTTP {status_code}")


class PreconditionViolation(ZooConsoleError):
    """An operation was invoked with an invalid kind/id combination."""


class FormError(ZooConsoleError):
    """Form input could not be shaped into a payload."""

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = list(fields or [])
        super().__init__(message)
