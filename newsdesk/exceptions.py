"""Exceptions and error codes for newsdesk.

Every failure a search task can end in is represented by a subclass of
NewsdeskError. Workers never raise these across the queue boundary; they are
carried inside a TaskResult so that each submitted request produces exactly
one outcome. The HTTP layer maps the error codes to status codes.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes, part of the HTTP API contract."""

    CANCELLED = "CANCELLED"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    QUEUE_FULL = "QUEUE_FULL"
    DISPATCHER_CLOSED = "DISPATCHER_CLOSED"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class NewsdeskError(Exception):  # NOQA: N818
    """Base exception for all newsdesk errors.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Stable error code for programmatic handling
    details
        Optional additional context (logged but not exposed to users)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class Cancelled(NewsdeskError):
    """Raised when a task's deadline or cancellation fired."""

    def __init__(
        self,
        message: str = "request canceled",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CANCELLED, details)


class ProviderUnavailable(NewsdeskError):
    """Raised when the search provider failed and nothing usable is cached.

    The original failure (transport error, bad status, parse error) is kept
    as ``__cause__`` when raised with ``from``.
    """

    def __init__(
        self,
        message: str = "search provider unavailable",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.PROVIDER_UNAVAILABLE, details)


class StoreUnavailable(NewsdeskError):
    """Raised when the result store cannot be read or written."""

    def __init__(
        self,
        message: str = "result store unavailable",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.STORE_UNAVAILABLE, details)


class QueueFull(NewsdeskError):
    """Raised by a non-blocking submit when the task queue is at capacity."""

    def __init__(self, capacity: int) -> None:
        super().__init__(
            f"task queue is full (capacity {capacity})",
            ErrorCode.QUEUE_FULL,
            {"capacity": capacity},
        )


class DispatcherClosed(NewsdeskError):
    """Raised when submitting to a dispatcher that has been closed."""

    def __init__(self) -> None:
        super().__init__("dispatcher is closed", ErrorCode.DISPATCHER_CLOSED)


class InvalidSearchRequest(NewsdeskError):
    """Raised when a search request fails validation at submission time."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.INVALID_REQUEST, details)


class InternalError(NewsdeskError):
    """Wraps an unexpected exception raised while resolving a task."""

    def __init__(self, message: str = "internal error") -> None:
        super().__init__(message, ErrorCode.INTERNAL_ERROR)
