r"""Error types raised by httpmanager.

All failures that prevent a request from producing an ``HttpResponse``
are reported with a single exception class, ``HttpRequestError``, tagged
with an ``ErrorKind``. Callers dispatch on ``error.kind`` instead of on
a class hierarchy.

Note that HTTP error statuses (4xx/5xx) are NOT errors at this level:
they are returned as regular ``HttpResponse`` objects.
"""

from __future__ import annotations

__all__ = ["ErrorKind", "HttpRequestError"]

from enum import Enum


class ErrorKind(str, Enum):
    """Tag describing why a request could not be completed."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    UNSUPPORTED_METHOD = "unsupported_method"
    RETRY_EXHAUSTED = "retry_exhausted"
    CANCELLED = "cancelled"

    @property
    def is_transient(self) -> bool:
        """Indicate whether a failure of this kind may be retried."""
        return self in (ErrorKind.NETWORK, ErrorKind.TIMEOUT)


class HttpRequestError(Exception):
    """Raised when a request could not be completed.

    Args:
        message: Human readable description of the failure.
        kind: The error tag.
        method: The HTTP method of the failed request, if known.
        url: The URL of the failed request, if known.
        status_code: The HTTP status code related to the failure, if any.
        cause: The underlying exception, if any.
        attempts: Number of attempts made before giving up. Only set for
            ``ErrorKind.RETRY_EXHAUSTED``.

    Example:
        ```pycon
        >>> from httpmanager.exceptions import ErrorKind, HttpRequestError
        >>> error = HttpRequestError(
        ...     "GET request to https://example.test timed out",
        ...     kind=ErrorKind.TIMEOUT,
        ...     method="GET",
        ...     url="https://example.test",
        ... )
        >>> error.kind
        <ErrorKind.TIMEOUT: 'timeout'>
        >>> error.has_status_code()
        False

        ```
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
        attempts: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.method = method
        self.url = url
        self.status_code = status_code
        self.cause = cause
        self.attempts = attempts

    def has_status_code(self) -> bool:
        """Indicate whether a positive HTTP status code is attached."""
        return self.status_code is not None and self.status_code > 0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(kind={self.kind.value}, method={self.method}, "
            f"url={self.url}, message={self.message!r})"
        )
