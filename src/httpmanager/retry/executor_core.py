r"""Shared core logic for retry executors.

This module provides helper functions used by both the synchronous and
the asynchronous retry executors to classify failures and build the
final errors.
"""

from __future__ import annotations

__all__ = [
    "create_cancelled_error",
    "create_exhausted_error",
    "is_retryable",
    "log_failed_attempt",
]

import logging

from httpmanager.exceptions import ErrorKind, HttpRequestError

logger: logging.Logger = logging.getLogger(__name__)


def is_retryable(error: HttpRequestError) -> bool:
    """Indicate whether a failed attempt may be retried.

    Only network and timeout failures are transient. Unsupported methods
    and cancellations are returned to the caller immediately.
    """
    return error.kind.is_transient


def log_failed_attempt(
    error: HttpRequestError, url: str, method: str, attempt: int, max_attempts: int
) -> None:
    """Log a failed attempt.

    Args:
        error: The failure of the attempt.
        url: The URL being requested.
        method: The HTTP method being used.
        attempt: The attempt that failed (0-indexed).
        max_attempts: The total number of attempts allowed.
    """
    if attempt + 1 < max_attempts:
        logger.warning(
            f"{method} request to {url} failed, attempt {attempt + 1}/{max_attempts}: "
            f"{error.message}"
        )
    else:
        logger.debug(
            f"{method} request to {url} failed on final attempt "
            f"{attempt + 1}/{max_attempts}: {error.message}"
        )


def create_exhausted_error(
    url: str, method: str, attempts: int, last_error: HttpRequestError
) -> HttpRequestError:
    """Create the error raised once every attempt has failed.

    Args:
        url: The URL being requested.
        method: The HTTP method being used.
        attempts: The number of attempts made.
        last_error: The failure of the last attempt.

    Returns:
        An error of kind ``RETRY_EXHAUSTED`` wrapping ``last_error``.
    """
    return HttpRequestError(
        f"{method} request to {url} failed after {attempts} attempts: {last_error.message}",
        kind=ErrorKind.RETRY_EXHAUSTED,
        method=method,
        url=url,
        status_code=last_error.status_code,
        cause=last_error,
        attempts=attempts,
    )


def create_cancelled_error(url: str, method: str, attempts: int) -> HttpRequestError:
    """Create the error raised when a request is cancelled.

    Args:
        url: The URL being requested.
        method: The HTTP method being used.
        attempts: The number of attempts started before cancellation.

    Returns:
        An error of kind ``CANCELLED``.
    """
    return HttpRequestError(
        f"{method} request to {url} was cancelled after {attempts} attempt(s)",
        kind=ErrorKind.CANCELLED,
        method=method,
        url=url,
        attempts=attempts,
    )
