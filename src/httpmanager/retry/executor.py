r"""Synchronous retry executor.

This module provides the RetryExecutor class that runs one request
attempt after another until an attempt succeeds, the attempt budget is
spent, or the caller cancels.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import logging
import time
from typing import TYPE_CHECKING

from httpmanager.exceptions import HttpRequestError
from httpmanager.retry.config import RetryConfig
from httpmanager.retry.executor_core import (
    create_cancelled_error,
    create_exhausted_error,
    is_retryable,
    log_failed_attempt,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from httpmanager.cancellation import CancellationToken
    from httpmanager.response import HttpResponse

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Executes a request attempt with a bounded retry loop.

    The loop follows ``Idle -> Attempting -> {Success | Retrying ->
    Attempting | Exhausted}``:

    - Up to ``config.max_attempts`` attempts are made. Retries are
      disabled by ``enable_retry=False``, in which case one attempt is
      made.
    - Only transient failures (``NETWORK`` and ``TIMEOUT``) are retried.
      Any other ``HttpRequestError`` propagates immediately.
    - Between two attempts, the executor waits for the delay given by the
      backoff strategy (constant by default, no jitter).
    - When every attempt failed, an ``HttpRequestError`` of kind
      ``RETRY_EXHAUSTED`` is raised with the last failure as ``cause``.

    A ``CancellationToken`` may be passed to ``execute``. It is checked
    before and after every attempt and interrupts a pending delay at
    once. Cancellation raises an error of kind ``CANCELLED``; it is
    never reported as exhaustion. An attempt already in flight cannot be
    interrupted and is bounded by its request timeout.

    Args:
        config: The retry configuration. Defaults to ``RetryConfig()``.

    Example:
        ```pycon
        >>> from httpmanager.backoff import ConstantBackoff
        >>> from httpmanager.response import HttpResponse
        >>> from httpmanager.retry import RetryConfig, RetryExecutor
        >>> executor = RetryExecutor(
        ...     RetryConfig(max_retries=3, backoff_strategy=ConstantBackoff(0.01))
        ... )
        >>> executor.execute(
        ...     lambda: HttpResponse(status_code=200), url="https://example.test", method="GET"
        ... ).status_code
        200

        ```
    """

    def __init__(self, config: RetryConfig | None = None) -> None:
        self.config = config or RetryConfig()

    def execute(
        self,
        call: Callable[[], HttpResponse],
        *,
        url: str,
        method: str,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        """Run ``call`` with automatic retry logic.

        Args:
            call: Function performing one attempt. It must raise
                ``HttpRequestError`` on failure.
            url: The URL being requested, used in logs and errors.
            method: The HTTP method being used, used in logs and errors.
            cancel_token: Optional token used to abort the operation.

        Returns:
            The response of the first successful attempt.

        Raises:
            HttpRequestError: With kind ``RETRY_EXHAUSTED`` if every attempt
                failed, ``CANCELLED`` if the token fired, or the kind of
                a non-retryable failure.
        """
        max_attempts = self.config.max_attempts
        last_error: HttpRequestError | None = None

        for attempt in range(max_attempts):
            if cancel_token is not None and cancel_token.is_cancelled:
                raise create_cancelled_error(url, method, attempt)
            try:
                response = call()
            except HttpRequestError as exc:
                if not is_retryable(exc):
                    raise
                last_error = exc
                log_failed_attempt(exc, url, method, attempt, max_attempts)
                if attempt + 1 < max_attempts:
                    self._sleep(
                        self.config.backoff_strategy.calculate(attempt),
                        url=url,
                        method=method,
                        attempts=attempt + 1,
                        cancel_token=cancel_token,
                    )
                continue

            if cancel_token is not None and cancel_token.is_cancelled:
                raise create_cancelled_error(url, method, attempt + 1)
            if attempt > 0:
                logger.debug(f"{method} request to {url} succeeded on attempt {attempt + 1}")
            return response

        raise create_exhausted_error(url, method, max_attempts, last_error) from last_error

    def _sleep(
        self,
        delay: float,
        *,
        url: str,
        method: str,
        attempts: int,
        cancel_token: CancellationToken | None,
    ) -> None:
        logger.debug(f"Waiting {delay:.2f}s before retrying {method} request to {url}")
        if cancel_token is None:
            time.sleep(delay)
        elif cancel_token.wait(delay):
            raise create_cancelled_error(url, method, attempts)
