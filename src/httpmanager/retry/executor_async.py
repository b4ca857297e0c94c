r"""Asynchronous retry executor.

This module provides the AsyncRetryExecutor class, the async
counterpart of ``RetryExecutor``. Delays use ``asyncio.sleep`` so other
tasks run while a request waits for its next attempt.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, TypeVar

from httpmanager.exceptions import HttpRequestError
from httpmanager.retry.config import RetryConfig
from httpmanager.retry.executor_core import (
    create_cancelled_error,
    create_exhausted_error,
    is_retryable,
    log_failed_attempt,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpmanager.cancellation import CancellationToken
    from httpmanager.response import HttpResponse

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    """Executes an async request attempt with a bounded retry loop.

    Same semantics as ``RetryExecutor``. In addition, a
    ``CancellationToken`` aborts the attempt in flight: the pending
    request task is cancelled as soon as the token fires. Cancelling the
    calling task itself raises ``asyncio.CancelledError`` as usual.

    Args:
        config: The retry configuration. Defaults to ``RetryConfig()``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from httpmanager.response import HttpResponse
        >>> from httpmanager.retry import AsyncRetryExecutor, RetryConfig
        >>> async def attempt():
        ...     return HttpResponse(status_code=200)
        ...
        >>> executor = AsyncRetryExecutor(RetryConfig(max_retries=2))
        >>> asyncio.run(
        ...     executor.execute(attempt, url="https://example.test", method="GET")
        ... ).status_code
        200

        ```
    """

    def __init__(self, config: RetryConfig | None = None) -> None:
        self.config = config or RetryConfig()

    async def execute(
        self,
        call: Callable[[], Awaitable[HttpResponse]],
        *,
        url: str,
        method: str,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        """Run ``call`` with automatic retry logic.

        Args:
            call: Coroutine function performing one attempt. It must raise
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
                cancelled, response = await _run_until_cancelled(call(), cancel_token)
            except HttpRequestError as exc:
                if not is_retryable(exc):
                    raise
                last_error = exc
                log_failed_attempt(exc, url, method, attempt, max_attempts)
                if attempt + 1 < max_attempts:
                    delay = self.config.backoff_strategy.calculate(attempt)
                    logger.debug(f"Waiting {delay:.2f}s before retrying {method} request to {url}")
                    cancelled, _ = await _run_until_cancelled(asyncio.sleep(delay), cancel_token)
                    if cancelled:
                        raise create_cancelled_error(url, method, attempt + 1) from None
                continue

            if cancelled:
                raise create_cancelled_error(url, method, attempt + 1)
            if attempt > 0:
                logger.debug(f"{method} request to {url} succeeded on attempt {attempt + 1}")
            return response

        raise create_exhausted_error(url, method, max_attempts, last_error) from last_error


async def _run_until_cancelled(
    awaitable: Awaitable[T], cancel_token: CancellationToken | None
) -> tuple[bool, T | None]:
    """Await ``awaitable`` unless ``cancel_token`` fires first.

    Returns:
        ``(False, result)`` if the awaitable completed, ``(True, None)``
        if the token fired. In the latter case the awaitable is cancelled.
    """
    if cancel_token is None:
        return False, await awaitable

    loop = asyncio.get_running_loop()
    fired: asyncio.Future[None] = loop.create_future()

    def _set_fired() -> None:
        if not fired.done():
            fired.set_result(None)

    def _on_cancel() -> None:
        loop.call_soon_threadsafe(_set_fired)

    task = asyncio.ensure_future(awaitable)
    cancel_token.add_callback(_on_cancel)
    try:
        await asyncio.wait({task, fired}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        cancel_token.remove_callback(_on_cancel)
        if not fired.done():
            fired.cancel()

    if cancel_token.is_cancelled:
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError, HttpRequestError):
            await task
        return True, None
    return False, task.result()
