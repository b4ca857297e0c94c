r"""Cooperative cancellation for in-progress requests.

A ``CancellationToken`` is handed to a request operation by the caller
and may be cancelled from any thread. The retry executors check it
before each attempt, wake up immediately from a pending retry delay when
it fires, and report the outcome as ``ErrorKind.CANCELLED``.
"""

from __future__ import annotations

__all__ = ["CancellationToken"]

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class CancellationToken:
    """Thread-safe, one-shot cancellation flag.

    Example:
        ```pycon
        >>> from httpmanager.cancellation import CancellationToken
        >>> token = CancellationToken()
        >>> token.is_cancelled
        False
        >>> token.cancel()
        >>> token.is_cancelled
        True
        >>> token.wait(10.0)  # returns immediately once cancelled
        True

        ```
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Cancel the token and run registered callbacks once.

        Calling ``cancel`` again has no effect.
        """
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the token is cancelled or ``timeout`` elapses.

        Args:
            timeout: Maximum number of seconds to wait, or ``None`` to
                wait forever.

        Returns:
            ``True`` if the token was cancelled, ``False`` on timeout.
        """
        return self._event.wait(timeout)

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` to run on cancellation.

        If the token is already cancelled the callback runs immediately.
        Callbacks run on the thread calling ``cancel``.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(cancelled={self.is_cancelled})"
