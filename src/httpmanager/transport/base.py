r"""Abstract transport interfaces.

A transport turns one fully resolved ``HttpRequest`` into exactly one
outbound call and one ``HttpResponse``. Transports never retry; that
is the job of the retry executors.
"""

from __future__ import annotations

__all__ = ["AsyncBaseTransport", "BaseTransport"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from httpmanager.request import HttpRequest
    from httpmanager.response import HttpResponse


class BaseTransport(ABC):
    """Synchronous transport interface."""

    @abstractmethod
    def send(self, request: HttpRequest) -> HttpResponse:
        """Send one request.

        Args:
            request: The request to send.

        Returns:
            The response. ``elapsed_ms`` is left to the caller.

        Raises:
            HttpRequestError: With kind ``NETWORK`` or ``TIMEOUT`` if the
                exchange failed, or ``UNSUPPORTED_METHOD`` if the method
                cannot be sent.
            RuntimeError: If the transport is closed.
        """

    @abstractmethod
    def close(self) -> None:
        """Release pooled resources. Must be idempotent."""

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Indicate whether ``close`` was called."""

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncBaseTransport(ABC):
    """Asynchronous transport interface."""

    @abstractmethod
    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send one request. See ``BaseTransport.send``."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release pooled resources. Must be idempotent."""

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Indicate whether ``aclose`` was called."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
