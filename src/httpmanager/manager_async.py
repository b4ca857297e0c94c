r"""Asynchronous HTTP manager.

This module provides ``AsyncHttpManager``, the async counterpart of
``HttpManager``. It shares the configuration, header and retry semantics
of the sync manager and backs requests with ``httpx.AsyncClient``.
"""

from __future__ import annotations

__all__ = ["AsyncHttpManager"]

import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from httpmanager.core.client_logic import (
    build_auth_headers,
    resolve_request,
    serialize_body,
    with_elapsed,
)
from httpmanager.core.config import ClientConfig
from httpmanager.core.headers import DefaultHeaders
from httpmanager.exceptions import HttpRequestError
from httpmanager.request import HttpMethod, HttpRequest
from httpmanager.retry import AsyncRetryExecutor, RetryConfig
from httpmanager.transport import AsyncHttpxTransport
from httpmanager.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType
    from typing import Self

    from httpmanager.cancellation import CancellationToken
    from httpmanager.response import HttpResponse
    from httpmanager.transport import AsyncBaseTransport

logger: logging.Logger = logging.getLogger(__name__)


class AsyncHttpManager:
    r"""Asynchronous manager for pooled HTTP requests with retries.

    See ``HttpManager`` for the request semantics. Retry delays use
    ``asyncio.sleep`` and a ``CancellationToken`` also aborts the attempt
    in flight.

    Args:
        config: The client configuration. Defaults to ``ClientConfig()``.
        transport: Optional async transport to use instead of creating an
            ``AsyncHttpxTransport`` from ``config``. The manager closes it
            on ``aclose``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from httpmanager import AsyncHttpManager
        >>> async def main():
        ...     async with AsyncHttpManager() as manager:
        ...         return await manager.get("https://httpbin.org/get")
        ...
        >>> response = asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self, config: ClientConfig | None = None, *, transport: AsyncBaseTransport | None = None
    ) -> None:
        self._config: ClientConfig = config or ClientConfig()
        self._transport: AsyncBaseTransport = transport or AsyncHttpxTransport(self._config)
        self._executor = AsyncRetryExecutor(RetryConfig.from_client_config(self._config))
        self._default_headers = DefaultHeaders(self._config.user_agent)
        self._closed = False

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self._config}, closed={self._closed})"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def transport(self) -> AsyncBaseTransport:
        return self._transport

    @property
    def default_headers(self) -> dict[str, str]:
        """A snapshot of the current default headers."""
        return self._default_headers.snapshot()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def add_default_header(self, key: str, value: str) -> None:
        self._default_headers.set(key, value)

    def remove_default_header(self, key: str) -> None:
        self._default_headers.remove(key)

    def clear_default_headers(self) -> None:
        self._default_headers.reset()

    async def execute(
        self, request: HttpRequest, *, cancel_token: CancellationToken | None = None
    ) -> HttpResponse:
        r"""Execute a request with the default headers and retry policy.

        Args:
            request: The request to send.
            cancel_token: Optional token used to abort the operation.

        Returns:
            The response, with ``elapsed_ms`` covering every attempt.

        Raises:
            RuntimeError: If the manager is closed.
            ValueError: If the URL is empty, the timeout is not positive or a
                header name or value is not ASCII.
            HttpRequestError: If no response could be obtained.
        """
        self._check_open()
        method = HttpMethod.from_value(request.method)
        final_request = resolve_request(replace(request, method=method), self._default_headers)
        log_structured(
            logger,
            logging.DEBUG,
            f"Executing {method.value} request to {final_request.url}",
            method=method.value,
            url=final_request.url,
        )

        start_time = time.monotonic()
        try:
            response = await self._executor.execute(
                lambda: self._transport.send(final_request),
                url=final_request.url,
                method=method.value,
                cancel_token=cancel_token,
            )
        except HttpRequestError as exc:
            log_structured(
                logger,
                logging.ERROR,
                f"HTTP request failed for URL: {final_request.url}",
                method=method.value,
                url=final_request.url,
                error_kind=exc.kind.value,
            )
            raise
        return with_elapsed(response, start_time)

    async def request(
        self,
        method: HttpMethod | str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        """Build and execute a request. See ``HttpManager.request``."""
        request = HttpRequest(
            url=url,
            method=method,
            headers=headers or {},
            body=serialize_body(body),
            timeout=self._config.read_timeout,
            follow_redirects=self._config.follow_redirects,
        )
        return await self.execute(request, cancel_token=cancel_token)

    async def get(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return await self.request(HttpMethod.GET, url, headers=headers, cancel_token=cancel_token)

    async def post(
        self,
        url: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return await self.request(
            HttpMethod.POST, url, headers=headers, body=body, cancel_token=cancel_token
        )

    async def put(
        self,
        url: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return await self.request(
            HttpMethod.PUT, url, headers=headers, body=body, cancel_token=cancel_token
        )

    async def patch(
        self,
        url: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return await self.request(
            HttpMethod.PATCH, url, headers=headers, body=body, cancel_token=cancel_token
        )

    async def delete(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return await self.request(
            HttpMethod.DELETE, url, headers=headers, cancel_token=cancel_token
        )

    async def head(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return await self.request(HttpMethod.HEAD, url, headers=headers, cancel_token=cancel_token)

    async def options(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return await self.request(
            HttpMethod.OPTIONS, url, headers=headers, cancel_token=cancel_token
        )

    async def send_api_request(
        self,
        url: str,
        method: HttpMethod | str,
        body: Any = None,
        token: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        """Send a request to a JSON API with an optional bearer token. See
        ``HttpManager.send_api_request``."""
        return await self.request(
            method,
            url,
            headers=build_auth_headers(token, headers),
            body=body,
            cancel_token=cancel_token,
        )

    async def aclose(self) -> None:
        """Close the manager and release the pooled connections.

        Calling ``aclose`` more than once is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        await self._transport.aclose()
        logger.info("Async HTTP manager closed")

    def _check_open(self) -> None:
        if self._closed:
            msg = f"{self.__class__.__qualname__} is closed"
            raise RuntimeError(msg)
