r"""Synchronous HTTP manager.

This module provides ``HttpManager``, the facade most callers use. It
owns one pooled transport and one retry executor, keeps a store of
default headers and exposes convenience methods for every supported
HTTP method.
"""

from __future__ import annotations

__all__ = ["HttpManager"]

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
from httpmanager.retry import RetryConfig, RetryExecutor
from httpmanager.transport import HttpxTransport
from httpmanager.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType
    from typing import Self

    from httpmanager.cancellation import CancellationToken
    from httpmanager.response import HttpResponse
    from httpmanager.transport import BaseTransport

logger: logging.Logger = logging.getLogger(__name__)


class HttpManager:
    r"""Issue HTTP requests with pooled connections, default headers and
    retries.

    Every request goes through the same path: the default headers are
    merged under the caller's headers, the request is handed to the retry
    executor, which calls the transport once per attempt, and the
    returned response is stamped with the total elapsed time (retries
    and delays included).

    HTTP error statuses (4xx/5xx) are returned as regular responses.
    ``HttpRequestError`` is raised only when no response could be
    obtained.

    The manager is safe to share between threads. Calling any request
    method after ``close`` raises ``RuntimeError``.

    Args:
        config: The client configuration. Defaults to ``ClientConfig()``.
        transport: Optional transport to use instead of creating an
            ``HttpxTransport`` from ``config``. The manager closes it on
            ``close``.

    Example:
        ```pycon
        >>> from httpmanager import ClientConfig, HttpManager
        >>> with HttpManager(ClientConfig(max_retries=5)) as manager:  # doctest: +SKIP
        ...     manager.add_default_header("X-API-Key", "secret")
        ...     response = manager.get("https://httpbin.org/get")
        ...     response.is_success()
        ...
        True

        ```
    """

    def __init__(
        self, config: ClientConfig | None = None, *, transport: BaseTransport | None = None
    ) -> None:
        self._config: ClientConfig = config or ClientConfig()
        self._transport: BaseTransport = transport or HttpxTransport(self._config)
        self._executor = RetryExecutor(RetryConfig.from_client_config(self._config))
        self._default_headers = DefaultHeaders(self._config.user_agent)
        self._closed = False

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self._config}, closed={self._closed})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def transport(self) -> BaseTransport:
        """The underlying transport adapter."""
        return self._transport

    @property
    def default_headers(self) -> dict[str, str]:
        """A snapshot of the current default headers."""
        return self._default_headers.snapshot()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def add_default_header(self, key: str, value: str) -> None:
        """Add or replace a header sent with every subsequent request.

        Example:
            ```pycon
            >>> from httpmanager import HttpManager
            >>> manager = HttpManager()
            >>> manager.add_default_header("X-API-Key", "your-api-key")
            >>> manager.default_headers["X-API-Key"]
            'your-api-key'
            >>> manager.close()

            ```
        """
        self._default_headers.set(key, value)

    def remove_default_header(self, key: str) -> None:
        """Remove a default header. Removing an absent header is a no-op."""
        self._default_headers.remove(key)

    def clear_default_headers(self) -> None:
        """Drop every default header and reinstall the initial
        ``Content-Type``, ``Accept`` and ``User-Agent`` headers."""
        self._default_headers.reset()

    def execute(
        self, request: HttpRequest, *, cancel_token: CancellationToken | None = None
    ) -> HttpResponse:
        r"""Execute a request with the default headers and retry policy.

        A cancellation token is checked before and after each attempt and
        interrupts the delay between attempts. It cannot abort an attempt
        that is already in flight: that attempt runs until it completes or
        its request timeout elapses, then the call raises a ``CANCELLED``
        error.

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

        Example:
            ```pycon
            >>> from httpmanager import HttpManager, HttpMethod, RequestBuilder
            >>> request = (
            ...     RequestBuilder()
            ...     .url("https://httpbin.org/post")
            ...     .method(HttpMethod.POST)
            ...     .body('{"a":1}')
            ...     .build()
            ... )
            >>> with HttpManager() as manager:  # doctest: +SKIP
            ...     response = manager.execute(request)
            ...

            ```
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
            response = self._executor.execute(
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

    def request(
        self,
        method: HttpMethod | str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        r"""Build and execute a request.

        Args:
            method: The HTTP method, as an ``HttpMethod`` or a name.
            url: The target URL.
            headers: Optional headers. They win over the default headers.
            body: Optional body. Strings are sent as is and any other
                object is serialized to JSON. Ignored for methods
                without a body.
            cancel_token: Optional token used to abort the operation.

        Returns:
            The response.
        """
        request = HttpRequest(
            url=url,
            method=method,
            headers=headers or {},
            body=serialize_body(body),
            timeout=self._config.read_timeout,
            follow_redirects=self._config.follow_redirects,
        )
        return self.execute(request, cancel_token=cancel_token)

    def get(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        """Send a GET request.

        Example:
            ```pycon
            >>> from httpmanager import HttpManager
            >>> with HttpManager() as manager:  # doctest: +SKIP
            ...     response = manager.get("https://httpbin.org/get")
            ...

            ```
        """
        return self.request(HttpMethod.GET, url, headers=headers, cancel_token=cancel_token)

    def post(
        self,
        url: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        """Send a POST request.

        Example:
            ```pycon
            >>> from httpmanager import HttpManager
            >>> with HttpManager() as manager:  # doctest: +SKIP
            ...     response = manager.post("https://httpbin.org/post", {"name": "John Doe"})
            ...

            ```
        """
        return self.request(
            HttpMethod.POST, url, headers=headers, body=body, cancel_token=cancel_token
        )

    def put(
        self,
        url: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return self.request(
            HttpMethod.PUT, url, headers=headers, body=body, cancel_token=cancel_token
        )

    def patch(
        self,
        url: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return self.request(
            HttpMethod.PATCH, url, headers=headers, body=body, cancel_token=cancel_token
        )

    def delete(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return self.request(HttpMethod.DELETE, url, headers=headers, cancel_token=cancel_token)

    def head(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return self.request(HttpMethod.HEAD, url, headers=headers, cancel_token=cancel_token)

    def options(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        return self.request(HttpMethod.OPTIONS, url, headers=headers, cancel_token=cancel_token)

    def send_api_request(
        self,
        url: str,
        method: HttpMethod | str,
        body: Any = None,
        token: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> HttpResponse:
        r"""Send a request to a JSON API with an optional bearer token.

        Args:
            url: The target URL.
            method: The HTTP method.
            body: Optional body, serialized to JSON unless it is a string.
            token: Optional bearer token. When non-empty, an
                ``Authorization: Bearer <token>`` header is added.
            headers: Optional extra headers.
            cancel_token: Optional token used to abort the operation.

        Returns:
            The response.

        Example:
            ```pycon
            >>> from httpmanager import HttpManager
            >>> with HttpManager() as manager:  # doctest: +SKIP
            ...     response = manager.send_api_request(
            ...         "https://api.example.com/users", "POST", {"name": "John"}, "token"
            ...     )
            ...

            ```
        """
        return self.request(
            method,
            url,
            headers=build_auth_headers(token, headers),
            body=body,
            cancel_token=cancel_token,
        )

    def close(self) -> None:
        """Close the manager and release the pooled connections.

        Calling ``close`` more than once is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        self._transport.close()
        logger.info("HTTP manager closed")

    def _check_open(self) -> None:
        if self._closed:
            msg = f"{self.__class__.__qualname__} is closed"
            raise RuntimeError(msg)
