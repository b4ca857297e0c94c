r"""Synchronous transport backed by ``httpx.Client``."""

from __future__ import annotations

__all__ = ["HttpxTransport"]

import logging
from typing import TYPE_CHECKING

import httpx

from httpmanager.core.config import ClientConfig
from httpmanager.request import HttpMethod
from httpmanager.transport.base import BaseTransport
from httpmanager.transport.common import (
    build_request_kwargs,
    create_limits,
    create_timeout,
    to_http_response,
    to_request_error,
)

if TYPE_CHECKING:
    from httpmanager.request import HttpRequest
    from httpmanager.response import HttpResponse

logger: logging.Logger = logging.getLogger(__name__)


class HttpxTransport(BaseTransport):
    r"""Send requests through a pooled ``httpx.Client``.

    The transport performs one call per ``send`` and never retries.

    Args:
        config: The client configuration. Defines the pool limits, the
            default timeouts, the redirect policy and the user agent.
        client: Optional ``httpx.Client`` to use instead of creating one.
            The transport closes it on ``close``.

    Example:
        ```pycon
        >>> from httpmanager.core.config import ClientConfig
        >>> from httpmanager.request import HttpRequest
        >>> from httpmanager.transport import HttpxTransport
        >>> with HttpxTransport(ClientConfig()) as transport:  # doctest: +SKIP
        ...     response = transport.send(HttpRequest(url="https://httpbin.org/get"))
        ...

        ```
    """

    def __init__(self, config: ClientConfig | None = None, client: httpx.Client | None = None) -> None:
        self._config = config or ClientConfig()
        self._client = client or httpx.Client(
            timeout=create_timeout(self._config),
            limits=create_limits(self._config),
            follow_redirects=self._config.follow_redirects,
        )
        self._closed = False

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def is_closed(self) -> bool:
        return self._closed

    def send(self, request: HttpRequest) -> HttpResponse:
        if self._closed:
            msg = "HttpxTransport is closed"
            raise RuntimeError(msg)
        method = HttpMethod.from_value(request.method)
        kwargs = build_request_kwargs(request, method, self._config)
        logger.debug(f"{method.value} {request.url}")
        try:
            response = self._client.request(**kwargs)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise to_request_error(exc, method, request.url) from exc
        return to_http_response(response)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._client.close()
