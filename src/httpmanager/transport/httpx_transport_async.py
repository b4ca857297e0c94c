r"""Asynchronous transport backed by ``httpx.AsyncClient``."""

from __future__ import annotations

__all__ = ["AsyncHttpxTransport"]

import logging
from typing import TYPE_CHECKING

import httpx

from httpmanager.core.config import ClientConfig
from httpmanager.request import HttpMethod
from httpmanager.transport.base import AsyncBaseTransport
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


class AsyncHttpxTransport(AsyncBaseTransport):
    r"""Send requests through a pooled ``httpx.AsyncClient``.

    Async counterpart of ``HttpxTransport``.

    Args:
        config: The client configuration.
        client: Optional ``httpx.AsyncClient`` to use instead of creating
            one. The transport closes it on ``aclose``.
    """

    def __init__(
        self, config: ClientConfig | None = None, client: httpx.AsyncClient | None = None
    ) -> None:
        self._config = config or ClientConfig()
        self._client = client or httpx.AsyncClient(
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

    async def send(self, request: HttpRequest) -> HttpResponse:
        if self._closed:
            msg = "AsyncHttpxTransport is closed"
            raise RuntimeError(msg)
        method = HttpMethod.from_value(request.method)
        kwargs = build_request_kwargs(request, method, self._config)
        logger.debug(f"{method.value} {request.url}")
        try:
            response = await self._client.request(**kwargs)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise to_request_error(exc, method, request.url) from exc
        return to_http_response(response)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._client.aclose()
