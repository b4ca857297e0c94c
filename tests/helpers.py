r"""Shared test helpers for transport and manager tests.

This module contains stub transports with scripted outcomes and an echo
handler for ``httpx.MockTransport``.
"""

from __future__ import annotations

__all__ = [
    "AsyncStubTransport",
    "HTTPBIN_URL",
    "StubTransport",
    "TEST_URL",
    "echo_handler",
    "make_async_httpx_transport",
    "make_httpx_transport",
    "network_error",
    "timeout_error",
]

import json
from typing import TYPE_CHECKING

import httpx

from httpmanager.exceptions import ErrorKind, HttpRequestError
from httpmanager.response import HttpResponse
from httpmanager.transport import (
    AsyncBaseTransport,
    AsyncHttpxTransport,
    BaseTransport,
    HttpxTransport,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from httpmanager.core.config import ClientConfig
    from httpmanager.request import HttpRequest

# Use httpbin.org for real HTTP testing
HTTPBIN_URL = "https://httpbin.org"

TEST_URL = "https://api.example.test/data"


def network_error(url: str = TEST_URL, method: str = "GET") -> HttpRequestError:
    return HttpRequestError(
        f"{method} request to {url} encountered ConnectError: connection refused",
        kind=ErrorKind.NETWORK,
        method=method,
        url=url,
    )


def timeout_error(url: str = TEST_URL, method: str = "GET") -> HttpRequestError:
    return HttpRequestError(
        f"{method} request to {url} timed out: read timeout",
        kind=ErrorKind.TIMEOUT,
        method=method,
        url=url,
    )


class StubTransport(BaseTransport):
    """Transport returning scripted outcomes and recording requests.

    Each call to ``send`` consumes the next outcome: an ``HttpResponse``
    is returned and an exception is raised. The last outcome is repeated
    once the script is exhausted.
    """

    def __init__(self, outcomes: Iterable[HttpResponse | Exception] | None = None) -> None:
        self.outcomes = list(outcomes or [HttpResponse(status_code=200, body="ok")])
        self.requests: list[HttpRequest] = []
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def _next_outcome(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def send(self, request: HttpRequest) -> HttpResponse:
        return self._next_outcome(request)

    def close(self) -> None:
        self._closed = True


class AsyncStubTransport(AsyncBaseTransport):
    """Async counterpart of ``StubTransport``."""

    def __init__(self, outcomes: Iterable[HttpResponse | Exception] | None = None) -> None:
        self._stub = StubTransport(outcomes)
        self._closed = False

    @property
    def requests(self) -> list[HttpRequest]:
        return self._stub.requests

    @property
    def call_count(self) -> int:
        return self._stub.call_count

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def send(self, request: HttpRequest) -> HttpResponse:
        return self._stub.send(request)

    async def aclose(self) -> None:
        self._closed = True


def echo_handler(request: httpx.Request) -> httpx.Response:
    """``httpx.MockTransport`` handler echoing the request as JSON.

    The response body contains the method, URL, headers and body of the
    request.
    """
    return httpx.Response(
        200,
        headers={"Content-Type": "application/json", "X-Echo": "1"},
        content=json.dumps(
            {
                "method": request.method,
                "url": str(request.url),
                "headers": dict(request.headers),
                "body": request.content.decode("utf-8"),
            }
        ).encode("utf-8"),
    )


def make_httpx_transport(
    handler: Callable[[httpx.Request], httpx.Response], config: ClientConfig | None = None
) -> HttpxTransport:
    """Create an ``HttpxTransport`` whose client is served by ``handler``."""
    return HttpxTransport(config, client=httpx.Client(transport=httpx.MockTransport(handler)))


def make_async_httpx_transport(
    handler: Callable[[httpx.Request], httpx.Response], config: ClientConfig | None = None
) -> AsyncHttpxTransport:
    """Create an ``AsyncHttpxTransport`` whose client is served by
    ``handler``."""
    return AsyncHttpxTransport(
        config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )
