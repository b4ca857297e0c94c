r"""Shared request/response translation for the httpx transports.

This module contains the logic used by both the synchronous and the
asynchronous httpx transports: building the keyword arguments of an
httpx call from an ``HttpRequest``, converting an ``httpx.Response``
into an ``HttpResponse`` and mapping httpx exceptions to
``HttpRequestError``.
"""

from __future__ import annotations

__all__ = [
    "build_request_kwargs",
    "create_limits",
    "create_timeout",
    "prepare_headers",
    "to_http_response",
    "to_request_error",
]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from httpmanager.exceptions import ErrorKind, HttpRequestError
from httpmanager.request import BODY_METHODS, HttpMethod
from httpmanager.response import HttpResponse

if TYPE_CHECKING:
    from httpmanager.core.config import ClientConfig
    from httpmanager.request import HttpRequest

logger: logging.Logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def create_limits(config: ClientConfig) -> httpx.Limits:
    """Create the connection pool limits for ``config``."""
    return httpx.Limits(
        max_connections=config.max_connections,
        max_keepalive_connections=config.max_connections_per_route,
    )


def create_timeout(config: ClientConfig) -> httpx.Timeout:
    """Create the default client timeout for ``config``."""
    return httpx.Timeout(config.read_timeout, connect=config.connect_timeout)


def prepare_headers(request: HttpRequest, method: HttpMethod, user_agent: str) -> dict[str, str]:
    """Compute the headers actually sent for ``request``.

    The ``User-Agent`` header is added only if the caller did not supply
    one. For POST/PUT/PATCH requests with a body, ``Content-Type`` is set
    to ``application/json`` unless a content type is already present.

    Args:
        request: The request to send.
        method: The resolved HTTP method.
        user_agent: The configured user agent.

    Returns:
        The headers to send.

    Example:
        ```pycon
        >>> from httpmanager.request import HttpMethod, HttpRequest
        >>> from httpmanager.transport.common import prepare_headers
        >>> request = HttpRequest(url="https://example.test", method="POST", body="{}")
        >>> prepare_headers(request, HttpMethod.POST, "agent/1.0")
        {'User-Agent': 'agent/1.0', 'Content-Type': 'application/json'}

        ```
    """
    headers = dict(request.headers)
    if "User-Agent" not in headers:
        headers["User-Agent"] = user_agent
    if method in BODY_METHODS and request.body is not None:
        if not any(key.lower() == "content-type" for key in headers):
            headers["Content-Type"] = JSON_CONTENT_TYPE
    return headers


def build_request_kwargs(
    request: HttpRequest, method: HttpMethod, config: ClientConfig
) -> dict[str, Any]:
    """Build the keyword arguments of ``httpx.Client.request``.

    The per-request timeout replaces the configured read/write/pool
    timeouts while the connect timeout stays the configured one.
    Redirects are followed only if both the configuration and the
    request allow it.

    Args:
        request: The request to send.
        method: The resolved HTTP method.
        config: The client configuration.

    Returns:
        The keyword arguments, including ``method`` and ``url``.
    """
    kwargs: dict[str, Any] = {
        "method": method.value,
        "url": request.url,
        "headers": prepare_headers(request, method, config.user_agent),
        "timeout": httpx.Timeout(request.timeout, connect=config.connect_timeout),
        "follow_redirects": config.follow_redirects and request.follow_redirects,
    }
    if method in BODY_METHODS:
        if request.body is not None:
            kwargs["content"] = request.body.encode("utf-8")
    elif request.body is not None:
        logger.debug(f"Ignoring request body for {method.value} request to {request.url}")
    return kwargs


def to_http_response(response: httpx.Response) -> HttpResponse:
    """Convert an ``httpx.Response`` into an ``HttpResponse``.

    Headers are read from the raw header list to keep the server's
    casing; when a name appears several times the last value wins.

    Args:
        response: The httpx response. Its body must already be read.

    Returns:
        The converted response, without elapsed time.
    """
    encoding = response.headers.encoding
    headers = {key.decode(encoding): value.decode(encoding) for key, value in response.headers.raw}
    return HttpResponse(
        status_code=response.status_code,
        headers=headers,
        body=response.text or "",
    )


def to_request_error(exc: Exception, method: HttpMethod, url: str) -> HttpRequestError:
    """Map an httpx exception to an ``HttpRequestError``.

    Args:
        exc: The exception raised by httpx.
        method: The HTTP method of the request.
        url: The URL of the request.

    Returns:
        An error of kind ``TIMEOUT`` for ``httpx.TimeoutException``,
        ``NETWORK`` otherwise.
    """
    if isinstance(exc, httpx.TimeoutException):
        return HttpRequestError(
            f"{method.value} request to {url} timed out: {exc}",
            kind=ErrorKind.TIMEOUT,
            method=method.value,
            url=url,
            cause=exc,
        )
    return HttpRequestError(
        f"{method.value} request to {url} encountered {type(exc).__name__}: {exc}",
        kind=ErrorKind.NETWORK,
        method=method.value,
        url=url,
        cause=exc,
    )
