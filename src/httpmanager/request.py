r"""Request value objects.

This module defines the supported HTTP methods, the immutable
``HttpRequest`` value and a ``RequestBuilder`` for chained
construction.
"""

from __future__ import annotations

__all__ = ["BODY_METHODS", "HttpMethod", "HttpRequest", "RequestBuilder"]

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING

from httpmanager.core.config import DEFAULT_REQUEST_TIMEOUT
from httpmanager.exceptions import ErrorKind, HttpRequestError

if TYPE_CHECKING:
    from collections.abc import Mapping


class HttpMethod(str, Enum):
    """HTTP methods supported by the transport adapters."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def from_value(cls, value: HttpMethod | str) -> HttpMethod:
        """Resolve a method name (case-insensitive) to an ``HttpMethod``.

        Args:
            value: An ``HttpMethod`` or a method name such as ``"post"``.

        Returns:
            The matching ``HttpMethod``.

        Raises:
            HttpRequestError: With kind ``UNSUPPORTED_METHOD`` if the
                value is not a supported method.

        Example:
            ```pycon
            >>> from httpmanager.request import HttpMethod
            >>> HttpMethod.from_value("post")
            <HttpMethod.POST: 'POST'>

            ```
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.upper())
            except ValueError:
                pass
        raise HttpRequestError(
            f"Unsupported HTTP method: {value}",
            kind=ErrorKind.UNSUPPORTED_METHOD,
            method=str(value),
        )


# Methods for which a request body is sent
BODY_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH})


@dataclass(frozen=True)
class HttpRequest:
    """Immutable description of one HTTP request.

    Args:
        url: The target URL. Must be non-empty when executed.
        method: The HTTP method. Strings are accepted and resolved when
            the request is sent.
        headers: Request headers. Keys are kept case-sensitive as given.
        body: Optional request body, sent only for POST/PUT/PATCH.
        timeout: Per-request timeout in seconds.
        follow_redirects: Whether redirects may be followed for this request.

    Example:
        ```pycon
        >>> from httpmanager.request import HttpMethod, HttpRequest
        >>> request = HttpRequest(
        ...     url="https://example.test/x", method=HttpMethod.POST, body='{"a":1}'
        ... )
        >>> request.with_header("X-Test", "v").headers["X-Test"]
        'v'

        ```
    """

    url: str
    method: HttpMethod | str = HttpMethod.GET
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | None = None
    timeout: float = DEFAULT_REQUEST_TIMEOUT
    follow_redirects: bool = True

    def __post_init__(self) -> None:
        # Copy so later changes to the caller's dict do not leak in
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def with_headers(self, headers: Mapping[str, str]) -> HttpRequest:
        """Return a copy with ``headers`` added on top of the current ones."""
        return replace(self, headers={**self.headers, **headers})

    def with_header(self, key: str, value: str) -> HttpRequest:
        """Return a copy with one header added or replaced."""
        return self.with_headers({key: value})


class RequestBuilder:
    r"""Chained builder producing an immutable ``HttpRequest``.

    Example:
        ```pycon
        >>> from httpmanager.request import HttpMethod, RequestBuilder
        >>> request = (
        ...     RequestBuilder()
        ...     .url("https://example.test/x")
        ...     .method(HttpMethod.POST)
        ...     .body('{"a":1}')
        ...     .header("X-Test", "v")
        ...     .build()
        ... )
        >>> request.method
        <HttpMethod.POST: 'POST'>

        ```
    """

    def __init__(self) -> None:
        self._url = ""
        self._method: HttpMethod | str = HttpMethod.GET
        self._headers: dict[str, str] = {}
        self._body: str | None = None
        self._timeout = DEFAULT_REQUEST_TIMEOUT
        self._follow_redirects = True

    def url(self, url: str) -> RequestBuilder:
        self._url = url
        return self

    def method(self, method: HttpMethod | str) -> RequestBuilder:
        self._method = method
        return self

    def header(self, key: str, value: str) -> RequestBuilder:
        self._headers[key] = value
        return self

    def headers(self, headers: Mapping[str, str]) -> RequestBuilder:
        self._headers.update(headers)
        return self

    def body(self, body: str | None) -> RequestBuilder:
        self._body = body
        return self

    def timeout(self, timeout: float) -> RequestBuilder:
        self._timeout = timeout
        return self

    def follow_redirects(self, follow_redirects: bool) -> RequestBuilder:
        self._follow_redirects = follow_redirects
        return self

    def build(self) -> HttpRequest:
        """Create the ``HttpRequest``.

        The builder can be reused; each call returns an independent value.
        """
        return HttpRequest(
            url=self._url,
            method=self._method,
            headers=self._headers,
            body=self._body,
            timeout=self._timeout,
            follow_redirects=self._follow_redirects,
        )
