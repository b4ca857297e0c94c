r"""Shared logic for the sync and async managers.

This module provides the request preparation steps that
``HttpManager`` and ``AsyncHttpManager`` have in common: body
serialization, authorization headers, default-header merging and
elapsed-time stamping.
"""

from __future__ import annotations

__all__ = [
    "build_auth_headers",
    "elapsed_ms_since",
    "resolve_request",
    "serialize_body",
    "with_elapsed",
]

import json
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from httpmanager.core.validation import validate_headers, validate_timeout, validate_url

if TYPE_CHECKING:
    from collections.abc import Mapping

    from httpmanager.core.headers import DefaultHeaders
    from httpmanager.request import HttpRequest
    from httpmanager.response import HttpResponse


def serialize_body(body: Any) -> str | None:
    """Turn a request payload into the string sent on the wire.

    Strings are passed through untouched, bytes are decoded as UTF-8 and
    any other object is serialized to JSON.

    Args:
        body: The payload, or ``None`` for no body.

    Returns:
        The body string, or ``None``.

    Raises:
        TypeError: If the object cannot be serialized to JSON.

    Example:
        ```pycon
        >>> from httpmanager.core.client_logic import serialize_body
        >>> serialize_body({"name": "John Doe"})
        '{"name": "John Doe"}'
        >>> serialize_body('{"a":1}')
        '{"a":1}'

        ```
    """
    if body is None or isinstance(body, str):
        return body
    if isinstance(body, (bytes, bytearray)):
        return bytes(body).decode("utf-8")
    return json.dumps(body)


def build_auth_headers(
    token: str | None, headers: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Return ``headers`` with a bearer ``Authorization`` header added.

    The header is added only when ``token`` is a non-empty string.

    Example:
        ```pycon
        >>> from httpmanager.core.client_logic import build_auth_headers
        >>> build_auth_headers("abc")
        {'Authorization': 'Bearer abc'}
        >>> build_auth_headers("")
        {}

        ```
    """
    merged = dict(headers or {})
    if token:
        merged["Authorization"] = f"Bearer {token}"
    return merged


def resolve_request(request: HttpRequest, default_headers: DefaultHeaders) -> HttpRequest:
    """Validate ``request`` and merge the default headers into it.

    Headers already on the request win over the defaults.

    Raises:
        ValueError: If the URL is empty, the timeout is not positive or a
            header name or value is not ASCII.
    """
    validate_url(request.url)
    validate_timeout(request.timeout)
    headers = default_headers.merged_with(request.headers)
    validate_headers(headers)
    return replace(request, headers=headers)


def elapsed_ms_since(start_time: float) -> int:
    """Return the milliseconds elapsed since ``start_time`` (a
    ``time.monotonic`` value)."""
    return max(0, int((time.monotonic() - start_time) * 1000))


def with_elapsed(response: HttpResponse, start_time: float) -> HttpResponse:
    """Return a copy of ``response`` stamped with the elapsed time."""
    return replace(response, elapsed_ms=elapsed_ms_since(start_time))
