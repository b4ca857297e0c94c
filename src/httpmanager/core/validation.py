r"""Parameter validation utilities.

This module provides validation functions for configuration values and
request parameters. Invalid values are programmer errors and raise
``ValueError``.
"""

from __future__ import annotations

__all__ = [
    "validate_client_params",
    "validate_headers",
    "validate_timeout",
    "validate_url",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def validate_timeout(timeout: float, name: str = "timeout") -> None:
    """Validate a timeout value.

    Args:
        timeout: Timeout in seconds. Must be > 0.
        name: Parameter name used in the error message.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from httpmanager.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_url(url: str) -> None:
    """Validate that a URL is present.

    Args:
        url: The URL to validate.

    Raises:
        ValueError: If the URL is empty or blank.
    """
    if not url or not url.strip():
        msg = "url must be a non-empty string"
        raise ValueError(msg)


def validate_headers(headers: Mapping[str, str]) -> None:
    """Validate that header names and values can be sent on the wire.

    Header names and values are encoded as ASCII by the HTTP client, so
    any other character makes the request impossible to build.

    Args:
        headers: The headers to validate.

    Raises:
        ValueError: If a header name or value is not ASCII.

    Example:
        ```pycon
        >>> from httpmanager.core.validation import validate_headers
        >>> validate_headers({"Accept": "application/json"})
        >>> validate_headers({"X-Name": "Zoë"})  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: header 'X-Name' must contain only ASCII characters, got 'Zoë'

        ```
    """
    for name, value in headers.items():
        if not name.isascii():
            msg = f"header name must contain only ASCII characters, got {name!r}"
            raise ValueError(msg)
        if not value.isascii():
            msg = f"header {name!r} must contain only ASCII characters, got {value!r}"
            raise ValueError(msg)


def validate_client_params(
    *,
    connect_timeout: float,
    read_timeout: float,
    max_connections: int,
    max_connections_per_route: int,
    max_retries: int,
    retry_delay: float,
) -> None:
    """Validate client configuration parameters.

    Args:
        connect_timeout: Connection timeout in seconds. Must be > 0.
        read_timeout: Read timeout in seconds. Must be > 0.
        max_connections: Pool size. Must be > 0.
        max_connections_per_route: Keep-alive pool size. Must be > 0.
        max_retries: Total number of attempts. Must be >= 0.
        retry_delay: Delay between attempts in seconds. Must be >= 0.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from httpmanager.core.validation import validate_client_params
        >>> validate_client_params(
        ...     connect_timeout=10.0,
        ...     read_timeout=30.0,
        ...     max_connections=20,
        ...     max_connections_per_route=10,
        ...     max_retries=3,
        ...     retry_delay=1.0,
        ... )

        ```
    """
    validate_timeout(connect_timeout, name="connect_timeout")
    validate_timeout(read_timeout, name="read_timeout")
    if max_connections <= 0:
        msg = f"max_connections must be > 0, got {max_connections}"
        raise ValueError(msg)
    if max_connections_per_route <= 0:
        msg = f"max_connections_per_route must be > 0, got {max_connections_per_route}"
        raise ValueError(msg)
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if retry_delay < 0:
        msg = f"retry_delay must be >= 0, got {retry_delay}"
        raise ValueError(msg)
