r"""Response value object returned by all request operations."""

from __future__ import annotations

__all__ = ["HttpResponse"]

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class HttpResponse:
    """Immutable result of a completed HTTP exchange.

    A response with a 4xx or 5xx status is still a response: failures to
    complete the exchange are raised as ``HttpRequestError`` instead.

    Args:
        status_code: The HTTP status code, or 0 if none was obtained.
        headers: Response headers, stored as a read-only copy.
            Duplicate header names are flattened, the last value wins.
        body: The decoded response body, empty if the server sent none.
        elapsed_ms: Total time spent on the call in milliseconds,
            including retries.
        error_message: Optional error description.

    Example:
        ```pycon
        >>> from httpmanager.response import HttpResponse
        >>> response = HttpResponse(status_code=204)
        >>> response.is_success()
        True
        >>> HttpResponse(status_code=404).is_client_error()
        True

        ```
    """

    status_code: int = 0
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""
    elapsed_ms: int = 0
    error_message: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def __hash__(self) -> int:
        return hash(
            (
                self.status_code,
                frozenset(self.headers.items()),
                self.body,
                self.elapsed_ms,
                self.error_message,
            )
        )

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300 and not self.error_message

    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    def get_header(self, name: str) -> str | None:
        """Return a header value.

        An exact key match is preferred; otherwise the lookup falls back to
        a case-insensitive comparison since HTTP header names are
        case-insensitive on the wire.

        Args:
            name: The header name.

        Returns:
            The header value, or ``None`` if the header is absent.
        """
        if name in self.headers:
            return self.headers[name]
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        return json.loads(self.body)

    def __repr__(self) -> str:
        preview = self.body[:100] + ("..." if len(self.body) > 100 else "")
        return (
            f"{self.__class__.__qualname__}(status_code={self.status_code}, "
            f"elapsed_ms={self.elapsed_ms}, body={preview!r}, "
            f"error_message={self.error_message!r})"
        )
