r"""httpmanager - Pooled HTTP client manager with default headers and
retries.

This package wraps httpx behind a small facade. A manager owns a pooled
connection client, a set of default headers merged into every request
and a fixed-delay retry policy for transient network failures. HTTP
error statuses are returned as plain responses; only failures that
prevent a response are raised, as ``HttpRequestError``.

Key Features:
    - Connection pooling with configurable limits and timeouts
    - Default headers (``Content-Type``, ``Accept``, ``User-Agent``) with
      per-request overrides
    - Bounded retries with a constant delay for network errors and timeouts
    - Convenience methods for GET, POST, PUT, PATCH, DELETE, HEAD, OPTIONS
    - Bearer-token API helper
    - Cooperative cancellation
    - Sync and async managers, plus a process-wide shared manager

Example:
    ```pycon
    >>> from httpmanager import ClientConfig, HttpManager
    >>> with HttpManager(ClientConfig(max_retries=5)) as manager:  # doctest: +SKIP
    ...     manager.add_default_header("X-API-Key", "secret")
    ...     response = manager.get("https://api.example.com/data")
    ...     created = manager.post("https://api.example.com/data", {"key": "value"})
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncHttpManager",
    "BaseBackoffStrategy",
    "CancellationToken",
    "ClientConfig",
    "ConstantBackoff",
    "ErrorKind",
    "HttpManager",
    "HttpMethod",
    "HttpRequest",
    "HttpRequestError",
    "HttpResponse",
    "LinearBackoff",
    "RequestBuilder",
    "__version__",
    "close_http_manager",
    "get_http_manager",
]

from importlib.metadata import PackageNotFoundError, version

from httpmanager.backoff import BaseBackoffStrategy, ConstantBackoff, LinearBackoff
from httpmanager.cancellation import CancellationToken
from httpmanager.core.config import ClientConfig
from httpmanager.exceptions import ErrorKind, HttpRequestError
from httpmanager.manager import HttpManager
from httpmanager.manager_async import AsyncHttpManager
from httpmanager.request import HttpMethod, HttpRequest, RequestBuilder
from httpmanager.response import HttpResponse
from httpmanager.shared import close_http_manager, get_http_manager

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
