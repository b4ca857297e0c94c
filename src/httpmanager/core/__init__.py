r"""Core building blocks shared by the sync and async managers.

This package contains the client configuration, parameter validation
and the default-header store.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_RETRY_DELAY",
    "ClientConfig",
    "DefaultHeaders",
    "merge_headers",
    "validate_client_params",
    "validate_headers",
    "validate_timeout",
    "validate_url",
]

from httpmanager.core.config import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_DELAY,
    ClientConfig,
)
from httpmanager.core.headers import DefaultHeaders, merge_headers
from httpmanager.core.validation import (
    validate_client_params,
    validate_headers,
    validate_timeout,
    validate_url,
)
