r"""Configuration dataclass and defaults for HttpManager.

This module provides configuration constants and the immutable
``ClientConfig`` consumed once when a manager (and its transport) is
constructed. All durations are expressed in seconds.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_MAX_CONNECTIONS",
    "DEFAULT_MAX_CONNECTIONS_PER_ROUTE",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_USER_AGENT",
    "ClientConfig",
]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from httpmanager.core.validation import validate_client_params

if TYPE_CHECKING:
    from httpmanager.backoff import BaseBackoffStrategy


# Maximum seconds to wait while establishing a connection
DEFAULT_CONNECT_TIMEOUT = 10.0

# Maximum seconds to wait for data once connected
DEFAULT_READ_TIMEOUT = 30.0

# Default per-request timeout, overrides the read timeout for that request
DEFAULT_REQUEST_TIMEOUT = 30.0

# Connection pool sizing. httpx has no per-host limit, so the per-route
# value bounds the number of idle keep-alive connections instead
DEFAULT_MAX_CONNECTIONS = 20
DEFAULT_MAX_CONNECTIONS_PER_ROUTE = 10

# Total number of attempts per request (initial attempt included)
DEFAULT_MAX_RETRIES = 3

# Fixed delay in seconds between two attempts
DEFAULT_RETRY_DELAY = 1.0

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; httpmanager)"


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for HttpManager and its transport.

    Args:
        connect_timeout: Seconds to wait for a connection. Must be > 0.
        read_timeout: Seconds to wait for response data. Must be > 0.
        max_connections: Maximum number of pooled connections. Must be > 0.
        max_connections_per_route: Maximum number of idle keep-alive
            connections. Must be > 0.
        follow_redirects: Whether redirects are followed.
        user_agent: Value of the ``User-Agent`` header sent when the caller
            does not provide one.
        enable_retry: Whether failed attempts are retried. If ``False``,
            exactly one attempt is made.
        max_retries: Total number of attempts per request. Must be >= 0;
            0 is treated as a single attempt.
        retry_delay: Fixed delay in seconds between attempts. Must be >= 0.
        backoff_strategy: Optional strategy replacing the fixed delay, for
            example ``LinearBackoff``. Ignored when ``None``.

    Example:
        ```pycon
        >>> from httpmanager.core.config import ClientConfig
        >>> config = ClientConfig()
        >>> config.max_retries
        3
        >>> config = ClientConfig(max_retries=2, retry_delay=2.0, user_agent="CustomApp/1.0")
        >>> config.merge(max_retries=5).max_retries
        5
        >>> config.max_retries  # Original unchanged
        2

        ```
    """

    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    max_connections: int = DEFAULT_MAX_CONNECTIONS
    max_connections_per_route: int = DEFAULT_MAX_CONNECTIONS_PER_ROUTE
    follow_redirects: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    enable_retry: bool = True
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    backoff_strategy: BaseBackoffStrategy | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_client_params(
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            max_connections=self.max_connections,
            max_connections_per_route=self.max_connections_per_route,
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
        )

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.

        Example:
            ```pycon
            >>> from httpmanager.core.config import ClientConfig
            >>> config = ClientConfig(enable_retry=False)
            >>> config.merge(enable_retry=None).enable_retry
            False

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
