r"""Retry configuration derived from the client configuration."""

from __future__ import annotations

__all__ = ["RetryConfig"]

from dataclasses import dataclass, field

from httpmanager.backoff import BaseBackoffStrategy, ConstantBackoff
from httpmanager.core.config import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY, ClientConfig


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for the retry executors.

    Attributes:
        enable_retry: Whether failed attempts are retried.
        max_retries: Total number of attempts, initial attempt included.
            0 is treated as a single attempt.
        backoff_strategy: Strategy giving the delay after each failed attempt.

    Example:
        ```pycon
        >>> from httpmanager.retry import RetryConfig
        >>> RetryConfig(max_retries=3).max_attempts
        3
        >>> RetryConfig(max_retries=3, enable_retry=False).max_attempts
        1
        >>> RetryConfig(max_retries=0).max_attempts
        1

        ```
    """

    enable_retry: bool = True
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_strategy: BaseBackoffStrategy = field(
        default_factory=lambda: ConstantBackoff(DEFAULT_RETRY_DELAY)
    )

    @property
    def max_attempts(self) -> int:
        """Number of attempts the executor may make for one request."""
        if not self.enable_retry:
            return 1
        return max(1, self.max_retries)

    @classmethod
    def from_client_config(cls, config: ClientConfig) -> RetryConfig:
        """Build the retry configuration of ``config``.

        If the client configuration has no backoff strategy, a constant
        delay of ``config.retry_delay`` seconds is used.
        """
        return cls(
            enable_retry=config.enable_retry,
            max_retries=config.max_retries,
            backoff_strategy=config.backoff_strategy or ConstantBackoff(config.retry_delay),
        )
