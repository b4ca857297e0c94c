r"""Retry package.

Public API:
    - RetryConfig: Configuration for retry behavior
    - RetryExecutor: Synchronous retry executor
    - AsyncRetryExecutor: Asynchronous retry executor
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "RetryConfig", "RetryExecutor"]

from httpmanager.retry.config import RetryConfig
from httpmanager.retry.executor import RetryExecutor
from httpmanager.retry.executor_async import AsyncRetryExecutor
