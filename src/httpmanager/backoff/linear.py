r"""Linearly growing delay between retry attempts."""

from __future__ import annotations

__all__ = ["LinearBackoff"]

from httpmanager.backoff.base import BaseBackoffStrategy


class LinearBackoff(BaseBackoffStrategy):
    """Wait ``base_delay * (attempt + 1)`` seconds, optionally capped.

    This is an opt-in alternative to the fixed delay. It must be set
    explicitly through ``ClientConfig(backoff_strategy=...)``.

    Args:
        base_delay: Delay after the first failure, in seconds. Must be >= 0.
        max_delay: Optional cap in seconds. Must be > 0 if provided.

    Example:
        ```pycon
        >>> from httpmanager.backoff import LinearBackoff
        >>> backoff = LinearBackoff(base_delay=0.5, max_delay=1.2)
        >>> backoff.calculate(0)
        0.5
        >>> backoff.calculate(1)
        1.0
        >>> backoff.calculate(2)
        1.2

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        super().__init__(max_delay=max_delay)
        self.base_delay = base_delay

    def _compute(self, attempt: int) -> float:
        return self.base_delay * (attempt + 1)
