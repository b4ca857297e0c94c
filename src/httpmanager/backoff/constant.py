r"""Fixed delay between retry attempts."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from httpmanager.backoff.base import BaseBackoffStrategy


class ConstantBackoff(BaseBackoffStrategy):
    """Wait the same amount of time after every failed attempt.

    This is the strategy used by the retry executor when the client
    configuration does not provide one; ``delay`` is then the configured
    ``retry_delay``.

    Args:
        delay: The fixed delay in seconds (default: 1.0). Must be >= 0.

    Example:
        ```pycon
        >>> from httpmanager.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(delay=0.5)
        >>> backoff.calculate(0)
        0.5
        >>> backoff.calculate(7)
        0.5

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)
        super().__init__()
        self.delay = delay

    def _compute(self, attempt: int) -> float:  # noqa: ARG002
        return self.delay
