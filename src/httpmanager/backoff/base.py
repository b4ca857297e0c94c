r"""Abstract base class for delay strategies between retry attempts."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A strategy maps the index of a failed attempt to the number of
    seconds to wait before the next one. Subclasses implement
    ``_compute``; the optional ``max_delay`` cap is applied here.

    Args:
        max_delay: Optional upper bound for every delay, in seconds.
            Must be > 0 if provided.
    """

    def __init__(self, max_delay: float | None = None) -> None:
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)
        self.max_delay = max_delay

    def calculate(self, attempt: int) -> float:
        """Return the delay to wait after a failed attempt.

        Args:
            attempt: Index of the attempt that just failed (0-indexed).

        Returns:
            The delay in seconds, capped at ``max_delay`` if set.
        """
        delay = self._compute(attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay

    @abstractmethod
    def _compute(self, attempt: int) -> float:
        """Compute the uncapped delay for ``attempt``."""

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self), tuple(sorted(vars(self).items()))))

    def __repr__(self) -> str:
        args = ", ".join(f"{key}={value}" for key, value in vars(self).items())
        return f"{self.__class__.__qualname__}({args})"
