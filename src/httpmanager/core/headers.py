r"""Thread-safe store for default request headers.

The store is shared by every request issued through one manager.
Mutations and reads are serialized by a lock so that each request
merges against a consistent snapshot.
"""

from __future__ import annotations

__all__ = ["DefaultHeaders", "merge_headers"]

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def merge_headers(
    defaults: Mapping[str, str], overrides: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Merge per-call headers on top of default headers.

    Args:
        defaults: The default headers.
        overrides: The per-call headers. They win on key collision.

    Returns:
        A new dictionary with the merged headers.

    Example:
        ```pycon
        >>> from httpmanager.core.headers import merge_headers
        >>> merge_headers({"Accept": "application/json", "X-A": "1"}, {"X-A": "2"})
        {'Accept': 'application/json', 'X-A': '2'}

        ```
    """
    merged = dict(defaults)
    if overrides:
        merged.update(overrides)
    return merged


class DefaultHeaders:
    """Mutable, lock-protected mapping of default headers.

    The store starts with ``Content-Type`` and ``Accept`` set to
    ``application/json`` and ``User-Agent`` set to the given user agent.

    Args:
        user_agent: The user agent installed on (re)initialization.

    Example:
        ```pycon
        >>> from httpmanager.core.headers import DefaultHeaders
        >>> headers = DefaultHeaders(user_agent="CustomApp/1.0")
        >>> headers.set("X-API-Key", "k1")
        >>> headers.snapshot()["X-API-Key"]
        'k1'
        >>> headers.reset()
        >>> "X-API-Key" in headers.snapshot()
        False

        ```
    """

    def __init__(self, user_agent: str) -> None:
        self._user_agent = user_agent
        self._lock = threading.Lock()
        self._headers: dict[str, str] = self._initial_headers()

    def _initial_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self._user_agent,
        }

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._headers[key] = value

    def remove(self, key: str) -> None:
        """Remove a header. Removing an absent header is a no-op."""
        with self._lock:
            self._headers.pop(key, None)

    def reset(self) -> None:
        """Drop every header and reinstall the initial ones."""
        with self._lock:
            self._headers = self._initial_headers()

    def snapshot(self) -> dict[str, str]:
        """Return a copy of the current headers."""
        with self._lock:
            return dict(self._headers)

    def merged_with(self, overrides: Mapping[str, str] | None = None) -> dict[str, str]:
        """Return the current headers with ``overrides`` applied on top."""
        with self._lock:
            return merge_headers(self._headers, overrides)

    def __len__(self) -> int:
        with self._lock:
            return len(self._headers)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({self.snapshot()})"
