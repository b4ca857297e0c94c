r"""Process-wide shared ``HttpManager``.

Most applications need a single pooled manager. ``get_http_manager``
creates it on first use and returns the same instance afterwards;
``close_http_manager`` releases it.
"""

from __future__ import annotations

__all__ = ["close_http_manager", "get_http_manager"]

import logging
import threading
from typing import TYPE_CHECKING

from httpmanager.manager import HttpManager

if TYPE_CHECKING:
    from httpmanager.core.config import ClientConfig

logger: logging.Logger = logging.getLogger(__name__)

_lock = threading.Lock()
_shared_manager: HttpManager | None = None


def get_http_manager(config: ClientConfig | None = None) -> HttpManager:
    r"""Return the shared ``HttpManager``, creating it on first use.

    A shared manager that was closed directly with ``close()`` is replaced
    by a new one on the next call.

    Args:
        config: The configuration used to create the manager. If the
            manager already exists, ``config`` must be ``None`` or equal
            to the configuration in use.

    Returns:
        The shared manager.

    Raises:
        ValueError: If ``config`` differs from the configuration of the
            existing manager.

    Example:
        ```pycon
        >>> from httpmanager import close_http_manager, get_http_manager
        >>> get_http_manager() is get_http_manager()
        True
        >>> close_http_manager()

        ```
    """
    global _shared_manager  # noqa: PLW0603
    manager = _shared_manager
    if manager is None or manager.is_closed:
        with _lock:
            manager = _shared_manager
            if manager is None or manager.is_closed:
                manager = HttpManager(config)
                _shared_manager = manager
                logger.debug("Created shared HTTP manager")
                return manager

    if config is not None and config != manager.config:
        msg = (
            "The shared HTTP manager already exists with a different configuration; "
            "call close_http_manager() first"
        )
        raise ValueError(msg)
    return manager


def close_http_manager() -> None:
    """Close and discard the shared manager, if any.

    The next call to ``get_http_manager`` creates a fresh manager.
    """
    global _shared_manager  # noqa: PLW0603
    with _lock:
        manager, _shared_manager = _shared_manager, None
    if manager is not None:
        manager.close()
