r"""Transport adapters turning requests into httpx calls."""

from __future__ import annotations

__all__ = ["AsyncBaseTransport", "AsyncHttpxTransport", "BaseTransport", "HttpxTransport"]

from httpmanager.transport.base import AsyncBaseTransport, BaseTransport
from httpmanager.transport.httpx_transport import HttpxTransport
from httpmanager.transport.httpx_transport_async import AsyncHttpxTransport
