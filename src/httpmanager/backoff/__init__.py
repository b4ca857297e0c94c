r"""Delay strategies used between retry attempts.

The default is a constant delay. A capped linear strategy is available
as an explicit opt-in.
"""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ConstantBackoff", "LinearBackoff"]

from httpmanager.backoff.base import BaseBackoffStrategy
from httpmanager.backoff.constant import ConstantBackoff
from httpmanager.backoff.linear import LinearBackoff
