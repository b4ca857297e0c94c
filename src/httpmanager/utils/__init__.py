r"""Utility helpers for httpmanager."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_structured_logging",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

from httpmanager.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    configure_structured_logging,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
