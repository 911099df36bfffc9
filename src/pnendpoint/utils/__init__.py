r"""Utility functions shared across the package."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "correlation_id_scope",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

from pnendpoint.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    correlation_id_scope,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
