"""Logging setup for applications that use actionkit."""

from actionkit.observability.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    configure_logging,
    get_context,
    log_context,
)

__all__ = [
    "HumanReadableFormatter",
    "StructuredFormatter",
    "configure_logging",
    "get_context",
    "log_context",
]
