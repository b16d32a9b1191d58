"""Observability module for the adapter harness.

Example:
    >>> from efs_harness.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("client.request", method="PUT", path="/api/bookings/b-1")
"""

from efs_harness.observability.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    redact_sensitive_fields,
    sanitize_for_logging,
    unbind_context,
)

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "redact_sensitive_fields",
    "sanitize_for_logging",
    "unbind_context",
]
