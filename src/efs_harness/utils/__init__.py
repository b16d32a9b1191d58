"""Shared utilities for the adapter harness."""

from efs_harness.utils.sanitization import sanitize_credentials, sanitize_url

__all__ = ["sanitize_credentials", "sanitize_url"]
