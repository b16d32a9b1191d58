"""HTTP transport for the adapter booking API.

Example:
    >>> from efs_harness.transport import BookingApiClient, status_2xx
"""

from efs_harness.transport.client import BookingApiClient
from efs_harness.transport.matchers import (
    ResponseMatcher,
    content_type_json,
    match_all,
    status_2xx,
    status_4xx,
    status_is,
)

__all__ = [
    "BookingApiClient",
    "ResponseMatcher",
    "content_type_json",
    "match_all",
    "status_2xx",
    "status_4xx",
    "status_is",
]
