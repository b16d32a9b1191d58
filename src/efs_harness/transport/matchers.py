"""Response matchers for booking API calls.

A matcher is a callable taking an ``httpx.Response`` and raising
ResponseExpectationError when the response does not meet its expectation.
Requests accept any number of matchers; all of them are applied.

Example:
    >>> import httpx
    >>> response = httpx.Response(201, request=httpx.Request("POST", "http://a/api/bookings"))
    >>> status_2xx()(response)
    >>> match_all(response, [status_2xx(), status_is(201)])
"""

from __future__ import annotations

from typing import Callable, Iterable

import httpx

from efs_harness.errors import ResponseExpectationError
from efs_harness.utils.sanitization import sanitize_url

ResponseMatcher = Callable[[httpx.Response], None]

CONTENT_TYPE_JSON = "application/json"


def _fail(response: httpx.Response, expectation: str) -> ResponseExpectationError:
    return ResponseExpectationError(
        expectation=expectation,
        status_code=response.status_code,
        method=response.request.method,
        url=sanitize_url(str(response.request.url)),
        details={"body": response.text[:200]},
    )


def status_in_range(low: int, high: int, label: str) -> ResponseMatcher:
    """Build a matcher accepting status codes in ``[low, high)``."""

    def matcher(response: httpx.Response) -> None:
        if not low <= response.status_code < high:
            raise _fail(response, label)

    matcher.__name__ = f"status_{label}"
    return matcher


def status_2xx() -> ResponseMatcher:
    """Expect a successful (2xx) status."""
    return status_in_range(200, 300, "2xx")


def status_4xx() -> ResponseMatcher:
    """Expect a client error (4xx) status."""
    return status_in_range(400, 500, "4xx")


def status_is(code: int) -> ResponseMatcher:
    """Expect exactly ``code``."""
    return status_in_range(code, code + 1, str(code))


def content_type_json() -> ResponseMatcher:
    """Expect a JSON content type."""

    def matcher(response: httpx.Response) -> None:
        if CONTENT_TYPE_JSON not in response.headers.get("content-type", ""):
            raise _fail(response, "Content-Type application/json")

    return matcher


def match_all(response: httpx.Response, matchers: Iterable[ResponseMatcher]) -> None:
    """Apply every matcher to ``response``; the first failure propagates."""
    for matcher in matchers:
        matcher(response)


__all__ = [
    "CONTENT_TYPE_JSON",
    "ResponseMatcher",
    "content_type_json",
    "match_all",
    "status_2xx",
    "status_4xx",
    "status_in_range",
    "status_is",
]
