"""HTTP client for the adapter booking API.

This module provides BookingApiClient, a thin synchronous wrapper around
``httpx.Client`` that builds the booking API requests, attaches the
``x-credentials`` header, applies response matchers and (de)serializes the
JSON bodies into the harness models.

The underlying ``httpx.Client`` may be a live client, a
``fastapi.testclient.TestClient`` for in-process adapters, or a client
using ``httpx.MockTransport``.

Example:
    >>> from efs_harness.transport.client import BookingApiClient
    >>> from efs_harness.transport.matchers import status_2xx
    >>>
    >>> with BookingApiClient("http://adapter.example.com") as client:
    ...     options = client.get_options("48.74,9.31", expect=[status_2xx()])
    ...     booking = client.create_booking_from_option(options[0], None)
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from types import TracebackType
from typing import Any, Sequence, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from efs_harness.config import HarnessConfig
from efs_harness.errors import ResponseExpectationError, ResponseParseError
from efs_harness.models.entities import Booking, Customer, Option
from efs_harness.models.enums import BookingState
from efs_harness.models.payloads import NewBooking
from efs_harness.observability import get_logger
from efs_harness.transport.matchers import (
    CONTENT_TYPE_JSON,
    ResponseMatcher,
    match_all,
    status_2xx,
)
from efs_harness.utils.sanitization import sanitize_credentials, sanitize_url

logger = get_logger(__name__)

T = TypeVar("T")

CREDENTIALS_HEADER = "x-credentials"

BOOKINGS_PATH = "/api/bookings"
OPTIONS_PATH = "/api/bookings/options"

# Default timeout in seconds
DEFAULT_TIMEOUT = 30.0


@lru_cache(maxsize=32)
def _type_adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


def _type_name(type_: Any) -> str:
    if getattr(type_, "__origin__", None) is not None:
        return str(type_)
    return getattr(type_, "__name__", repr(type_))


def to_epoch_millis(value: datetime) -> int:
    """Return ``value`` as epoch milliseconds, the format of time query parameters."""
    return int(value.timestamp() * 1000)


class BookingApiClient:
    """Synchronous client for the adapter booking endpoints.

    Every request method accepts ``credentials`` (sent as ``x-credentials``
    when not None) and ``expect``, a sequence of response matchers that are
    all applied before the body is parsed. Without matchers any status is
    accepted.

    Attributes:
        base_url: Adapter base URL without trailing slash
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Adapter base URL, e.g. ``http://localhost:8080``
            timeout: Request timeout in seconds (ignored when ``http`` is given)
            http: Pre-built httpx client; the caller keeps ownership of it
        """
        self.base_url = base_url.rstrip("/")
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(timeout=timeout)

    @classmethod
    def from_config(
        cls, config: HarnessConfig, *, http: httpx.Client | None = None
    ) -> "BookingApiClient":
        return cls(config.base_url, timeout=config.timeout_seconds, http=http)

    def close(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "BookingApiClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # Serialization

    @staticmethod
    def stringify(model: BaseModel) -> str:
        """Serialize a model to the adapter's JSON form (camelCase, no nulls)."""
        return model.model_dump_json(by_alias=True, exclude_none=True)

    def parse(self, response: httpx.Response, type_: type[T]) -> T:
        """Parse the response body into ``type_``.

        Raises:
            ResponseParseError: If the body is not valid JSON of that shape.
                The failure is logged before it is raised.
        """
        try:
            return _type_adapter(type_).validate_json(response.content)
        except ValidationError as exc:
            logger.error(
                "client.parse_failed",
                expected_type=_type_name(type_),
                status_code=response.status_code,
                url=sanitize_url(str(response.request.url)),
                error=str(exc),
            )
            raise ResponseParseError(_type_name(type_), response.text) from exc

    def try_parse(self, response: httpx.Response, type_: type[T]) -> T | None:
        """Parse the response body into ``type_`` or return None.

        Used for error responses, which may or may not echo the entity.
        """
        if not response.content:
            return None
        try:
            return _type_adapter(type_).validate_json(response.content)
        except ValidationError:
            logger.debug(
                "client.body_not_parsed",
                expected_type=_type_name(type_),
                status_code=response.status_code,
            )
            return None

    # Requests

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        content: str | None = None,
        credentials: str | None = None,
        expect: Sequence[ResponseMatcher] = (),
    ) -> httpx.Response:
        """Send a request and apply ``expect`` to the response.

        Raises:
            httpx.HTTPError: If the request could not be performed
            ResponseExpectationError: If a matcher rejects the response
        """
        url = f"{self.base_url}{path}"
        headers: dict[str, str] = {}
        if content is not None:
            headers["Content-Type"] = CONTENT_TYPE_JSON
        if credentials is not None:
            headers[CREDENTIALS_HEADER] = credentials

        logger.debug(
            "client.request",
            method=method,
            path=path,
            params=params,
            credential_hint=sanitize_credentials(credentials),
        )
        try:
            response = self._http.request(
                method, url, params=params, content=content, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.error(
                "client.request_failed",
                method=method,
                url=sanitize_url(url),
                error=str(exc),
            )
            raise

        logger.debug(
            "client.response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        try:
            match_all(response, expect)
        except ResponseExpectationError as exc:
            logger.error("client.unexpected_response", **exc.details)
            raise
        return response

    def request_check_2xx(
        self,
        method: str,
        path: str,
        type_: type[T],
        **kwargs: Any,
    ) -> T:
        """Send a request that must succeed and parse its body into ``type_``."""
        response = self.request(method, path, expect=[status_2xx()], **kwargs)
        return self.parse(response, type_)

    # Booking API

    def get_options(
        self,
        from_lat_lon: str,
        to_lat_lon: str | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        radius: int | None = None,
        sharing: bool | None = None,
        *,
        credentials: str | None = None,
        expect: Sequence[ResponseMatcher] = (),
    ) -> list[Option]:
        """Query ``GET /api/bookings/options``.

        ``from`` is always sent; every other parameter only when not None.
        Times are sent as epoch milliseconds.
        """
        params: dict[str, Any] = {"from": from_lat_lon}
        if to_lat_lon is not None:
            params["to"] = to_lat_lon
        if start_time is not None:
            params["startTime"] = to_epoch_millis(start_time)
        if end_time is not None:
            params["endTime"] = to_epoch_millis(end_time)
        if radius is not None:
            params["radius"] = radius
        if sharing is not None:
            params["sharing"] = "true" if sharing else "false"

        response = self.request(
            "GET", OPTIONS_PATH, params=params, credentials=credentials, expect=expect
        )
        return self.parse(response, list[Option])

    def create_booking(
        self,
        new_booking: NewBooking,
        *,
        credentials: str | None = None,
        expect: Sequence[ResponseMatcher] = (),
    ) -> Booking:
        """Submit a new booking with ``POST /api/bookings``."""
        response = self.request(
            "POST",
            BOOKINGS_PATH,
            content=self.stringify(new_booking),
            credentials=credentials,
            expect=expect,
        )
        return self.parse(response, Booking)

    def create_booking_from_option(
        self,
        option: Option,
        customer: Customer | None,
        *,
        credentials: str | None = None,
        expect: Sequence[ResponseMatcher] = (),
        now: datetime | None = None,
    ) -> Booking:
        """Book ``option`` for ``customer``, see NewBooking.from_option."""
        new_booking = NewBooking.from_option(option, customer, now=now)
        return self.create_booking(new_booking, credentials=credentials, expect=expect)

    def modify_booking(
        self,
        booking: Booking,
        *,
        credentials: str | None = None,
        expect: Sequence[ResponseMatcher] = (),
        lenient: bool = False,
    ) -> Booking | None:
        """Send ``booking`` with ``PUT /api/bookings/{id}``.

        Args:
            booking: Booking carrying the requested state
            credentials: Value for the credentials header
            expect: Response matchers
            lenient: Return None instead of raising when the body is not a
                booking (rejected modifications often answer with an error body)
        """
        response = self.request(
            "PUT",
            f"{BOOKINGS_PATH}/{quote(booking.id, safe='')}",
            content=self.stringify(booking),
            credentials=credentials,
            expect=expect,
        )
        if lenient:
            return self.try_parse(response, Booking)
        return self.parse(response, Booking)

    def get_bookings(
        self,
        state: BookingState | None = None,
        *,
        credentials: str | None = None,
        expect: Sequence[ResponseMatcher] = (),
    ) -> list[Booking]:
        """List bookings, optionally filtered with ``?state=``."""
        params = {"state": state.value} if state is not None else None
        response = self.request(
            "GET", BOOKINGS_PATH, params=params, credentials=credentials, expect=expect
        )
        return self.parse(response, list[Booking])

    def get_booking_by_id(
        self,
        booking_id: str,
        *,
        credentials: str | None = None,
        expect: Sequence[ResponseMatcher] = (),
    ) -> Booking:
        """Fetch a single booking with ``GET /api/bookings/{id}``."""
        response = self.request(
            "GET",
            f"{BOOKINGS_PATH}/{quote(booking_id, safe='')}",
            credentials=credentials,
            expect=expect,
        )
        return self.parse(response, Booking)


__all__ = [
    "BOOKINGS_PATH",
    "BookingApiClient",
    "CREDENTIALS_HEADER",
    "DEFAULT_TIMEOUT",
    "OPTIONS_PATH",
    "to_epoch_millis",
]
