"""Entity models for the booking API.

Entities are the objects exchanged with the adapter: places, legs,
customers, bookable options and bookings.

Example:
    >>> from efs_harness.models.entities import Place, Leg
    >>> leg = Leg.model_validate({"from": {"lat": 48.74, "lon": 9.31}})
    >>> leg.from_.lat
    48.74
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import Field, field_validator

from efs_harness.models.base import HarnessBaseModel
from efs_harness.models.enums import BookingState


class Place(HarnessBaseModel):
    """A geographic location, optionally a named stop."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    name: str | None = None
    stop_id: str | None = None

    @classmethod
    def from_lat_lon(cls, lat_lon: str) -> "Place":
        """Build a place from the ``"lat,lon"`` form used in option queries."""
        lat, lon = (part.strip() for part in lat_lon.split(",", 1))
        return cls(lat=float(lat), lon=float(lon))

    def to_lat_lon(self) -> str:
        return f"{self.lat},{self.lon}"


class Leg(HarnessBaseModel):
    """A single trip segment.

    Attributes:
        from_: Start place (``from`` on the wire)
        to: End place; adapters may leave it open until the trip is closed
        start_time: Planned or actual departure
        end_time: Planned or actual arrival
        mode: Transport mode, e.g. BICYCLE or CAR
        service_id: Identifier of the mobility service providing the leg
    """

    from_: Place = Field(..., alias="from")
    to: Place | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    mode: str | None = None
    service_id: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Customer(HarnessBaseModel):
    """Customer data attached to new bookings."""

    id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None


class OptionMeta(HarnessBaseModel):
    """Meta information of an option."""

    mode: str | None = None
    sharing: bool | None = None


class Option(HarnessBaseModel):
    """A bookable trip offered by the adapter.

    The transport mode is reported either in ``meta`` or on the leg itself,
    depending on the middleware generation the adapter was built against.
    """

    leg: Leg
    meta: OptionMeta | None = None

    @property
    def mode(self) -> str | None:
        if self.meta is not None and self.meta.mode is not None:
            return self.meta.mode
        return self.leg.mode


class Booking(HarnessBaseModel):
    """A booking as stored by the adapter."""

    id: str = Field(..., min_length=1)
    state: BookingState
    leg: Leg
    customer: Customer | None = None

    def with_state(self, state: BookingState) -> "Booking":
        """Return a copy of this booking marked with ``state``."""
        return self.model_copy(update={"state": state})


__all__ = [
    "Booking",
    "BookingState",
    "Customer",
    "Leg",
    "Option",
    "OptionMeta",
    "Place",
]
