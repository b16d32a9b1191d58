"""Custom assertions for booking adapter tests.

Functions:
    assert_equal_if_not_none: Compare only when the actual value is present.
    assert_booking_state_in: Assert a booking is in one of the given states.
    assert_no_transient_states: Assert no stored booking is NEW or UPDATEREQUESTED.
"""

from typing import Iterable, TypeVar

from efs_harness.models.entities import Booking
from efs_harness.models.enums import BookingState

T = TypeVar("T")


def assert_equal_if_not_none(expected: T, actual: T | None, message: str) -> None:
    """Assert ``actual == expected`` unless ``actual`` is None.

    Adapters answer rejected requests with or without an entity body; a
    missing value is therefore not a failure.
    """
    if actual is not None:
        assert actual == expected, f"{message} Expected {expected!r}, got {actual!r}."


def assert_booking_state_in(
    booking: Booking | None,
    states: Iterable[BookingState],
    message: str,
) -> None:
    """Assert that ``booking`` is not None and its state is one of ``states``.

    Raises:
        AssertionError: If the booking is missing or in another state.
    """
    allowed = list(states)
    assert booking is not None, "The booking should not be None."
    assert booking.state in allowed, (
        f"{message} Allowed: {[s.value for s in allowed]}, actual: {booking.state.value}."
    )


def assert_no_transient_states(bookings: Iterable[Booking]) -> None:
    """Assert that no booking is reported in a transient state."""
    for booking in bookings:
        assert booking.state not in BookingState.transient_states(), (
            f"Stored booking {booking.id!r} must not have state {booking.state.value}."
        )


__all__ = [
    "assert_booking_state_in",
    "assert_equal_if_not_none",
    "assert_no_transient_states",
]
