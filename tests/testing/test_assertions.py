"""Tests for custom booking assertions."""

import pytest

from efs_harness.models.entities import Booking
from efs_harness.models.enums import BookingState
from efs_harness.testing.assertions import (
    assert_booking_state_in,
    assert_equal_if_not_none,
    assert_no_transient_states,
)


class TestAssertEqualIfNotNone:
    def test_none_is_accepted(self) -> None:
        assert_equal_if_not_none(BookingState.BOOKED, None, "unused")

    def test_equal_is_accepted(self) -> None:
        assert_equal_if_not_none(BookingState.BOOKED, BookingState.BOOKED, "unused")

    def test_different_fails_with_message(self) -> None:
        with pytest.raises(AssertionError, match="State changed"):
            assert_equal_if_not_none(BookingState.BOOKED, BookingState.NEW, "State changed.")


class TestAssertBookingStateIn:
    """Tests for assert_booking_state_in."""

    def test_state_in_allowed(self, sample_booking: Booking) -> None:
        assert_booking_state_in(
            sample_booking, [BookingState.BOOKED, BookingState.STARTED], "unused"
        )

    def test_state_not_allowed(self, sample_booking: Booking) -> None:
        with pytest.raises(AssertionError, match="actual: BOOKED"):
            assert_booking_state_in(sample_booking, [BookingState.STARTED], "Wrong state.")

    def test_none_booking_fails(self) -> None:
        with pytest.raises(AssertionError, match="should not be None"):
            assert_booking_state_in(None, [BookingState.BOOKED], "unused")

    def test_accepts_any_iterable(self, sample_booking: Booking) -> None:
        assert_booking_state_in(sample_booking, frozenset({BookingState.BOOKED}), "unused")


class TestAssertNoTransientStates:
    def test_stored_states_pass(self, sample_booking: Booking) -> None:
        assert_no_transient_states(
            [sample_booking, sample_booking.with_state(BookingState.FINISHED)]
        )

    @pytest.mark.parametrize("state", [BookingState.NEW, BookingState.UPDATEREQUESTED])
    def test_transient_state_fails(self, sample_booking: Booking, state: BookingState) -> None:
        with pytest.raises(AssertionError, match=state.value):
            assert_no_transient_states([sample_booking.with_state(state)])
