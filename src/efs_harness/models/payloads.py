"""Request payloads sent to the booking API."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from efs_harness.models.base import HarnessBaseModel
from efs_harness.models.entities import Customer, Leg, Option
from efs_harness.models.enums import BookingState

# Offset applied when an option's start time already lies in the past
START_TIME_OFFSET = timedelta(seconds=5)


class NewBooking(HarnessBaseModel):
    """Payload for ``POST /api/bookings``.

    Attributes:
        state: Always NEW when submitted; the adapter assigns the real state
        leg: The leg to book
        customer: Customer the booking is made for
    """

    state: BookingState = BookingState.NEW
    leg: Leg
    customer: Customer | None = None

    @classmethod
    def from_option(
        cls,
        option: Option,
        customer: Customer | None,
        now: datetime | None = None,
    ) -> "NewBooking":
        """Create a submittable NewBooking from an option.

        The start time is kept if it is still in the future, otherwise it is
        moved to ``now + 5s``. If the option's end time would then lie before
        the start, the end is moved so the leg keeps the option's duration.

        Args:
            option: Option returned by the options endpoint
            customer: Customer to book for
            now: Reference time (defaults to the current UTC time)

        Returns:
            NewBooking in state NEW

        Example:
            >>> from efs_harness.models.entities import Place
            >>> opt = Option(leg=Leg(from_=Place(lat=1, lon=2), mode="CAR"))
            >>> NewBooking.from_option(opt, None).leg.mode
            'CAR'
        """
        now = now or datetime.now(timezone.utc)
        option_leg = option.leg
        option_start = option_leg.start_time
        end_time = option_leg.end_time

        if option_start is not None and option_start > now:
            start_time = option_start
        else:
            start_time = now + START_TIME_OFFSET

        if end_time is not None and end_time < start_time:
            if option_start is not None:
                end_time = start_time + (end_time - option_start)
            else:
                end_time = start_time

        leg = Leg(
            from_=option_leg.from_,
            to=option_leg.to,
            start_time=start_time,
            end_time=end_time,
            mode=option.mode,
            service_id=option_leg.service_id,
        )
        return cls(state=BookingState.NEW, leg=leg, customer=customer)


__all__ = ["NewBooking", "START_TIME_OFFSET"]
