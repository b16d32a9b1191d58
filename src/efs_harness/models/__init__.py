"""Wire models for the mobility-booking API.

Example:
    >>> from efs_harness.models import Booking, BookingState
    >>> BookingState.CANCELLED.is_terminal()
    True
"""

from efs_harness.models.base import HarnessBaseModel
from efs_harness.models.entities import Booking, Customer, Leg, Option, OptionMeta, Place
from efs_harness.models.enums import BookingState
from efs_harness.models.payloads import NewBooking

__all__ = [
    "Booking",
    "BookingState",
    "Customer",
    "HarnessBaseModel",
    "Leg",
    "NewBooking",
    "Option",
    "OptionMeta",
    "Place",
]
