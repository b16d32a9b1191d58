"""Enumerations for the booking API.

This module defines the enum types shared by the wire models and the
booking state machine.
"""

from enum import Enum


class BookingState(str, Enum):
    """Booking lifecycle states.

    Values are the upper-case names the adapter API uses on the wire and in
    the ``state`` query parameter. Terminal states are: CANCELLED, FINISHED,
    ABORTED.

    Example:
        >>> BookingState.FINISHED.is_terminal()
        True
        >>> BookingState.BOOKED.is_terminal()
        False
    """

    NEW = "NEW"
    BOOKED = "BOOKED"
    STARTED = "STARTED"
    CANCELLED = "CANCELLED"
    FINISHED = "FINISHED"
    ABORTED = "ABORTED"
    UPDATEREQUESTED = "UPDATEREQUESTED"

    @classmethod
    def terminal_states(cls) -> frozenset["BookingState"]:
        """Return all terminal states.

        Returns:
            Frozen set containing all terminal booking states
        """
        return frozenset({cls.CANCELLED, cls.FINISHED, cls.ABORTED})

    @classmethod
    def transient_states(cls) -> frozenset["BookingState"]:
        """Return states a stored booking must never be reported in."""
        return frozenset({cls.NEW, cls.UPDATEREQUESTED})

    def is_terminal(self) -> bool:
        """Check if this state represents a terminal state."""
        return self in self.terminal_states()
