"""Booking State Machine.

This module holds the booking lifecycle as an explicit transition table.
Scenarios and property tests derive their expectations from it instead of
listing allowed and forbidden modifications by hand.

Example:
    >>> from efs_harness.models.enums import BookingState
    >>> can_transition(BookingState.BOOKED, BookingState.CANCELLED)
    True
    >>> can_transition(BookingState.FINISHED, BookingState.BOOKED)
    False
"""

from __future__ import annotations

from efs_harness.errors import InvalidTransitionError
from efs_harness.models.entities import Booking
from efs_harness.models.enums import BookingState

__all__ = [
    "BookingState",
    "CLOSING_STATES",
    "VALID_TRANSITIONS",
    "accepted_result_states",
    "allowed_targets",
    "can_transition",
    "closing_state",
    "prepare_modification",
    "rejected_targets",
    "transition",
]

# Valid state transitions mapping
VALID_TRANSITIONS: dict[BookingState, frozenset[BookingState]] = {
    BookingState.NEW: frozenset({BookingState.BOOKED, BookingState.STARTED}),
    BookingState.BOOKED: frozenset({BookingState.STARTED, BookingState.CANCELLED}),
    BookingState.STARTED: frozenset({BookingState.FINISHED, BookingState.ABORTED}),
    BookingState.UPDATEREQUESTED: frozenset({BookingState.BOOKED, BookingState.CANCELLED}),
    BookingState.CANCELLED: frozenset(),  # Terminal state
    BookingState.FINISHED: frozenset(),  # Terminal state
    BookingState.ABORTED: frozenset(),  # Terminal state
}

# Closing a started trip needs a destination on the leg
CLOSING_STATES: frozenset[BookingState] = frozenset(
    {BookingState.FINISHED, BookingState.ABORTED}
)

_CLOSE_BY_STATE: dict[BookingState, BookingState] = {
    BookingState.BOOKED: BookingState.CANCELLED,
    BookingState.STARTED: BookingState.ABORTED,
}


def can_transition(from_state: BookingState, to_state: BookingState) -> bool:
    """Check if a transition from one state to another is valid.

    Args:
        from_state: Current booking state
        to_state: Requested booking state

    Returns:
        True if the transition is valid, False otherwise
    """
    return to_state in VALID_TRANSITIONS.get(from_state, frozenset())


def allowed_targets(state: BookingState) -> frozenset[BookingState]:
    """Return the states a booking in ``state`` may be modified to."""
    return VALID_TRANSITIONS.get(state, frozenset())


def rejected_targets(state: BookingState) -> list[BookingState]:
    """Return every state a modification from ``state`` must be rejected for.

    The list follows enum declaration order so probes run deterministically.

    Example:
        >>> [s.value for s in rejected_targets(BookingState.STARTED)]
        ['NEW', 'BOOKED', 'STARTED', 'CANCELLED', 'UPDATEREQUESTED']
    """
    allowed = allowed_targets(state)
    return [target for target in BookingState if target not in allowed]


def closing_state(state: BookingState) -> BookingState | None:
    """Return the state that closes a booking in ``state``.

    BOOKED bookings are cancelled, STARTED ones aborted. Other states have
    nothing to close and return None.
    """
    return _CLOSE_BY_STATE.get(state)


def accepted_result_states(requested: BookingState) -> frozenset[BookingState]:
    """Return the states an adapter may answer a successful modification with.

    Adapters may report an ended trip as either FINISHED or ABORTED no matter
    which of the two was requested; every other request must be echoed.
    """
    if requested in CLOSING_STATES:
        return CLOSING_STATES
    return frozenset({requested})


def prepare_modification(booking: Booking, state: BookingState) -> Booking:
    """Return a copy of ``booking`` marked with ``state``, ready to be sent.

    When closing to FINISHED or ABORTED the leg must carry a destination; an
    absent ``to`` is filled with the leg's ``from`` place. No transition check
    is done here, so the result can also be used to probe rejected requests.
    """
    marked = booking.with_state(state)
    if state in CLOSING_STATES and marked.leg.to is None:
        leg = marked.leg.model_copy(update={"to": marked.leg.from_})
        marked = marked.model_copy(update={"leg": leg})
    return marked


def transition(booking: Booking, new_state: BookingState) -> Booking:
    """Transition a booking to a new state with validation.

    Args:
        booking: The booking to transition
        new_state: The target state

    Returns:
        New booking instance in ``new_state`` (leg normalized for closing states)

    Raises:
        InvalidTransitionError: If the transition is not valid
    """
    if not can_transition(booking.state, new_state):
        raise InvalidTransitionError(
            from_state=booking.state.value,
            to_state=new_state.value,
            details={"booking_id": booking.id},
        )
    return prepare_modification(booking, new_state)
