"""Booking lifecycle module.

This module provides the state machine used to decide which booking
modifications an adapter must accept or reject.

Example:
    >>> from efs_harness.models.enums import BookingState
    >>> can_transition(BookingState.STARTED, BookingState.FINISHED)
    True
"""

from .machine import (
    VALID_TRANSITIONS,
    accepted_result_states,
    allowed_targets,
    can_transition,
    closing_state,
    prepare_modification,
    rejected_targets,
    transition,
)
from efs_harness.models.enums import BookingState

__all__ = [
    "BookingState",
    "VALID_TRANSITIONS",
    "accepted_result_states",
    "allowed_targets",
    "can_transition",
    "closing_state",
    "prepare_modification",
    "rejected_targets",
    "transition",
]
