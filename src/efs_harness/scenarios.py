"""Booking lifecycle scenarios run against an adapter.

BookingScenarios books random options and walks the bookings through their
lifecycle, checking every accepted and every rejected modification against
the booking state machine. Failures surface as AssertionError (including
ResponseExpectationError), so the scenarios can run under pytest or through
the runner.

Options are fetched once per adapter and query and kept for the lifetime of
the process; call clear_options_cache() to force a fresh query.

Example:
    >>> from efs_harness.config import HarnessConfig
    >>> from efs_harness.transport.client import BookingApiClient
    >>>
    >>> config = HarnessConfig(base_url="http://localhost:8080")
    >>> with BookingApiClient.from_config(config) as client:
    ...     BookingScenarios(client, config).book_start_abort_try_all_states()
"""

from __future__ import annotations

import random
from threading import Lock
from typing import Callable

from efs_harness.config import HarnessConfig
from efs_harness.errors import EmptyOptionsError
from efs_harness.lifecycle.machine import (
    accepted_result_states,
    closing_state,
    prepare_modification,
    rejected_targets,
)
from efs_harness.models.entities import Booking, Option
from efs_harness.models.enums import BookingState
from efs_harness.models.payloads import NewBooking
from efs_harness.observability import get_logger
from efs_harness.testing.assertions import (
    assert_booking_state_in,
    assert_equal_if_not_none,
    assert_no_transient_states,
)
from efs_harness.transport.client import BookingApiClient
from efs_harness.transport.matchers import status_2xx, status_4xx

logger = get_logger(__name__)

# States a freshly created booking may be in
CREATED_STATES = (BookingState.BOOKED, BookingState.STARTED)

# Order in which the state filter of the bookings listing is probed
FILTER_PROBE_ORDER = (
    BookingState.BOOKED,
    BookingState.CANCELLED,
    BookingState.STARTED,
    BookingState.FINISHED,
    BookingState.ABORTED,
)

SCENARIO_NAMES = (
    "check_get_options",
    "book_try_illegal_states_close_try_all_states",
    "book_start_try_illegal_states_finish_try_all_states",
    "book_start_abort_try_all_states",
    "check_get_bookings",
)


class OptionsCache:
    """Process-wide cache of option listings, keyed by adapter and query."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], list[Option]] = {}
        self._lock = Lock()

    def get_or_fetch(
        self, key: tuple[str, str], fetch: Callable[[], list[Option]]
    ) -> list[Option]:
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            return cached
        options = fetch()
        with self._lock:
            self._entries[key] = options
        return options

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


_options_cache = OptionsCache()


def clear_options_cache() -> None:
    """Drop all cached option listings."""
    _options_cache.clear()


class BookingScenarios:
    """Lifecycle scenarios for one adapter.

    Attributes:
        client: Client bound to the adapter under test
        config: Harness configuration (query, credentials, customer)
        rng: Random source for option and booking picks
    """

    def __init__(
        self,
        client: BookingApiClient,
        config: HarnessConfig,
        *,
        rng: random.Random | None = None,
        cache: OptionsCache | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self._cache = cache if cache is not None else _options_cache

    # Options

    def get_options(self) -> list[Option]:
        """Query options with the configured parameters, bypassing the cache."""
        return self.client.get_options(
            **self.config.options_query(),
            credentials=self.config.options_credentials,
            expect=[status_2xx()],
        )

    def get_cached_options(self) -> list[Option]:
        """Return the cached options for this adapter and query, fetching once."""
        key = (self.client.base_url, repr(sorted(self.config.options_query().items())))
        return self._cache.get_or_fetch(key, self.get_options)

    def random_cached_option(self) -> Option:
        options = self.get_cached_options()
        if not options:
            raise EmptyOptionsError(self.config.options_query())
        return self.rng.choice(options)

    # Bookings

    def book_random_option(self) -> Booking:
        """Book a random cached option; the result must be BOOKED or STARTED."""
        option = self.random_cached_option()
        new_booking = NewBooking.from_option(option, self.config.customer)
        booking = self.client.create_booking(
            new_booking,
            credentials=self.config.booking_credentials,
            expect=[status_2xx()],
        )
        assert booking is not None, "The newly created booking should not be None."
        assert_booking_state_in(
            booking,
            CREATED_STATES,
            "The newly created booking should have a BookingState of either "
            '"BOOKED" or "STARTED".',
        )
        logger.info("scenario.booked", booking_id=booking.id, state=booking.state.value)
        return booking

    def try_modify_for_fail(self, booking: Booking, state: BookingState) -> None:
        """Request ``state`` for ``booking`` and expect the adapter to reject it.

        The response must be 4xx; if it carries a booking, its state must
        still be the previous one. ``booking`` itself is not changed.
        """
        logger.debug(
            "scenario.probe_rejected",
            booking_id=booking.id,
            from_state=booking.state.value,
            to_state=state.value,
        )
        result = self.client.modify_booking(
            prepare_modification(booking, state),
            credentials=self.config.booking_credentials,
            expect=[status_4xx()],
            lenient=True,
        )
        assert_equal_if_not_none(
            booking.state,
            result.state if result is not None else None,
            "The state of the returned booking should not have changed after the "
            "erroneous call.",
        )

    def try_modify_for_success(self, booking: Booking, state: BookingState) -> Booking:
        """Request ``state`` for ``booking`` and expect the adapter to accept it.

        Closing states get a destination on the leg first. Returns the
        booking as answered by the adapter; ``booking`` itself is not changed.
        """
        result = self.client.modify_booking(
            prepare_modification(booking, state),
            credentials=self.config.booking_credentials,
            expect=[status_2xx()],
        )
        assert result is not None, "The returned booking should not be None."
        accepted = accepted_result_states(state)
        assert_booking_state_in(
            result,
            accepted,
            f'The returned booking should match the requested state "{state.value}".',
        )
        logger.info(
            "scenario.modified",
            booking_id=result.id,
            from_state=booking.state.value,
            to_state=result.state.value,
        )
        return result

    def probe_rejected_transitions(self, booking: Booking) -> None:
        """Try every state the state machine forbids for ``booking``."""
        for state in rejected_targets(booking.state):
            self.try_modify_for_fail(booking, state)

    def try_close_booking(self, booking: Booking) -> Booking | None:
        """Best-effort clean-up: cancel a BOOKED or abort a STARTED booking.

        Nothing is asserted; bookings in other states are left alone.
        """
        target = closing_state(booking.state)
        if target is None:
            return None
        return self.client.modify_booking(
            prepare_modification(booking, target),
            credentials=self.config.booking_credentials,
            lenient=True,
        )

    # Scenarios

    def check_get_options(self) -> list[Option]:
        return self.get_cached_options()

    def book_try_illegal_states_close_try_all_states(self) -> None:
        """Book, probe forbidden states, close, then probe every state."""
        booking = self.book_random_option()

        self.probe_rejected_transitions(booking)
        if booking.state is BookingState.BOOKED:
            closed = self.try_modify_for_success(booking, BookingState.CANCELLED)
        else:
            closed = self.try_modify_for_success(booking, BookingState.FINISHED)

        self.probe_rejected_transitions(closed)

    def book_start_try_illegal_states_finish_try_all_states(self) -> None:
        """Book, start, probe forbidden states, finish, then probe every state."""
        booking = self.book_random_option()

        if booking.state is BookingState.BOOKED:
            started = self.try_modify_for_success(booking, BookingState.STARTED)
            # Bookings created as STARTED were probed in the close scenario
            self.probe_rejected_transitions(started)
        else:
            started = booking

        finished = self.try_modify_for_success(started, BookingState.FINISHED)
        self.probe_rejected_transitions(finished)

    def book_start_abort_try_all_states(self) -> None:
        """Book, start, abort, then probe every state."""
        booking = self.book_random_option()

        if booking.state is BookingState.BOOKED:
            started = self.try_modify_for_success(booking, BookingState.STARTED)
        else:
            started = booking

        aborted = self.try_modify_for_success(started, BookingState.ABORTED)
        self.probe_rejected_transitions(aborted)

    def check_get_bookings(self) -> None:
        """Check the bookings listing, its state filter and lookup by id."""
        bookings = self.client.get_bookings(
            credentials=self.config.booking_credentials, expect=[status_2xx()]
        )
        assert bookings is not None
        assert_no_transient_states(bookings)

        if not bookings:
            return

        # One state is enough, every filter call lists the adapter's bookings
        for state in FILTER_PROBE_ORDER:
            if self.contains_bookings_with_state(bookings, state):
                self.check_booking_state_filter(bookings, state)
                break

        expected = self.rng.choice(bookings)
        result = self.client.get_booking_by_id(
            expected.id,
            credentials=self.config.booking_credentials,
            expect=[status_2xx()],
        )
        assert result == expected, "The two bookings should be equal."

    @staticmethod
    def contains_bookings_with_state(bookings: list[Booking], state: BookingState) -> bool:
        return any(b.state is state for b in bookings)

    def check_booking_state_filter(self, bookings: list[Booking], state: BookingState) -> None:
        """The filtered listing must hold exactly the ``state`` entries of ``bookings``."""
        filtered = self.client.get_bookings(
            state, credentials=self.config.booking_credentials, expect=[status_2xx()]
        )
        expected = [b for b in bookings if b.state is state]
        assert all(b in expected for b in filtered), (
            f"Bookings filtered by {state.value} must be contained in the full listing."
        )
        assert all(b in filtered for b in expected), (
            f"Bookings filtered by {state.value} must include every {state.value} booking "
            "of the full listing."
        )
        assert all(b.state is state for b in filtered), (
            f"Bookings filtered by {state.value} must all have that state."
        )

    def run(self, name: str) -> None:
        """Run the scenario called ``name`` (one of SCENARIO_NAMES)."""
        if name not in SCENARIO_NAMES:
            raise ValueError(f"Unknown scenario: {name!r}")
        getattr(self, name)()


__all__ = [
    "BookingScenarios",
    "CREATED_STATES",
    "FILTER_PROBE_ORDER",
    "OptionsCache",
    "SCENARIO_NAMES",
    "clear_options_cache",
]
