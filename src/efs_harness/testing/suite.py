"""Ready-made test class for booking adapters.

Subclass AdapterIntegrationTest in a test module named so pytest collects
it (``Test*``) and make the ``booking_scenarios`` fixture available, e.g. by
loading ``efs_harness.testing.pytest_plugin``:

    >>> from efs_harness.testing.suite import AdapterIntegrationTest
    >>>
    >>> class TestBikeAdapter(AdapterIntegrationTest):
    ...     pass

Override a test method to skip or extend a scenario for a given adapter.
"""

from __future__ import annotations

import pytest

from efs_harness.scenarios import BookingScenarios


@pytest.mark.efs_adapter
class AdapterIntegrationTest:
    """Lifecycle tests every booking adapter should pass."""

    def test_get_options(self, booking_scenarios: BookingScenarios) -> None:
        assert booking_scenarios.check_get_options() is not None

    def test_book_try_illegal_states_close_try_all_states(
        self, booking_scenarios: BookingScenarios
    ) -> None:
        booking_scenarios.book_try_illegal_states_close_try_all_states()

    def test_book_start_try_illegal_states_finish_try_all_states(
        self, booking_scenarios: BookingScenarios
    ) -> None:
        booking_scenarios.book_start_try_illegal_states_finish_try_all_states()

    def test_book_start_abort_try_all_states(self, booking_scenarios: BookingScenarios) -> None:
        booking_scenarios.book_start_abort_try_all_states()

    def test_get_bookings(self, booking_scenarios: BookingScenarios) -> None:
        booking_scenarios.check_get_bookings()


__all__ = ["AdapterIntegrationTest"]
