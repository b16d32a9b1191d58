"""Testing utilities for booking adapter tests.

Modules:
    assertions: Custom assertions (assert_equal_if_not_none,
                assert_booking_state_in, assert_no_transient_states).
    mock_service: MockBookingService and create_mock_app, an in-process
                  adapter driven by the booking state machine.
    pytest_plugin: Options and fixtures (harness_config, booking_client,
                   booking_scenarios).
    suite: AdapterIntegrationTest, a base class bundling the scenarios.

Example:
    >>> from efs_harness.testing import MockBookingService, create_mock_app
"""

from efs_harness.testing.assertions import (
    assert_booking_state_in,
    assert_equal_if_not_none,
    assert_no_transient_states,
)
from efs_harness.testing.mock_service import MockBookingService, create_mock_app

__all__ = [
    "MockBookingService",
    "assert_booking_state_in",
    "assert_equal_if_not_none",
    "assert_no_transient_states",
    "create_mock_app",
]
