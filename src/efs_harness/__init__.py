"""EFS adapter harness - integration tests for mobility-booking adapters.

Drives an adapter's booking API (options, create, modify, list) and asserts
that bookings move through their lifecycle the way the booking state machine
allows.
"""

__version__ = "0.3.0"
