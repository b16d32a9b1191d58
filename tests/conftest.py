"""Shared pytest fixtures for the adapter harness tests.

Scenarios run against MockBookingService through a FastAPI TestClient, so
no adapter has to be running.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from efs_harness.config import HarnessConfig
from efs_harness.models.entities import Booking, Customer, Leg, Option, OptionMeta, Place
from efs_harness.models.enums import BookingState
from efs_harness.scenarios import BookingScenarios, OptionsCache, clear_options_cache
from efs_harness.testing.mock_service import MockBookingService, create_mock_app
from efs_harness.transport.client import BookingApiClient

# Load harness fixtures (harness_config, booking_client, booking_scenarios)
pytest_plugins = ["pytester", "efs_harness.testing.pytest_plugin"]

TEST_BASE_URL = "http://testserver"
TEST_SEED = 1234

FIXED_NOW = datetime(2026, 3, 2, 8, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _clear_options_cache() -> Iterator[None]:
    """Keep cached option listings from leaking between tests."""
    clear_options_cache()
    yield
    clear_options_cache()


@pytest.fixture
def sample_place() -> Place:
    return Place(lat=48.7384, lon=9.3104, name="Esslingen Bahnhof")


@pytest.fixture
def sample_leg(sample_place: Place) -> Leg:
    return Leg(
        from_=sample_place,
        start_time=FIXED_NOW + timedelta(minutes=10),
        end_time=FIXED_NOW + timedelta(minutes=40),
        mode="BICYCLE",
        service_id="bikes",
    )


@pytest.fixture
def sample_option(sample_leg: Leg) -> Option:
    return Option(leg=sample_leg, meta=OptionMeta(mode="BICYCLE"))


@pytest.fixture
def sample_booking(sample_leg: Leg) -> Booking:
    return Booking(
        id="booking-1",
        state=BookingState.BOOKED,
        leg=sample_leg,
        customer=Customer(first_name="Test", last_name="Customer"),
    )


@pytest.fixture
def mock_service() -> MockBookingService:
    return MockBookingService()


@pytest.fixture
def mock_app(mock_service: MockBookingService) -> FastAPI:
    return create_mock_app(mock_service)


@pytest.fixture
def mock_http(mock_app: FastAPI) -> Iterator[TestClient]:
    with TestClient(mock_app) as client:
        yield client


@pytest.fixture
def harness_config() -> HarnessConfig:
    """Deterministic config pointing at the in-process mock adapter."""
    return HarnessConfig(base_url=TEST_BASE_URL, seed=TEST_SEED)


@pytest.fixture
def booking_client(mock_http: TestClient) -> BookingApiClient:
    """BookingApiClient routed through the mock adapter's TestClient."""
    return BookingApiClient(TEST_BASE_URL, http=mock_http)


@pytest.fixture
def booking_scenarios(
    booking_client: BookingApiClient, harness_config: HarnessConfig
) -> BookingScenarios:
    return BookingScenarios(booking_client, harness_config, cache=OptionsCache())
