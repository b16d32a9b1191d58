"""Configuration for the adapter harness."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator

from efs_harness.models.entities import Customer

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_FROM_LAT_LON = "48.7384,9.3104"

# Environment variable names
ENV_BASE_URL = "EFS_ADAPTER_URL"
ENV_TIMEOUT = "EFS_TIMEOUT"
ENV_OPTIONS_CREDENTIALS = "EFS_OPTIONS_CREDENTIALS"
ENV_BOOKING_CREDENTIALS = "EFS_BOOKING_CREDENTIALS"
ENV_FROM = "EFS_FROM"
ENV_TO = "EFS_TO"
ENV_RADIUS = "EFS_RADIUS"
ENV_SHARING = "EFS_SHARING"
ENV_SEED = "EFS_SEED"


class HarnessConfig(BaseModel):
    """Everything the scenarios need to know about the adapter under test.

    Option query fields mirror the parameters of ``GET /api/bookings/options``.
    Credentials are sent as the ``x-credentials`` header when set.
    """

    base_url: str = Field(default=DEFAULT_BASE_URL, description="Base URL of the adapter")
    timeout_seconds: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    options_credentials: str | None = Field(
        default=None, description="Credentials for the options endpoint"
    )
    booking_credentials: str | None = Field(
        default=None, description="Credentials for the booking endpoints"
    )
    customer: Customer = Field(
        default_factory=lambda: Customer(first_name="Test", last_name="Customer"),
        description="Customer new bookings are made for",
    )
    from_lat_lon: str = Field(default=DEFAULT_FROM_LAT_LON, description="Options query origin")
    to_lat_lon: str | None = Field(default=None, description="Options query destination")
    start_time: datetime | None = Field(default=None, description="Earliest departure")
    end_time: datetime | None = Field(default=None, description="Latest arrival")
    radius: int | None = Field(default=None, ge=0, description="Search radius in meters")
    sharing: bool = Field(default=False, description="Ask for shared vehicles only")
    seed: int | None = Field(default=None, description="Seed for random option/booking picks")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("start_time", "end_time")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def options_query(self) -> dict[str, Any]:
        """Return the option query parameters as keyword arguments."""
        return {
            "from_lat_lon": self.from_lat_lon,
            "to_lat_lon": self.to_lat_lon,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "radius": self.radius,
            "sharing": self.sharing,
        }

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> "HarnessConfig":
        """Build a config from ``EFS_*`` environment variables.

        Keyword overrides win over the environment; unset variables keep the
        field defaults.
        """
        environ = os.environ if environ is None else environ
        mapping = {
            ENV_BASE_URL: "base_url",
            ENV_TIMEOUT: "timeout_seconds",
            ENV_OPTIONS_CREDENTIALS: "options_credentials",
            ENV_BOOKING_CREDENTIALS: "booking_credentials",
            ENV_FROM: "from_lat_lon",
            ENV_TO: "to_lat_lon",
            ENV_RADIUS: "radius",
            ENV_SHARING: "sharing",
            ENV_SEED: "seed",
        }
        values: dict[str, Any] = {
            field: environ[var] for var, field in mapping.items() if environ.get(var)
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
