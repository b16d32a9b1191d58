"""EFS Harness Error Taxonomy.

This module defines the error hierarchy for the adapter harness,
providing structured error handling with specific error codes
and context information.
"""
from __future__ import annotations

from typing import Any


class HarnessError(Exception):
    """Base exception for all harness errors.

    Attributes:
        code: Error code following the efs:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidTransitionError(HarnessError):
    """Raised when a booking state change is not allowed by the state machine.

    Attributes:
        from_state: The current booking state
        to_state: The attempted target state
    """

    def __init__(
        self, from_state: str, to_state: str, details: dict[str, Any] | None = None
    ) -> None:
        message = f"Invalid transition from '{from_state}' to '{to_state}'"
        super().__init__(
            code="efs:booking/invalid_transition",
            message=message,
            details={"from_state": from_state, "to_state": to_state, **(details or {})},
        )
        self.from_state = from_state
        self.to_state = to_state


class ResponseParseError(HarnessError):
    """Raised when a response body cannot be read as the expected type.

    Attributes:
        expected_type: Name of the type the body was parsed into
        body: Leading part of the response body
    """

    BODY_EXCERPT_LENGTH = 200

    def __init__(
        self, expected_type: str, body: str, details: dict[str, Any] | None = None
    ) -> None:
        excerpt = body[: self.BODY_EXCERPT_LENGTH]
        super().__init__(
            code="efs:transport/parse_failed",
            message=f"Could not parse response body as {expected_type}",
            details={"expected_type": expected_type, "body": excerpt, **(details or {})},
        )
        self.expected_type = expected_type
        self.body = excerpt


class ResponseExpectationError(HarnessError, AssertionError):
    """Raised when a response does not satisfy a matcher.

    Subclasses AssertionError so pytest reports it as a test failure
    rather than an error.
    """

    def __init__(
        self,
        expectation: str,
        status_code: int,
        method: str,
        url: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"Expected {expectation} but {method} {url} returned {status_code}"
        super().__init__(
            code="efs:transport/unexpected_response",
            message=message,
            details={
                "expectation": expectation,
                "status_code": status_code,
                "method": method,
                "url": url,
                **(details or {}),
            },
        )
        self.expectation = expectation
        self.status_code = status_code


class EmptyOptionsError(HarnessError):
    """Raised when the adapter returned no options to book from."""

    def __init__(self, query: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="efs:options/empty",
            message="The adapter returned no options for the configured query",
            details={"query": query or {}},
        )
