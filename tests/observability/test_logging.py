"""Tests for structured logging configuration."""

import logging
import sys

import structlog

from efs_harness.observability.logging import (
    REDACTED_PLACEHOLDER,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    redact_sensitive_fields,
    sanitize_for_logging,
    unbind_context,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_respects_log_level(self) -> None:
        configure_logging(log_format="console", log_level="WARNING", force=True)

        assert logging.getLogger().level == logging.WARNING

    def test_configure_logging_with_json_format(self) -> None:
        configure_logging(log_format="json", log_level="INFO", force=True)

        assert get_logger("test.json") is not None

    def test_logs_go_to_stderr(self) -> None:
        configure_logging(log_format="json", log_level="INFO", force=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr

    def test_env_vars_are_used(self, monkeypatch) -> None:
        monkeypatch.setenv("EFS_LOG_LEVEL", "error")
        monkeypatch.setenv("EFS_SERVICE_NAME", "bike-adapter-ci")

        configure_logging(force=True)

        assert logging.getLogger().level == logging.ERROR
        assert structlog.contextvars.get_contextvars()["service"] == "bike-adapter-ci"

    def test_http_loggers_are_quiet_unless_debug(self) -> None:
        configure_logging(log_level="INFO", force=True)
        assert logging.getLogger("httpx").level == logging.WARNING

        configure_logging(log_level="DEBUG", force=True)
        assert logging.getLogger("httpcore").level == logging.DEBUG

    def test_events_are_redacted(self, capsys) -> None:
        configure_logging(log_format="json", log_level="INFO", force=True)

        get_logger("test.redact").info("client.request", credentials="user:secret-value")

        err = capsys.readouterr().err
        assert "secret-value" not in err
        assert REDACTED_PLACEHOLDER in err

    def test_without_force_is_noop(self) -> None:
        configure_logging(log_level="DEBUG", force=True)
        configure_logging(log_level="ERROR")

        assert logging.getLogger().level == logging.DEBUG


class TestContext:
    """Tests for context binding helpers."""

    def test_bind_and_unbind(self) -> None:
        clear_context()
        bind_context(scenario="check_get_bookings", booking_id="b-1")

        unbind_context("scenario")

        assert structlog.contextvars.get_contextvars() == {"booking_id": "b-1"}
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestSanitizeForLogging:
    """Tests for sanitize_for_logging."""

    def test_redacts_sensitive_keys(self) -> None:
        data = {
            "x-credentials": "abc",
            "Authorization": "Bearer x",
            "client_secret": "s",
            "state": "BOOKED",
        }

        assert sanitize_for_logging(data) == {
            "x-credentials": REDACTED_PLACEHOLDER,
            "Authorization": REDACTED_PLACEHOLDER,
            "client_secret": REDACTED_PLACEHOLDER,
            "state": "BOOKED",
        }

    def test_nested_structures(self) -> None:
        data = {"headers": {"token": "t"}, "items": [{"password": "p"}, "plain"]}

        assert sanitize_for_logging(data) == {
            "headers": {"token": REDACTED_PLACEHOLDER},
            "items": [{"password": REDACTED_PLACEHOLDER}, "plain"],
        }

    def test_empty(self) -> None:
        assert sanitize_for_logging({}) == {}


class TestRedactProcessor:
    def test_redacts_event_dict(self) -> None:
        event = {"event": "client.request", "x-credentials": "abc", "path": "/api/bookings"}

        assert redact_sensitive_fields(None, "info", event) == {
            "event": "client.request",
            "x-credentials": REDACTED_PLACEHOLDER,
            "path": "/api/bookings",
        }
