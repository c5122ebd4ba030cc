"""Tests for log level selection and request-scoped log context."""

import structlog

from checkout.utils.logging import bind_request_context, clear_request_context, get_log_level


class TestLogLevel:
    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("ENV", raising=False)
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert get_log_level() == "INFO"

        monkeypatch.setenv("ENVIRONMENT", "development")
        assert get_log_level() == "DEBUG"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert get_log_level() == "ERROR"


class TestRequestContext:
    def test_bind_and_clear(self):
        bind_request_context(request_id="req-001", path="/orders")
        bind_request_context(user_id="user-001")
        try:
            assert structlog.contextvars.get_contextvars() == {
                "request_id": "req-001",
                "path": "/orders",
                "user_id": "user-001",
            }
        finally:
            clear_request_context()

        assert structlog.contextvars.get_contextvars() == {}
