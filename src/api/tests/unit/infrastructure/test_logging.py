"""Unit tests for structlog configuration."""

import logging

import pytest
import structlog

from infrastructure.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output_without_tty(self, monkeypatch, capsys):
        monkeypatch.delenv("FORCE_COLOR", raising=False)

        configure_logging(level="INFO")
        structlog.get_logger().info("consent_recorded", client_id="client-1")

        output = capsys.readouterr().out
        assert '"event": "consent_recorded"' in output
        assert '"client_id": "client-1"' in output

    def test_filters_below_minimum_level(self, monkeypatch, capsys):
        monkeypatch.delenv("FORCE_COLOR", raising=False)

        configure_logging(level="warning")
        structlog.get_logger().info("user_retrieved")
        structlog.get_logger().warning("disclosure_without_consent")

        output = capsys.readouterr().out
        assert "user_retrieved" not in output
        assert "disclosure_without_consent" in output

    def test_level_defaults_to_settings(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            structlog,
            "make_filtering_bound_logger",
            lambda level: calls.append(level) or structlog.BoundLogger,
        )

        configure_logging()

        assert calls == [logging.INFO]
