"""Unit tests for structlog configuration."""

import json
import logging

import pytest
import structlog

from tenancy.infrastructure.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_renders_json_lines(self, capsys):
        configure_logging(json_output=True)
        structlog.get_logger().info("context_switched", kind="tenant", current_id=1)

        line = json.loads(capsys.readouterr().out.strip())
        assert line["event"] == "context_switched"
        assert line["level"] == "info"
        assert line["current_id"] == 1
        assert "timestamp" in line

    def test_detects_json_when_output_is_not_a_terminal(self, monkeypatch, capsys):
        monkeypatch.delenv("FORCE_COLOR", raising=False)

        configure_logging()
        structlog.get_logger().info("context_forgotten", kind="tenant")

        assert json.loads(capsys.readouterr().out.strip())["event"] == "context_forgotten"

    def test_level_filters_lower_events(self, capsys):
        configure_logging(logging.WARNING, json_output=True)
        logger = structlog.get_logger()
        logger.debug("domain_resolved")
        logger.warning("domain_lookup_table_failed")

        out = capsys.readouterr().out
        assert "domain_resolved" not in out
        assert "domain_lookup_table_failed" in out

    def test_bound_contextvars_are_merged(self, capsys):
        configure_logging(json_output=True)
        with structlog.contextvars.bound_contextvars(request_id="req-1"):
            structlog.get_logger().info("context_resolved")

        assert json.loads(capsys.readouterr().out.strip())["request_id"] == "req-1"
