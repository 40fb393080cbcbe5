"""Tests for retrykit.core.logging."""

import json

import structlog

from retrykit.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    def teardown_method(self):
        structlog.reset_defaults()

    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_format=True, service="nightly")
        get_logger("test").info("retry.exhausted", attempts=3)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "retry.exhausted"
        assert event["attempts"] == 3
        assert event["service"] == "nightly"
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_logger_name_bound_on_events(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("retrykit.execution.retry").info("retry.succeeded")

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["logger_name"] == "retrykit.execution.retry"

    def test_module_logger_created_before_configure(self, capsys):
        logger = get_logger("early")
        configure_logging(level="INFO", json_format=True)
        logger.info("step.completed")

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["event"] == "step.completed"
        assert event["logger_name"] == "early"

    def test_level_filtering(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        get_logger("test").info("hidden")
        get_logger("test").warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_console_output(self, capsys):
        configure_logging(level="INFO", json_format=False)
        get_logger("test").info("step.completed")
        assert "step.completed" in capsys.readouterr().err


class TestContext:
    def teardown_method(self):
        clear_context()
        structlog.reset_defaults()

    def test_bound_context_in_events(self, capsys):
        configure_logging(json_format=True)
        bind_context(step="load")
        get_logger("test").info("step.completed")

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["step"] == "load"

    def test_log_context_unbinds(self):
        with LogContext(step="export"):
            assert structlog.contextvars.get_contextvars()["step"] == "export"
        assert "step" not in structlog.contextvars.get_contextvars()
