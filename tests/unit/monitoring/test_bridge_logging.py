"""
Tests for structured logging and the Prometheus metrics of the bridge.
"""

import json
import logging
import sys
from unittest.mock import patch

import pytest
from prometheus_client import REGISTRY

from rabbitmq_build_trigger.monitoring.logging import (
    BridgeContextFilter,
    BridgeJsonFormatter,
    bridge_context,
    current_context,
    setup_bridge_logging,
)
from rabbitmq_build_trigger.monitoring.prometheus import (
    BUILDS_SCHEDULED,
    PUBLISHES,
    start_metrics_server,
)


@pytest.fixture
def package_logger():
    """Restore the package logger after setup_bridge_logging() replaced its handlers."""
    logger = logging.getLogger("rabbitmq_build_trigger")
    handlers, level = logger.handlers[:], logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


def make_record(msg="hello", **extra):
    record = logging.LogRecord("rabbitmq_build_trigger.x", logging.INFO, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestBridgeContext:
    def test_nested_context(self):
        with bridge_context(queue_name="builds"):
            with bridge_context(project="app"):
                assert current_context() == {"queue_name": "builds", "project": "app"}
            assert current_context() == {"queue_name": "builds"}
        assert current_context() == {}

    def test_filter_copies_context(self):
        record = make_record()

        with bridge_context(queue_name="builds", project="app"):
            assert BridgeContextFilter().filter(record)

        assert record.queue_name == "builds"
        assert record.project == "app"
        assert record.build_number == ""

    def test_filter_keeps_explicit_fields(self):
        record = make_record(project="explicit")

        with bridge_context(project="ambient"):
            BridgeContextFilter().filter(record)

        assert record.project == "explicit"


class TestBridgeJsonFormatter:
    def test_format(self):
        entry = json.loads(BridgeJsonFormatter().format(make_record(queue_name="builds", project="")))

        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "rabbitmq_build_trigger.x"
        assert entry["queue_name"] == "builds"
        assert "project" not in entry

    def test_format_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        entry = json.loads(BridgeJsonFormatter().format(record))

        assert "RuntimeError: boom" in entry["exception"]


class TestSetupBridgeLogging:
    def test_json_handler(self, package_logger):
        logger = setup_bridge_logging(log_level="debug", json_format=True)

        assert logger is package_logger
        assert logger.level == logging.DEBUG
        [handler] = logger.handlers
        assert isinstance(handler.formatter, BridgeJsonFormatter)

    def test_text_handler(self, package_logger):
        setup_bridge_logging(json_format=False)

        [handler] = package_logger.handlers
        assert not isinstance(handler.formatter, BridgeJsonFormatter)
        assert any(isinstance(f, BridgeContextFilter) for f in handler.filters)

    def test_without_console(self, package_logger):
        setup_bridge_logging(include_console=False)

        assert package_logger.handlers == []

    def test_repeated_setup_does_not_stack_handlers(self, package_logger):
        setup_bridge_logging()
        setup_bridge_logging()

        assert len(package_logger.handlers) == 1


class TestMetrics:
    def test_counters_are_registered(self):
        BUILDS_SCHEDULED.labels(project="metrics-test").inc()
        PUBLISHES.labels(outcome="success").inc(0)

        assert REGISTRY.get_sample_value(
            "remote_build_scheduled_total", {"project": "metrics-test"}
        ) >= 1.0
        assert REGISTRY.get_sample_value("remote_build_publishes_total", {"outcome": "success"}) is not None

    def test_start_metrics_server(self):
        with patch("rabbitmq_build_trigger.monitoring.prometheus.start_http_server") as start:
            start_metrics_server(port=9999)

        start.assert_called_once_with(9999, addr="0.0.0.0")
