"""
Structured logging for the bridge

Log records emitted while a delivery is being dispatched or a build outcome
published carry the queue and project they concern, so JSON log lines can be
correlated without parsing messages.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

_bridge_context: ContextVar[dict[str, Any]] = ContextVar("bridge_context", default={})

_CONTEXT_FIELDS = ("queue_name", "project", "build_number")


@contextmanager
def bridge_context(**fields: Any) -> Iterator[None]:
    """Attach fields to every log record emitted inside the block"""
    token = _bridge_context.set({**_bridge_context.get(), **fields})
    try:
        yield
    finally:
        _bridge_context.reset(token)


def current_context() -> dict[str, Any]:
    return dict(_bridge_context.get())


class BridgeJsonFormatter(logging.Formatter):
    """JSON formatter including the bridge context of the record"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class BridgeContextFilter(logging.Filter):
    """Copies the bridge context onto log records"""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _bridge_context.get()
        for field in _CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, context.get(field, ""))
        return True


def setup_bridge_logging(
    log_level: str = "INFO", json_format: bool = True, include_console: bool = True
) -> logging.Logger:
    """
    Set up logging for the rabbitmq_build_trigger namespace

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON formatting for structured logs
        include_console: Attach a console handler

    Returns:
        The configured package logger
    """
    root_logger = logging.getLogger("rabbitmq_build_trigger")
    root_logger.setLevel(getattr(logging, log_level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if include_console:
        console_handler = logging.StreamHandler()
        console_handler.addFilter(BridgeContextFilter())

        if json_format:
            console_handler.setFormatter(BridgeJsonFormatter())
        else:
            console_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s - %(levelname)s - [%(queue_name)s:%(project)s] - %(message)s"
                )
            )

        root_logger.addHandler(console_handler)

    return root_logger
