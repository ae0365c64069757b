"""
Centralized logger lookup for the bridge.

By default every module logs through Python's standard logging under the
``rabbitmq_build_trigger`` namespace. Embedders that route logs elsewhere
(structlog, the CI host's own logger) can swap the logger process-wide.

Usage:
    from rabbitmq_build_trigger.core.logger import get_logger
    logger = get_logger(__name__)
    logger.warning("...")

    # Route everything through the host's logger
    from rabbitmq_build_trigger.core.logger import set_logger
    set_logger(host_logger)
"""

import logging
from typing import Any

_custom_logger: Any = None


def set_logger(logger: Any) -> None:
    """
    Set a custom logger for all bridge components.

    Args:
        logger: A logger instance supporting debug/info/warning/error/exception.
                Pass None to go back to standard logging.
    """
    global _custom_logger
    _custom_logger = logger


def get_logger(name: str = "rabbitmq_build_trigger") -> Any:
    """
    Get a logger instance.

    Returns the logger installed with set_logger(), otherwise a standard
    logger with the given name.
    """
    if _custom_logger is not None:
        return _custom_logger

    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
