"""
Bridge observability: structured logging and Prometheus metrics.

Quick Start:
    >>> from rabbitmq_build_trigger.monitoring import setup_bridge_logging, start_metrics_server
    >>> setup_bridge_logging(json_format=True)
    >>> start_metrics_server(port=9102)
"""

from .logging import (
    BridgeContextFilter,
    BridgeJsonFormatter,
    bridge_context,
    current_context,
    setup_bridge_logging,
)
from .prometheus import BUILDS_SCHEDULED, DELIVERIES, PUBLISHES, start_metrics_server

__all__ = [
    "BUILDS_SCHEDULED",
    "DELIVERIES",
    "PUBLISHES",
    "BridgeContextFilter",
    "BridgeJsonFormatter",
    "bridge_context",
    "current_context",
    "setup_bridge_logging",
    "start_metrics_server",
]
