# ============================================
# FILE: rabbitmq_build_trigger/monitoring/prometheus.py
# ============================================

"""
Prometheus metrics for the bridge.

Exposes:
    - remote_build_deliveries_total{outcome}: deliveries seen by the listener,
      by decoding outcome (ok, wrong_content_type, bad_encoding, bad_json)
    - remote_build_scheduled_total{project}: builds the host accepted
    - remote_build_publishes_total{outcome}: build outcome publishes
      (success, failure, exception, skipped)

Quick Start:
    >>> from rabbitmq_build_trigger.monitoring.prometheus import start_metrics_server
    >>> start_metrics_server(port=9102)
"""

from prometheus_client import Counter, start_http_server

from rabbitmq_build_trigger.core.logger import get_logger

logger = get_logger(__name__)

DELIVERIES = Counter(
    "remote_build_deliveries_total",
    "Deliveries received by the remote build listener",
    ["outcome"],
)

BUILDS_SCHEDULED = Counter(
    "remote_build_scheduled_total",
    "Builds scheduled from remote build messages",
    ["project"],
)

PUBLISHES = Counter(
    "remote_build_publishes_total",
    "Build outcome publishes by result",
    ["outcome"],
)


def start_metrics_server(port: int = 9102, addr: str = "0.0.0.0") -> None:
    """Start the Prometheus HTTP endpoint on a background thread."""
    start_http_server(port, addr=addr)
    logger.info(f"Prometheus metrics server started on {addr}:{port}")
