"""
Cache of intermediary exchanges declared for queue-targeted publishers.

When a publisher names a queue instead of an exchange, an exchange bound to
that queue is declared once and its name reused for every later publish.
Entries are never invalidated, so after a broker restart that loses the
exchange a stale name is reused until the process restarts.
"""

import threading

from rabbitmq_build_trigger.core.logger import get_logger

logger = get_logger(__name__)


class ExchangeNameCache:
    """
    Thread-safe mapping of queue name to resolved exchange name.

    ``None`` from get() means "not yet resolved".
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._names: dict[str, str] = {}

    def get(self, queue_name: str) -> str | None:
        with self._lock:
            return self._names.get(queue_name)

    def set(self, queue_name: str, exchange_name: str) -> None:
        with self._lock:
            self._names[queue_name] = exchange_name
        logger.debug(f"Cached exchange {exchange_name} for queue {queue_name}")

    def clear(self) -> None:
        with self._lock:
            self._names.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)
