"""
In-Memory AMQP adapter - For testing and development.

Deliveries are injected with deliver(); publishes are recorded and can be
inspected. Publish futures complete immediately.
"""

import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any

from rabbitmq_build_trigger.brokers.base import BaseBroker, BrokerConnectionError
from rabbitmq_build_trigger.core.types import APP_ID
from rabbitmq_build_trigger.publisher.types import MessageProperties, PublishResult


@dataclass(frozen=True)
class PublishedMessage:
    """A message recorded by the in-memory publish channel."""

    exchange_name: str
    routing_key: str
    properties: MessageProperties
    body: bytes


class InMemoryPublishChannel:
    """
    Publish channel that stores messages instead of sending them.

    Usage:
        >>> channel = InMemoryPublishChannel()
        >>> channel.publish("builds", "key", MessageProperties(), b"{}").result()
        PublishResult(success=True, message='', exchange_name='builds')
        >>> len(channel.messages)
        1
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._messages: list[PublishedMessage] = []
        self._exchanges: dict[str, tuple[str, str]] = {}
        self._open = True
        self._failure: str | None = None
        self._error: Exception | None = None

    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        self._open = False

    def reopen(self) -> None:
        self._open = True

    def fail_with(self, message: str | None) -> None:
        """Make subsequent publishes complete unsuccessfully (None resets)."""
        self._failure = message

    def raise_on_publish(self, error: Exception | None) -> None:
        """Make subsequent publish futures raise error (None resets)."""
        self._error = error

    def publish(
        self,
        exchange_name: str,
        routing_key: str,
        properties: MessageProperties,
        body: bytes,
    ) -> Future:
        future: Future = Future()

        if self._error is not None:
            future.set_exception(self._error)
            return future

        if self._failure is not None:
            future.set_result(PublishResult(False, self._failure, exchange_name))
            return future

        with self._lock:
            self._messages.append(PublishedMessage(exchange_name, routing_key, properties, body))
        future.set_result(PublishResult(True, "", exchange_name))
        return future

    def setup_exchange(self, exchange_type: str, queue_name: str) -> PublishResult:
        exchange_name = f"{APP_ID}.{queue_name}"
        with self._lock:
            self._exchanges[exchange_name] = (exchange_type, queue_name)
        return PublishResult(True, "", exchange_name)

    @property
    def messages(self) -> list[PublishedMessage]:
        with self._lock:
            return list(self._messages)

    @property
    def exchanges(self) -> dict[str, tuple[str, str]]:
        with self._lock:
            return dict(self._exchanges)

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()
            self._exchanges.clear()


class InMemoryBroker(BaseBroker):
    """
    In-memory AMQP adapter for tests and local development.

    Usage:
        >>> broker = InMemoryBroker(queues=["builds"])
        >>> broker.add_listener(listener)
        >>> broker.connect()  # listeners see on_bind("builds")
        >>> broker.deliver("builds", b'{"project": "p", "token": "t"}', app_id="remote-build")
    """

    def __init__(self, queues: list[str] | None = None):
        super().__init__()
        self.queues = list(queues or [])
        self.channel = InMemoryPublishChannel()

    def connect(self) -> None:
        if self._connected:
            return
        self._connected = True
        self.channel.reopen()
        for queue_name in self.queues:
            self.notify_bind(queue_name)

    def close(self) -> None:
        if not self._connected:
            return
        for queue_name in self.queues:
            self.notify_unbind(queue_name)
        self.channel.close()
        self._connected = False

    def get_publish_channel(self) -> InMemoryPublishChannel | None:
        if not self._connected:
            return None
        return self.channel

    def deliver(
        self,
        queue_name: str,
        body: bytes,
        *,
        app_id: str | None = APP_ID,
        content_type: str | None = "application/json",
        headers: dict[str, Any] | None = None,
    ) -> int:
        """Inject a delivery as if it arrived on queue_name."""
        if not self._connected:
            msg = "Broker not connected"
            raise BrokerConnectionError(msg)
        return self.dispatch(queue_name, app_id, content_type, headers, body)
