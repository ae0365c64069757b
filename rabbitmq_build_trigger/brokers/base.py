"""
AMQP adapter protocol - the broker surface the bridge consumes.

The bridge never talks to an AMQP client directly. An adapter owns the
connection and channels, demultiplexes deliveries to listeners by application
id, and exposes a publish channel whose publishes complete asynchronously.
"""

import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Any, Protocol, runtime_checkable

from rabbitmq_build_trigger.core.logger import get_logger
from rabbitmq_build_trigger.publisher.types import MessageProperties, PublishResult

logger = get_logger(__name__)


@runtime_checkable
class MessageQueueListener(Protocol):
    """
    Receiver of deliveries for one application id.

    Adapters call these from their consumer threads; implementations must not
    raise back into the adapter.
    """

    app_id: str

    def on_bind(self, queue_name: str) -> None: ...

    def on_unbind(self, queue_name: str) -> None: ...

    def on_receive(
        self,
        queue_name: str,
        content_type: str | None,
        headers: dict[str, Any] | None,
        body: bytes,
    ) -> None: ...


@runtime_checkable
class PublishChannel(Protocol):
    """Handle used to publish; its open/closed state is owned by the adapter."""

    def is_open(self) -> bool: ...

    def publish(
        self,
        exchange_name: str,
        routing_key: str,
        properties: MessageProperties,
        body: bytes,
    ) -> Future:
        """
        Publish a message.

        Returns:
            A future resolving to a PublishResult once the broker confirms
            (or refuses) the message.
        """
        ...

    def setup_exchange(self, exchange_type: str, queue_name: str) -> PublishResult:
        """
        Declare an exchange of the given type bound to queue_name.

        Returns:
            A PublishResult whose exchange_name is the declared exchange.
        """
        ...


class BrokerError(Exception):
    """Base exception for broker errors."""


class BrokerConnectionError(BrokerError):
    """Error connecting to the broker."""


class BrokerPublishError(BrokerError):
    """Error publishing a message."""


class BaseBroker(ABC):
    """
    Base class for AMQP adapters.

    Keeps the listener set and the application-id demultiplexing shared by
    every adapter; subclasses provide connection handling and publishing.
    """

    def __init__(self):
        self._listeners_lock = threading.Lock()
        self._listeners: tuple[MessageQueueListener, ...] = ()
        self._connected = False

    @abstractmethod
    def connect(self) -> None:
        """Establish the connection and start consuming."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Stop consuming and close the connection."""
        ...

    @abstractmethod
    def get_publish_channel(self) -> PublishChannel | None:
        """Return the publish channel, or None when not available."""
        ...

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def listeners(self) -> tuple[MessageQueueListener, ...]:
        return self._listeners

    def add_listener(self, listener: MessageQueueListener) -> None:
        with self._listeners_lock:
            if any(existing is listener for existing in self._listeners):
                return
            self._listeners = (*self._listeners, listener)
        logger.debug(f"Listener registered for app id {listener.app_id}")

    def remove_listener(self, listener: MessageQueueListener) -> None:
        with self._listeners_lock:
            self._listeners = tuple(l for l in self._listeners if l is not listener)

    def notify_bind(self, queue_name: str) -> None:
        for listener in self._listeners:
            listener.on_bind(queue_name)

    def notify_unbind(self, queue_name: str) -> None:
        for listener in self._listeners:
            listener.on_unbind(queue_name)

    def dispatch(
        self,
        queue_name: str,
        app_id: str | None,
        content_type: str | None,
        headers: dict[str, Any] | None,
        body: bytes,
    ) -> int:
        """
        Hand a delivery to every listener registered for its application id.

        Returns:
            Number of listeners the delivery was handed to
        """
        delivered = 0
        for listener in self._listeners:
            if listener.app_id != app_id:
                continue
            try:
                listener.on_receive(queue_name, content_type, headers, body)
            except Exception as e:
                logger.exception(f"Listener for {app_id} failed on queue {queue_name}: {e}")
            delivered += 1

        if not delivered:
            logger.debug(f"No listener for app id {app_id!r} on queue {queue_name}")
        return delivered
