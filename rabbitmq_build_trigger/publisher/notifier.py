"""
RemoteBuildPublisher - reports completed builds to the broker.

Publishing is observational: whatever happens on the broker side, perform()
returns True so the build result reported by the host stays untouched.

Usage:
    >>> publisher = RemoteBuildPublisher("build-results", "ci.builds")
    >>> publisher.perform(BuildRecord("app", 42, BuildResult.SUCCESS), sys.stdout, bridge)
    Publish to RabbitMQ: Success.
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from rabbitmq_build_trigger.core.logger import get_logger
from rabbitmq_build_trigger.core.types import DEFAULT_ROUTING_KEY, BuildRecord
from rabbitmq_build_trigger.monitoring.logging import bridge_context
from rabbitmq_build_trigger.monitoring.prometheus import PUBLISHES
from rabbitmq_build_trigger.publisher.types import BuildOutcome, MessageProperties

if TYPE_CHECKING:
    from rabbitmq_build_trigger.bridge import RemoteBuildBridge

logger = get_logger(__name__)

LOG_HEADER = "Publish to RabbitMQ: "
QUEUE_EXCHANGE_TYPE = "fanout"


class RemoteBuildPublisher:
    """
    Completion hook publishing the build outcome as JSON.

    Args:
        broker_name: Exchange to publish to, or a queue name when
            publish_to_queue is set. Empty disables publishing.
        routing_key: Routing key; blank falls back to DEFAULT_ROUTING_KEY
        publish_to_queue: Treat broker_name as a queue and publish through
            an exchange declared for it
    """

    def __init__(
        self,
        broker_name: str | None,
        routing_key: str | None = None,
        publish_to_queue: bool = False,
    ):
        self.broker_name = broker_name
        self.routing_key = routing_key
        self.publish_to_queue = publish_to_queue

    def __repr__(self) -> str:
        return (
            f"RemoteBuildPublisher(broker_name={self.broker_name!r}, "
            f"routing_key={self.routing_key!r})"
        )

    @property
    def routing_key(self) -> str:
        return self._routing_key

    @routing_key.setter
    def routing_key(self, value: str | None) -> None:
        if value is None or not value.strip():
            value = DEFAULT_ROUTING_KEY
        self._routing_key = value

    def perform(self, build: BuildRecord, build_log: TextIO, bridge: RemoteBuildBridge) -> bool:
        """
        Publish the outcome of build.

        Args:
            build: The completed build
            build_log: The build's console log; one result line is written
            bridge: Bridge providing the publish channel and host root URL

        Returns:
            Always True
        """
        if not self.broker_name:
            return True

        with bridge_context(project=build.project, build_number=build.number):
            self._publish(build, build_log, bridge)
        return True

    def _publish(self, build: BuildRecord, build_log: TextIO, bridge: RemoteBuildBridge) -> None:
        body = BuildOutcome.from_record(build).to_bytes()
        properties = MessageProperties.for_build(bridge.root_url)

        channel = bridge.get_publish_channel()
        if channel is None or not channel.is_open():
            logger.warning(f"No open publish channel, skipping publish of {build.project} #{build.number}")
            PUBLISHES.labels(outcome="skipped").inc()
            return

        try:
            exchange_name = self.broker_name
            if self.publish_to_queue:
                exchange_name = self._resolve_queue_exchange(channel, bridge, build_log)
                if exchange_name is None:
                    PUBLISHES.labels(outcome="failure").inc()
                    return

            future = channel.publish(exchange_name, self.routing_key, properties, body)
            result = future.result()
        except Exception as e:
            logger.warning(str(e))
            print(f"{LOG_HEADER}Fail due to exception.", file=build_log)
            PUBLISHES.labels(outcome="exception").inc()
            return

        if result.success:
            print(f"{LOG_HEADER}Success.", file=build_log)
            PUBLISHES.labels(outcome="success").inc()
        else:
            print(f"{LOG_HEADER}Fail - {result.message}", file=build_log)
            PUBLISHES.labels(outcome="failure").inc()

    def _resolve_queue_exchange(self, channel, bridge: RemoteBuildBridge, build_log: TextIO) -> str | None:
        cached = bridge.exchange_cache.get(self.broker_name)
        if cached is not None:
            return cached

        result = channel.setup_exchange(QUEUE_EXCHANGE_TYPE, self.broker_name)
        if not result.success or not result.exchange_name:
            print(f"{LOG_HEADER}Fail - {result.message}", file=build_log)
            return None

        bridge.exchange_cache.set(self.broker_name, result.exchange_name)
        return result.exchange_name
