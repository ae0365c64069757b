"""
RemoteBuildBridge - wires a CI host to an AMQP adapter.

The bridge owns the state shared by triggers, the listener and publishers:
the trigger registry and the exchange-name cache. Nothing is process-global;
construct one bridge per host.

Usage:
    >>> bridge = RemoteBuildBridge(host, create_broker("rabbitmq", url=url, queues=["builds"]))
    >>> bridge.start()       # listener registered, broker connected
    >>> bridge.on_loaded()   # triggers of every loaded job registered
    ...
    >>> bridge.close()
"""

from __future__ import annotations

from rabbitmq_build_trigger.brokers.base import BaseBroker, PublishChannel
from rabbitmq_build_trigger.core.exceptions import BridgeConfigurationError
from rabbitmq_build_trigger.core.logger import get_logger
from rabbitmq_build_trigger.host.base import BuildHost
from rabbitmq_build_trigger.publisher.exchange import ExchangeNameCache
from rabbitmq_build_trigger.triggers.registry import TriggerRegistry
from rabbitmq_build_trigger.triggers.sources.broker import RemoteBuildListener

logger = get_logger(__name__)


class RemoteBuildBridge:
    """
    Coordinator between the host, the broker adapter and the triggers.

    Args:
        host: The CI host
        broker: The AMQP adapter
        registry: Trigger registry (a fresh one by default)
        exchange_cache: Exchange-name cache for queue publishers

    Raises:
        BridgeConfigurationError: If host or broker is missing
    """

    def __init__(
        self,
        host: BuildHost | None,
        broker: BaseBroker | None,
        registry: TriggerRegistry | None = None,
        exchange_cache: ExchangeNameCache | None = None,
    ):
        if host is None:
            raise BridgeConfigurationError("CI host")
        if broker is None:
            raise BridgeConfigurationError("AMQP adapter")

        self.host = host
        self.broker = broker
        self.registry = registry if registry is not None else TriggerRegistry()
        self.exchange_cache = exchange_cache if exchange_cache is not None else ExchangeNameCache()
        self.listener = RemoteBuildListener(self.registry)
        self._started = False

    @property
    def root_url(self) -> str | None:
        return self.host.root_url

    @property
    def is_started(self) -> bool:
        return self._started

    def attach(self) -> None:
        """Register the listener with the broker without connecting."""
        self.broker.add_listener(self.listener)

    def start(self) -> None:
        """Register the listener and connect the broker."""
        if self._started:
            return
        self.attach()
        self.broker.connect()
        self._started = True
        logger.info("Remote build bridge started")

    def on_loaded(self) -> int:
        """
        Backfill the registry from the host once every job is loaded.

        Every job with a configured trigger gets that trigger bound and
        registered, then the registry is deduplicated by project name.

        Returns:
            Number of triggers registered afterwards
        """
        for job in self.host.all_jobs():
            trigger = self.host.get_trigger(job)
            if trigger is None:
                continue
            trigger.bind(job, self)
            self.registry.add(trigger)

        self.registry.deduplicate()
        logger.info(f"Loaded {len(self.registry)} remote build trigger(s)")
        return len(self.registry)

    def get_publish_channel(self) -> PublishChannel | None:
        return self.broker.get_publish_channel()

    def close(self) -> None:
        """Unregister the listener, close the broker and empty the registry."""
        self.broker.remove_listener(self.listener)
        self.broker.close()
        self.registry.clear()
        self._started = False
        logger.info("Remote build bridge closed")
