"""
Build outcome publishing.

Example:
    publisher = RemoteBuildPublisher("build-results", routing_key="ci.builds")
    publisher.perform(build, build_log, bridge)
"""

from rabbitmq_build_trigger.publisher.exchange import ExchangeNameCache
from rabbitmq_build_trigger.publisher.notifier import LOG_HEADER, RemoteBuildPublisher
from rabbitmq_build_trigger.publisher.types import BuildOutcome, MessageProperties, PublishResult

__all__ = [
    "LOG_HEADER",
    "BuildOutcome",
    "ExchangeNameCache",
    "MessageProperties",
    "PublishResult",
    "RemoteBuildPublisher",
]
