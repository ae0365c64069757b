# ============================================
# FILE: rabbitmq_build_trigger/__init__.py
# ============================================

"""
rabbitmq-build-trigger - Remote build triggering over RabbitMQ

Bridges an AMQP broker and a CI job runner:
- JSON build requests consumed from queues schedule the matching jobs,
  authenticated by a per-job token
- Message parameters are merged into the job's defined parameters
- Completed builds are published as JSON to an exchange (or a queue)
- RabbitMQ adapter on aio-pika, plus in-memory adapter and host for tests
- Prometheus metrics and structured JSON logging

Triggering builds:
    >>> from rabbitmq_build_trigger import RemoteBuildBridge, RemoteBuildTrigger
    >>> from rabbitmq_build_trigger.brokers import create_broker
    >>>
    >>> bridge = RemoteBuildBridge(host, create_broker("rabbitmq", url=url, queues=["builds"]))
    >>> bridge.start()
    >>> RemoteBuildTrigger(token="s3cret").start(job, bridge)
    >>>
    >>> # {"project": "<job name>", "token": "s3cret",
    >>> #  "parameter": [{"name": "BRANCH", "value": "main"}]}
    >>> # on queue "builds" now schedules job with BRANCH=main.

Publishing outcomes:
    >>> from rabbitmq_build_trigger import RemoteBuildPublisher
    >>>
    >>> publisher = RemoteBuildPublisher("build-results", routing_key="ci.builds")
    >>> publisher.perform(build, build_log, bridge)  # always True

Configuration:
    >>> from rabbitmq_build_trigger import BridgeConfig
    >>>
    >>> config = BridgeConfig.from_env()  # RABBITMQ_BUILD_TRIGGER_* variables
    >>> config.configure_logging()
    >>> bridge = RemoteBuildBridge(host, config.create_broker())
"""

from rabbitmq_build_trigger.bridge import RemoteBuildBridge
from rabbitmq_build_trigger.core.config import BridgeConfig, configure, get_config
from rabbitmq_build_trigger.core.exceptions import (
    BridgeConfigurationError,
    BuildTriggerError,
    TriggerNotStartedError,
)
from rabbitmq_build_trigger.core.logger import get_logger, set_logger
from rabbitmq_build_trigger.core.types import (
    APP_ID,
    CONTENT_TYPE_JSON,
    DEFAULT_ROUTING_KEY,
    HEADER_JENKINS_URL,
    BuildRecord,
    BuildResult,
    ParameterValue,
    StringParameterValue,
)
from rabbitmq_build_trigger.publisher import (
    BuildOutcome,
    ExchangeNameCache,
    MessageProperties,
    PublishResult,
    RemoteBuildPublisher,
)
from rabbitmq_build_trigger.triggers import (
    DeliveryStatus,
    RemoteBuildCause,
    RemoteBuildListener,
    RemoteBuildTrigger,
    TriggerRegistry,
    decode_delivery,
    merge_parameters,
)

__version__ = "1.0.0"

__all__ = [
    "APP_ID",
    "CONTENT_TYPE_JSON",
    "DEFAULT_ROUTING_KEY",
    "HEADER_JENKINS_URL",
    "BridgeConfig",
    "BridgeConfigurationError",
    "BuildOutcome",
    "BuildRecord",
    "BuildResult",
    "BuildTriggerError",
    "DeliveryStatus",
    "ExchangeNameCache",
    "MessageProperties",
    "ParameterValue",
    "PublishResult",
    "RemoteBuildBridge",
    "RemoteBuildCause",
    "RemoteBuildListener",
    "RemoteBuildPublisher",
    "RemoteBuildTrigger",
    "StringParameterValue",
    "TriggerNotStartedError",
    "TriggerRegistry",
    "__version__",
    "configure",
    "decode_delivery",
    "get_config",
    "get_logger",
    "merge_parameters",
]
