"""
Core building blocks shared by the trigger and publisher sides.
"""

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

__all__ = [
    "APP_ID",
    "CONTENT_TYPE_JSON",
    "DEFAULT_ROUTING_KEY",
    "HEADER_JENKINS_URL",
    "BridgeConfig",
    "BridgeConfigurationError",
    "BuildRecord",
    "BuildResult",
    "BuildTriggerError",
    "ParameterValue",
    "StringParameterValue",
    "TriggerNotStartedError",
    "configure",
    "get_config",
    "get_logger",
    "set_logger",
]
