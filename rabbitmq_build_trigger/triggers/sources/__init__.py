"""
Trigger sources.

Available sources:
- RemoteBuildListener: build requests arriving through an AMQP adapter
"""

from rabbitmq_build_trigger.triggers.sources.broker import PLUGIN_NAME, RemoteBuildListener

__all__ = [
    "PLUGIN_NAME",
    "RemoteBuildListener",
]
