"""
rabbitmq_build_trigger.triggers - broker messages to scheduled builds.

Example:
    trigger = RemoteBuildTrigger(token="s3cret")
    trigger.start(job, bridge)

    # A delivery of {"project": job.name, "token": "s3cret"} on queue
    # "builds" now schedules job with RemoteBuildCause("builds").
"""

from rabbitmq_build_trigger.triggers.cause import RemoteBuildCause
from rabbitmq_build_trigger.triggers.messages import (
    BuildRequest,
    DecodedDelivery,
    DeliveryStatus,
    decode_delivery,
)
from rabbitmq_build_trigger.triggers.registry import TriggerRegistry
from rabbitmq_build_trigger.triggers.sources.broker import RemoteBuildListener
from rabbitmq_build_trigger.triggers.trigger import RemoteBuildTrigger, merge_parameters

__all__ = [
    "BuildRequest",
    "DecodedDelivery",
    "DeliveryStatus",
    "RemoteBuildCause",
    "RemoteBuildListener",
    "RemoteBuildTrigger",
    "TriggerRegistry",
    "decode_delivery",
    "merge_parameters",
]
