"""
Broker integration for message-driven build triggering.

RemoteBuildListener is registered with an AMQP adapter under the
``remote-build`` application id. Every delivery is decoded and matched
against the registered triggers; a trigger whose project name and token both
match schedules its job.

Example:
    registry = TriggerRegistry()
    listener = RemoteBuildListener(registry)
    broker.add_listener(listener)

    # Adapter thread:
    listener.on_receive("builds", "application/json", None,
                        b'{"project": "app", "token": "s3cret"}')
"""

from typing import Any

from rabbitmq_build_trigger.core.logger import get_logger
from rabbitmq_build_trigger.core.types import APP_ID
from rabbitmq_build_trigger.monitoring.logging import bridge_context
from rabbitmq_build_trigger.monitoring.prometheus import DELIVERIES
from rabbitmq_build_trigger.triggers.messages import (
    BuildRequest,
    DeliveryStatus,
    decode_delivery,
)
from rabbitmq_build_trigger.triggers.registry import TriggerRegistry

PLUGIN_NAME = "Remote Builder"


class RemoteBuildListener:
    """
    Turns broker deliveries into trigger invocations.

    Never raises back into the adapter: malformed deliveries are logged and
    dropped, and a failing trigger does not keep other triggers from seeing
    the message.
    """

    name = PLUGIN_NAME
    app_id = APP_ID

    def __init__(self, registry: TriggerRegistry):
        self.registry = registry
        self.log = get_logger(__name__)

    def on_bind(self, queue_name: str) -> None:
        self.log.info(f"Bind to: {queue_name}")

    def on_unbind(self, queue_name: str) -> None:
        self.log.info(f"Unbind from: {queue_name}")

    def on_receive(
        self,
        queue_name: str,
        content_type: str | None,
        headers: dict[str, Any] | None,
        body: bytes,
    ) -> int:
        """
        Handle one delivery.

        Returns:
            Number of builds scheduled for the delivery
        """
        decoded = decode_delivery(content_type, body)
        DELIVERIES.labels(outcome=decoded.status.value).inc()

        if decoded.status is DeliveryStatus.WRONG_CONTENT_TYPE:
            self.log.debug(f"Ignoring delivery on {queue_name}: {decoded.error}")
            return 0

        if decoded.status is DeliveryStatus.BAD_ENCODING:
            self.log.warning(
                f"Unsupported encoding on {queue_name}. Is the message body not a UTF-8 string?"
            )
            return 0

        if decoded.status is DeliveryStatus.BAD_JSON:
            self.log.warning(f"JSON format string: {decoded.payload}")
            self.log.warning(decoded.error)
            return 0

        with bridge_context(queue_name=queue_name):
            return self._dispatch(queue_name, decoded.request)

    def _dispatch(self, queue_name: str, request: BuildRequest) -> int:
        scheduled = 0
        for trigger in self.registry.snapshot():
            if trigger.token is None:
                self.log.warning(
                    f"ignoring AMQP trigger for project {trigger.project_name}: no token set"
                )
                continue

            if not request.matches(trigger.project_name, trigger.token):
                continue

            try:
                if trigger.schedule_build(queue_name, request.parameters):
                    scheduled += 1
            except Exception as e:
                self.log.exception(f"Failed to schedule {trigger.project_name} from {queue_name}: {e}")

        return scheduled
