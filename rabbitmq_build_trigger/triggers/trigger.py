"""
RemoteBuildTrigger - a job's subscription to remote build messages.

The host creates one trigger per configured job and starts it against a
bridge. A matching message makes the trigger ask the host to schedule the
job, tagged with the queue the message came from.
"""

from __future__ import annotations

import json
import weakref
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rabbitmq_build_trigger.core.exceptions import TriggerNotStartedError
from rabbitmq_build_trigger.core.logger import get_logger
from rabbitmq_build_trigger.core.types import ParameterValue, StringParameterValue
from rabbitmq_build_trigger.monitoring.prometheus import BUILDS_SCHEDULED
from rabbitmq_build_trigger.triggers.cause import RemoteBuildCause

if TYPE_CHECKING:
    from rabbitmq_build_trigger.bridge import RemoteBuildBridge
    from rabbitmq_build_trigger.host.base import BuildHost, Job
    from rabbitmq_build_trigger.triggers.registry import TriggerRegistry

logger = get_logger(__name__)

KEY_PARAM_NAME = "name"
KEY_PARAM_VALUE = "value"


def _strip_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _as_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def merge_parameters(
    incoming: Sequence[Any], defined: Sequence[ParameterValue]
) -> list[StringParameterValue]:
    """
    Merge message parameters into the job's defined parameters.

    For each defined parameter, in order, the first incoming entry whose name
    matches case-insensitively supplies the value. Defined parameters without
    a match and incoming names the job does not define are dropped. Values are
    always emitted as strings.

    Args:
        incoming: The ``parameter`` array of the message
        defined: The job's parameter defaults, as reported by the host
    """
    entries: list[tuple[str, Any]] = []
    for entry in incoming:
        if not isinstance(entry, dict):
            continue
        name = entry.get(KEY_PARAM_NAME)
        if not isinstance(name, str) or KEY_PARAM_VALUE not in entry:
            continue
        entries.append((name.upper(), entry[KEY_PARAM_VALUE]))

    merged: list[StringParameterValue] = []
    for definition in defined:
        wanted = definition.name.upper()
        for name, value in entries:
            if name == wanted:
                merged.append(StringParameterValue(definition.name, _as_string(value)))
                break
    return merged


class RemoteBuildTrigger:
    """
    Per-job trigger holding the token a message must present.

    Attributes:
        token: Stripped token, or None when not configured
    """

    def __init__(self, token: str | None = None):
        self._token = _strip_to_none(token)
        self._job_ref: weakref.ref[Job] | None = None
        self._host: BuildHost | None = None
        self._registry: TriggerRegistry | None = None

    def __repr__(self) -> str:
        return f"RemoteBuildTrigger(project={self.project_name!r})"

    @property
    def token(self) -> str | None:
        return self._token

    @token.setter
    def token(self, value: str | None) -> None:
        self._token = _strip_to_none(value)

    @property
    def job(self) -> Job | None:
        if self._job_ref is None:
            return None
        return self._job_ref()

    @property
    def project_name(self) -> str | None:
        """Current name of the owning job (follows renames), None if unbound."""
        job = self.job
        return job.name if job is not None else None

    def bind(self, job: Job, bridge: RemoteBuildBridge) -> None:
        """Attach to a job and a bridge without registering."""
        self._job_ref = weakref.ref(job)
        self._host = bridge.host
        self._registry = bridge.registry

    def start(self, job: Job, bridge: RemoteBuildBridge, new_instance: bool = False) -> None:
        """
        Register this trigger for job.

        Safe to call repeatedly: the registry is deduplicated right after, so
        only the most recently started trigger of a job stays registered.
        """
        self.bind(job, bridge)
        bridge.registry.add(self)
        bridge.registry.deduplicate()
        logger.debug(f"Started remote build trigger for {job.name} (new instance: {new_instance})")

    def stop(self) -> None:
        if self._registry is not None:
            self._registry.remove(self)
        logger.debug(f"Stopped remote build trigger for {self.project_name}")

    def schedule_build(self, queue_name: str, parameters: Sequence[Any] | None = None) -> bool:
        """
        Ask the host to schedule the job.

        Args:
            queue_name: Queue the triggering message arrived on
            parameters: The message's ``parameter`` array; None or empty
                schedules the job with its defaults

        Returns:
            Whatever the host answered (True if the build was queued)
        """
        job = self.job
        if job is None or self._host is None:
            msg = "Remote build trigger is not started"
            raise TriggerNotStartedError(msg)

        cause = RemoteBuildCause(queue_name)
        values = None
        if parameters:
            values = merge_parameters(parameters, self._host.parameter_defaults(job))

        scheduled = self._host.schedule_build(job, cause, values)
        if scheduled:
            BUILDS_SCHEDULED.labels(project=job.name).inc()
            logger.info(f"Scheduled {job.name}: {cause.short_description}")
        else:
            logger.info(f"Host declined to schedule {job.name} from queue {queue_name}")
        return bool(scheduled)
