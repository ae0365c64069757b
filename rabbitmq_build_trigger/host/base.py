"""
CI host surface - what the bridge needs from the job runner.

The host owns jobs, their parameter definitions, the build queue and the
lifecycle callbacks. A host integration implements BuildHost and calls into
the bridge:

    - RemoteBuildTrigger.start(job, bridge) when a job with a trigger loads
    - RemoteBuildTrigger.stop() when it is unloaded or reconfigured
    - RemoteBuildBridge.on_loaded() once every job is loaded
    - RemoteBuildPublisher.perform(build, build_log, bridge) when a build completes
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from rabbitmq_build_trigger.core.types import ParameterValue, StringParameterValue

if TYPE_CHECKING:
    from rabbitmq_build_trigger.triggers.cause import RemoteBuildCause
    from rabbitmq_build_trigger.triggers.trigger import RemoteBuildTrigger


@runtime_checkable
class Job(Protocol):
    """A buildable job. Triggers hold it weakly, so it must support weakrefs."""

    @property
    def name(self) -> str: ...


@runtime_checkable
class BuildHost(Protocol):
    """The job runner consumed by triggers, publishers and the bridge."""

    @property
    def root_url(self) -> str | None:
        """Externally advertised root URL, sent in the jenkins-url header."""
        ...

    def all_jobs(self) -> Iterable[Job]: ...

    def get_trigger(self, job: Job) -> RemoteBuildTrigger | None:
        """The remote build trigger configured on job, if any."""
        ...

    def parameter_defaults(self, job: Job) -> Sequence[ParameterValue]:
        """Default values of the parameters job defines, in definition order."""
        ...

    def schedule_build(
        self,
        job: Job,
        cause: RemoteBuildCause,
        parameters: list[StringParameterValue] | None,
    ) -> bool:
        """
        Enqueue a build of job.

        Args:
            job: Job to build
            cause: Why the build was requested
            parameters: Parameter values, or None to build without a
                parameters action (the job's defaults apply)

        Returns:
            True if the build was queued
        """
        ...
