"""
In-Memory CI host - For testing and embedding.

Jobs live in a dict, scheduled builds are recorded instead of run, and
complete() finishes a recorded build by running the job's publishers the way
a real host runs its completion hooks.

Usage:
    >>> host = InMemoryBuildHost(root_url="http://ci.example.com/")
    >>> job = host.add_job("app", trigger=RemoteBuildTrigger(token="s3cret"))
    >>> bridge = RemoteBuildBridge(host, InMemoryBroker(queues=["builds"]))
    >>> bridge.start()
    >>> bridge.on_loaded()
    >>> bridge.broker.deliver("builds", b'{"project": "app", "token": "s3cret"}')
    >>> host.scheduled[0].cause.short_description
    'Triggered by remote build message from RabbitMQ queue: builds'
"""

from __future__ import annotations

import io
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rabbitmq_build_trigger.core.logger import get_logger
from rabbitmq_build_trigger.core.types import (
    BuildRecord,
    BuildResult,
    ParameterValue,
    StringParameterValue,
)

if TYPE_CHECKING:
    from rabbitmq_build_trigger.bridge import RemoteBuildBridge
    from rabbitmq_build_trigger.publisher.notifier import RemoteBuildPublisher
    from rabbitmq_build_trigger.triggers.cause import RemoteBuildCause
    from rabbitmq_build_trigger.triggers.trigger import RemoteBuildTrigger

logger = get_logger(__name__)


class InMemoryJob:
    """A job with parameter definitions, an optional trigger and publishers."""

    def __init__(
        self,
        name: str,
        parameter_definitions: list[ParameterValue] | None = None,
        trigger: RemoteBuildTrigger | None = None,
        publishers: list[RemoteBuildPublisher] | None = None,
    ):
        self.name = name
        self.parameter_definitions = list(parameter_definitions or [])
        self.trigger = trigger
        self.publishers = list(publishers or [])
        self.next_build_number = 1

    def __repr__(self) -> str:
        return f"InMemoryJob(name={self.name!r})"


@dataclass
class ScheduledBuild:
    """A build the host accepted."""

    job: InMemoryJob
    cause: RemoteBuildCause
    parameters: list[StringParameterValue] | None
    number: int
    record: BuildRecord | None = None
    log: str = ""

    @property
    def parameter_map(self) -> dict[str, str]:
        return {p.name: p.value for p in self.parameters or []}


@dataclass
class InMemoryBuildHost:
    """
    BuildHost keeping jobs and scheduled builds in memory.

    Attributes:
        root_url: Advertised root URL
        accepting: When False, schedule_build() declines every request
    """

    root_url: str | None = "http://localhost:8080/"
    accepting: bool = True
    jobs: dict[str, InMemoryJob] = field(default_factory=dict)
    scheduled: list[ScheduledBuild] = field(default_factory=list)

    def __post_init__(self):
        self._lock = threading.Lock()

    def add_job(
        self,
        name: str,
        parameter_definitions: list[ParameterValue] | None = None,
        trigger: RemoteBuildTrigger | None = None,
        publishers: list[RemoteBuildPublisher] | None = None,
    ) -> InMemoryJob:
        job = InMemoryJob(name, parameter_definitions, trigger, publishers)
        self.jobs[name] = job
        return job

    def remove_job(self, name: str) -> InMemoryJob | None:
        job = self.jobs.pop(name, None)
        if job is not None and job.trigger is not None:
            job.trigger.stop()
        return job

    def rename_job(self, old_name: str, new_name: str) -> InMemoryJob:
        job = self.jobs.pop(old_name)
        job.name = new_name
        self.jobs[new_name] = job
        return job

    def all_jobs(self) -> list[InMemoryJob]:
        return list(self.jobs.values())

    def get_trigger(self, job: InMemoryJob) -> RemoteBuildTrigger | None:
        return job.trigger

    def parameter_defaults(self, job: InMemoryJob) -> list[ParameterValue]:
        return list(job.parameter_definitions)

    def schedule_build(
        self,
        job: InMemoryJob,
        cause: RemoteBuildCause,
        parameters: list[StringParameterValue] | None,
    ) -> bool:
        if not self.accepting:
            return False

        with self._lock:
            build = ScheduledBuild(job, cause, parameters, job.next_build_number)
            job.next_build_number += 1
            self.scheduled.append(build)

        logger.debug(f"Queued {job.name} #{build.number}")
        return True

    def start_all(self, bridge: RemoteBuildBridge) -> None:
        """Start the trigger of every job, as a host does while loading jobs."""
        for job in self.all_jobs():
            if job.trigger is not None:
                job.trigger.start(job, bridge, new_instance=True)

    def complete(
        self,
        build: ScheduledBuild,
        bridge: RemoteBuildBridge,
        result: BuildResult | str = BuildResult.SUCCESS,
    ) -> BuildRecord:
        """
        Finish build with result and run the job's publishers.

        The result is never changed by the publishers; their console output
        is kept on build.log.
        """
        record = BuildRecord(build.job.name, build.number, result)
        build_log = io.StringIO()
        for publisher in build.job.publishers:
            publisher.perform(record, build_log, bridge)

        build.record = record
        build.log = build_log.getvalue()
        return record
