"""
CI host adapters.

Available hosts:
    - BuildHost: protocol a host integration implements
    - InMemoryBuildHost: For testing and embedding
"""

from rabbitmq_build_trigger.host.base import BuildHost, Job
from rabbitmq_build_trigger.host.memory import InMemoryBuildHost, InMemoryJob, ScheduledBuild

__all__ = [
    "BuildHost",
    "InMemoryBuildHost",
    "InMemoryJob",
    "Job",
    "ScheduledBuild",
]
