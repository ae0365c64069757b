"""
Shared constants, enums and dataclasses.

The wire-level constants here are part of the public contract with other
broker clients: changing them breaks peers that demultiplex on ``app_id`` or
bind queues to the default routing key.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

APP_ID = "remote-build"
"""Application id stamped on outbound messages and used to demultiplex deliveries."""

CONTENT_TYPE_JSON = "application/json"

DEFAULT_ROUTING_KEY = "rabbitmq_build_trigger"
"""Routing key used when a publisher is configured with a blank one."""

HEADER_JENKINS_URL = "jenkins-url"


class BuildResult(Enum):
    """Build result words as reported by the CI host."""

    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"


@dataclass(frozen=True)
class ParameterValue:
    """A named build parameter as defined (or defaulted) by the host."""

    name: str
    value: Any = None


@dataclass(frozen=True)
class StringParameterValue(ParameterValue):
    """A parameter whose value has been coerced to a string."""

    value: str = ""


@dataclass
class BuildRecord:
    """
    A completed build handed to the publisher by the host.

    Attributes:
        project: Name of the job that was built
        number: Build number
        result: Build result (enum member or whatever word the host exposes)
    """

    project: str
    number: int
    result: BuildResult | str

    @property
    def status(self) -> str:
        """Uppercase status word for the outbound message."""
        if isinstance(self.result, BuildResult):
            return self.result.value
        return str(self.result).upper()
