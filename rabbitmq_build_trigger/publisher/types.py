"""
Outbound message types.

A build outcome travels as a small JSON object plus AMQP basic properties:

    {"project": "<job-name>", "number": <int>, "status": "SUCCESS"}

    app_id       = "remote-build"
    content_type = "application/json"
    headers      = {"jenkins-url": "<host root url>"}
"""

import json
from dataclasses import dataclass, field
from typing import Any

from rabbitmq_build_trigger.core.types import (
    APP_ID,
    CONTENT_TYPE_JSON,
    HEADER_JENKINS_URL,
    BuildRecord,
)


@dataclass(frozen=True)
class MessageProperties:
    """AMQP basic properties attached to a published message."""

    app_id: str = APP_ID
    content_type: str = CONTENT_TYPE_JSON
    headers: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_build(cls, root_url: str | None) -> "MessageProperties":
        return cls(headers={HEADER_JENKINS_URL: root_url})


@dataclass(frozen=True)
class BuildOutcome:
    """Body of a build-completion message."""

    project: str
    number: int
    status: str

    @classmethod
    def from_record(cls, record: BuildRecord) -> "BuildOutcome":
        return cls(project=record.project, number=int(record.number), status=record.status)

    def to_dict(self) -> dict[str, Any]:
        return {"project": self.project, "number": self.number, "status": self.status}

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_dict()).encode("utf-8")


@dataclass(frozen=True)
class PublishResult:
    """
    Outcome of a publish (or exchange setup) reported by the AMQP adapter.

    Attributes:
        success: Whether the broker confirmed the operation
        message: Failure reason, empty on success
        exchange_name: Exchange the message went to (or was declared)
    """

    success: bool
    message: str = ""
    exchange_name: str | None = None
