from dataclasses import dataclass


@dataclass(frozen=True)
class RemoteBuildCause:
    """Cause attached to builds scheduled from a broker message."""

    queue_name: str

    @property
    def short_description(self) -> str:
        return f"Triggered by remote build message from RabbitMQ queue: {self.queue_name}"

    def __str__(self) -> str:
        return self.short_description
