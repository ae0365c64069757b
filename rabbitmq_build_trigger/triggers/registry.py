import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING

from rabbitmq_build_trigger.core.logger import get_logger

if TYPE_CHECKING:
    from rabbitmq_build_trigger.triggers.trigger import RemoteBuildTrigger

logger = get_logger(__name__)


class TriggerRegistry:
    """
    Directory of active remote build triggers.

    Membership is a copy-on-write tuple: writers build a new tuple under a
    lock and swap it in, readers iterate whatever tuple was current when they
    asked. Iteration therefore never blocks and never sees a half-applied
    change; a trigger removed mid-iteration may still be yielded.

    Triggers are compared by identity, not equality.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._triggers: tuple[RemoteBuildTrigger, ...] = ()

    def add(self, trigger: "RemoteBuildTrigger") -> None:
        """Register a trigger. Adding an already registered trigger is a no-op."""
        with self._lock:
            if any(t is trigger for t in self._triggers):
                return
            self._triggers = (*self._triggers, trigger)

    def remove(self, trigger: "RemoteBuildTrigger") -> None:
        """Unregister a trigger. No-op if it is not registered."""
        with self._lock:
            self._triggers = tuple(t for t in self._triggers if t is not trigger)

    def snapshot(self) -> Iterator["RemoteBuildTrigger"]:
        """Lazily iterate the triggers registered at call time."""
        return iter(self._triggers)

    def deduplicate(self) -> None:
        """
        Keep at most one trigger per project name.

        Triggers are visited in insertion order and the last one seen for a
        name wins. Triggers whose job is gone are dropped.
        """
        with self._lock:
            by_name: dict[str, RemoteBuildTrigger] = {}
            for trigger in self._triggers:
                name = trigger.project_name
                if name is None:
                    logger.debug("Dropping trigger whose job is no longer loaded")
                    continue
                by_name[name] = trigger

            kept = tuple(by_name.values())
            dropped = len(self._triggers) - len(kept)
            self._triggers = kept

        if dropped:
            logger.debug(f"Deduplicated triggers: dropped {dropped}, kept {len(kept)}")

    def clear(self) -> None:
        with self._lock:
            self._triggers = ()

    def __len__(self) -> int:
        return len(self._triggers)

    def __contains__(self, trigger: object) -> bool:
        return any(t is trigger for t in self._triggers)
