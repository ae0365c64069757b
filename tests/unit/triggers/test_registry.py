"""
Tests for the trigger registry.

Covers:
- Identity semantics of add/remove
- Snapshot stability under concurrent mutation
- Deduplication by project name
"""

import gc
import threading

import pytest

from rabbitmq_build_trigger.bridge import RemoteBuildBridge
from rabbitmq_build_trigger.brokers.memory import InMemoryBroker
from rabbitmq_build_trigger.host.memory import InMemoryBuildHost, InMemoryJob
from rabbitmq_build_trigger.triggers.registry import TriggerRegistry
from rabbitmq_build_trigger.triggers.trigger import RemoteBuildTrigger


@pytest.fixture
def bridge():
    return RemoteBuildBridge(InMemoryBuildHost(), InMemoryBroker())


def bound_trigger(bridge, job, token="t"):
    trigger = RemoteBuildTrigger(token=token)
    trigger.bind(job, bridge)
    return trigger


class TestRegistryMembership:
    """add / remove / snapshot."""

    def test_starts_empty(self):
        registry = TriggerRegistry()
        assert len(registry) == 0
        assert list(registry.snapshot()) == []

    def test_add_is_idempotent_by_identity(self, bridge):
        job = InMemoryJob("p")
        trigger = bound_trigger(bridge, job)

        registry = TriggerRegistry()
        registry.add(trigger)
        registry.add(trigger)

        assert len(registry) == 1
        assert trigger in registry

    def test_add_keeps_distinct_triggers_for_same_project(self, bridge):
        job = InMemoryJob("p")
        first = bound_trigger(bridge, job)
        second = bound_trigger(bridge, job)

        registry = TriggerRegistry()
        registry.add(first)
        registry.add(second)

        # Plain add never deduplicates
        assert len(registry) == 2

    def test_remove_by_identity(self, bridge):
        job = InMemoryJob("p")
        first = bound_trigger(bridge, job)
        second = bound_trigger(bridge, job)

        registry = TriggerRegistry()
        registry.add(first)
        registry.add(second)
        registry.remove(first)

        assert list(registry.snapshot()) == [second]
        assert first not in registry

    def test_remove_unknown_is_noop(self):
        registry = TriggerRegistry()
        registry.remove(RemoteBuildTrigger(token="t"))
        assert len(registry) == 0

    def test_clear(self, bridge):
        registry = TriggerRegistry()
        registry.add(bound_trigger(bridge, InMemoryJob("a")))
        registry.add(bound_trigger(bridge, InMemoryJob("b")))

        registry.clear()

        assert len(registry) == 0

    def test_snapshot_ignores_later_mutation(self, bridge):
        job_a, job_b = InMemoryJob("a"), InMemoryJob("b")
        a = bound_trigger(bridge, job_a)
        b = bound_trigger(bridge, job_b)

        registry = TriggerRegistry()
        registry.add(a)
        snapshot = registry.snapshot()

        registry.add(b)
        registry.remove(a)

        assert list(snapshot) == [a]
        assert list(registry.snapshot()) == [b]

    def test_snapshot_safe_under_concurrent_writers(self, bridge):
        jobs = [InMemoryJob(f"job-{i}") for i in range(50)]
        triggers = [bound_trigger(bridge, job) for job in jobs]
        registry = TriggerRegistry()
        errors = []
        stop = threading.Event()

        def writer():
            while not stop.is_set():
                for trigger in triggers:
                    registry.add(trigger)
                for trigger in triggers:
                    registry.remove(trigger)

        def reader():
            try:
                for _ in range(200):
                    for trigger in registry.snapshot():
                        assert trigger.project_name is not None
            except Exception as e:
                errors.append(e)

        writers = [threading.Thread(target=writer) for _ in range(2)]
        readers = [threading.Thread(target=reader) for _ in range(4)]
        for t in writers + readers:
            t.start()
        for t in readers:
            t.join()
        stop.set()
        for t in writers:
            t.join()

        assert errors == []


class TestRegistryDeduplicate:
    """deduplicate()."""

    def test_keeps_last_inserted_per_project(self, bridge):
        job = InMemoryJob("p")
        older = bound_trigger(bridge, job, token="old")
        newer = bound_trigger(bridge, job, token="new")
        other_job = InMemoryJob("q")
        other = bound_trigger(bridge, other_job)

        registry = TriggerRegistry()
        registry.add(older)
        registry.add(other)
        registry.add(newer)
        registry.deduplicate()

        remaining = list(registry.snapshot())
        assert len(remaining) == 2
        assert newer in registry
        assert other in registry
        assert older not in registry

    def test_is_idempotent(self, bridge):
        job = InMemoryJob("p")
        registry = TriggerRegistry()
        for token in ("a", "b", "c"):
            registry.add(bound_trigger(bridge, job, token=token))

        registry.deduplicate()
        once = list(registry.snapshot())
        registry.deduplicate()

        assert list(registry.snapshot()) == once
        assert len(once) == 1

    def test_one_trigger_per_distinct_project(self, bridge):
        jobs = [InMemoryJob(name) for name in ("a", "b", "a", "c", "b")]
        registry = TriggerRegistry()
        for job in jobs:
            registry.add(bound_trigger(bridge, job))

        registry.deduplicate()

        names = [t.project_name for t in registry.snapshot()]
        assert sorted(names) == ["a", "b", "c"]

    def test_drops_triggers_of_collected_jobs(self, bridge):
        job = InMemoryJob("gone")
        trigger = bound_trigger(bridge, job)
        registry = TriggerRegistry()
        registry.add(trigger)

        del job
        gc.collect()
        registry.deduplicate()

        assert len(registry) == 0

    def test_follows_renames(self, bridge):
        job = InMemoryJob("old-name")
        renamed = bound_trigger(bridge, job)
        existing_job = InMemoryJob("new-name")
        existing = bound_trigger(bridge, existing_job)

        registry = TriggerRegistry()
        registry.add(existing)
        registry.add(renamed)
        job.name = "new-name"
        registry.deduplicate()

        assert list(registry.snapshot()) == [renamed]
