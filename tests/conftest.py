"""
Pytest configuration and shared fixtures for remote build trigger tests
"""

import pytest

from rabbitmq_build_trigger.bridge import RemoteBuildBridge
from rabbitmq_build_trigger.brokers.memory import InMemoryBroker
from rabbitmq_build_trigger.host.memory import InMemoryBuildHost

HOST_ROOT_URL = "http://ci.example.com/"


# ============================================
# BRIDGE FIXTURES
# ============================================


@pytest.fixture
def host():
    """In-memory CI host with a fixed root URL."""
    return InMemoryBuildHost(root_url=HOST_ROOT_URL)


@pytest.fixture
def broker():
    """In-memory AMQP adapter consuming a single queue."""
    return InMemoryBroker(queues=["trigger-queue"])


@pytest.fixture
def bridge(host, broker):
    """Started bridge; closed after the test."""
    bridge = RemoteBuildBridge(host, broker)
    bridge.start()
    yield bridge
    bridge.close()
