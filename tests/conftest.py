"""Shared fixtures: in-memory storage, simulated host and a wired registry."""

from __future__ import annotations

import pytest

from host.simulated import SimulatedHost
from host.storage import MemoryKeyValueStore
from settlements.locator import ZoneLocator
from settlements.registry import ZoneRegistry
from settlements.store import ZoneStore
from tracking.session import SessionTracker


class FailingKeyValueStore(MemoryKeyValueStore):
    """Memory store whose writes can be made to fail on demand."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = False
        self.fail_reads = False

    def get(self, key):
        if self.fail_reads:
            raise OSError("storage offline")
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise OSError("disk full")
        super().set(key, value)


@pytest.fixture
def kv():
    return FailingKeyValueStore()


@pytest.fixture
def store(kv):
    return ZoneStore(kv)


@pytest.fixture
def registry(store):
    return ZoneRegistry(store)


@pytest.fixture
def locator(registry):
    return ZoneLocator(registry)


@pytest.fixture
def host():
    return SimulatedHost()


@pytest.fixture
def tracker(host):
    return SessionTracker(host)
