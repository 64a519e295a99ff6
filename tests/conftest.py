"""Pytest configuration and shared fixtures."""
import pytest

import freeki.shared.core.service_registry as service_registry_module
from freeki.shared.core.configuration import ENV_OVERRIDES
from freeki.shared.core.state_store import StateStore
from freeki.shared.domain.settings.device import DeviceProfile
from freeki.shared.domain.theme.surfaces import InMemoryStyleSurface
from freeki.shared.infrastructure.persistence.slot_storage import MemorySlotStorage


class ManualTask:
    """Scheduled callback that only runs when the test says so."""

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.ran = False
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self):
        return self._cancelled

    def run(self):
        self.ran = True
        self.callback()


class ManualScheduler:
    """Scheduler whose clock is advanced explicitly by the test."""

    def __init__(self):
        self.tasks = []

    def call_later(self, delay, callback):
        task = ManualTask(delay, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self):
        return [t for t in self.tasks if not t.cancelled() and not t.ran]

    def run_pending(self):
        pending = self.pending
        for task in pending:
            task.run()
        return len(pending)


@pytest.fixture(autouse=True)
def reset_cleanup_handlers():
    """Keep atexit handlers registered by one test from leaking into the next."""
    original = list(service_registry_module._cleanup_handlers)
    yield
    service_registry_module._cleanup_handlers[:] = original


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FREEKI_* overrides inherited from the shell."""
    for key in ENV_OVERRIDES:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def store():
    return StateStore()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def surface():
    return InMemoryStyleSurface()


@pytest.fixture
def memory_storage():
    return MemorySlotStorage()


@pytest.fixture
def device():
    return DeviceProfile(
        screen_width=1920,
        screen_height=1080,
        viewport_width=1920,
        user_agent="Mozilla/5.0 (X11; Linux x86_64) FreeKiTest",
    )
