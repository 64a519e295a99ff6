"""Tests for per-device user-settings persistence and slot storage."""
import json

import pytest

from freeki.shared.core.state_store import StateStore
from freeki.shared.domain.models import default_user_settings
from freeki.shared.domain.settings.device import DeviceProfile
from freeki.shared.domain.settings.persistence import SettingsPersistence
from freeki.shared.infrastructure.persistence.slot_storage import (
    DuckDBSlotStorage,
    MemorySlotStorage,
    SlotQuotaExceededError,
    SlotStorageError,
)


class UnavailableStorage:
    """Storage that refuses every operation."""

    def read(self, key):
        raise SlotStorageError("storage disabled")

    def write(self, key, value):
        raise SlotStorageError("storage disabled")

    def remove(self, key):
        raise SlotStorageError("storage disabled")

    def keys(self):
        raise SlotStorageError("storage disabled")


@pytest.fixture
def persistence(memory_storage, device):
    return SettingsPersistence(memory_storage, device)


# --- load ---

def test_load_without_saved_slot_returns_defaults(persistence):
    assert persistence.load() == default_user_settings()


def test_save_then_load_round_trip(memory_storage, device):
    settings = default_user_settings()
    settings["theme"] = "dark"
    settings["searchHistory"] = ["alpha", "beta"]

    assert SettingsPersistence(memory_storage, device).save(settings) is True

    loaded = SettingsPersistence(memory_storage, device).load()
    assert loaded["theme"] == "dark"
    assert loaded["searchHistory"] == ["alpha", "beta"]


def test_other_device_does_not_see_saved_settings(memory_storage, device):
    SettingsPersistence(memory_storage, device).save({**default_user_settings(), "theme": "dark"})

    phone = DeviceProfile(390, 844, 390, device.user_agent)
    assert SettingsPersistence(memory_storage, phone).load()["theme"] == "light"


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"dark"', json.dumps({"theme": "neon"})])
def test_unusable_slot_falls_back_to_defaults(memory_storage, persistence, raw):
    memory_storage.write(persistence.key, raw)
    assert persistence.load() == default_user_settings()


def test_unknown_keys_are_dropped(memory_storage, persistence):
    memory_storage.write(persistence.key, json.dumps({"theme": "dark", "legacyToolbar": True}))

    loaded = persistence.load()

    assert loaded["theme"] == "dark"
    assert "legacyToolbar" not in loaded


def test_partial_slot_merges_over_defaults(memory_storage, persistence):
    memory_storage.write(persistence.key, json.dumps({"wideScreenLayout": {"sidebarWidth": 420}}))

    layout = persistence.load()["wideScreenLayout"]

    assert layout["sidebarWidth"] == 420
    assert layout["metadataWidth"] == 280
    assert layout["sidebarCollapsed"] is False


def test_stale_nested_key_keeps_other_settings(memory_storage, persistence):
    saved = {"theme": "dark", "searchConfig": {"titles": True, "legacy": 1}, "searchHistory": ["wiki"]}
    memory_storage.write(persistence.key, json.dumps(saved))

    loaded = persistence.load()

    assert loaded["theme"] == "dark"
    assert loaded["searchHistory"] == ["wiki"]
    assert loaded["searchConfig"] == {"titles": True, "tags": False, "author": False, "content": False}


def test_invalid_setting_only_resets_itself(memory_storage, persistence):
    saved = {"theme": "dark", "wideScreenLayout": {"sidebarWidth": 99999}, "expandedFolderPaths": ["docs"]}
    memory_storage.write(persistence.key, json.dumps(saved))

    loaded = persistence.load()

    assert loaded["theme"] == "dark"
    assert loaded["expandedFolderPaths"] == ["docs"]
    assert loaded["wideScreenLayout"]["sidebarWidth"] == 300


def test_unavailable_storage_yields_defaults(device):
    persistence = SettingsPersistence(UnavailableStorage(), device)
    assert persistence.load() == default_user_settings()
    assert persistence.save(default_user_settings()) is False
    persistence.clear()


# --- save ---

def test_quota_failure_is_not_fatal(device):
    persistence = SettingsPersistence(MemorySlotStorage(quota_bytes=10), device)
    store = StateStore()
    persistence.attach(store)

    store.set("userSettings.theme", "dark")

    assert store.get("userSettings.theme") == "dark"
    assert persistence.save(store.get("userSettings")) is False


def test_memory_storage_quota():
    storage = MemorySlotStorage(quota_bytes=8)
    storage.write("a", "1234")
    with pytest.raises(SlotQuotaExceededError):
        storage.write("b", "12345")
    # overwriting a slot only counts the new value
    storage.write("a", "12345678")


def test_save_settings_without_store_merges_with_slot(persistence):
    persistence.save_settings({"theme": "dark"})
    persistence.save_settings({"searchMode": "partial"})

    loaded = persistence.load()
    assert loaded["theme"] == "dark"
    assert loaded["searchMode"] == "partial"


def test_clear_removes_slot(memory_storage, persistence):
    persistence.save(default_user_settings())
    persistence.clear()
    assert memory_storage.read(persistence.key) is None


# --- store binding ---

def test_attached_store_saves_user_settings_only(memory_storage, persistence):
    store = StateStore()
    persistence.attach(store)

    store.set("adminSettings.wikiTitle", "Team Wiki")
    assert memory_storage.read(persistence.key) is None

    store.set("userSettings.theme", "dark")
    saved = json.loads(memory_storage.read(persistence.key))

    assert saved["theme"] == "dark"
    assert "wikiTitle" not in saved
    assert set(saved) == set(default_user_settings())


def test_save_settings_goes_through_attached_store(memory_storage, persistence):
    store = StateStore()
    persistence.attach(store)

    assert persistence.save_settings({"showMetadataPanel": False}) is True

    assert store.get("userSettings.showMetadataPanel") is False
    assert json.loads(memory_storage.read(persistence.key))["showMetadataPanel"] is False


def test_save_settings_reports_failed_write_when_attached(device):
    persistence = SettingsPersistence(MemorySlotStorage(quota_bytes=10), device)
    store = StateStore()
    persistence.attach(store)

    assert persistence.save_settings({"theme": "dark"}) is False
    assert store.get("userSettings.theme") == "dark"


def test_detach_stops_saving(memory_storage, persistence):
    store = StateStore()
    persistence.attach(store)
    persistence.detach()

    store.set("userSettings.theme", "dark")

    assert memory_storage.read(persistence.key) is None
    assert store.subscription_count == 0


def test_settings_survive_a_restart(memory_storage, device):
    first = SettingsPersistence(memory_storage, device)
    store = StateStore({"userSettings": first.load()})
    first.attach(store)
    store.set("userSettings.expandedFolderPaths", ["docs"])
    first.detach()

    second = SettingsPersistence(memory_storage, device)
    restored = StateStore({"userSettings": second.load()})
    assert restored.get("userSettings.expandedFolderPaths") == ["docs"]


# --- DuckDB slots ---

def test_duckdb_storage_operations():
    storage = DuckDBSlotStorage()
    try:
        assert storage.read("k") is None
        storage.write("k", "v1")
        storage.write("k", "v2")
        storage.write("j", "x")
        assert storage.read("k") == "v2"
        assert storage.keys() == ["j", "k"]
        storage.remove("k")
        storage.remove("missing")
        assert storage.keys() == ["j"]
    finally:
        storage.close()


def test_duckdb_file_persists_between_connections(tmp_path, device):
    db_path = str(tmp_path / "db" / "settings.duckdb")

    storage = DuckDBSlotStorage(db_path)
    SettingsPersistence(storage, device).save({**default_user_settings(), "theme": "auto"})
    storage.close()

    reopened = DuckDBSlotStorage(db_path)
    try:
        assert SettingsPersistence(reopened, device).load()["theme"] == "auto"
    finally:
        reopened.close()
