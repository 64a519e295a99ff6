"""Persistence of ``userSettings`` to a per-device storage slot.

Only the user settings subtree is ever written. Admin settings and transient
UI fields are reloaded from the server each session.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from pydantic import ValidationError

from freeki.shared.core.events import PATH_USER_SETTINGS
from freeki.shared.core.state_store import deep_merge
from freeki.shared.domain.models import UserSettings, default_user_settings, strip_unknown_keys
from freeki.shared.infrastructure.persistence.slot_storage import SlotStorage, SlotStorageError

from .device import DeviceProfile

if TYPE_CHECKING:
    from freeki.shared.core.state_store import StateStore

logger = logging.getLogger(__name__)

USER_SETTINGS_KEYS = frozenset(
    info.alias or name for name, info in UserSettings.model_fields.items()
)


class SettingsPersistence:
    """Loads and saves user settings for one device.

    Usage:
        persistence = SettingsPersistence(storage, device)
        store = StateStore({"userSettings": persistence.load()})
        persistence.attach(store)
    """

    def __init__(self, storage: SlotStorage, device: DeviceProfile) -> None:
        self.storage = storage
        self.device = device
        self.key = device.settings_key
        self._store: Optional["StateStore"] = None
        self._subscription_id: Optional[int] = None
        self._last_save_ok = False

    def load(self) -> Dict[str, Any]:
        """Read this device's settings merged over the defaults.

        Never raises: a missing, unreadable or corrupt slot yields defaults.
        """
        defaults = default_user_settings()

        try:
            raw = self.storage.read(self.key)
        except SlotStorageError as e:
            logger.warning(f"Settings storage unavailable, using defaults: {e}")
            return defaults

        if raw is None:
            logger.debug(f"No saved settings under {self.key}")
            return defaults

        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Corrupt settings under {self.key}, using defaults: {e}")
            return defaults

        if not isinstance(parsed, dict):
            logger.warning(f"Settings under {self.key} are not an object, using defaults")
            return defaults

        unknown = set(parsed) - USER_SETTINGS_KEYS
        if unknown:
            logger.debug(f"Dropping unknown saved settings: {sorted(unknown)}")
        known = strip_unknown_keys(UserSettings, parsed)

        # Each top-level setting stands on its own; a bad one keeps its default
        settings = defaults
        for key, value in known.items():
            candidate = deep_merge(settings, {key: value})
            try:
                UserSettings.model_validate(candidate)
            except ValidationError as e:
                logger.warning(f"Ignoring saved setting {key!r} under {self.key}: {e}")
                continue
            settings = candidate

        return settings

    def save(self, settings: Mapping[str, Any]) -> bool:
        """Overwrite the slot with the whole settings object.

        Returns:
            True if the write succeeded; failures are logged, not raised
        """
        try:
            payload = json.dumps(dict(settings))
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize user settings: {e}")
            return False

        try:
            self.storage.write(self.key, payload)
        except SlotStorageError as e:
            logger.warning(f"Failed to save user settings: {e}")
            return False

        logger.debug(f"Saved user settings under {self.key}")
        return True

    def save_settings(self, changes: Mapping[str, Any]) -> bool:
        """Merge ``changes`` into the current settings and persist them.

        When attached, the write goes through the store (and is saved by the
        subscription); otherwise it is merged with what the slot holds.

        Returns:
            True if the slot now holds the merged settings. When attached, a
            failed write still leaves the changes in the store.
        """
        if self._store is not None:
            self._last_save_ok = False
            self._store.set(PATH_USER_SETTINGS, dict(changes))
            return self._last_save_ok

        merged = deep_merge(self.load(), dict(changes))
        UserSettings.model_validate(merged)
        return self.save(merged)

    def clear(self) -> None:
        """Forget this device's saved settings."""
        try:
            self.storage.remove(self.key)
        except SlotStorageError as e:
            logger.warning(f"Failed to clear user settings: {e}")

    # --- Store binding ---

    def attach(self, store: "StateStore") -> int:
        """Save ``userSettings`` whenever it (or anything inside it) changes."""
        if self._subscription_id is not None:
            self.detach()
        self._store = store
        self._subscription_id = store.subscribe(PATH_USER_SETTINGS, self._on_user_settings_changed)
        return self._subscription_id

    def detach(self) -> None:
        if self._store is not None and self._subscription_id is not None:
            self._store.unsubscribe(self._subscription_id)
        self._store = None
        self._subscription_id = None

    def _on_user_settings_changed(self, path: str, new_value: Any, old_value: Any) -> None:
        if self._store is None:
            return
        self._last_save_ok = self.save(self._store.get(PATH_USER_SETTINGS, default_user_settings()))
