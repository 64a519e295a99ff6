"""Client session - wires one state store into every consumer.

Usage:
    session = ClientSession(get_config())
    session.start()
    await session.load_server_state()
    ...
    await session.aclose()
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

import httpx

from freeki.shared.core.configuration import ClientConfig
from freeki.shared.core.events import (
    PATH_ADMIN_SETTINGS,
    PATH_CURRENT_USER,
    PATH_ERROR_MESSAGE,
    PATH_LOADING_ADMIN_SETTINGS,
    PATH_LOADING_USER,
    PATH_USER_SETTINGS,
)
from freeki.shared.core.scheduler import Scheduler
from freeki.shared.core.service_registry import register_cleanup_handler, unregister_cleanup_handler
from freeki.shared.core.state_store import StateStore
from freeki.shared.domain.settings.device import DeviceProfile
from freeki.shared.domain.settings.persistence import SettingsPersistence
from freeki.shared.domain.theme.surfaces import InMemoryStyleSurface, StyleSurface, StylesheetFileSurface
from freeki.shared.domain.theme.theme_applier import ThemeApplier
from freeki.shared.infrastructure.api.client import ApiClient
from freeki.shared.infrastructure.api.semantic_api import SemanticApi, create_semantic_api
from freeki.shared.infrastructure.persistence.slot_storage import (
    DuckDBSlotStorage,
    MemorySlotStorage,
    SlotStorage,
)

logger = logging.getLogger(__name__)


def create_slot_storage(config: ClientConfig) -> SlotStorage:
    if config.persistence.in_memory:
        return MemorySlotStorage()
    return DuckDBSlotStorage(config.persistence.db_path)


def create_style_surface(config: ClientConfig) -> StyleSurface:
    if config.theme.stylesheet_path:
        return StylesheetFileSurface(config.theme.stylesheet_path)
    return InMemoryStyleSurface()


class ClientSession:
    """Owns the store and the services bound to it for one client run."""

    def __init__(
        self,
        config: ClientConfig,
        storage: Optional[SlotStorage] = None,
        surface: Optional[StyleSurface] = None,
        scheduler: Optional[Scheduler] = None,
        semantic_api: Optional[SemanticApi] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.device = DeviceProfile.from_config(config.device)
        self.storage = storage if storage is not None else create_slot_storage(config)
        self.surface = surface if surface is not None else create_style_surface(config)
        self._scheduler = scheduler
        self._platform_color_scheme = config.theme.platform_color_scheme

        self.api_client = ApiClient(config.api.base_url, config.api.timeout, transport=transport)
        self.api_client.set_error_handler(self._show_error)
        self.api = semantic_api or create_semantic_api(config.api.use_fake_api, self.api_client)

        self.persistence = SettingsPersistence(self.storage, self.device)
        self.store: Optional[StateStore] = None
        self.theme_applier: Optional[ThemeApplier] = None
        self._closed = False

    @property
    def platform_color_scheme(self) -> str:
        return self._platform_color_scheme

    def start(self) -> StateStore:
        """Restore saved settings into a fresh store and apply the theme."""
        if self.store is not None:
            return self.store

        logger.info(f"Starting client session for device slot {self.device.settings_key}")
        self.store = StateStore({PATH_USER_SETTINGS: self.persistence.load()})
        self.persistence.attach(self.store)

        self.theme_applier = ThemeApplier(
            self.store,
            self.surface,
            scheduler=self._scheduler,
            prefers_dark=lambda: self._platform_color_scheme == "dark",
            debounce_ms=self.config.theme.debounce_ms,
        )
        self.theme_applier.start()
        register_cleanup_handler(self.close)
        return self.store

    async def load_server_state(self) -> None:
        """Fetch admin settings and the current user into the store."""
        store = self._require_store()

        store.set(PATH_LOADING_ADMIN_SETTINGS, True)
        try:
            admin_settings = await self.api.get_admin_settings()
            if admin_settings is not None:
                store.set(PATH_ADMIN_SETTINGS, admin_settings)
            else:
                logger.info("Keeping default admin settings")
        finally:
            store.set(PATH_LOADING_ADMIN_SETTINGS, False)

        store.set(PATH_LOADING_USER, True)
        try:
            user = await self.api.get_current_user()
            store.set(PATH_CURRENT_USER, user)
        finally:
            store.set(PATH_LOADING_USER, False)

    def set_platform_color_scheme(self, scheme: Literal["light", "dark"]) -> None:
        """Record a platform light/dark flip; matters only for the ``auto`` theme."""
        if scheme == self._platform_color_scheme:
            return
        self._platform_color_scheme = scheme
        if self.theme_applier is not None:
            self.theme_applier.platform_preference_changed()

    def clear_error(self) -> None:
        self._require_store().set(PATH_ERROR_MESSAGE, None)

    def close(self) -> None:
        """Stop following the store and release local storage."""
        if self._closed:
            return
        self._closed = True

        if self.theme_applier is not None:
            self.theme_applier.flush()
            self.theme_applier.dispose()
        self.persistence.detach()
        if isinstance(self.storage, DuckDBSlotStorage):
            self.storage.close()
        unregister_cleanup_handler(self.close)
        logger.info("Client session closed")

    async def aclose(self) -> None:
        self.close()
        await self.api_client.aclose()

    def _show_error(self, message: str) -> None:
        if self.store is None:
            logger.error(f"API error before session start: {message}")
            return
        self.store.set(PATH_ERROR_MESSAGE, message)

    def _require_store(self) -> StateStore:
        if self.store is None:
            raise RuntimeError("Client session not started")
        return self.store
