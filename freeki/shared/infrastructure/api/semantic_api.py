"""Semantic API - the server operations the state engine consumes.

Two implementations share one protocol: :class:`RealSemanticApi` talks HTTP to
the wiki server, :class:`FakeSemanticApi` serves demo data from memory.
:func:`create_semantic_api` picks one from configuration.
"""

from __future__ import annotations

import copy
import logging
import time
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError

from freeki.shared.core.state_store import deep_merge
from freeki.shared.domain.models import AdminSettings, UserInfo, default_admin_settings, strip_unknown_keys

from .client import ApiClient

logger = logging.getLogger(__name__)

ADMIN_SETTINGS_ENDPOINT = "/api/admin/settings"
CURRENT_USER_ENDPOINT = "/api/user/me"
HEALTH_ENDPOINT = "/health"

INVALID_ADMIN_SETTINGS_MESSAGE = "Server sent unusable admin settings - using defaults"


class SemanticApi(Protocol):
    async def get_admin_settings(self) -> Optional[Dict[str, Any]]: ...

    async def save_admin_settings(self, settings: Dict[str, Any]) -> bool: ...

    async def get_current_user(self) -> Optional[Dict[str, Any]]: ...

    async def health_check(self) -> bool: ...


def normalize_admin_settings(data: Any) -> Optional[Dict[str, Any]]:
    """Fill a server payload in over the defaults and check its shape.

    Keys the schema does not know, at any depth, are dropped first so settings
    saved by older clients still load.

    Returns:
        The complete settings, or None if the payload cannot be used
    """
    if not isinstance(data, dict):
        return None
    known = strip_unknown_keys(AdminSettings, data)
    merged = deep_merge(default_admin_settings(), known)
    try:
        AdminSettings.model_validate(merged)
    except ValidationError as e:
        logger.warning(f"Server admin settings rejected: {e}")
        return None
    return merged


class RealSemanticApi:
    """Semantic API over HTTP."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def get_admin_settings(self) -> Optional[Dict[str, Any]]:
        """Fetch admin settings.

        Returns:
            None for permission errors (non-admin users), the defaults for
            any other failure, otherwise the server's settings
        """
        start = time.perf_counter()
        response = await self.client.get(ADMIN_SETTINGS_ENDPOINT)
        duration_ms = (time.perf_counter() - start) * 1000

        if not response.success:
            if response.error is not None and response.error.is_permission_error:
                logger.info("Admin settings not available to this user")
                return None
            logger.warning(f"get_admin_settings failed after {duration_ms:.0f}ms, using defaults")
            return default_admin_settings()

        settings = normalize_admin_settings(response.data)
        if settings is None:
            self.client.report_error(INVALID_ADMIN_SETTINGS_MESSAGE)
            return default_admin_settings()
        logger.debug(f"get_admin_settings ok in {duration_ms:.0f}ms")
        return settings

    async def save_admin_settings(self, settings: Dict[str, Any]) -> bool:
        try:
            AdminSettings.model_validate(settings)
        except ValidationError as e:
            logger.warning(f"Refusing to save invalid admin settings: {e}")
            return False
        response = await self.client.post(ADMIN_SETTINGS_ENDPOINT, settings)
        return response.success

    async def get_current_user(self) -> Optional[Dict[str, Any]]:
        response = await self.client.get(CURRENT_USER_ENDPOINT)
        if not response.success:
            return None
        try:
            user = UserInfo.model_validate(response.data)
        except ValidationError as e:
            logger.warning(f"Server user info rejected: {e}")
            return None
        return user.model_dump(by_alias=True)

    async def health_check(self) -> bool:
        response = await self.client.get(HEALTH_ENDPOINT)
        return response.success


class FakeSemanticApi:
    """In-memory semantic API for demos and offline development."""

    def __init__(self) -> None:
        self._admin_settings = deep_merge(
            default_admin_settings(),
            {"companyName": "Demo Company", "wikiTitle": "FreeKi Demo Wiki"},
        )
        self._current_user: Dict[str, Any] = {
            "accountId": "demo-user",
            "fullName": "Demo User",
            "email": "demo@example.com",
            "roles": ["Admin"],
            "isAdmin": True,
            "gravatarUrl": None,
        }

    async def get_admin_settings(self) -> Optional[Dict[str, Any]]:
        logger.debug("Fake get_admin_settings")
        return copy.deepcopy(self._admin_settings)

    async def save_admin_settings(self, settings: Dict[str, Any]) -> bool:
        try:
            AdminSettings.model_validate(settings)
        except ValidationError as e:
            logger.warning(f"Fake save_admin_settings rejected: {e}")
            return False
        self._admin_settings = copy.deepcopy(settings)
        return True

    async def get_current_user(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._current_user)

    async def health_check(self) -> bool:
        return True


def create_semantic_api(use_fake_api: bool, client: Optional[ApiClient] = None) -> SemanticApi:
    """Choose the fake or the HTTP implementation."""
    if use_fake_api:
        logger.info("Using fake semantic API")
        return FakeSemanticApi()
    if client is None:
        raise ValueError("An ApiClient is required for the HTTP semantic API")
    return RealSemanticApi(client)
