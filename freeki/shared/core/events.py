"""Canonical state paths for the FreeKi client."""

from __future__ import annotations

from typing import Literal

from .paths import join_path

# Server-owned branding and palette
PATH_ADMIN_SETTINGS = "adminSettings"
PATH_COLOR_SCHEMES = "adminSettings.colorSchemes"
PATH_LIGHT_SCHEME = "adminSettings.colorSchemes.light"
PATH_DARK_SCHEME = "adminSettings.colorSchemes.dark"

# Client-owned, persisted per device
PATH_USER_SETTINGS = "userSettings"
PATH_USER_THEME = "userSettings.theme"
PATH_SEARCH_HISTORY = "userSettings.searchHistory"
PATH_EXPANDED_FOLDERS = "userSettings.expandedFolderPaths"
PATH_SEARCH_CONFIG = "userSettings.searchConfig"

# Server listings
PATH_CURRENT_USER = "currentUser"
PATH_PAGE_METADATA = "pageMetadata"
PATH_SEARCH_RESULTS = "searchResults"

# Transient UI
PATH_IS_EDITING = "isEditing"
PATH_SEARCH_QUERY = "searchQuery"
PATH_LOADING_ADMIN_SETTINGS = "isLoadingAdminSettings"
PATH_LOADING_PAGES = "isLoadingPages"
PATH_LOADING_USER = "isLoadingUser"
PATH_ERROR_MESSAGE = "errorMessage"


def color_scheme_path(mode: Literal["light", "dark"], attribute: str | None = None) -> str:
    """Path of one scheme, or of one attribute inside it."""
    return join_path(PATH_COLOR_SCHEMES, mode, attribute or "")


def user_setting_path(key: str) -> str:
    """Path of a single user setting (e.g. ``searchConfig.tags``)."""
    return join_path(PATH_USER_SETTINGS, key)
