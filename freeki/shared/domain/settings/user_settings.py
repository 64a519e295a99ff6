"""Helpers for the user-settings operations the views perform."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from freeki.shared.core.events import (
    PATH_EXPANDED_FOLDERS,
    PATH_SEARCH_HISTORY,
    PATH_USER_SETTINGS,
    user_setting_path,
)
from freeki.shared.domain.models import SEARCH_HISTORY_LIMIT, default_user_settings

if TYPE_CHECKING:
    from freeki.shared.core.state_store import StateStore

    from .persistence import SettingsPersistence


def update_setting(store: "StateStore", key: str, value: Any) -> None:
    """Write one setting, e.g. ``update_setting(store, "theme", "dark")``."""
    store.set(user_setting_path(key), value)


def add_to_search_history(store: "StateStore", query: str) -> List[str]:
    """Move ``query`` to the front of the history, keeping the newest entries."""
    query = query.strip()
    history: List[str] = store.get(PATH_SEARCH_HISTORY, [])
    if not query:
        return history
    history = [query] + [item for item in history if item != query]
    history = history[:SEARCH_HISTORY_LIMIT]
    store.set(PATH_SEARCH_HISTORY, history)
    return history


def set_folder_expanded(store: "StateStore", folder_path: str, expanded: bool) -> List[str]:
    folders: List[str] = store.get(PATH_EXPANDED_FOLDERS, [])
    if expanded and folder_path not in folders:
        folders.append(folder_path)
    elif not expanded and folder_path in folders:
        folders = [f for f in folders if f != folder_path]
    else:
        return folders
    store.set(PATH_EXPANDED_FOLDERS, folders)
    return folders


def toggle_expanded_folder(store: "StateStore", folder_path: str) -> bool:
    """Flip a folder's expanded state; returns the new state."""
    expanded = folder_path not in store.get(PATH_EXPANDED_FOLDERS, [])
    set_folder_expanded(store, folder_path, expanded)
    return expanded


def current_layout(settings: Dict[str, Any], narrow_screen: bool) -> Dict[str, Any]:
    """Layout flags for the current screen width; narrow screens have no widths."""
    if narrow_screen:
        layout = dict(settings["narrowScreenLayout"])
        layout.setdefault("sidebarWidth", None)
        layout.setdefault("metadataWidth", None)
        return layout
    return dict(settings["wideScreenLayout"])


def reset_settings(store: "StateStore", persistence: Optional["SettingsPersistence"] = None) -> None:
    """Restore default settings and drop the saved slot."""
    store.set(PATH_USER_SETTINGS, default_user_settings())
    if persistence is not None:
        persistence.clear()
