"""
Shared Domain Module
====================

State schema, theme application and user-settings persistence.

The theme and settings subpackages depend on the core store and are imported
from their own modules.
"""

from freeki.shared.domain.models import (
    AppStateModel,
    AdminSettings,
    ColorScheme,
    ColorSchemes,
    UserSettings,
    UserInfo,
    default_app_state,
    default_admin_settings,
    default_user_settings,
)

__all__ = [
    "AppStateModel",
    "AdminSettings",
    "ColorScheme",
    "ColorSchemes",
    "UserSettings",
    "UserInfo",
    "default_app_state",
    "default_admin_settings",
    "default_user_settings",
]
