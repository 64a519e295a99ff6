"""
State Tree Schema for the FreeKi client

The state tree is stored as plain JSON-like dictionaries keyed by camelCase
names (the server wire format). These pydantic models describe the shape of
that tree so every write can be checked before it is committed.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from freeki.shared.domain.theme.palette import DEFAULT_DARK_SCHEME, DEFAULT_LIGHT_SCHEME

HexColor = Annotated[str, StringConstraints(pattern=r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")]
FontSize = Annotated[float, Field(gt=0, le=200)]

ThemePreference = Literal["light", "dark", "auto"]
ResolvedTheme = Literal["light", "dark"]

SEARCH_HISTORY_LIMIT = 10


class _StateModel(BaseModel):
    """Base for every node of the state tree: camelCase keys, no unknown fields, no coercion."""
    model_config = ConfigDict(
        extra='forbid',
        strict=True,
        alias_generator=to_camel,
    )


class ColorScheme(_StateModel):
    """Named style attributes for one visual mode"""

    app_bar_background: HexColor = DEFAULT_LIGHT_SCHEME["appBarBackground"]
    app_bar_text_color: HexColor = DEFAULT_LIGHT_SCHEME["appBarTextColor"]
    footer_background: HexColor = DEFAULT_LIGHT_SCHEME["footerBackground"]
    footer_text_color: HexColor = DEFAULT_LIGHT_SCHEME["footerTextColor"]
    h1_font_color: HexColor = DEFAULT_LIGHT_SCHEME["h1FontColor"]
    h1_font_size: FontSize = DEFAULT_LIGHT_SCHEME["h1FontSize"]
    h2_font_color: HexColor = DEFAULT_LIGHT_SCHEME["h2FontColor"]
    h2_font_size: FontSize = DEFAULT_LIGHT_SCHEME["h2FontSize"]
    h3_font_color: HexColor = DEFAULT_LIGHT_SCHEME["h3FontColor"]
    h3_font_size: FontSize = DEFAULT_LIGHT_SCHEME["h3FontSize"]
    p_font_color: HexColor = DEFAULT_LIGHT_SCHEME["pFontColor"]
    p_font_size: FontSize = DEFAULT_LIGHT_SCHEME["pFontSize"]
    view_background: HexColor = DEFAULT_LIGHT_SCHEME["viewBackground"]
    edit_background: HexColor = DEFAULT_LIGHT_SCHEME["editBackground"]
    folders_background: HexColor = DEFAULT_LIGHT_SCHEME["foldersBackground"]
    folders_selected_background: HexColor = DEFAULT_LIGHT_SCHEME["foldersSelectedBackground"]
    folders_font_color: HexColor = DEFAULT_LIGHT_SCHEME["foldersFontColor"]
    folders_font_size: FontSize = DEFAULT_LIGHT_SCHEME["foldersFontSize"]
    page_details_background: HexColor = DEFAULT_LIGHT_SCHEME["pageDetailsBackground"]
    page_details_font_color: HexColor = DEFAULT_LIGHT_SCHEME["pageDetailsFontColor"]
    page_details_font_size: FontSize = DEFAULT_LIGHT_SCHEME["pageDetailsFontSize"]
    border_color: HexColor = DEFAULT_LIGHT_SCHEME["borderColor"]
    shadow_color: HexColor = DEFAULT_LIGHT_SCHEME["shadowColor"]


def _dark_scheme() -> ColorScheme:
    return ColorScheme.model_validate(DEFAULT_DARK_SCHEME)


class ColorSchemes(_StateModel):
    light: ColorScheme = Field(default_factory=ColorScheme)
    dark: ColorScheme = Field(default_factory=_dark_scheme)


class AdminSettings(_StateModel):
    """Server-owned branding and palette"""

    company_name: str = Field(default="Your Company", description="Company shown in the app bar")
    company_logo_path: str = Field(default="/logo.png", description="Logo served by the wiki")
    wiki_title: str = Field(default="FreeKi Wiki", description="Title of the wiki")
    color_schemes: ColorSchemes = Field(default_factory=ColorSchemes)


class SearchConfig(_StateModel):
    titles: bool = True
    tags: bool = False
    author: bool = False
    content: bool = False


class WideScreenLayout(_StateModel):
    sidebar_collapsed: bool = False
    metadata_collapsed: bool = False
    sidebar_width: int = Field(default=300, ge=0, le=4000)
    metadata_width: int = Field(default=280, ge=0, le=4000)


class NarrowScreenLayout(_StateModel):
    sidebar_collapsed: bool = True
    metadata_collapsed: bool = True


class UserSettings(_StateModel):
    """Client-owned preferences, persisted per device"""

    theme: ThemePreference = Field(default="light", description="Theme preference")
    search_mode: Literal["full", "partial"] = "full"
    search_config: SearchConfig = Field(default_factory=SearchConfig)
    wide_screen_layout: WideScreenLayout = Field(default_factory=WideScreenLayout)
    narrow_screen_layout: NarrowScreenLayout = Field(default_factory=NarrowScreenLayout)
    expanded_folder_paths: List[str] = Field(default_factory=list)
    visible_page_ids: List[str] = Field(default_factory=list)
    search_history: List[str] = Field(default_factory=list, max_length=SEARCH_HISTORY_LIMIT)
    last_selected_page_id: Optional[str] = None
    show_metadata_panel: bool = True
    default_edit_mode: Literal["wysiwyg", "markdown"] = "wysiwyg"
    auto_save: bool = True
    auto_save_interval: int = Field(default=30, ge=1, le=3600, description="Seconds between auto-saves")


class UserInfo(_StateModel):
    account_id: str
    full_name: str
    email: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    is_admin: bool = False
    gravatar_url: Optional[str] = None


class AppStateModel(_StateModel):
    """Complete client state tree"""

    admin_settings: AdminSettings = Field(default_factory=AdminSettings)
    user_settings: UserSettings = Field(default_factory=UserSettings)
    current_user: Optional[UserInfo] = None

    # Server listings; their inner shape belongs to the wiki collaborators
    page_metadata: List[Dict[str, Any]] = Field(default_factory=list)
    current_page_metadata: Optional[Dict[str, Any]] = None
    current_page_content: Optional[Dict[str, Any]] = None
    search_results: List[Dict[str, Any]] = Field(default_factory=list)

    # Transient UI
    is_editing: bool = False
    search_query: str = ""
    is_loading_admin_settings: bool = True
    is_loading_pages: bool = False
    is_loading_user: bool = False
    error_message: Optional[str] = None


# Top-level fields that are never written to local storage
VOLATILE_FIELDS = frozenset(
    name for name in (to_camel(field) for field in AppStateModel.model_fields) if name != "userSettings"
)


def default_app_state() -> Dict[str, Any]:
    """Fresh default state tree as plain dictionaries."""
    return AppStateModel().model_dump(by_alias=True)


def default_admin_settings() -> Dict[str, Any]:
    return AdminSettings().model_dump(by_alias=True)


def default_user_settings() -> Dict[str, Any]:
    return UserSettings().model_dump(by_alias=True)


def strip_unknown_keys(model: Type[BaseModel], data: Dict[str, Any]) -> Dict[str, Any]:
    """Copy ``data`` keeping only the keys ``model`` declares, at every level.

    Payloads written by older clients may carry fields this schema no longer
    has; those are dropped instead of failing the whole object.
    """
    kept: Dict[str, Any] = {}
    for name, info in model.model_fields.items():
        key = info.alias or name
        if key not in data:
            continue
        value = data[key]
        nested = info.annotation
        if isinstance(value, dict) and isinstance(nested, type) and issubclass(nested, BaseModel):
            value = strip_unknown_keys(nested, value)
        kept[key] = value
    return kept
