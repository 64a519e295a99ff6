"""
FreeKi default color schemes.

Color Philosophy:
- The app bar carries the brand blue, everything else stays neutral
- Light and dark schemes define the same attributes so either can be applied whole
- Sizes are pixel values, colors are hex strings (alpha only where a shadow needs it)
"""

from __future__ import annotations

from typing import Any, Dict

# =============================================================================
# BRAND COLORS
# =============================================================================
BRAND_BLUE_LIGHT = "#1976d2"   # App bar in the light scheme
BRAND_BLUE_DARK = "#1565c0"    # App bar in the dark scheme
APP_BAR_TEXT = "#ffffff"

# =============================================================================
# TYPOGRAPHY SIZES (px, shared by both schemes)
# =============================================================================
H1_FONT_SIZE = 32
H2_FONT_SIZE = 24
H3_FONT_SIZE = 20
P_FONT_SIZE = 16
FOLDERS_FONT_SIZE = 16
PAGE_DETAILS_FONT_SIZE = 16

# =============================================================================
# LIGHT SCHEME
# =============================================================================
DEFAULT_LIGHT_SCHEME: Dict[str, Any] = {
    "appBarBackground": BRAND_BLUE_LIGHT,
    "appBarTextColor": APP_BAR_TEXT,
    "footerBackground": "#fafafa",
    "footerTextColor": "#666666",
    "h1FontColor": "#222222",
    "h1FontSize": H1_FONT_SIZE,
    "h2FontColor": "#333333",
    "h2FontSize": H2_FONT_SIZE,
    "h3FontColor": "#444444",
    "h3FontSize": H3_FONT_SIZE,
    "pFontColor": "#000000",
    "pFontSize": P_FONT_SIZE,
    "viewBackground": "#ffffff",
    "editBackground": "#ffffff",
    "foldersBackground": "#fafafa",
    "foldersSelectedBackground": "#e3f2fd",
    "foldersFontColor": "#222222",
    "foldersFontSize": FOLDERS_FONT_SIZE,
    "pageDetailsBackground": "#f9f9f9",
    "pageDetailsFontColor": "#222222",
    "pageDetailsFontSize": PAGE_DETAILS_FONT_SIZE,
    "borderColor": "#e0e0e0",
    "shadowColor": "#22222233",
}

# =============================================================================
# DARK SCHEME
# =============================================================================
DEFAULT_DARK_SCHEME: Dict[str, Any] = {
    "appBarBackground": BRAND_BLUE_DARK,
    "appBarTextColor": APP_BAR_TEXT,
    "footerBackground": "#1e1e1e",
    "footerTextColor": "#b3b3b3",
    "h1FontColor": "#ffffff",
    "h1FontSize": H1_FONT_SIZE,
    "h2FontColor": "#e0e0e0",
    "h2FontSize": H2_FONT_SIZE,
    "h3FontColor": "#cccccc",
    "h3FontSize": H3_FONT_SIZE,
    "pFontColor": "#ffffff",
    "pFontSize": P_FONT_SIZE,
    "viewBackground": "#121212",
    "editBackground": "#1e1e1e",
    "foldersBackground": "#2b2b2b",
    "foldersSelectedBackground": "#2d3e50",
    "foldersFontColor": "#e0e0e0",
    "foldersFontSize": FOLDERS_FONT_SIZE,
    "pageDetailsBackground": "#1e1e1e",
    "pageDetailsFontColor": "#e0e0e0",
    "pageDetailsFontSize": PAGE_DETAILS_FONT_SIZE,
    "borderColor": "#404040",
    "shadowColor": "#00000066",
}

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================
def get_default_scheme(mode: str) -> Dict[str, Any]:
    """Get a copy of the default scheme for a resolved mode."""
    schemes = {
        "light": DEFAULT_LIGHT_SCHEME,
        "dark": DEFAULT_DARK_SCHEME,
    }
    return dict(schemes.get(mode.lower(), DEFAULT_LIGHT_SCHEME))
