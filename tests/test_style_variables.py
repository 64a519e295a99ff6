"""Tests for style variable naming and the stylesheet surface."""
from freeki.shared.domain.theme.palette import DEFAULT_DARK_SCHEME, get_default_scheme
from freeki.shared.domain.theme.style_variables import build_style_variables, format_value, variable_name
from freeki.shared.domain.theme.surfaces import StylesheetFileSurface


def test_variable_names_are_kebab_case():
    assert variable_name("appBarBackground") == "--freeki-app-bar-background"
    assert variable_name("h1FontSize") == "--freeki-h1-font-size"
    assert variable_name("pFontColor") == "--freeki-p-font-color"
    assert variable_name("foldersSelectedBackground") == "--freeki-folders-selected-background"


def test_sizes_get_pixel_units():
    assert format_value("h1FontSize", 32) == "32px"
    assert format_value("h1FontSize", 18.5) == "18.5px"
    assert format_value("h1FontSize", 24.0) == "24px"
    assert format_value("borderColor", "#e0e0e0") == "#e0e0e0"


def test_build_covers_every_attribute():
    variables = build_style_variables(DEFAULT_DARK_SCHEME)
    assert len(variables) == len(DEFAULT_DARK_SCHEME)
    assert variables["--freeki-view-background"] == "#121212"
    assert variables["--freeki-shadow-color"] == DEFAULT_DARK_SCHEME["shadowColor"]


def test_missing_attributes_fall_back_to_light_defaults():
    variables = build_style_variables({"appBarBackground": "#000000", "h2FontColor": ""})
    assert variables["--freeki-app-bar-background"] == "#000000"
    assert variables["--freeki-h2-font-color"] == "#333333"
    assert variables["--freeki-p-font-size"] == "16px"


def test_get_default_scheme_returns_copies():
    scheme = get_default_scheme("dark")
    scheme["viewBackground"] = "#ffffff"
    assert get_default_scheme("dark")["viewBackground"] == "#121212"


def test_stylesheet_surface_writes_root_block(tmp_path):
    path = tmp_path / "theme" / "freeki.css"
    surface = StylesheetFileSurface(path)

    surface.apply(build_style_variables(DEFAULT_DARK_SCHEME), "dark")

    css = path.read_text(encoding="utf-8")
    assert "dark scheme" in css
    assert ":root {" in css
    assert "  --freeki-app-bar-background: #1565c0;" in css
    assert "  --freeki-h1-font-size: 32px;" in css
    assert css.rstrip().endswith("}")
    assert not (tmp_path / "theme" / "freeki.css.tmp").exists()


def test_stylesheet_surface_overwrites(tmp_path):
    path = tmp_path / "freeki.css"
    surface = StylesheetFileSurface(path)

    surface.apply({"--freeki-border-color": "#111111"}, "light")
    surface.apply({"--freeki-border-color": "#222222"}, "light")

    css = path.read_text(encoding="utf-8")
    assert "#222222" in css
    assert "#111111" not in css
