"""Tests for dotted path parsing and matching."""
import pytest

from freeki.shared.core.events import color_scheme_path, user_setting_path
from freeki.shared.core.paths import (
    InvalidPathError,
    get_value_at,
    has_path,
    is_affected,
    is_ancestor,
    join_path,
    split_path,
)


def test_split_path_segments():
    assert split_path("") == ()
    assert split_path("adminSettings") == ("adminSettings",)
    assert split_path("adminSettings.colorSchemes.light") == ("adminSettings", "colorSchemes", "light")


@pytest.mark.parametrize("bad", ["a..b", ".a", "a.", "a b", " a", "a.\tb", "."])
def test_split_path_rejects_malformed(bad):
    with pytest.raises(InvalidPathError):
        split_path(bad)


def test_split_path_rejects_non_string():
    with pytest.raises(InvalidPathError):
        split_path(5)


def test_invalid_path_is_value_error():
    with pytest.raises(ValueError):
        split_path("a..b")


@pytest.mark.parametrize(
    "changed, subscribed, expected",
    [
        # exact
        ("userSettings.theme", "userSettings.theme", True),
        # change below the subscription
        ("adminSettings.colorSchemes.light.h1FontSize", "adminSettings", True),
        ("adminSettings.colorSchemes.light.h1FontSize", "adminSettings.colorSchemes", True),
        # subscription inside a replaced subtree
        ("adminSettings", "adminSettings.colorSchemes.light.appBarBackground", True),
        # siblings and unrelated branches
        ("adminSettings.colorSchemes.light", "adminSettings.colorSchemes.dark", False),
        ("userSettings.theme", "adminSettings", False),
        # whole segments only
        ("admin", "adminSettings", False),
        ("adminSettings.colorSchemes.lightish", "adminSettings.colorSchemes.light", False),
        # root
        ("userSettings.theme", "", True),
        ("", "userSettings.theme", True),
    ],
)
def test_is_affected(changed, subscribed, expected):
    assert is_affected(changed, subscribed) is expected


def test_is_ancestor_is_strict():
    assert is_ancestor("adminSettings", "adminSettings.wikiTitle")
    assert is_ancestor("", "adminSettings")
    assert not is_ancestor("adminSettings", "adminSettings")
    assert not is_ancestor("adminSettings.wikiTitle", "adminSettings")


def test_join_path_skips_empty_parts():
    assert join_path("a", "", "b") == "a.b"
    assert join_path("a.b", "c") == "a.b.c"
    assert join_path() == ""


def test_canonical_path_helpers():
    assert color_scheme_path("dark", "h1FontSize") == "adminSettings.colorSchemes.dark.h1FontSize"
    assert color_scheme_path("light") == "adminSettings.colorSchemes.light"
    assert user_setting_path("searchConfig.tags") == "userSettings.searchConfig.tags"


def test_get_value_at():
    tree = {"a": {"b": {"c": 1}, "list": [1, 2]}}
    assert get_value_at(tree, "a.b.c") == 1
    assert get_value_at(tree, "") is tree
    assert get_value_at(tree, "a.x", "missing") == "missing"
    # cannot walk into a list or a leaf
    assert get_value_at(tree, "a.list.0") is None
    assert get_value_at(tree, "a.b.c.d") is None


def test_has_path_distinguishes_none_from_missing():
    tree = {"a": None}
    assert has_path(tree, "a")
    assert not has_path(tree, "b")
