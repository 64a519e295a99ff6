"""Dotted property paths for the FreeKi state tree.

A path such as ``adminSettings.colorSchemes.light.appBarBackground`` addresses
one node of the state tree. The empty path addresses the root. Matching is
done on whole segments, so ``admin`` is never a prefix of ``adminSettings``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Tuple

ROOT_PATH = ""

_MISSING = object()


class InvalidPathError(ValueError):
    """Raised when a property path is malformed."""


@lru_cache(maxsize=1024)
def split_path(path: str) -> Tuple[str, ...]:
    """Split a path into its segments, validating it on the way."""
    if not isinstance(path, str):
        raise InvalidPathError(f"Path must be a string, got {type(path).__name__}")
    if path == ROOT_PATH:
        return ()
    segments = tuple(path.split("."))
    for segment in segments:
        if not segment:
            raise InvalidPathError(f"Empty segment in path '{path}'")
        if segment != segment.strip() or any(ch.isspace() for ch in segment):
            raise InvalidPathError(f"Whitespace in path segment '{segment}' of '{path}'")
    return segments


def join_path(*segments: str) -> str:
    """Join segments (or sub-paths) into one path, skipping empty parts."""
    path = ".".join(s for s in segments if s)
    split_path(path)
    return path


def validate_path(path: str) -> str:
    split_path(path)
    return path


def is_ancestor(ancestor: str, descendant: str) -> bool:
    """True when ``ancestor`` is a strict ancestor of ``descendant``."""
    a = split_path(ancestor)
    d = split_path(descendant)
    return len(a) < len(d) and d[: len(a)] == a


def is_affected(changed_path: str, subscribed_path: str) -> bool:
    """Decide whether a change at ``changed_path`` is visible at ``subscribed_path``.

    Affected when the paths are equal, when the change happened below the
    subscribed node, or when the subscribed node sits inside a subtree that
    was replaced wholesale.
    """
    changed = split_path(changed_path)
    subscribed = split_path(subscribed_path)
    shortest = min(len(changed), len(subscribed))
    return changed[:shortest] == subscribed[:shortest]


def get_value_at(tree: Any, path: str, default: Any = None) -> Any:
    """Walk ``tree`` along ``path``; return ``default`` when it leads nowhere."""
    node = tree
    for segment in split_path(path):
        if not isinstance(node, dict):
            return default
        node = node.get(segment, _MISSING)
        if node is _MISSING:
            return default
    return node


def has_path(tree: Any, path: str) -> bool:
    return get_value_at(tree, path, _MISSING) is not _MISSING
