"""State Store - single source of truth for the client.

Holds one state tree addressed by dotted property paths. Reads hand out deep
copies, writes deep-merge objects into the tree, get checked against the
schema and are then announced synchronously to every affected subscriber.

Usage:
    store = StateStore()
    sub_id = store.subscribe("adminSettings", on_admin_change)
    store.set("adminSettings.colorSchemes.light.appBarBackground", "#112233")
    store.get("adminSettings.colorSchemes.light")
    store.unsubscribe(sub_id)
"""

from __future__ import annotations

import copy
import itertools
import logging
from collections import deque
from typing import Any, Deque, Dict, Iterable, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from freeki.shared.domain.models import AppStateModel, default_app_state

from .notifier import ChangeCallback, Notifier, Subscription
from .paths import ROOT_PATH, InvalidPathError, get_value_at, split_path

logger = logging.getLogger(__name__)

_MISSING = object()

PendingChange = Tuple[str, Any, Any]


class StateValidationError(ValueError):
    """Raised when a write would leave the state tree in an invalid shape."""


def deep_merge(base: Any, updates: Any) -> Any:
    """Merge ``updates`` into ``base`` without mutating either.

    Dictionaries merge key by key, anything else (lists included) replaces.
    """
    if not isinstance(base, dict) or not isinstance(updates, dict):
        return copy.deepcopy(updates)
    merged = dict(base)
    for key, value in updates.items():
        if key in merged:
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class StateStore:
    """Path-addressed state tree with synchronous change notification.

    Nested writes from inside a callback are committed at once but their
    notifications wait until the current batch has been delivered (FIFO).
    """

    def __init__(
        self,
        initial_state: Optional[Mapping[str, Any]] = None,
        schema: Type[BaseModel] = AppStateModel,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._schema = schema
        self._notifier = notifier or Notifier()
        state = default_app_state() if schema is AppStateModel else {}
        if initial_state:
            state = deep_merge(state, dict(initial_state))
        self._validate(state, ROOT_PATH)
        self._state: Dict[str, Any] = state
        self._subscriptions: Dict[int, Subscription] = {}
        self._ids = itertools.count(1)
        self._pending: Deque[PendingChange] = deque()
        self._notifying = False

    # --- Reads ---

    def get(self, path: str = ROOT_PATH, default: Any = None) -> Any:
        """Return an independent copy of the subtree at ``path``.

        Unknown or malformed paths return ``default`` instead of raising,
        since view bindings read optional fields.
        """
        try:
            value = get_value_at(self._state, path, _MISSING)
        except InvalidPathError:
            return default
        if value is _MISSING:
            return default
        return copy.deepcopy(value)

    def get_state(self) -> Dict[str, Any]:
        return copy.deepcopy(self._state)

    # --- Writes ---

    def set(self, path: str, value: Any) -> None:
        """Write ``value`` at ``path`` and notify affected subscribers.

        Raises:
            InvalidPathError: If the path is malformed
            StateValidationError: If the resulting tree does not match the schema
        """
        segments = split_path(path)
        old_value = get_value_at(self._state, path)
        candidate = self._write(self._state, segments, value)
        self._validate(candidate, path)
        self._state = candidate
        logger.debug(f"State set at '{path or '<root>'}'")
        self._dispatch([(path, get_value_at(candidate, path), old_value)])

    def set_property(self, path: str, value: Any) -> None:
        """Dotted-path form of :meth:`set` used by view bindings."""
        self.set(path, value)

    def update(self, updates: Mapping[str, Any]) -> None:
        """Apply several writes as one validated unit.

        Each key is a path; subscribers are notified once per key, in order.
        """
        if not updates:
            return
        candidate = self._state
        changes = []
        for path, value in updates.items():
            segments = split_path(path)
            old_value = get_value_at(candidate, path)
            candidate = self._write(candidate, segments, value)
            changes.append((path, old_value))
        self._validate(candidate, ", ".join(updates))
        self._state = candidate
        logger.debug(f"State batch update of {len(changes)} path(s)")
        self._dispatch([(path, get_value_at(candidate, path), old) for path, old in changes])

    # --- Subscriptions ---

    def subscribe(self, path: str, callback: ChangeCallback) -> int:
        """Register ``callback(changed_path, new_value, old_value)`` for ``path``.

        Returns:
            Subscription id to pass to :meth:`unsubscribe`
        """
        split_path(path)
        if not callable(callback):
            raise TypeError("callback must be callable")
        sub_id = next(self._ids)
        self._subscriptions[sub_id] = Subscription(sub_id, path, callback)
        return sub_id

    def subscribe_global(self, callback: ChangeCallback) -> int:
        """Subscribe to every change in the tree."""
        return self.subscribe(ROOT_PATH, callback)

    def unsubscribe(self, subscription_id: int) -> bool:
        """Remove a subscription; unknown ids are ignored.

        Returns:
            True if a subscription was removed
        """
        return self._subscriptions.pop(subscription_id, None) is not None

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    # --- Internals ---

    def _write(self, tree: Dict[str, Any], segments: Tuple[str, ...], value: Any) -> Dict[str, Any]:
        """Copy-on-write of ``value`` into ``tree`` along ``segments``."""
        if not segments:
            if not isinstance(value, dict):
                raise StateValidationError("The root of the state tree must be an object")
            return deep_merge(tree, value)

        root = dict(tree)
        node = root
        walked = []
        for segment in segments[:-1]:
            walked.append(segment)
            child = node.get(segment, _MISSING)
            if child is _MISSING or child is None:
                child = {}
            elif not isinstance(child, dict):
                raise StateValidationError(
                    f"Cannot write below '{'.'.join(walked)}': it holds a {type(child).__name__}, not an object"
                )
            child = dict(child)
            node[segment] = child
            node = child

        leaf = segments[-1]
        existing = node.get(leaf, _MISSING)
        if isinstance(value, dict) and isinstance(existing, dict):
            node[leaf] = deep_merge(existing, value)
        else:
            node[leaf] = copy.deepcopy(value)
        return root

    def _validate(self, candidate: Dict[str, Any], path: str) -> None:
        try:
            self._schema.model_validate(candidate)
        except ValidationError as exc:
            raise StateValidationError(f"Invalid write at '{path or '<root>'}': {exc}") from exc

    def _dispatch(self, changes: Iterable[PendingChange]) -> None:
        self._pending.extend(changes)
        if self._notifying:
            # Delivered by the outer loop once the current batch is done
            return
        self._notifying = True
        try:
            while self._pending:
                path, new_value, old_value = self._pending.popleft()
                snapshot = list(self._subscriptions.values())
                self._notifier.notify(snapshot, path, new_value, old_value)
        finally:
            self._notifying = False
