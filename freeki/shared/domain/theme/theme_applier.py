"""Theme Applier - pushes the effective color scheme to a styling surface.

Watches the server palette (``adminSettings.colorSchemes``) and the user's
theme preference (``userSettings.theme``). Bursts of writes, such as a font
size slider being dragged, collapse into one apply of the last value, and an
apply whose content matches the previous one is skipped.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional

from freeki.shared.core.events import PATH_COLOR_SCHEMES, PATH_USER_THEME
from freeki.shared.core.scheduler import AsyncioScheduler, Debouncer, Scheduler
from freeki.shared.core.service_registry import register_cleanup_handler, unregister_cleanup_handler

from .palette import get_default_scheme
from .style_variables import build_style_variables
from .surfaces import StyleSurface

if TYPE_CHECKING:
    from freeki.shared.core.state_store import StateStore

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 16.0


def resolve_theme(preference: Optional[str], prefers_dark: bool) -> str:
    """Concrete mode for a preference; ``auto`` follows the platform."""
    if preference == "dark":
        return "dark"
    if preference == "auto":
        return "dark" if prefers_dark else "light"
    return "light"


def theme_fingerprint(mode: str, scheme: Mapping[str, Any]) -> str:
    payload = f"{mode}-{json.dumps(dict(scheme), sort_keys=True, separators=(',', ':'))}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ThemeApplier:
    """Applies the resolved scheme once per logical change.

    Usage:
        applier = ThemeApplier(store, surface, prefers_dark=lambda: False)
        applier.start()      # synchronous first apply, then subscription-driven
        ...
        applier.dispose()
    """

    def __init__(
        self,
        store: "StateStore",
        surface: StyleSurface,
        scheduler: Optional[Scheduler] = None,
        prefers_dark: Optional[Callable[[], bool]] = None,
        debounce_ms: float = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self.store = store
        self.surface = surface
        self._prefers_dark = prefers_dark or (lambda: False)
        self._debouncer = Debouncer(scheduler or AsyncioScheduler(), debounce_ms / 1000.0, self.apply_current)
        self._subscriptions: List[int] = []
        self._last_fingerprint: Optional[str] = None
        self._started = False
        self.apply_count = 0

    @property
    def started(self) -> bool:
        return self._started

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def start(self) -> None:
        """Apply the current state now, then follow changes."""
        if self._started:
            return

        self.apply_current()

        # Parent paths also catch every nested edit (font size sliders etc.)
        self._subscriptions.append(self.store.subscribe(PATH_COLOR_SCHEMES, self._on_theme_input_changed))
        self._subscriptions.append(self.store.subscribe(PATH_USER_THEME, self._on_theme_input_changed))

        self._started = True
        register_cleanup_handler(self.dispose)
        logger.info("Theme applier started")

    def resolve_mode(self) -> str:
        return resolve_theme(self.store.get(PATH_USER_THEME), self._prefers_dark())

    def current_scheme(self, mode: str) -> Dict[str, Any]:
        schemes = self.store.get(PATH_COLOR_SCHEMES) or {}
        return schemes.get(mode) or get_default_scheme(mode)

    def apply_current(self) -> bool:
        """Push the effective scheme unless it matches the last successful apply.

        Returns:
            True if the surface was written
        """
        mode = self.resolve_mode()
        scheme = self.current_scheme(mode)
        fingerprint = theme_fingerprint(mode, scheme)
        if fingerprint == self._last_fingerprint:
            logger.debug(f"Theme unchanged ({mode}), skipping apply")
            return False

        variables = build_style_variables(scheme)
        try:
            self.surface.apply(variables, mode)
        except Exception as exc:
            # Fingerprint stays stale so the next change retries
            logger.exception(f"Failed to apply {mode} theme", exc_info=exc)
            return False

        self._last_fingerprint = fingerprint
        self.apply_count += 1
        logger.info(f"Applied {mode} theme ({len(variables)} style variables)")
        return True

    def platform_preference_changed(self) -> None:
        """Call when the platform's light/dark preference flips."""
        if self._started:
            self._debouncer.trigger()

    def flush(self) -> None:
        """Run a pending apply immediately."""
        self._debouncer.flush()

    def dispose(self) -> None:
        """Cancel pending work and stop following the store."""
        self._debouncer.cancel()
        for sub_id in self._subscriptions:
            self.store.unsubscribe(sub_id)
        self._subscriptions.clear()
        if self._started:
            unregister_cleanup_handler(self.dispose)
        self._started = False

    def _on_theme_input_changed(self, path: str, new_value: Any, old_value: Any) -> None:
        logger.debug(f"Theme input changed at '{path}'")
        self._debouncer.trigger()
