from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeAlias

from .paths import is_affected

ChangeCallback: TypeAlias = Callable[[str, Any, Any], None]


@dataclass(frozen=True)
class Subscription:
    """A registered interest in one path of the state tree."""

    id: int
    path_pattern: str
    callback: ChangeCallback


class Notifier:
    """Synchronous fan-out of one state change to the affected subscribers."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def notify(
        self,
        subscriptions: Iterable[Subscription],
        changed_path: str,
        new_value: Any,
        old_value: Any,
    ) -> int:
        """Invoke every affected subscriber in registration order.

        ``subscriptions`` must already be a snapshot; it is iterated once.
        Returns the number of callbacks invoked (failed ones included).
        """
        invoked = 0
        for subscription in subscriptions:
            if not is_affected(changed_path, subscription.path_pattern):
                continue
            invoked += 1
            self._safe_dispatch(subscription, changed_path, new_value, old_value)
        if invoked:
            self._logger.debug(f"Change at '{changed_path}' delivered to {invoked} subscriber(s)")
        return invoked

    def _safe_dispatch(
        self,
        subscription: Subscription,
        changed_path: str,
        new_value: Any,
        old_value: Any,
    ) -> None:
        """Dispatch wrapper to keep one subscriber failure from stopping the batch."""
        callback_name = getattr(subscription.callback, "__qualname__", repr(subscription.callback))
        try:
            subscription.callback(changed_path, copy.deepcopy(new_value), copy.deepcopy(old_value))
        except Exception as exc:
            self._logger.exception(
                f"Subscriber '{callback_name}' (id={subscription.id}, path='{subscription.path_pattern}') "
                f"failed for change at '{changed_path}'",
                exc_info=exc,
            )
