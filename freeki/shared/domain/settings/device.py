"""Device profile and the settings slot key derived from it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from freeki.shared.core.configuration import DeviceConfig

SLOT_KEY_PREFIX = "freeki-settings"

MOBILE_MAX_WIDTH = 768
TABLET_MAX_WIDTH = 1024

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def user_agent_hash(user_agent: str) -> str:
    """Stable 32-bit rolling hash (``h * 31 + unit``) over UTF-16 code units, in base 36.

    Matches the key format already written by browser clients, so a device
    keeps its slot across client implementations.
    """
    h = 0
    encoded = user_agent.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32((h << 5) - h + unit)
    return _to_base36(abs(h))


def device_class(viewport_width: int) -> str:
    if viewport_width <= MOBILE_MAX_WIDTH:
        return "mobile"
    if viewport_width <= TABLET_MAX_WIDTH:
        return "tablet"
    return "desktop"


@dataclass(frozen=True)
class DeviceProfile:
    screen_width: int
    screen_height: int
    viewport_width: int
    user_agent: str

    @classmethod
    def from_config(cls, config: "DeviceConfig") -> "DeviceProfile":
        return cls(
            screen_width=config.screen_width,
            screen_height=config.screen_height,
            viewport_width=config.viewport_width,
            user_agent=config.user_agent,
        )

    @property
    def device_class(self) -> str:
        return device_class(self.viewport_width)

    @property
    def settings_key(self) -> str:
        """``freeki-settings-{deviceClass}-{W}x{H}-{uaHash}``"""
        return (
            f"{SLOT_KEY_PREFIX}-{self.device_class}-"
            f"{self.screen_width}x{self.screen_height}-{user_agent_hash(self.user_agent)}"
        )
