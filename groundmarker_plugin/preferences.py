"""Preferences for the Ground Markers plugin."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from .config_store import ConfigManager
from .point_store import CONFIG_GROUP
from .points import GROUP_MAX, GROUP_MIN
from .session_state import DEFAULT_HOTKEY

DEFAULT_MARKER_COLORS: Dict[int, str] = {
    1: "#FFFF00",
    2: "#00FF00",
    3: "#00FFFF",
    4: "#FF00FF",
}
_HEX_DIGITS = set("0123456789ABCDEFabcdef")

LOGGER = logging.getLogger("GroundMarkers.Preferences")


def _normalise_color(value: Any, default: str) -> str:
    if value is None:
        return default
    try:
        token = str(value).strip()
    except Exception:
        return default
    if token.startswith("#"):
        token = token[1:]
    if len(token) not in (6, 8) or not all(ch in _HEX_DIGITS for ch in token):
        return default
    return "#" + token.upper()


def _coerce_str(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


@dataclass
class Preferences:
    """Marker colours and hotkey, stored alongside the markers."""

    marker_color_1: str = DEFAULT_MARKER_COLORS[1]
    marker_color_2: str = DEFAULT_MARKER_COLORS[2]
    marker_color_3: str = DEFAULT_MARKER_COLORS[3]
    marker_color_4: str = DEFAULT_MARKER_COLORS[4]
    hotkey: str = DEFAULT_HOTKEY

    @classmethod
    def load(cls, config: ConfigManager, group: str = CONFIG_GROUP) -> "Preferences":
        prefs = cls()
        prefs._apply_raw_data({f.name: config.get_configuration(group, f.name) for f in fields(cls)})
        return prefs

    def save(self, config: ConfigManager, group: str = CONFIG_GROUP) -> None:
        for f in fields(self):
            config.set_configuration(group, f.name, str(getattr(self, f.name)))
        LOGGER.debug("Saved preferences: %s", self)

    def _apply_raw_data(self, data: Dict[str, Optional[str]]) -> None:
        for group in range(GROUP_MIN, GROUP_MAX + 1):
            name = f"marker_color_{group}"
            setattr(self, name, _normalise_color(data.get(name), DEFAULT_MARKER_COLORS[group]))
        self.hotkey = _coerce_str(data.get("hotkey"), DEFAULT_HOTKEY)

    def marker_color(self, group: int) -> str:
        if not GROUP_MIN <= group <= GROUP_MAX:
            return self.marker_color_1
        return getattr(self, f"marker_color_{group}")

    def marker_colors(self) -> Dict[int, str]:
        return {group: self.marker_color(group) for group in range(GROUP_MIN, GROUP_MAX + 1)}
