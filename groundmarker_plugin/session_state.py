"""Per-activation input state shared by the key and menu handlers."""
from __future__ import annotations

from dataclasses import dataclass

DEFAULT_HOTKEY = "shift"


@dataclass
class SessionState:
    hotkey_pressed: bool = False

    def reset(self) -> None:
        self.hotkey_pressed = False


def _normalise_key(key: str) -> str:
    return (key or "").strip().lower()


class HotkeyListener:
    """Tracks whether the marking hotkey is held down."""

    def __init__(self, state: SessionState, hotkey: str = DEFAULT_HOTKEY) -> None:
        self._state = state
        self.hotkey = hotkey

    @property
    def hotkey(self) -> str:
        return self._hotkey

    @hotkey.setter
    def hotkey(self, value: str) -> None:
        self._hotkey = _normalise_key(value) or DEFAULT_HOTKEY

    def key_pressed(self, key: str) -> None:
        if _normalise_key(key) == self._hotkey:
            self._state.hotkey_pressed = True

    def key_released(self, key: str) -> None:
        if _normalise_key(key) == self._hotkey:
            self._state.hotkey_pressed = False

    def focus_changed(self, focused: bool) -> None:
        # Key releases are not delivered while unfocused.
        if not focused:
            self._state.hotkey_pressed = False
