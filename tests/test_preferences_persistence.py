from __future__ import annotations

import pytest

from groundmarker_plugin.preferences import DEFAULT_MARKER_COLORS, Preferences


class DummyConfig:
    """Minimal host config stub with get/set support."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.store: dict[tuple[str, str], str] = {("groundMarker", k): v for k, v in (initial or {}).items()}

    def get_configuration(self, group: str, key: str) -> str | None:
        return self.store.get((group, key))

    def set_configuration(self, group: str, key: str, value: str) -> None:
        self.store[(group, key)] = value

    def unset_configuration(self, group: str, key: str) -> None:
        self.store.pop((group, key), None)


def test_defaults_when_config_empty() -> None:
    prefs = Preferences.load(DummyConfig())
    assert prefs.marker_colors() == DEFAULT_MARKER_COLORS
    assert prefs.hotkey == "shift"


def test_save_then_load_round_trips() -> None:
    config = DummyConfig()
    prefs = Preferences(marker_color_2="#123456", hotkey="ctrl")

    prefs.save(config)
    loaded = Preferences.load(config)

    assert loaded.marker_color(2) == "#123456"
    assert loaded.hotkey == "ctrl"
    assert config.store[("groundMarker", "marker_color_2")] == "#123456"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("ff0000", "#FF0000"),
        ("#80ff0000", "#80FF0000"),
        ("red", DEFAULT_MARKER_COLORS[1]),
        ("#12345", DEFAULT_MARKER_COLORS[1]),
    ],
)
def test_colors_are_normalised(raw: str, expected: str) -> None:
    prefs = Preferences.load(DummyConfig({"marker_color_1": raw}))
    assert prefs.marker_color(1) == expected


def test_out_of_range_group_uses_first_color() -> None:
    prefs = Preferences(marker_color_1="#010101")
    assert prefs.marker_color(9) == "#010101"
