"""Primary entry point for the Ground Markers plugin."""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

if __package__:
    from .version import __version__ as GROUND_MARKERS_VERSION, DEV_MODE_ENV_VAR, is_dev_build
    from .groundmarker_plugin.config_store import ConfigManager, JsonConfigManager, resolve_config_path
    from .groundmarker_plugin.group_toggle import current_group, toggle_point
    from .groundmarker_plugin.instance_translator import world_from_scene_instance
    from .groundmarker_plugin.menu_entries import MenuOption, build_menu_options, is_trigger_option, parse_menu_option
    from .groundmarker_plugin.point_store import PointStore
    from .groundmarker_plugin.points import RegionPoint, RegionWorldPoint
    from .groundmarker_plugin.preferences import Preferences
    from .groundmarker_plugin.session_cache import SessionPointCache
    from .groundmarker_plugin.session_state import HotkeyListener, SessionState
    from .groundmarker_plugin.world_view import WorldView, instance_context
else:  # pragma: no cover - host loads as top-level module
    from version import __version__ as GROUND_MARKERS_VERSION, DEV_MODE_ENV_VAR, is_dev_build
    from groundmarker_plugin.config_store import ConfigManager, JsonConfigManager, resolve_config_path
    from groundmarker_plugin.group_toggle import current_group, toggle_point
    from groundmarker_plugin.instance_translator import world_from_scene_instance
    from groundmarker_plugin.menu_entries import MenuOption, build_menu_options, is_trigger_option, parse_menu_option
    from groundmarker_plugin.point_store import PointStore
    from groundmarker_plugin.points import RegionPoint, RegionWorldPoint
    from groundmarker_plugin.preferences import Preferences
    from groundmarker_plugin.session_cache import SessionPointCache
    from groundmarker_plugin.session_state import HotkeyListener, SessionState
    from groundmarker_plugin.world_view import WorldView, instance_context

PLUGIN_NAME = "GroundMarkers"
PLUGIN_VERSION = GROUND_MARKERS_VERSION
DEV_BUILD = is_dev_build(GROUND_MARKERS_VERSION)
LOGGER_NAME = PLUGIN_NAME
LOG_TAG = PLUGIN_NAME

LOGGED_IN = "LOGGED_IN"

HOST_DEFAULT_LOG_LEVEL = logging.DEBUG if DEV_BUILD else logging.INFO

_host_logger: Optional[logging.Logger] = None


def _resolve_host_log_level() -> int:
    candidates: list[int] = []
    if _host_logger is not None:
        try:
            candidates.append(_host_logger.getEffectiveLevel())
        except Exception:
            pass
    candidates.append(logging.getLogger().getEffectiveLevel())
    candidates.append(HOST_DEFAULT_LOG_LEVEL)
    for level in candidates:
        if isinstance(level, int) and level != logging.NOTSET:
            return level
    return HOST_DEFAULT_LOG_LEVEL


def _effective_log_level(level: Optional[int] = None) -> int:
    """Return the level Ground Markers loggers should use."""

    if level is None:
        level = _resolve_host_log_level()
    if DEV_BUILD and level > logging.DEBUG:
        return logging.DEBUG
    return level


class _HostLogHandler(logging.Handler):
    """Logging bridge that forwards plugin records to the host logger."""

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < _effective_log_level():
            return
        message = self.format(record)
        target = _host_logger
        if target is not None:
            try:
                if target.isEnabledFor(record.levelno):
                    target.log(record.levelno, message)
                    return
            except Exception:
                pass
        root_logger = logging.getLogger()
        if root_logger.isEnabledFor(record.levelno):
            root_logger.log(record.levelno, message)


def _configure_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_effective_log_level())
    if not any(getattr(handler, "_host_handler", False) for handler in logger.handlers):
        handler = _HostLogHandler()
        handler._host_handler = True  # type: ignore[attr-defined]
        formatter = logging.Formatter(f"[%(asctime)s] [{LOG_TAG}] %(message)s", "%H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger


LOGGER = _configure_logger()
if DEV_BUILD:
    LOGGER.info(
        "Running Ground Markers dev build (%s); override via %s=0 to force release behaviour.",
        GROUND_MARKERS_VERSION,
        DEV_MODE_ENV_VAR,
    )


def _coerce_game_state(state: Any) -> str:
    name = getattr(state, "name", state)
    try:
        return str(name).strip().upper()
    except Exception:
        return ""


class _PluginRuntime:
    """Encapsulates plugin state so host globals stay tidy."""

    def __init__(
        self,
        plugin_dir: str,
        world: WorldView,
        config_manager: ConfigManager,
        preferences: Preferences,
    ) -> None:
        self.plugin_dir = Path(plugin_dir)
        self.world = world
        self.config_manager = config_manager
        self.preferences = preferences
        self.store = PointStore(config_manager)
        self.cache = SessionPointCache(self.store)
        self.session = SessionState()
        self.input_listener = HotkeyListener(self.session, preferences.hotkey)
        self._lock = threading.Lock()
        self._running = False

    # Lifecycle ------------------------------------------------------------

    def start(self) -> str:
        with self._lock:
            if self._running:
                return PLUGIN_NAME
            self._running = True
            self.session.reset()
        self.load_points()
        LOGGER.info("Plugin started")
        return PLUGIN_NAME

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            self.session.reset()
        self.cache.clear()
        LOGGER.info("Plugin stopped")

    @property
    def running(self) -> bool:
        return self._running

    @property
    def points(self) -> Tuple[RegionWorldPoint, ...]:
        return self.cache.points

    # Events ---------------------------------------------------------------

    def handle_game_state(self, state: Any) -> None:
        if not self._running or _coerce_game_state(state) != LOGGED_IN:
            return
        # map region has just been updated
        self.load_points()

    def handle_focus(self, focused: bool) -> None:
        self.input_listener.focus_changed(bool(focused))

    def handle_key_pressed(self, key: str) -> None:
        self.input_listener.key_pressed(key)

    def handle_key_released(self, key: str) -> None:
        self.input_listener.key_released(key)

    def menu_entry_added(self, option: str, target: str = "") -> List[MenuOption]:
        """Return the mark/unmark options to append for the hovered tile."""

        if not self._running or not self.session.hotkey_pressed or not is_trigger_option(option):
            return []
        point = self._selected_region_point(group=1)
        if point is None:
            return []
        existing = current_group(self.store.get(point.region_id), point.key)
        return build_menu_options(existing, self.preferences.marker_colors(), target)

    def menu_option_clicked(self, option: str) -> bool:
        if not self._running:
            return False
        group = parse_menu_option(option)
        if group is None:
            return False
        point = self._selected_region_point(group)
        if point is None:
            return False
        self.mark_tile(point)
        return True

    # Marking --------------------------------------------------------------

    def mark_tile(self, point: RegionPoint) -> None:
        LOGGER.debug("Updating point: %s", point)
        updated = toggle_point(self.store.get(point.region_id), point)
        self.store.put(point.region_id, updated)
        self.load_points()

    def load_points(self) -> None:
        regions: Optional[Sequence[int]] = self.world.map_regions()
        if regions is None:
            self.cache.clear()
            return
        self.cache.rebuild(regions, instance_context(self.world))
        LOGGER.debug("Loaded %d marker(s) across %d region(s)", len(self.cache.points), len(regions))

    def _selected_region_point(self, group: int) -> Optional[RegionPoint]:
        tile = self.world.selected_scene_tile()
        if tile is None:
            return None
        scene_x, scene_y = tile
        plane = self.world.plane
        world_point = world_from_scene_instance(scene_x, scene_y, plane, instance_context(self.world))
        if world_point is None:
            return None
        return RegionPoint.from_world(world_point, plane, group)


_plugin: Optional[_PluginRuntime] = None
_preferences: Optional[Preferences] = None


def plugin_start3(
    plugin_dir: str,
    world: WorldView,
    config_manager: Optional[ConfigManager] = None,
    host_logger: Optional[logging.Logger] = None,
) -> str:
    global _plugin, _preferences, _host_logger
    _host_logger = host_logger
    LOGGER.setLevel(_effective_log_level())
    if config_manager is None:
        config_manager = JsonConfigManager(resolve_config_path(Path(plugin_dir)))
        LOGGER.debug("Using standalone configuration at %s", config_manager.path)
    _preferences = Preferences.load(config_manager)
    _plugin = _PluginRuntime(plugin_dir, world, config_manager, _preferences)
    return _plugin.start()


def plugin_stop() -> None:
    global _plugin
    if _plugin:
        _plugin.stop()
    _plugin = None


def game_state_changed(state: Any) -> None:
    if _plugin:
        _plugin.handle_game_state(state)


def focus_changed(focused: bool) -> None:
    if _plugin:
        _plugin.handle_focus(focused)


def key_pressed(key: str) -> None:
    if _plugin:
        _plugin.handle_key_pressed(key)


def key_released(key: str) -> None:
    if _plugin:
        _plugin.handle_key_released(key)


def menu_entry_added(option: str, target: str = "") -> List[MenuOption]:
    if not _plugin:
        return []
    try:
        return _plugin.menu_entry_added(option, target)
    except Exception as exc:
        LOGGER.exception("Failed to build marker menu options: %s", exc)
        return []


def menu_option_clicked(option: str) -> bool:
    if not _plugin:
        return False
    try:
        return _plugin.menu_option_clicked(option)
    except Exception as exc:
        LOGGER.exception("Failed to update marker: %s", exc)
        return False


def marker_points() -> Tuple[RegionWorldPoint, ...]:
    """Expose the current marker snapshot to renderers."""

    if _plugin is None:
        return ()
    return _plugin.points


def marker_painter() -> Any:
    """Build a painter coloured from the active preferences."""

    # Qt is only needed once the host actually renders.
    if __package__:
        from .groundmarker_client.marker_painter import MarkerPainter
    else:  # pragma: no cover - host loads as top-level module
        from groundmarker_client.marker_painter import MarkerPainter

    prefs = _preferences if _preferences is not None else Preferences()
    return MarkerPainter(colors=prefs.marker_colors())


# Metadata expected by some plugin loaders
name = PLUGIN_NAME
plugin_name = PLUGIN_NAME
version = PLUGIN_VERSION
