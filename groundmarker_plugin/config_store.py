"""Key/value configuration backends for persisted markers and preferences."""
from __future__ import annotations

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

CONFIG_FILENAME = "groundmarkers.json"
_CONFIG_VERSION = 1

_LOGGER = logging.getLogger("GroundMarkers.Config")


class ConfigManager(Protocol):
    """Host configuration surface addressed by ``(group, key)``."""

    def get_configuration(self, group: str, key: str) -> Optional[str]:
        ...

    def set_configuration(self, group: str, key: str, value: str) -> None:
        ...

    def unset_configuration(self, group: str, key: str) -> None:
        ...


def _default_state() -> Dict[str, Any]:
    return {"version": _CONFIG_VERSION, "groups": {}}


class JsonConfigManager:
    """File-backed :class:`ConfigManager` used when the host offers none.

    Every mutation is written straight through so a crash never loses more
    than the in-flight edit.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._state: Dict[str, Any] = _default_state()
        self._load_existing()

    @property
    def path(self) -> Path:
        return self._path

    def _load_existing(self) -> None:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            _LOGGER.warning("Failed to load configuration from %s: %s", self._path, exc)
            return
        if not isinstance(raw, dict):
            return
        groups = raw.get("groups")
        if not isinstance(groups, dict):
            return
        with self._lock:
            self._state["groups"] = {
                str(name): {str(k): str(v) for k, v in entries.items()}
                for name, entries in groups.items()
                if isinstance(entries, dict)
            }

    def get_configuration(self, group: str, key: str) -> Optional[str]:
        with self._lock:
            entries = self._state["groups"].get(group)
            if not isinstance(entries, dict):
                return None
            return entries.get(key)

    def set_configuration(self, group: str, key: str, value: str) -> None:
        with self._lock:
            self._state["groups"].setdefault(group, {})[key] = str(value)
            snapshot = copy.deepcopy(self._state)
        self._write_snapshot(snapshot)

    def unset_configuration(self, group: str, key: str) -> None:
        with self._lock:
            entries = self._state["groups"].get(group)
            if not isinstance(entries, dict) or key not in entries:
                return
            del entries[key]
            if not entries:
                del self._state["groups"][group]
            snapshot = copy.deepcopy(self._state)
        self._write_snapshot(snapshot)

    def _write_snapshot(self, snapshot: Dict[str, Any]) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(snapshot, indent=2, sort_keys=True), encoding="utf-8")
            tmp_path.replace(self._path)
            return True
        except OSError as exc:
            _LOGGER.debug("Failed to write configuration: %s", exc)
            return False


def resolve_config_path(root: Optional[Path] = None) -> Path:
    """Return the configuration file path rooted at the given folder."""

    base = root if root is not None else Path(__file__).resolve().parent.parent
    return base / CONFIG_FILENAME
