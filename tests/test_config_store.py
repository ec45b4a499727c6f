from __future__ import annotations

import json
from pathlib import Path

from groundmarker_plugin.config_store import CONFIG_FILENAME, JsonConfigManager, resolve_config_path


def test_values_persist_across_instances(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    JsonConfigManager(path).set_configuration("groundMarker", "region_1", "[]")

    reloaded = JsonConfigManager(path)

    assert reloaded.get_configuration("groundMarker", "region_1") == "[]"
    assert json.loads(path.read_text(encoding="utf-8"))["groups"]["groundMarker"] == {"region_1": "[]"}


def test_unset_removes_key_and_empty_group(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    manager = JsonConfigManager(path)
    manager.set_configuration("groundMarker", "region_1", "x")

    manager.unset_configuration("groundMarker", "region_1")

    assert manager.get_configuration("groundMarker", "region_1") is None
    assert json.loads(path.read_text(encoding="utf-8"))["groups"] == {}


def test_unset_missing_key_is_noop(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    JsonConfigManager(path).unset_configuration("groundMarker", "region_1")
    assert not path.exists()


def test_corrupt_file_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text("{not json", encoding="utf-8")

    manager = JsonConfigManager(path)

    assert manager.get_configuration("groundMarker", "region_1") is None


def test_resolve_config_path_uses_root(tmp_path: Path) -> None:
    assert resolve_config_path(tmp_path) == tmp_path / CONFIG_FILENAME
