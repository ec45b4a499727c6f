from __future__ import annotations

from groundmarker_plugin.group_toggle import toggle_point
from groundmarker_plugin.instance_translator import InstanceContext
from groundmarker_plugin.point_store import PointStore
from groundmarker_plugin.points import RegionPoint, WorldPoint
from groundmarker_plugin.session_cache import SessionPointCache


class DummyConfig:
    def __init__(self) -> None:
        self.store: dict[tuple[str, str], str] = {}

    def get_configuration(self, group: str, key: str) -> str | None:
        return self.store.get((group, key))

    def set_configuration(self, group: str, key: str, value: str) -> None:
        self.store[(group, key)] = value

    def unset_configuration(self, group: str, key: str) -> None:
        self.store.pop((group, key), None)


def _cache() -> tuple[PointStore, SessionPointCache]:
    store = PointStore(DummyConfig())
    return store, SessionPointCache(store)


def test_rebuild_collects_every_region() -> None:
    store, cache = _cache()
    store.put(12850, [RegionPoint(12850, 10, 20, 0, 1)])
    store.put(12851, [RegionPoint(12851, 0, 0, 0, 2)])

    cache.rebuild([12850, 12851, 12852], InstanceContext())

    assert [p.world_point for p in cache.points] == [WorldPoint(3210, 3220, 0), WorldPoint(3200, 3264, 0)]


def test_rebuild_replaces_snapshot_after_toggle() -> None:
    store, cache = _cache()
    tile = RegionPoint(12850, 10, 20, 0, 1)
    store.put(12850, [tile, RegionPoint(12850, 11, 20, 0, 2)])
    cache.rebuild([12850], InstanceContext())
    before = cache.points

    store.put(12850, toggle_point(store.get(12850), RegionPoint(12850, 10, 20, 0, 4)))
    cache.rebuild([12850], InstanceContext())

    assert before is not cache.points
    groups = {(p.point.region_x, p.point.group) for p in cache.points}
    assert groups == {(10, 4), (11, 2)}
    assert all(p.point != tile for p in cache.points)


def test_unmarking_last_point_empties_snapshot() -> None:
    store, cache = _cache()
    tile = RegionPoint(12850, 10, 20, 0, 1)
    store.put(12850, [tile])
    cache.rebuild([12850], InstanceContext())

    store.put(12850, toggle_point(store.get(12850), tile))
    cache.rebuild([12850], InstanceContext())

    assert cache.points == ()


def test_bad_region_does_not_block_others() -> None:
    store, cache = _cache()
    store.put(12851, [RegionPoint(12851, 1, 1, 0, 1)])
    store._config.set_configuration("groundMarker", "region_12850", "[{broken")

    cache.rebuild([12850, 12851], InstanceContext())

    assert len(cache.points) == 1
    assert cache.points[0].point.region_id == 12851


def test_deeply_nested_region_does_not_block_others() -> None:
    store, cache = _cache()
    store.put(12851, [RegionPoint(12851, 1, 1, 0, 1)])
    store._config.set_configuration("groundMarker", "region_12850", "[" * 200000)

    cache.rebuild([12850, 12851], InstanceContext())

    assert [p.point.region_id for p in cache.points] == [12851]


def test_no_loaded_regions_clears_cache() -> None:
    store, cache = _cache()
    store.put(12850, [RegionPoint(12850, 1, 1, 0, 1)])
    cache.rebuild([12850], InstanceContext())

    cache.rebuild(None, InstanceContext())

    assert cache.points == ()
