import tcod.ecs

from engine.ecs.components import TAG_CACHE, CacheSite
from world.caches import Cache
from world.directory import CacheDirectory
from world.generator import CacheGenerator
from world.grid import Cell, CoordinateGrid, GeoPoint
from world.visibility import VisibilityManager

from conftest import LUCK_VALUES, START, FakeLuck


def _manager(luck=None, radius=2):
    grid = CoordinateGrid(1e-4)
    directory = CacheDirectory()
    generator = CacheGenerator(grid, 0.1, 10, luck or FakeLuck(LUCK_VALUES))
    manager = VisibilityManager(
        tcod.ecs.Registry(), grid, directory, generator,
        radius=radius, threshold_m=radius * 1e-4 * grid.meters_per_degree,
    )
    return manager


def _at(i, j):
    return GeoPoint(lat=START + i * 1e-4, lng=START + j * 1e-4)


def test_desired_cells_are_the_full_square():
    manager = _manager()
    desired = manager.desired_cells(_at(0, 0))
    assert len(desired) == 25
    assert Cell(2, 2) in desired
    assert Cell(-2, 2) in desired
    assert Cell(3, 0) not in desired


def test_corner_cells_materialize():
    manager = _manager(FakeLuck({"2,2": 0.0, "2,2,coins": 0.2}))
    manager.update(_at(0, 0))
    assert set(manager.materialized) == {Cell(2, 2)}
    # Still inside the square after a step that keeps the corner in range
    manager.update(_at(1, 1))
    assert Cell(2, 2) in manager.materialized


def test_radius_zero_keeps_own_cell_anywhere_inside_it():
    manager = _manager(FakeLuck({"0,0": 0.0, "0,0,coins": 0.3}), radius=0)
    corner = GeoPoint(lat=0.0, lng=0.0)
    manager.update(corner)
    assert set(manager.materialized) == {Cell(0, 0)}
    manager.update(GeoPoint(lat=0.00009, lng=0.00009))
    assert set(manager.materialized) == {Cell(0, 0)}
    manager.update(_at(1, 0))
    assert manager.materialized == {}


def test_update_materializes_spawned_cells_only():
    manager = _manager()
    manager.update(_at(0, 0))
    assert set(manager.materialized) == {Cell(0, 1), Cell(0, -1)}
    # Cells that roll no cache never get an entry
    assert len(manager.directory) == 2
    assert manager.directory.get("0,1") == ("0:1#0", "0:1#1", "0:1#2")


def test_materialized_entities_are_queryable():
    manager = _manager()
    manager.update(_at(0, 0))
    entities = list(manager.registry.Q.all_of(components=[CacheSite, Cache], tags=[TAG_CACHE]))
    assert len(entities) == 2
    site = manager.materialized[Cell(0, 1)].components[CacheSite]
    assert site.bounds == manager.grid.bounds_for_cell(Cell(0, 1))


def test_update_is_idempotent():
    fake = FakeLuck(LUCK_VALUES)
    manager = _manager(fake)
    manager.update(_at(0, 0))
    entities = dict(manager.materialized)
    manager.update(_at(0, 0))
    assert manager.materialized == entities
    # Cells with an entry are never rolled again
    assert fake.calls.count("0,1") == 1


def test_moving_away_dematerializes_and_returning_hydrates_from_directory():
    fake = FakeLuck(LUCK_VALUES)
    manager = _manager(fake)
    manager.update(_at(0, 0))
    entity = manager.materialized[Cell(0, 1)]

    manager.cache_at(Cell(0, 1)).collect("0:1#1")
    manager.flush(Cell(0, 1))

    manager.update(_at(5, 0))
    assert Cell(0, 1) not in manager.materialized
    assert Cache not in entity.components
    assert manager.directory.get("0,1") == ("0:1#0", "0:1#2")

    manager.update(_at(0, 0))
    assert manager.cache_at(Cell(0, 1)).serialize() == ("0:1#0", "0:1#2")
    assert fake.calls.count("0,1") == 1


def test_visible_caches_sorted_by_distance():
    manager = _manager(FakeLuck({"0,1": 0.0, "0,1,coins": 0.1, "2,0": 0.0, "2,0,coins": 0.2}))
    manager.update(_at(0, 0))
    assert [c.cell for c in manager.visible_caches()] == [Cell(0, 1), Cell(2, 0)]


def test_callbacks_fire_per_transition():
    manager = _manager()
    seen = []
    manager.on_generated = lambda cell: seen.append(("generated", cell))
    manager.on_materialized = lambda cell: seen.append(("materialized", cell))
    manager.on_dematerialized = lambda cell: seen.append(("dematerialized", cell))

    manager.update(_at(0, 0))
    manager.update(_at(10, 0))
    manager.update(_at(0, 0))

    assert seen.count(("generated", Cell(0, 1))) == 1
    assert seen.count(("materialized", Cell(0, 1))) == 2
    assert seen.count(("dematerialized", Cell(0, 1))) == 1
