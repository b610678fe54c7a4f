"""
GeoCoin — world/visibility.py
Visibility Manager: materializes caches near the player as ECS entities.
========================================================================
Version:     0.2
Stack:       Python 3.11+ | python-tcod-ecs
Status:      Core working-set reconciliation.

Per-cell lifecycle
------------------
  Unknown        -> Materialized    cell is in the Chebyshev neighbourhood and has a
                                    directory entry or rolls a positive spawn
                                    (the fresh memento is written first)
  Materialized   -> Dematerialized  cell left the neighbourhood and its center
                                    is beyond the visibility threshold; the
                                    entity is cleared
  Dematerialized -> Materialized    hydrated strictly from the directory

Cells that roll "no cache" never get a directory entry and stay Unknown.

Invariants
----------
- Every collect/deposit flushes the cache memento to the directory before
  returning, so discarding an entity never loses a mutation.
- The desired set is the whole Chebyshev neighbourhood, corners included.
  Removal requires leaving the neighbourhood, so the same cell is never
  added and dropped within one reconcile.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Set

import tcod.ecs

from engine.ecs.components import TAG_CACHE, CacheSite
from world.caches import Cache
from world.directory import CacheDirectory
from world.generator import CacheGenerator
from world.grid import Cell, CoordinateGrid, GeoPoint

logger = logging.getLogger(__name__)

CellCallback = Callable[[Cell], None]


class VisibilityManager:
    """
    Keeps the registry's cache entities in step with the player position.
    """
    def __init__(
        self,
        registry: tcod.ecs.Registry,
        grid: CoordinateGrid,
        directory: CacheDirectory,
        generator: CacheGenerator,
        radius: int,
        threshold_m: float,
    ):
        self.registry = registry
        self.grid = grid
        self.directory = directory
        self.generator = generator
        self.radius = radius
        self.threshold_m = threshold_m
        self.materialized: Dict[Cell, tcod.ecs.Entity] = {}

        # Optional observers, wired by the session to the EventBus
        self.on_generated: Optional[CellCallback] = None
        self.on_materialized: Optional[CellCallback] = None
        self.on_dematerialized: Optional[CellCallback] = None

    # ----------------------------------------------------------
    # Reconciliation
    # ----------------------------------------------------------

    def desired_cells(self, position: GeoPoint) -> Set[Cell]:
        """Every cell of the Chebyshev square around the player's cell."""
        return self.grid.cells_near(position, self.radius)

    def update(self, position: GeoPoint) -> None:
        """Removes stale caches, then materializes missing ones."""
        desired = self.desired_cells(position)

        for cell in list(self.materialized):
            if cell not in desired and self.grid.distance_to_cell_m(position, cell) > self.threshold_m:
                self.dematerialize(cell)

        for cell in sorted(desired - set(self.materialized)):
            self._materialize_if_present(cell)

        for cell, entity in self.materialized.items():
            entity.components[CacheSite].distance_m = self.grid.distance_to_cell_m(position, cell)

    def _materialize_if_present(self, cell: Cell) -> None:
        key = cell.key
        if not self.directory.has_entry(key):
            cache = self.generator.generate(cell)
            if cache is None:
                return
            self.directory.put(key, cache.serialize())
            logger.debug("Generated cache %s with %d coins", key, len(cache))
            if self.on_generated:
                self.on_generated(cell)
        self.materialize(cell)

    def materialize(self, cell: Cell) -> tcod.ecs.Entity:
        """Creates the entity for a cell, hydrated from its directory entry."""
        memento = self.directory.get(cell.key)
        if memento is None:
            raise KeyError(f"No directory entry for cell {cell.key}")

        cache = Cache(cell, self.grid.center_of(cell))
        cache.restore(memento)

        entity = self.registry.new_entity()
        entity.components[CacheSite] = CacheSite(cell=cell, bounds=self.grid.bounds_for_cell(cell))
        entity.components[Cache] = cache
        entity.tags.add(TAG_CACHE)
        self.materialized[cell] = entity

        if self.on_materialized:
            self.on_materialized(cell)
        return entity

    def dematerialize(self, cell: Cell) -> None:
        entity = self.materialized.pop(cell, None)
        if entity is None:
            return
        entity.clear()
        if self.on_dematerialized:
            self.on_dematerialized(cell)

    def dematerialize_all(self) -> None:
        for cell in list(self.materialized):
            self.dematerialize(cell)

    # ----------------------------------------------------------
    # Queries
    # ----------------------------------------------------------

    def cache_at(self, cell: Cell) -> Optional[Cache]:
        entity = self.materialized.get(cell)
        if entity is None:
            return None
        return entity.components[Cache]

    def flush(self, cell: Cell) -> None:
        """Writes a materialized cache's current state back to the directory."""
        cache = self.cache_at(cell)
        if cache is not None:
            self.directory.put(cell.key, cache.serialize())

    def visible_caches(self) -> List[Cache]:
        """Materialized caches, nearest first."""
        entities = sorted(
            self.registry.Q.all_of(components=[CacheSite, Cache], tags=[TAG_CACHE]),
            key=lambda e: (e.components[CacheSite].distance_m, e.components[CacheSite].cell),
        )
        return [e.components[Cache] for e in entities]
