"""
GeoCoin — world/grid.py
Coordinate Grid: geographic points to discrete cells and back.
==============================================================
Version:     0.2
Stack:       Python 3.11+ | Pydantic v2
Status:      Core spatial layer. Pure, stateless math over configuration.

Architecture notes
------------------
- Cell identity is floor(lat / tile_width), floor(lng / tile_width). It is
  derived on demand and never stored on a point.
- Bounds are memoized per cell (insert-if-absent). The memo only saves
  allocations; a hit and a recomputation return equal values.
- The neighbourhood is a Chebyshev square: (2r+1)^2 cells.
- Distance is a flat approximation scaled by meters_per_degree. It is only
  valid near the play area latitude.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Set

from pydantic import BaseModel, ConfigDict


class GeoPoint(BaseModel):
    """A latitude/longitude pair in degrees."""
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True, order=True)
class Cell:
    i: int
    j: int

    @property
    def key(self) -> str:
        """Directory key for this cell, e.g. "3,-7"."""
        return f"{self.i},{self.j}"

    @classmethod
    def from_key(cls, key: str) -> "Cell":
        """Parses an "i,j" key. Raises ValueError on malformed input."""
        i_str, j_str = key.split(",")
        return cls(int(i_str), int(j_str))


@dataclass(frozen=True)
class CellBound:
    south: float
    west: float
    north: float
    east: float

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(lat=(self.south + self.north) / 2, lng=(self.west + self.east) / 2)

    def contains(self, point: GeoPoint) -> bool:
        """Half-open containment: south/west edges inclusive, north/east exclusive."""
        return self.south <= point.lat < self.north and self.west <= point.lng < self.east


class CoordinateGrid:
    """
    Converts between continuous positions and integer cells.
    """
    def __init__(self, tile_width: float, meters_per_degree: float = 111_320.0):
        if tile_width <= 0:
            raise ValueError("tile_width must be positive")
        self.tile_width = tile_width
        self.meters_per_degree = meters_per_degree
        self._bounds: Dict[Cell, CellBound] = {}

    def cell_for_point(self, point: GeoPoint) -> Cell:
        return Cell(math.floor(point.lat / self.tile_width), math.floor(point.lng / self.tile_width))

    def bounds_for_cell(self, cell: Cell) -> CellBound:
        """Retrieve or compute the bounds of a cell."""
        if cell not in self._bounds:
            w = self.tile_width
            self._bounds[cell] = CellBound(
                south=cell.i * w,
                west=cell.j * w,
                north=(cell.i + 1) * w,
                east=(cell.j + 1) * w,
            )
        return self._bounds[cell]

    def center_of(self, cell: Cell) -> GeoPoint:
        return self.bounds_for_cell(cell).center

    def cells_near(self, point: GeoPoint, radius: int) -> Set[Cell]:
        """Every cell within `radius` of the point's cell along both axes."""
        if radius < 0:
            raise ValueError("radius must be non-negative")
        origin = self.cell_for_point(point)
        return {
            Cell(origin.i + di, origin.j + dj)
            for di in range(-radius, radius + 1)
            for dj in range(-radius, radius + 1)
        }

    def distance_m(self, a: GeoPoint, b: GeoPoint) -> float:
        """Approximate distance in meters between two points."""
        return math.hypot(a.lat - b.lat, a.lng - b.lng) * self.meters_per_degree

    def distance_to_cell_m(self, point: GeoPoint, cell: Cell) -> float:
        return self.distance_m(point, self.center_of(cell))
