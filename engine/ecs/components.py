"""
GeoCoin — engine/ecs/components.py
ECS Component Definitions for python-tcod-ecs.
==============================================
Version:     0.2
Stack:       Python 3.11+ | python-tcod-ecs
Status:      Materialized cache entities only. Authoritative state lives in
             the Cache Directory; these components are transient views.

A materialized cache entity carries:
  CacheSite              — which cell it stands for and that cell's bounds
  world.caches.Cache     — the hydrated coin sequence (mutated in place)
  tag TAG_CACHE          — for registry queries
"""

from __future__ import annotations
from dataclasses import dataclass

from world.grid import Cell, CellBound

TAG_CACHE = "cache"


@dataclass
class CacheSite:
    cell: Cell
    bounds: CellBound
    distance_m: float = 0.0   # from the player, refreshed on every reconcile
