"""
GeoCoin — world/generator.py
Procedural Generation: deterministic cache placement and starting coins.
========================================================================
Version:     0.2
Stack:       Python 3.11+
Status:      Core generation layer.

Architecture notes
------------------
- Spawn decision:   luck("i,j") < spawn_probability
- Starting coins:   floor(luck("i,j,coins") * max_tokens_per_cache)
  The ",coins" suffix keeps the two draws independent.
- Generation is one-shot per cell. Callers gate it on Cache Directory
  presence; nothing here remembers what it produced.
"""

from __future__ import annotations

import math
from typing import Optional

from world.caches import Cache, Token
from world.grid import Cell, CoordinateGrid
from world.luck import LuckFn, luck as default_luck


class CacheGenerator:
    """
    Rolls caches for cells using an injected luck oracle.
    """
    def __init__(
        self,
        grid: CoordinateGrid,
        spawn_probability: float,
        max_tokens_per_cache: int,
        luck: Optional[LuckFn] = None,
    ):
        self.grid = grid
        self.spawn_probability = spawn_probability
        self.max_tokens_per_cache = max_tokens_per_cache
        self.luck: LuckFn = luck if luck is not None else default_luck

    def should_spawn(self, cell: Cell) -> bool:
        return self.luck(f"{cell.i},{cell.j}") < self.spawn_probability

    def token_count(self, cell: Cell) -> int:
        return math.floor(self.luck(f"{cell.i},{cell.j},coins") * self.max_tokens_per_cache)

    def generate(self, cell: Cell) -> Optional[Cache]:
        """Returns a freshly rolled cache, or None if the cell rolls empty."""
        if not self.should_spawn(cell):
            return None
        tokens = [Token.minted(cell, k) for k in range(self.token_count(cell))]
        return Cache(cell, self.grid.center_of(cell), tokens)
