"""
GeoCoin — engine/presentation.py
Pure render functions from game state to presentation models.
Mutation handlers call these again after every state change; nothing
here mutates a Cache or the inventory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from engine.inventory import PlayerInventory
from world.caches import Cache
from world.grid import GeoPoint


@dataclass(frozen=True)
class CachePopup:
    title: str
    coin_ids: Tuple[str, ...]
    can_collect: bool
    can_deposit: bool
    next_deposit: Optional[str]


def render_cache_popup(cache: Cache, inventory: PlayerInventory) -> CachePopup:
    next_deposit = inventory.peek_oldest().token_id if len(inventory) else None
    coin_ids = cache.serialize()
    return CachePopup(
        title=f"Cache at ({cache.cell.i},{cache.cell.j})",
        coin_ids=coin_ids,
        can_collect=bool(coin_ids),
        can_deposit=next_deposit is not None and next_deposit not in cache,
        next_deposit=next_deposit,
    )


def render_status(inventory: PlayerInventory, position: GeoPoint) -> str:
    return f"Coins: {len(inventory)} | {position.lat:.5f}, {position.lng:.5f}"


def render_inventory(inventory: PlayerInventory) -> str:
    if not len(inventory):
        return "Inventory: (empty)"
    return "Inventory: " + ", ".join(inventory.ids())
