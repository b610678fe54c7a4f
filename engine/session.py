"""
GeoCoin — engine/session.py
Game Session: owns all mutable game state and runs player commands.
===================================================================
Version:     0.2
Stack:       Python 3.11+ | python-tcod-ecs
Status:      Integration entry point.

Architecture notes
------------------
- One session object owns the directory, inventory, position, trail,
  registry and history. The UI holds a reference; nothing is global.
- Commands run to completion one at a time. Each mutating command:
    1. snapshots state for undo
    2. mutates
    3. flushes any touched cache to the directory
    4. reconciles visibility when the position changed
    5. writes the four persisted keys to the store
- GameError subclasses are caught here, logged, turned into a user-facing
  message and an EVT_ACTION_REJECTED event. They never escape a command.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Deque, Optional

import tcod.ecs

from engine.config import GameConfig, load_game_config
from engine.errors import (
    CacheNotVisibleError,
    DuplicateTokenError,
    GameError,
    UnavailableCapabilityError,
)
from engine.events import (
    EventBus,
    GameEvent,
    EVT_ACTION_REJECTED,
    EVT_CACHE_DEMATERIALIZED,
    EVT_CACHE_GENERATED,
    EVT_CACHE_MATERIALIZED,
    EVT_COIN_COLLECTED,
    EVT_COIN_DEPOSITED,
    EVT_PLAYER_MOVED,
    EVT_SESSION_LOADED,
    EVT_SESSION_RESET,
    EVT_SESSION_UNDONE,
    EVT_TRACKING_STARTED,
    EVT_TRACKING_STOPPED,
)
from engine.geolocation import GeolocationProvider, LocationTracker
from engine.history import SessionSnapshot, SnapshotLog
from engine.inventory import PlayerInventory
from engine.journal import ActivityJournal
from engine.persistence import KeyValueStore, load_session_state, save_session_state
from engine.presentation import CachePopup, render_cache_popup
from world.caches import Token
from world.directory import CacheDirectory
from world.generator import CacheGenerator
from world.grid import Cell, CoordinateGrid, GeoPoint
from world.luck import LuckFn
from world.trail import MovementTrail
from world.visibility import VisibilityManager

logger = logging.getLogger(__name__)

MESSAGE_BACKLOG = 4


class Direction(Enum):
    NORTH = (1, 0)
    SOUTH = (-1, 0)
    EAST = (0, 1)
    WEST = (0, -1)


class GameSession:
    """
    Core executor for GeoCoin. Wires grid, generator, directory, visibility,
    inventory, trail, persistence, history and the event bus.
    """
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        luck: Optional[LuckFn] = None,
        store: Optional[KeyValueStore] = None,
        geolocation: Optional[GeolocationProvider] = None,
        journal_path: Optional[Path] = None,
    ):
        self.config = config if config is not None else load_game_config()
        cfg = self.config

        self.registry = tcod.ecs.Registry()
        self.bus = EventBus()
        self.journal = ActivityJournal(self.bus, journal_path) if journal_path else None

        self.grid = CoordinateGrid(cfg.tile_width, cfg.meters_per_degree)
        self.directory = CacheDirectory()
        self.generator = CacheGenerator(self.grid, cfg.spawn_probability, cfg.max_tokens_per_cache, luck)
        self.visibility = VisibilityManager(
            self.registry,
            self.grid,
            self.directory,
            self.generator,
            radius=cfg.visibility_radius,
            threshold_m=cfg.visibility_threshold_m,
        )
        self.visibility.on_generated = self._on_generated
        self.visibility.on_materialized = lambda cell: self._emit(EVT_CACHE_MATERIALIZED, target=cell.key)
        self.visibility.on_dematerialized = lambda cell: self._emit(EVT_CACHE_DEMATERIALIZED, target=cell.key)

        self.inventory = PlayerInventory()
        self.trail = MovementTrail()
        self.position = self.start_position
        self.history = SnapshotLog()
        self.store = store
        self.tracker = LocationTracker(geolocation, self._on_location_update)
        self.messages: Deque[str] = deque(maxlen=MESSAGE_BACKLOG)

    @property
    def start_position(self) -> GeoPoint:
        return GeoPoint(lat=self.config.start_lat, lng=self.config.start_lng)

    @property
    def player_cell(self) -> Cell:
        return self.grid.cell_for_point(self.position)

    # ----------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------

    def start(self) -> None:
        """Loads any saved state, then materializes caches around the player."""
        self.load()
        self.visibility.update(self.position)

    def load(self) -> bool:
        """Applies saved state from the store. Returns False if nothing was saved."""
        if self.store is None:
            return False
        found = load_session_state(self.store, self)
        self.visibility.dematerialize_all()
        self.visibility.update(self.position)
        if any(found.values()):
            self._emit(EVT_SESSION_LOADED, data={k: v for k, v in found.items()})
            return True
        return False

    def save(self) -> None:
        if self.store is not None:
            save_session_state(self.store, self)

    def close(self) -> None:
        self.tracker.stop()
        self.save()
        if self.journal:
            self.journal.detach()

    # ----------------------------------------------------------
    # Commands
    # ----------------------------------------------------------

    def move(self, direction: Direction) -> None:
        """
        Steps one cell in a cardinal direction. The moved axis lands on the
        destination cell's center line so repeated steps never drift across
        a cell edge through float error.
        """
        d_i, d_j = direction.value
        cell = self.player_cell
        target = self.grid.center_of(Cell(cell.i + d_i, cell.j + d_j))
        lat = target.lat if d_i else self.position.lat
        lng = target.lng if d_j else self.position.lng
        self.move_to(GeoPoint(lat=lat, lng=lng), label=f"move {direction.name.lower()}")

    def move_to(self, point: GeoPoint, label: str = "location update") -> None:
        snapshot = self._snapshot(label)
        self.trail.record(self.position)
        self.position = point
        self.visibility.update(point)
        self.history.record(snapshot)
        self._emit(EVT_PLAYER_MOVED, data=point.to_dict())
        self._commit()

    def collect(self, cell: Cell, token_id: str) -> Optional[Token]:
        """Moves one coin from the cache at `cell` into the inventory."""
        try:
            cache = self._require_cache(cell)
            if token_id in self.inventory:
                raise DuplicateTokenError(token_id, "the inventory")
            snapshot = self._snapshot(f"collect {token_id}")
            token = cache.collect(token_id)
        except GameError as exc:
            self._reject("collect", exc)
            return None

        self.inventory.collect(token)
        self.visibility.flush(cell)
        self.history.record(snapshot)
        self._notify(f"Collected {token}")
        self._emit(EVT_COIN_COLLECTED, target=cell.key, data={"token": token.token_id})
        self._commit()
        return token

    def deposit(self, cell: Cell) -> Optional[Token]:
        """Moves the oldest inventory coin into the cache at `cell`."""
        try:
            cache = self._require_cache(cell)
            token = self.inventory.peek_oldest()
            if token in cache:
                raise DuplicateTokenError(token.token_id, f"cache {cell.key}")
            snapshot = self._snapshot(f"deposit {token}")
        except GameError as exc:
            self._reject("deposit", exc)
            return None

        self.inventory.deposit_oldest()
        cache.deposit(token)
        self.visibility.flush(cell)
        self.history.record(snapshot)
        self._notify(f"Deposited {token}")
        self._emit(EVT_COIN_DEPOSITED, target=cell.key, data={"token": token.token_id})
        self._commit()
        return token

    def reset(self) -> None:
        """Forgets every cache, coin and step. Not undoable."""
        self.visibility.dematerialize_all()
        self.directory.clear()
        self.inventory.clear()
        self.trail.clear()
        self.position = self.start_position
        self.history.reset()
        self.visibility.update(self.position)
        self._notify("Game reset")
        self._emit(EVT_SESSION_RESET)
        self._commit()

    def undo(self) -> bool:
        """Restores the state from before the last command."""
        snapshot = self.history.undo()
        if snapshot is None:
            self._notify("Nothing to undo")
            return False

        self.position = snapshot.position
        self.inventory.load_state(list(snapshot.inventory))
        self.directory.load_state({key: list(m) for key, m in snapshot.caches})
        self.trail.load_state([p.to_dict() for p in snapshot.trail])
        self.visibility.dematerialize_all()
        self.visibility.update(self.position)

        self._notify(f"Undid {snapshot.label}")
        self._emit(EVT_SESSION_UNDONE, data={"label": snapshot.label})
        self._commit()
        return True

    def toggle_tracking(self) -> bool:
        """Starts or stops continuous location updates. Returns the new state."""
        try:
            active = self.tracker.toggle()
        except UnavailableCapabilityError as exc:
            logger.warning("Tracking toggle ignored: %s", exc)
            self._notify("Location tracking is unavailable")
            return False
        self._notify("Tracking on" if active else "Tracking off")
        self._emit(EVT_TRACKING_STARTED if active else EVT_TRACKING_STOPPED)
        return active

    # ----------------------------------------------------------
    # Queries
    # ----------------------------------------------------------

    def popup_for(self, cell: Cell) -> Optional[CachePopup]:
        cache = self.visibility.cache_at(cell)
        if cache is None:
            return None
        return render_cache_popup(cache, self.inventory)

    def total_tokens(self) -> int:
        """Coins held plus coins in every known cache."""
        return len(self.inventory) + self.directory.total_tokens()

    # ----------------------------------------------------------
    # Internals
    # ----------------------------------------------------------

    def _on_location_update(self, point: GeoPoint) -> None:
        self.move_to(point)

    def _on_generated(self, cell: Cell) -> None:
        memento = self.directory.get(cell.key) or ()
        self._emit(EVT_CACHE_GENERATED, target=cell.key, data={"coins": len(memento)})

    def _require_cache(self, cell: Cell):
        cache = self.visibility.cache_at(cell)
        if cache is None:
            raise CacheNotVisibleError(f"No cache in view at {cell.key}")
        return cache

    def _snapshot(self, label: str) -> SessionSnapshot:
        return SessionSnapshot(
            label=label,
            position=self.position,
            inventory=self.inventory.ids(),
            caches=tuple(self.directory),
            trail=tuple(self.trail.points),
        )

    def _reject(self, action: str, exc: GameError) -> None:
        logger.info("%s rejected: %s", action, exc)
        self._notify(str(exc))
        self._emit(EVT_ACTION_REJECTED, data={"action": action, "reason": str(exc)})

    def _notify(self, message: str) -> None:
        self.messages.append(message)

    def _emit(self, key: str, target: Optional[str] = None, data: Optional[dict] = None) -> None:
        self.bus.emit(GameEvent(event_key=key, source="session", target=target, data=data or {}))

    def _commit(self) -> None:
        self.save()
