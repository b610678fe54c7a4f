"""
GeoCoin — engine/events.py
Event envelope, canonical event keys and the bespoke pub-sub bus.
=================================================================
Version:     0.2
Stack:       Python 3.11+ | Pydantic v2 | bespoke pub-sub
Status:      Production-ready.

Architecture notes
------------------
- All events are GameEvent instances. data must stay flat + JSON-serializable.
- No global bus. The GameSession owns one and injects it where needed.
- The ActivityJournal receives every event via wildcard subscription ("*").
- Handler errors are logged and swallowed so emission always continues.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# ============================================================
# CANONICAL EVENT KEYS
# Never use raw strings. Add new keys here only.
# ============================================================

EVT_PLAYER_MOVED          = "player.moved"
EVT_CACHE_GENERATED       = "cache.generated"
EVT_CACHE_MATERIALIZED    = "cache.materialized"
EVT_CACHE_DEMATERIALIZED  = "cache.dematerialized"
EVT_COIN_COLLECTED        = "coin.collected"
EVT_COIN_DEPOSITED        = "coin.deposited"
EVT_ACTION_REJECTED       = "action.rejected"
EVT_SESSION_RESET         = "session.reset"
EVT_SESSION_UNDONE        = "session.undone"
EVT_SESSION_LOADED        = "session.loaded"
EVT_TRACKING_STARTED      = "tracking.started"
EVT_TRACKING_STOPPED      = "tracking.stopped"


class GameEvent(BaseModel):
    """Base envelope. The journal receives these directly."""
    event_key: str
    source: str
    target: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


HandlerFn = Callable[[GameEvent], None]


class EventBus:
    """
    Bespoke pub-sub. Pass the instance at construction; there is no global singleton.

    Wildcard key "*" receives every emitted event.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[HandlerFn]] = {}

    def subscribe(self, event_key: str, handler: HandlerFn) -> None:
        self._subscribers.setdefault(event_key, []).append(handler)

    def unsubscribe(self, event_key: str, handler: HandlerFn) -> None:
        if event_key in self._subscribers:
            self._subscribers[event_key] = [
                h for h in self._subscribers[event_key] if h != handler
            ]

    def emit(self, event: GameEvent) -> None:
        targets = (
            self._subscribers.get(event.event_key, [])
            + self._subscribers.get("*", [])
        )
        for handler in targets:
            try:
                handler(event)
            except Exception:  # noqa: BLE001
                logger.exception("Handler error on '%s'", event.event_key)
