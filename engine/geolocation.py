"""
GeoCoin — engine/geolocation.py
Geolocation collaborator and the continuous-tracking toggle.
============================================================
A provider delivers GeoPoint updates to a subscriber until the subscription
is cleared. The tracker holds at most one subscription; stopping it clears
exactly the handle that starting it returned.
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from engine.errors import UnavailableCapabilityError
from world.grid import GeoPoint

logger = logging.getLogger(__name__)

LocationCallback = Callable[[GeoPoint], None]


class GeolocationProvider(Protocol):
    def watch(self, callback: LocationCallback) -> int: ...
    def clear_watch(self, handle: int) -> None: ...


class ScriptedGeolocation:
    """
    Replays a fixed route. Each pump() delivers the next point to every
    active watcher; the route is consumed once.
    """
    def __init__(self, route: Iterable[GeoPoint]):
        self._route: List[GeoPoint] = list(route)
        self._watchers: Dict[int, LocationCallback] = {}
        self._handles = itertools.count(1)

    def watch(self, callback: LocationCallback) -> int:
        handle = next(self._handles)
        self._watchers[handle] = callback
        return handle

    def clear_watch(self, handle: int) -> None:
        self._watchers.pop(handle, None)

    @property
    def watcher_count(self) -> int:
        return len(self._watchers)

    def pump(self) -> Optional[GeoPoint]:
        """Delivers the next route point, if any watcher is listening."""
        if not self._watchers or not self._route:
            return None
        point = self._route.pop(0)
        for callback in list(self._watchers.values()):
            callback(point)
        return point


class LocationTracker:
    """
    Start/stop control over a single provider subscription.
    Without a provider every call is a logged no-op.
    """
    def __init__(self, provider: Optional[GeolocationProvider], on_update: LocationCallback):
        self.provider = provider
        self.on_update = on_update
        self._handle: Optional[int] = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self.active:
            return
        if self.provider is None:
            raise UnavailableCapabilityError("Geolocation is not available")
        self._handle = self.provider.watch(self.on_update)
        logger.info("Location tracking started (handle %s)", self._handle)

    def stop(self) -> None:
        if self._handle is None:
            return
        self.provider.clear_watch(self._handle)
        logger.info("Location tracking stopped (handle %s)", self._handle)
        self._handle = None

    def toggle(self) -> bool:
        """Flips tracking and returns whether it is now active."""
        if self.active:
            self.stop()
        else:
            self.start()
        return self.active
