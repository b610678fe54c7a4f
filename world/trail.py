"""
GeoCoin — world/trail.py
MovementTrail: append-only record of positions the player has left.
"""

import logging
from typing import Any, List

from pydantic import ValidationError

from world.grid import GeoPoint

logger = logging.getLogger(__name__)


class MovementTrail:
    def __init__(self):
        self.points: List[GeoPoint] = []

    def record(self, point: GeoPoint) -> None:
        """Appends a visited position."""
        self.points.append(point)

    def clear(self) -> None:
        self.points = []

    def __len__(self) -> int:
        return len(self.points)

    def polyline(self, current: GeoPoint) -> List[GeoPoint]:
        """Visited positions followed by the current one, for drawing a path."""
        return self.points + [current]

    def get_state(self) -> List[dict]:
        """Returns serializable state for snapshots."""
        return [p.to_dict() for p in self.points]

    def load_state(self, data: Any) -> None:
        """Restores state from serializable data, skipping malformed points."""
        self.points = []
        if not isinstance(data, list):
            logger.warning("Ignoring movement trail of type %s", type(data).__name__)
            return
        for item in data:
            try:
                self.points.append(GeoPoint.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed trail point %r", item)
                continue
