"""
GeoCoin — engine/history.py
Undo history as an append-only log of structured snapshots.
===========================================================
Records are never modified or removed. Each one points at the record that
was the head when it was written, so undo walks backwards through the
chain while the log itself only grows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from world.caches import Memento
from world.grid import GeoPoint


@dataclass(frozen=True)
class SessionSnapshot:
    label: str
    position: GeoPoint
    inventory: Tuple[str, ...]
    caches: Tuple[Tuple[str, Memento], ...]
    trail: Tuple[GeoPoint, ...]
    previous: Optional[int] = None

    def caches_dict(self) -> Dict[str, Memento]:
        return dict(self.caches)


class SnapshotLog:
    def __init__(self) -> None:
        self._records: List[SessionSnapshot] = []
        self.head: Optional[int] = None

    def record(self, snapshot: SessionSnapshot) -> int:
        """Appends a snapshot chained to the current head; returns its index."""
        chained = SessionSnapshot(
            label=snapshot.label,
            position=snapshot.position,
            inventory=snapshot.inventory,
            caches=snapshot.caches,
            trail=snapshot.trail,
            previous=self.head,
        )
        self._records.append(chained)
        self.head = len(self._records) - 1
        return self.head

    def undo(self) -> Optional[SessionSnapshot]:
        """Returns the head snapshot and moves the head to its predecessor."""
        if self.head is None:
            return None
        snapshot = self._records[self.head]
        self.head = snapshot.previous
        return snapshot

    def reset(self) -> None:
        """Detaches the head; earlier records stay in the log."""
        self.head = None

    def __getitem__(self, index: int) -> SessionSnapshot:
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    @property
    def can_undo(self) -> bool:
        return self.head is not None
