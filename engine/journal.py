"""
GeoCoin — engine/journal.py
Activity Journal: append-only JSONL record of game events.
==========================================================
Version:     0.2
Stack:       Python 3.11+ | stdlib json | bespoke EventBus

Architecture notes
------------------
- The journal is a PASSIVE wildcard subscriber. It never emits events.
- Append-only JSONL. Entries are immutable after write.
- sequence numbers restart at the number of lines already on disk, so a
  resumed session continues the count.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from engine.events import EventBus, GameEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JournalEntry:
    """Immutable record of a single event."""
    event_id: str                       # UUID4 string
    sequence: int                       # 0-based, per journal file
    event_type: str
    source: str
    target: str | None
    data: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id":   self.event_id,
            "sequence":   self.sequence,
            "event_type": self.event_type,
            "source":     self.source,
            "target":     self.target,
            "data":       self.data,
        }


class ActivityJournal:
    """
    Subscribes to every event on the bus and appends it to a JSONL file.
    """
    def __init__(self, bus: EventBus, journal_path: Path) -> None:
        self.bus = bus
        self.journal_path = journal_path
        self.journal_path.parent.mkdir(parents=True, exist_ok=True)
        self._sequence = len(JournalReader(journal_path).all_entries())
        self._terminate_partial_line()
        bus.subscribe("*", self._on_event)

    def _terminate_partial_line(self) -> None:
        """An interrupted append leaves no trailing newline; close it off."""
        if not self.journal_path.exists() or self.journal_path.stat().st_size == 0:
            return
        with open(self.journal_path, "rb") as fh:
            fh.seek(-1, 2)
            last = fh.read(1)
        if last != b"\n":
            with open(self.journal_path, "a", encoding="utf-8") as fh:
                fh.write("\n")

    def detach(self) -> None:
        self.bus.unsubscribe("*", self._on_event)

    def _on_event(self, event: GameEvent) -> None:
        entry = JournalEntry(
            event_id=str(uuid.uuid4()),
            sequence=self._sequence,
            event_type=event.event_key,
            source=event.source,
            target=event.target,
            data=event.data,
        )
        self._sequence += 1
        with open(self.journal_path, "a", encoding="utf-8") as fh:
            fh.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")


class JournalReader:
    """
    Read-only query interface for a journal.jsonl file.
    """

    def __init__(self, journal_path: Path) -> None:
        self.journal_path = journal_path

    def all_entries(self) -> List[Dict[str, Any]]:
        """Return all entries in insertion order. Undecodable lines are skipped."""
        if not self.journal_path.exists():
            return []
        entries = []
        with open(self.journal_path, "r", encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(json.loads(line))
                except json.JSONDecodeError:
                    logger.warning("Skipping undecodable journal line %d in %s", lineno, self.journal_path)
        return entries

    def by_event_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.all_entries() if e.get("event_type") == event_type]
