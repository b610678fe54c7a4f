"""
GeoCoin — world/directory.py
Cache Directory: authoritative cell key -> memento mapping.
Entries accumulate on first encounter and are only removed by clear().
"""

import logging
from typing import Any, Dict, Iterator, Optional, Set, Tuple

from world.caches import Memento
from world.grid import Cell

logger = logging.getLogger(__name__)


class CacheDirectory:
    def __init__(self):
        self._entries: Dict[str, Memento] = {}

    def has_entry(self, cell_key: str) -> bool:
        return cell_key in self._entries

    def put(self, cell_key: str, memento: Memento) -> None:
        """Unconditional overwrite. Called after every cache mutation."""
        self._entries[cell_key] = tuple(memento)

    def get(self, cell_key: str) -> Optional[Memento]:
        return self._entries.get(cell_key)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, Memento]]:
        return iter(list(self._entries.items()))

    def total_tokens(self) -> int:
        return sum(len(m) for m in self._entries.values())

    def get_state(self) -> Dict[str, Any]:
        """Returns serializable state: {"i,j": [coin ids]}."""
        return {key: list(memento) for key, memento in self._entries.items()}

    def load_state(self, data: Any) -> None:
        """
        Restores entries from serializable data.
        Malformed entries are skipped with a warning; the rest still load.
        """
        self._entries = {}
        seen: Set[str] = set()
        if not isinstance(data, dict):
            logger.warning("Ignoring cache directory of type %s", type(data).__name__)
            return
        for key, ids in data.items():
            try:
                Cell.from_key(key)
            except (ValueError, AttributeError):
                logger.warning("Skipping cache entry with malformed key %r", key)
                continue
            if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
                logger.warning("Skipping cache entry %s with malformed coin list %r", key, ids)
                continue
            if len(set(ids)) != len(ids):
                logger.warning("Skipping cache entry %s with duplicate coin ids", key)
                continue
            if seen.intersection(ids):
                logger.warning("Skipping cache entry %s holding coins of another cache", key)
                continue
            seen.update(ids)
            self._entries[key] = tuple(ids)
