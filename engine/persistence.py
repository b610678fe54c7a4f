"""
GeoCoin — engine/persistence.py
Persistence boundary: key-value stores and the persisted session shape.
=======================================================================
Version:     0.2
Stack:       Python 3.11+ | tomllib | Pydantic v2

Persisted keys (each independently optional on load)
----------------------------------------------------
  inventory   list of coin ids
  position    {lat, lng}
  caches      {"i,j": [coin ids]}
  trail       list of {lat, lng}

A missing key leaves the in-memory default. A malformed key or entry is
logged and skipped; it never aborts loading the rest.
"""

from __future__ import annotations

import json
import logging
import math
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol

from pydantic import ValidationError

from engine.errors import InvalidPersistedDataError
from world.grid import GeoPoint

if TYPE_CHECKING:
    from engine.session import GameSession

logger = logging.getLogger(__name__)

KEY_INVENTORY = "inventory"
KEY_POSITION = "position"
KEY_CACHES = "caches"
KEY_TRAIL = "trail"

PERSISTED_KEYS = (KEY_INVENTORY, KEY_POSITION, KEY_CACHES, KEY_TRAIL)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...
    def set(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-process store. Values are deep-copied through JSON on write."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.loads(json.dumps(value))

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)


# ============================================================
# TOML FILE STORE
# All keys live in one file as top-level key/value pairs.
# ============================================================

def _toml_value(value: Any) -> str:
    """Emits a TOML value. Tables are written inline."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError(f"Cannot persist non-finite float {value}")
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = ", ".join(f"{json.dumps(str(k), ensure_ascii=False)} = {_toml_value(v)}" for k, v in value.items())
        return "{ " + items + " }"
    raise TypeError(f"Cannot persist value of type {type(value).__name__}")


class TomlFileStore:
    """
    File-backed store. Every set() rewrites the whole file through a temp
    file and an atomic replace, so a crash leaves the previous save intact.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "rb") as f:
                return tomllib.load(f)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable save file %s: %s", self.path, exc)
            return {}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        lines = [f"{json.dumps(key)} = {_toml_value(value)}" for key, value in self._data.items()]
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        _toml_value(value)  # raises before the in-memory copy is touched
        self._data[key] = json.loads(json.dumps(value))
        self._write()

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._write()


# ============================================================
# SESSION STATE
# ============================================================

def save_session_state(store: KeyValueStore, session: "GameSession") -> None:
    """Writes all four persisted keys."""
    store.set(KEY_INVENTORY, session.inventory.get_state())
    store.set(KEY_POSITION, session.position.to_dict())
    store.set(KEY_CACHES, session.directory.get_state())
    store.set(KEY_TRAIL, session.trail.get_state())


def parse_position(data: Any) -> GeoPoint:
    """Validates a stored {lat, lng} mapping. Raises InvalidPersistedDataError."""
    try:
        return GeoPoint.model_validate(data)
    except ValidationError as exc:
        raise InvalidPersistedDataError(f"malformed saved position {data!r}") from exc


def load_position(data: Any) -> Optional[GeoPoint]:
    try:
        return parse_position(data)
    except InvalidPersistedDataError as exc:
        logger.warning("Ignoring %s", exc)
        return None


def _without_cached_coins(data: Any, session: "GameSession") -> Any:
    """Drops held coin ids that a loaded cache already holds."""
    if not isinstance(data, list):
        return data
    cached = {token_id for _, memento in session.directory for token_id in memento}
    kept = []
    for token_id in data:
        if isinstance(token_id, str) and token_id in cached:
            logger.warning("Skipping inventory coin %s already held by a cache", token_id)
            continue
        kept.append(token_id)
    return kept


def load_session_state(store: KeyValueStore, session: "GameSession") -> Dict[str, bool]:
    """
    Applies whichever persisted keys are present to the session.
    Returns which keys were found.
    """
    found = {key: store.get(key) is not None for key in PERSISTED_KEYS}

    if found[KEY_CACHES]:
        session.directory.load_state(store.get(KEY_CACHES))
    if found[KEY_INVENTORY]:
        session.inventory.load_state(_without_cached_coins(store.get(KEY_INVENTORY), session))
    if found[KEY_TRAIL]:
        session.trail.load_state(store.get(KEY_TRAIL))
    if found[KEY_POSITION]:
        position = load_position(store.get(KEY_POSITION))
        if position is not None:
            session.position = position

    return found
