"""
GeoCoin — world/caches.py
Cache Entity: one cell's location and its ordered coins.
========================================================
Version:     0.2
Stack:       Python 3.11+
Status:      Core state model.

Architecture notes
------------------
- A Token is a value object; its id is its whole identity.
- A Cache's coin sequence is the entire persisted state of its cell.
- Memento = ordered tuple of coin ids. restore(m).serialize() == m.
- restore() rebuilds Tokens from ids only. Nothing beyond the id survives a
  save/restore cycle, and nothing else is needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from engine.errors import DuplicateTokenError, TokenNotFoundError
from world.grid import Cell, GeoPoint

Memento = Tuple[str, ...]


@dataclass(frozen=True)
class Token:
    token_id: str

    @classmethod
    def minted(cls, cell: Cell, index: int) -> "Token":
        """The k-th coin generated for a cell: "<i>:<j>#<k>"."""
        return cls(f"{cell.i}:{cell.j}#{index}")

    def __str__(self) -> str:
        return self.token_id


class Cache:
    """
    In-memory view of one cache. Owned by the Visibility Manager while
    materialized; the Cache Directory holds its authoritative memento.
    """
    def __init__(self, cell: Cell, location: GeoPoint, tokens: Iterable[Token] = ()):
        self.cell = cell
        self.location = location
        self._tokens: List[Token] = []
        for token in tokens:
            self.deposit(token)

    @property
    def key(self) -> str:
        return self.cell.key

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return tuple(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, token_id: object) -> bool:
        if isinstance(token_id, Token):
            token_id = token_id.token_id
        return any(t.token_id == token_id for t in self._tokens)

    def serialize(self) -> Memento:
        return tuple(t.token_id for t in self._tokens)

    def restore(self, memento: Iterable[str]) -> None:
        """Replaces the coin set with Tokens rebuilt from `memento`."""
        ids = list(memento)
        if len(set(ids)) != len(ids):
            raise DuplicateTokenError(next(i for i in ids if ids.count(i) > 1), f"cache {self.key}")
        self._tokens = [Token(token_id) for token_id in ids]

    def collect(self, token_id: str) -> Token:
        """Removes and returns the coin with the given id."""
        for index, token in enumerate(self._tokens):
            if token.token_id == token_id:
                return self._tokens.pop(index)
        raise TokenNotFoundError(token_id, f"cache {self.key}")

    def deposit(self, token: Token) -> None:
        if token in self:
            raise DuplicateTokenError(token.token_id, f"cache {self.key}")
        self._tokens.append(token)

    def __repr__(self) -> str:
        return f"Cache({self.key}, coins={len(self._tokens)})"
