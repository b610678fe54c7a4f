"""
GeoCoin — engine/inventory.py
Player Inventory: coins held, in the order they were collected.
Deposits always take the oldest coin first (FIFO).
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, Iterator, List, Tuple

from engine.errors import DuplicateTokenError, EmptyInventoryError
from world.caches import Token

logger = logging.getLogger(__name__)


class PlayerInventory:
    def __init__(self):
        self._tokens: Deque[Token] = deque()

    def collect(self, token: Token) -> None:
        if token in self:
            raise DuplicateTokenError(token.token_id, "the inventory")
        self._tokens.append(token)

    def peek_oldest(self) -> Token:
        if not self._tokens:
            raise EmptyInventoryError("Inventory is empty")
        return self._tokens[0]

    def deposit_oldest(self) -> Token:
        """Removes and returns the earliest-collected coin."""
        if not self._tokens:
            raise EmptyInventoryError("Inventory is empty")
        return self._tokens.popleft()

    def ids(self) -> Tuple[str, ...]:
        return tuple(t.token_id for t in self._tokens)

    def clear(self) -> None:
        self._tokens.clear()

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(tuple(self._tokens))

    def __contains__(self, token: object) -> bool:
        token_id = token.token_id if isinstance(token, Token) else token
        return any(t.token_id == token_id for t in self._tokens)

    def get_state(self) -> List[str]:
        return list(self.ids())

    def load_state(self, data: Any) -> None:
        """Restores held coins, skipping entries that are not strings or repeat."""
        self._tokens = deque()
        if not isinstance(data, list):
            logger.warning("Ignoring inventory of type %s", type(data).__name__)
            return
        for token_id in data:
            if not isinstance(token_id, str):
                logger.warning("Skipping malformed inventory entry %r", token_id)
                continue
            try:
                self.collect(Token(token_id))
            except DuplicateTokenError:
                logger.warning("Skipping duplicate inventory coin %s", token_id)
