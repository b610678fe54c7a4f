"""
GeoCoin — engine/errors.py
Error taxonomy for the game domain.
===================================
Every error here is local and non-fatal: the worst outcome of any of them is
"this specific action did not happen". Session commands catch them, log a
diagnostic and carry on.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for all recoverable game errors."""


class InvalidPersistedDataError(GameError):
    """A stored entry has the wrong shape or type."""


class TokenNotFoundError(GameError):
    """A coin id was requested from a container that does not hold it."""

    def __init__(self, token_id: str, container: str) -> None:
        super().__init__(f"Coin {token_id} is not in {container}")
        self.token_id = token_id
        self.container = container


class DuplicateTokenError(GameError):
    """A coin id is already present in the target container."""

    def __init__(self, token_id: str, container: str) -> None:
        super().__init__(f"Coin {token_id} is already in {container}")
        self.token_id = token_id
        self.container = container


class EmptyInventoryError(GameError):
    """Deposit attempted with nothing in the inventory."""


class CacheNotVisibleError(GameError):
    """No materialized cache exists at the requested cell."""


class UnavailableCapabilityError(GameError):
    """The host environment cannot provide a capability (e.g. geolocation)."""
