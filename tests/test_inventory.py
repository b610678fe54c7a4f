import pytest

from engine.errors import DuplicateTokenError, EmptyInventoryError
from engine.inventory import PlayerInventory
from world.caches import Token


def test_deposit_is_first_in_first_out():
    inv = PlayerInventory()
    for token_id in ("a", "b", "c"):
        inv.collect(Token(token_id))
    assert inv.peek_oldest() == Token("a")
    assert inv.deposit_oldest() == Token("a")
    assert inv.deposit_oldest() == Token("b")
    assert inv.ids() == ("c",)


def test_empty_inventory_raises():
    inv = PlayerInventory()
    with pytest.raises(EmptyInventoryError):
        inv.peek_oldest()
    with pytest.raises(EmptyInventoryError):
        inv.deposit_oldest()


def test_duplicate_collect_rejected():
    inv = PlayerInventory()
    inv.collect(Token("a"))
    with pytest.raises(DuplicateTokenError):
        inv.collect(Token("a"))
    assert len(inv) == 1
    assert "a" in inv
    assert Token("a") in inv


def test_load_state_skips_bad_entries():
    inv = PlayerInventory()
    inv.load_state(["a", 3, None, "b", "a"])
    assert inv.get_state() == ["a", "b"]

    inv.load_state({"a": 1})
    assert len(inv) == 0
