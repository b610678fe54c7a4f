from world.luck import luck


def test_luck_is_stable_and_bounded():
    for key in ("0,0", "0,0,coins", "-12,400", ""):
        value = luck(key)
        assert 0.0 <= value < 1.0
        assert luck(key) == value


def test_luck_varies_by_key():
    values = {luck(f"{i},0") for i in range(50)}
    assert len(values) == 50
    assert luck("5,5") != luck("5,5,coins")
