import pytest

from engine.config import GameConfig
from engine.session import GameSession

# Cell (0,0) center; a start point on a cell edge would make the
# neighbourhood depend on float rounding.
START = 0.00005


class FakeLuck:
    """Luck oracle backed by a dict. Unlisted keys roll 0.99 (no cache)."""

    def __init__(self, values=None):
        self.values = dict(values or {})
        self.calls = []

    def __call__(self, key: str) -> float:
        self.calls.append(key)
        return self.values.get(key, 0.99)


# Two caches next to the start cell:
#   (0,1)  three coins  0:1#0, 0:1#1, 0:1#2
#   (0,-1) zero coins
LUCK_VALUES = {
    "0,1": 0.0,
    "0,1,coins": 0.35,
    "0,-1": 0.05,
    "0,-1,coins": 0.0,
}


@pytest.fixture
def config():
    return GameConfig(
        tile_width=1e-4,
        visibility_radius=2,
        spawn_probability=0.1,
        max_tokens_per_cache=10,
        start_lat=START,
        start_lng=START,
    )


@pytest.fixture
def fake_luck():
    return FakeLuck(LUCK_VALUES)


@pytest.fixture
def make_session(config, fake_luck):
    def _make(**kwargs):
        kwargs.setdefault("config", config)
        kwargs.setdefault("luck", fake_luck)
        return GameSession(**kwargs)
    return _make
