"""
GeoCoin — world/luck.py
Procedural Content Oracle: a pure, stable pseudo-random value per key.
"""

from __future__ import annotations

import random
from typing import Callable

LuckFn = Callable[[str], float]


def luck(key: str) -> float:
    """
    Returns a value in [0, 1) determined solely by `key`.

    random.Random hashes str seeds with SHA-512, so the result is identical
    across runs and independent of PYTHONHASHSEED.
    """
    return random.Random(key).random()
