"""
GeoCoin — engine/config.py
Game configuration loaded from TOML and validated by Pydantic.
==============================================================
Version:     0.2
Stack:       Python 3.11+ | Pydantic v2 | tomllib
Status:      Core configuration layer.

Design Variables (defaults; override in data/game.toml)
-------------------------------------------------------
  tile_width             0.0001    — degrees per grid cell (~11 m)
  visibility_radius      8         — cells, Chebyshev neighbourhood
  spawn_probability      0.1       — chance a cell holds a cache
  max_tokens_per_cache   10        — upper bound (exclusive) on starting coins
  meters_per_degree      111320.0  — linear approximation near the play area
  start_lat / start_lng  0.0       — Null Island
"""

import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ================================================================================
# SCHEMA
# ================================================================================

class GameConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    tile_width: float = 1e-4
    visibility_radius: int = Field(default=8, ge=0)
    spawn_probability: float = Field(default=0.1, ge=0.0, le=1.0)
    max_tokens_per_cache: int = Field(default=10, ge=0)
    meters_per_degree: float = 111_320.0
    start_lat: float = 0.0
    start_lng: float = 0.0

    save_path: Path = Path("sessions/geocoin.toml")
    journal_path: Path = Path("sessions/journal.jsonl")
    log_path: Path = Path("sessions/geocoin.log")
    log_level: str = "INFO"

    @field_validator("tile_width", "meters_per_degree")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def visibility_threshold_m(self) -> float:
        """Distance beyond which a materialized cache is discarded."""
        return self.visibility_radius * self.tile_width * self.meters_per_degree

# ================================================================================
# LOADER & CACHE (JIT)
# ================================================================================

_CONFIG_CACHE: Optional[GameConfig] = None

DATA_DIR = Path(__file__).parent.parent / "data"


def load_game_config(path: Optional[Path] = None) -> GameConfig:
    """
    Loads the game configuration from TOML.
    The default file is cached globally; an explicit path is always re-read.
    Missing files yield the built-in defaults.
    """
    global _CONFIG_CACHE
    if path is None and _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    source = path if path is not None else DATA_DIR / "game.toml"
    if not source.exists():
        config = GameConfig()
    else:
        with open(source, "rb") as f:
            data = tomllib.load(f)
        config = GameConfig(**data.get("game", {}))

    if path is None:
        _CONFIG_CACHE = config
    return config
