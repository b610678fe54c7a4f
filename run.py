"""
GeoCoin — run.py
Main entry point for the GeoCoin interactive application.
"""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import List

# Ensure we can import the project packages
project_root = Path(__file__).parent.resolve()
sys.path.insert(0, str(project_root))

from engine.config import load_game_config
from engine.geolocation import ScriptedGeolocation
from engine.persistence import TomlFileStore
from engine.session import GameSession
from ui.renderer import Renderer
from ui.states import Engine
from ui.screens import MainMenuState
from world.grid import GeoPoint


def load_route(path: Path) -> List[GeoPoint]:
    """Reads a replay route: a TOML file of [[point]] tables with lat/lng."""
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return [GeoPoint.model_validate(p) for p in data.get("point", [])]


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="GeoCoin: collect and deposit coins at map caches.")
    parser.add_argument("--config", type=Path, help="game TOML (defaults to data/game.toml)")
    parser.add_argument("--save", type=Path, help="save file, overrides the config")
    parser.add_argument("--journal", type=Path, help="activity journal, overrides the config")
    parser.add_argument("--track", type=Path, help="route TOML replayed as location updates")
    parser.add_argument("--width", type=int, default=80)
    parser.add_argument("--height", type=int, default=50)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = load_game_config(args.config)

    config.log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=config.log_path,
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    geolocation = ScriptedGeolocation(load_route(args.track)) if args.track else None
    session = GameSession(
        config=config,
        store=TomlFileStore(args.save or config.save_path),
        geolocation=geolocation,
        journal_path=args.journal or config.journal_path,
    )

    renderer = Renderer(width=args.width, height=args.height, title="GeoCoin")
    engine = Engine(renderer=renderer)
    engine.change_state(MainMenuState(engine, session, pump=geolocation.pump if geolocation else None))
    try:
        engine.run()
    finally:
        session.close()


if __name__ == "__main__":
    main()
