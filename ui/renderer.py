"""
GeoCoin — ui/renderer.py
TCOD Renderer: root console, clipping and background shading for the map.
=========================================================================
Version:     0.2
Stack:       Python 3.11+ | tcod | numpy
"""

from __future__ import annotations
from typing import Optional, Tuple
import numpy as np
import tcod

Color = Tuple[int, int, int]


class Renderer:
    """
    Owns the tcod root console. The map occupies the top `map_height` rows;
    the HUD lines sit below it.
    """
    def __init__(self, width: int, height: int, title: str = "GeoCoin", hud_lines: int = 5):
        self.width = width
        self.height = height
        self.title = title
        self.map_height = max(0, height - hud_lines)
        self.root_console = tcod.console.Console(width, height)
        self.context: Optional[tcod.context.Context] = None

    def clear(self) -> None:
        self.root_console.clear()

    def present(self, context: tcod.context.Context) -> None:
        context.present(self.root_console)

    def in_map(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.map_height

    def put(self, x: int, y: int, char: str, fg: Color) -> None:
        """Draws one glyph on the map; off-map positions are ignored."""
        if self.in_map(x, y):
            self.root_console.print(x, y, char, fg=fg)

    def print_line(self, x: int, y: int, text: str, fg: Color) -> None:
        """Prints a single line clipped to the console width."""
        self.root_console.print(x, y, text[: max(0, self.width - x)], fg=fg)

    def shade_map(self, mask: np.ndarray, color: Color) -> None:
        """Sets the background of every map cell where `mask` is true."""
        self.root_console.rgb["bg"][: self.map_height][mask] = color
