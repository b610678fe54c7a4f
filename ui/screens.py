"""
GeoCoin — ui/screens.py
Implementations of the UI Screen States.
"""
from typing import Callable, List, Optional
import tcod
from tcod import libtcodpy
import numpy as np

from ui.states import BaseState, Engine
from ui.renderer import Renderer
from engine.presentation import render_inventory, render_status
from engine.session import Direction, GameSession
from world.grid import Cell

COLOR_CHECKER = (16, 16, 24)
COLOR_PLAYER = (0, 255, 255)
COLOR_CACHE = (255, 215, 0)
COLOR_EMPTY_CACHE = (120, 100, 40)
COLOR_TRAIL = (90, 90, 160)
COLOR_HUD = (150, 150, 150)


class MainMenuState(BaseState):
    """The title screen."""

    def __init__(self, engine: Engine, session: GameSession, pump: Optional[Callable[[], object]] = None):
        super().__init__(engine)
        self.session = session
        self.pump = pump

    def on_render(self, renderer: Renderer) -> None:
        renderer.root_console.print(
            renderer.width // 2,
            renderer.height // 2 - 5,
            "GeoCoin",
            fg=(255, 255, 0),
            alignment=libtcodpy.CENTER
        )
        renderer.root_console.print(renderer.width // 2, renderer.height // 2, "[N]ew Game", alignment=libtcodpy.CENTER)
        renderer.root_console.print(renderer.width // 2, renderer.height // 2 + 1, "[C]ontinue", alignment=libtcodpy.CENTER)
        renderer.root_console.print(renderer.width // 2, renderer.height // 2 + 2, "[Q]uit", alignment=libtcodpy.CENTER)

    def ev_keydown(self, event: tcod.event.KeyDown) -> None:
        if event.sym == tcod.event.KeySym.Q:
            self.session.close()
            self.engine.running = False
        elif event.sym == tcod.event.KeySym.N:
            self.session.reset()
            self.engine.change_state(ExplorationState(self.engine, self.session, self.pump))
        elif event.sym == tcod.event.KeySym.C:
            self.session.start()
            self.engine.change_state(ExplorationState(self.engine, self.session, self.pump))


class ExplorationState(BaseState):
    """The main gameplay screen: one console cell per grid cell, north up."""

    def __init__(self, engine: Engine, session: GameSession, pump: Optional[Callable[[], object]] = None):
        super().__init__(engine)
        self.session = session
        self.pump = pump

    def screen_to_cell(self, renderer: Renderer, sx: int, sy: int) -> Cell:
        origin = self.session.player_cell
        map_h = renderer.map_height
        return Cell(origin.i + (map_h // 2 - sy), origin.j + (sx - renderer.width // 2))

    def cell_to_screen(self, renderer: Renderer, cell: Cell) -> tuple[int, int]:
        origin = self.session.player_cell
        map_h = renderer.map_height
        return renderer.width // 2 + (cell.j - origin.j), map_h // 2 - (cell.i - origin.i)

    def on_render(self, renderer: Renderer) -> None:
        map_h = renderer.map_height
        origin = self.session.player_cell

        # 1. Checker background by cell parity
        ys, xs = np.indices((map_h, renderer.width))
        parity = ((origin.i + map_h // 2 - ys) + (origin.j + xs - renderer.width // 2)) % 2 == 0
        renderer.shade_map(parity, COLOR_CHECKER)

        def draw(cell: Cell, char: str, fg: tuple) -> None:
            renderer.put(*self.cell_to_screen(renderer, cell), char, fg)

        # 2. Trail, ending under the player
        for point in self.session.trail.polyline(self.session.position):
            draw(self.session.grid.cell_for_point(point), "·", COLOR_TRAIL)

        # 3. Materialized caches
        for cache in self.session.visibility.visible_caches():
            draw(cache.cell, "$", COLOR_CACHE if len(cache) else COLOR_EMPTY_CACHE)

        # 4. Player
        draw(origin, "@", COLOR_PLAYER)

        # 5. HUD
        tracking = "on" if self.session.tracker.active else "off"
        renderer.print_line(1, map_h, f"{render_status(self.session.inventory, self.session.position)} | Tracking: {tracking}", fg=(0, 255, 0))
        renderer.print_line(1, map_h + 1, render_inventory(self.session.inventory), fg=(200, 200, 200))
        if self.session.messages:
            renderer.print_line(1, map_h + 2, self.session.messages[-1], fg=(255, 255, 255))
        renderer.print_line(1, renderer.height - 1, "[Arrows/WASD] Move  [F] Nearest cache  [T] Track  [U] Undo  [R] Reset  [ESC] Menu", fg=COLOR_HUD)

    def on_idle(self) -> None:
        if self.pump is not None and self.session.tracker.active:
            self.pump()

    def ev_keydown(self, event: tcod.event.KeyDown) -> None:
        if event.sym == tcod.event.KeySym.ESCAPE:
            self.session.save()
            self.engine.change_state(MainMenuState(self.engine, self.session, self.pump))
            return

        direction = None
        if event.sym in (tcod.event.KeySym.UP, tcod.event.KeySym.W, tcod.event.KeySym.K):
            direction = Direction.NORTH
        elif event.sym in (tcod.event.KeySym.DOWN, tcod.event.KeySym.S, tcod.event.KeySym.J):
            direction = Direction.SOUTH
        elif event.sym in (tcod.event.KeySym.LEFT, tcod.event.KeySym.A, tcod.event.KeySym.H):
            direction = Direction.WEST
        elif event.sym in (tcod.event.KeySym.RIGHT, tcod.event.KeySym.D, tcod.event.KeySym.L):
            direction = Direction.EAST

        if direction is not None:
            self.session.move(direction)
        elif event.sym == tcod.event.KeySym.F:
            caches = self.session.visibility.visible_caches()
            if caches:
                self.engine.change_state(CacheState(self.engine, self, caches[0].cell))
            else:
                self.session.messages.append("No cache in view")
        elif event.sym == tcod.event.KeySym.T:
            self.session.toggle_tracking()
        elif event.sym == tcod.event.KeySym.U:
            self.session.undo()
        elif event.sym == tcod.event.KeySym.R:
            self.session.reset()


class CacheState(BaseState):
    """Overlay for moving coins between a cache and the player."""

    def __init__(self, engine: Engine, parent_state: ExplorationState, cell: Cell):
        super().__init__(engine)
        self.parent_state = parent_state
        self.session = parent_state.session
        self.cell = cell
        self.cursor_pos = 0
        self.coin_ids: List[str] = []
        self._refresh()

    def _refresh(self) -> None:
        popup = self.session.popup_for(self.cell)
        self.coin_ids = list(popup.coin_ids) if popup else []
        if self.cursor_pos >= len(self.coin_ids):
            self.cursor_pos = max(0, len(self.coin_ids) - 1)

    def on_render(self, renderer: Renderer) -> None:
        self.parent_state.on_render(renderer)
        popup = self.session.popup_for(self.cell)
        if popup is None:
            return
        console = renderer.root_console
        console.draw_frame(
            15, 5, renderer.width - 30, renderer.height - 10,
            popup.title, clear=True, fg=(255, 255, 0), bg=(0, 0, 0)
        )

        if not popup.coin_ids:
            console.print(17, 7, "(Empty)", fg=(128, 128, 128))
        else:
            for i, coin_id in enumerate(popup.coin_ids[: renderer.height - 16]):
                fg = (0, 255, 255) if i == self.cursor_pos else (255, 255, 255)
                console.print(17, 7 + i, f"[Enter] Collect {coin_id}", fg=fg)

        deposit = f"[D] Deposit {popup.next_deposit}" if popup.can_deposit else "[D] Deposit (nothing to deposit)"
        console.print(17, renderer.height - 8, deposit, fg=(200, 200, 200))
        console.print(17, renderer.height - 7, "[ESC/F] to close", fg=(200, 200, 200))

    def ev_keydown(self, event: tcod.event.KeyDown) -> None:
        if event.sym == tcod.event.KeySym.ESCAPE:
            self.engine.change_state(self.parent_state)
        elif event.sym == tcod.event.KeySym.UP:
            self.cursor_pos = max(0, self.cursor_pos - 1)
        elif event.sym == tcod.event.KeySym.DOWN:
            self.cursor_pos = max(0, min(len(self.coin_ids) - 1, self.cursor_pos + 1))
        elif event.sym == tcod.event.KeySym.RETURN:
            if self.coin_ids:
                self.session.collect(self.cell, self.coin_ids[self.cursor_pos])
                self._refresh()
        elif event.sym == tcod.event.KeySym.D:
            self.session.deposit(self.cell)
            self._refresh()
        elif event.sym == tcod.event.KeySym.F:
            self.engine.change_state(self.parent_state)
