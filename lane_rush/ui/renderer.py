"""
Renderer - Reads session snapshots and renders to pyunicodegame windows.
This is a THIN ADAPTER - no game logic here.
"""
from typing import Optional, Tuple

import pyunicodegame

from lane_rush.gameplay.entities import ItemKind
from lane_rush.gameplay.geometry import Rect
from lane_rush.gameplay.session import GamePhase, Snapshot


# Colors
COLOR_BG = (5, 7, 13, 255)
COLOR_ROAD = (11, 16, 32)
COLOR_DIVIDER = (60, 64, 80)
COLOR_CAR = (34, 211, 238)
COLOR_CAR_SHIELD = (250, 250, 120)
COLOR_OBSTACLE = (239, 68, 68)
COLOR_HUD = (220, 220, 220)
COLOR_HINT = (150, 150, 160)
COLOR_TOAST = (255, 255, 255)
COLOR_GAMEOVER = (255, 100, 100)

ITEM_CHARS = {
    ItemKind.SHIELD: '◊',
    ItemKind.SLOW: '≈',
    ItemKind.BOOST: '✦',
    ItemKind.TRIVIA: '?',
}


def hex_to_rgb(value: str, default: Tuple[int, int, int] = COLOR_HUD) -> Tuple[int, int, int]:
    """'#22c55e' -> (34, 197, 94)."""
    value = value.lstrip('#')
    if len(value) != 6:
        return default
    try:
        return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return default


class Renderer:
    """
    Draws the latest published snapshot.

    The session publishes at most ~30 snapshots per second; render() may be
    called more often and just redraws the last one.
    """

    def __init__(self, width: int, height: int, cell_size: float):
        self.width = width
        self.height = height
        self.cell_size = cell_size

        self.snapshot: Optional[Snapshot] = None
        self.best_score: int = 0

        self.road_window = None
        self.hud_window = None

    @property
    def play_area(self) -> Tuple[float, float]:
        """Play-area size in simulation units."""
        return self.width * self.cell_size, self.height * self.cell_size

    def init_windows(self):
        """Initialize pyunicodegame windows."""
        self.road_window = pyunicodegame.create_window(
            "road", 0, 0, self.width, self.height,
            z_index=0, bg=COLOR_BG
        )
        self.hud_window = pyunicodegame.create_window(
            "hud", 0, 0, self.width, self.height,
            z_index=10, bg=None, fixed=True
        )

    def publish(self, snapshot: Snapshot):
        """Receive a snapshot from the session."""
        self.snapshot = snapshot

    def render(self):
        """Render the latest snapshot."""
        self.clear_hud()
        if self.snapshot is None:
            self.render_title()
            return

        self.render_road()
        self.render_entities()
        self.render_hud()

        if self.snapshot.phase == GamePhase.ENDED:
            self.render_game_over()

    def _cell(self, x: float, y: float) -> Tuple[int, int]:
        return int(x / self.cell_size), int(y / self.cell_size)

    def _in_bounds(self, cx: int, cy: int) -> bool:
        return 0 <= cx < self.width and 0 <= cy < self.height

    def _fill_rect(self, rect: Rect, char: str, color):
        """Cover every cell the rect touches."""
        left, top = self._cell(rect.x, rect.y)
        right, bottom = self._cell(rect.right - 0.01, rect.bottom - 0.01)
        for cy in range(top, bottom + 1):
            for cx in range(left, right + 1):
                if self._in_bounds(cx, cy):
                    self.road_window.put(cx, cy, char, color)

    def render_road(self):
        """Background, road surface and lane dividers (overwrites previous frame)."""
        layout = self.snapshot.layout
        road_left, _ = self._cell(layout.road_x, 0)
        road_right, _ = self._cell(layout.road_x + layout.road_width, 0)
        dividers = {
            self._cell(layout.road_x + layout.lane_width * n, 0)[0] for n in (1, 2)
        }

        for cy in range(self.height):
            for cx in range(self.width):
                if cx in dividers:
                    self.road_window.put(cx, cy, '┊', COLOR_DIVIDER)
                elif road_left <= cx < road_right:
                    self.road_window.put(cx, cy, '·', COLOR_ROAD)
                else:
                    self.road_window.put(cx, cy, ' ', COLOR_ROAD)

    def render_entities(self):
        """Obstacles, items and the car."""
        for obstacle in self.snapshot.obstacles:
            self._fill_rect(obstacle.rect, '█', COLOR_OBSTACLE)

        for item in self.snapshot.items:
            char = ITEM_CHARS.get(item.kind, '?')
            self._fill_rect(item.rect, char, hex_to_rgb(item.color))

        car_color = COLOR_CAR_SHIELD if self.snapshot.shield_active else COLOR_CAR
        self._fill_rect(self.snapshot.player, '▲', car_color)

    def render_hud(self):
        """Score, status flags, toast and hint."""
        snap = self.snapshot
        status = []
        if snap.shield_active:
            status.append("SHIELD")
        if snap.slow_mo:
            status.append("SLOW-MO")

        self._put_line(0, f"{snap.score}  {' '.join(status)}", COLOR_HUD)
        self._put_line(1, snap.hint, COLOR_HINT)

        if snap.toast is not None:
            self._put_line(3, snap.toast.title, COLOR_TOAST)
            self._put_line(4, snap.toast.subtitle, COLOR_HINT)

    def render_game_over(self):
        """Final score panel."""
        mid = self.height // 2
        self._put_line(mid - 1, "GAME OVER", COLOR_GAMEOVER)
        self._put_line(mid, f"SCORE {self.snapshot.score}", COLOR_HUD)
        self._put_line(mid + 1, f"HIGH SCORE {self.best_score}", COLOR_HUD)
        self._put_line(mid + 3, "Enter: play again  Esc: quit", COLOR_HINT)

    def render_title(self):
        """Shown before the first round."""
        mid = self.height // 2
        self._put_line(mid - 1, "LANE RUSH", COLOR_CAR)
        self._put_line(mid + 1, "Enter: start  ←/→: switch lane", COLOR_HINT)

    def clear_hud(self):
        """Blank every HUD row; the hud window keeps its cells between frames."""
        for y in range(self.height):
            self._put_line(y, "", COLOR_HUD)

    def _put_line(self, y: int, text: str, color):
        """Write a full-width line so leftovers from longer text are cleared."""
        line = text[:self.width].ljust(self.width)
        self.hud_window.put_string(0, y, line, color)
