"""Drawing the 3D view and the minimap into a frame."""

import math
from dataclasses import dataclass, field

import numpy as np

from .colors import shade
from .player import FOV, HEIGHT, TILE_SIZE, WIDTH
from .raycast import cast_all
from .textures import offset_x, scale_offset, wall_direction

_MASK32 = 0xFFFFFFFF
_PROJECTION = (WIDTH // 2) / math.tan((FOV // 2) * (math.pi / 180))
_LAMP_BITS = 5 << 24
_VERTICAL_SHADE = 0.75
_CEILING_LUM_DARK = 60
_CEILING_LUM_LAMP_DROP = 20

MINIMAP_SIZE = 250
MINIMAP_CENTER = 125
MINIMAP_SCALE = 3
MINIMAP_WALL = 0x004703FF
MINIMAP_DOOR = 0x728200FF
MINIMAP_FLOOR = 0x0A1E05FF
MARKER_COLOR = 0xFF0000FF
MARKER_RADIUS = 7


def _div(numerator, denominator):
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


@dataclass
class Frame:
    """A packed-RGBA image the renderer draws into."""

    width: int = WIDTH
    height: int = HEIGHT
    pixels: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("frame dimensions must be positive")
        self.pixels = np.zeros((self.height, self.width), dtype=np.uint32)

    def put(self, x, y, color):
        """Set one pixel; coordinates outside the frame are ignored."""
        x, y = int(x), int(y)
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y, x] = int(color) & _MASK32

    def get(self, x, y):
        """Packed colour at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside the frame")
        return int(self.pixels[y, x])

    def _column(self, x, ys, colors):
        if not 0 <= x < self.width:
            return
        ys = np.asarray(ys, dtype=np.int64)
        colors = np.broadcast_to(np.asarray(colors, dtype=np.int64) & _MASK32, ys.shape)
        keep = (ys >= 0) & (ys < self.height)
        self.pixels[ys[keep], x] = colors[keep].astype(np.uint32)


def project(ray, player_angle):
    """Fish-eye corrected distance, wall height and unclamped top and bottom rows."""
    distance = ray.distance * math.cos(ray.angle - player_angle)
    wall_height = _div(TILE_SIZE, distance) * _PROJECTION
    top = HEIGHT // 2 - wall_height / 2
    bottom = HEIGHT // 2 + wall_height / 2
    return distance, wall_height, top, bottom


def ceiling_lum(hold_lamp):
    """Ceiling brightness in percent: 40 while the lamp is held, 60 otherwise."""
    lamp_held = 1 if hold_lamp % 2 != 0 else 0
    return _CEILING_LUM_DARK - _CEILING_LUM_LAMP_DROP * lamp_held


def floor_lum(hold_lamp, y):
    """Floor brightness in percent for screen row ``y``, brighter near the bottom."""
    factor = 100 if hold_lamp % 2 != 0 else 80
    return min(int((y / HEIGHT) * factor), 100)


def wall_lum(hold_lamp, distance):
    """Wall brightness in percent, fading with distance; the lamp fades it less."""
    divisor = 50 if hold_lamp % 2 != 0 else 10
    value = 100 - distance / divisor
    if not math.isfinite(value) or value < 0:
        return 0
    return int(value)


def _darken(colors, factor):
    r = np.floor(((colors >> 24) & 0xFF) * factor).astype(np.int64)
    g = np.floor(((colors >> 16) & 0xFF) * factor).astype(np.int64)
    b = np.floor(((colors >> 8) & 0xFF) * factor).astype(np.int64)
    return (r << 24) | (g << 16) | (b << 8) | 0xFF


@dataclass
class Renderer:
    """Draws the first-person view of a map with its textures and colours.

    ``walls`` holds the north, south, east and west textures in that order.
    """

    grid: list
    walls: list
    door: object
    floor: tuple
    ceiling: tuple

    def render(self, frame, player, hold_lamp):
        """Cast all rays, draw the view and the minimap; return the rays."""
        rays = cast_all(self.grid, player)
        ceiling_color = shade(self.ceiling, ceiling_lum(hold_lamp))
        floor_colors = np.array(
            [shade(self.floor, floor_lum(hold_lamp, y)) for y in range(HEIGHT)],
            dtype=np.int64,
        )
        for column, ray in enumerate(rays):
            self._draw_column(frame, column, ray, player.angle, hold_lamp,
                              ceiling_color, floor_colors)
        render_minimap(frame, self.grid, player)
        return rays

    def _draw_column(self, frame, column, ray, player_angle, hold_lamp,
                     ceiling_color, floor_colors):
        distance, wall_height, top_wall, bottom_wall = project(ray, player_angle)
        top = float(np.fmax(top_wall, 0.0))
        bottom = float(np.fmin(bottom_wall, HEIGHT))
        lum = wall_lum(hold_lamp, distance)
        lamp = hold_lamp % 2 != 0
        if math.isfinite(top) and math.isfinite(bottom) and bottom > top:
            ys = np.arange(top, bottom)
            if ray.element == "1":
                colors = self._wall_colors(ray, ys, top_wall, wall_height, lum)
            else:
                colors = self._door_colors(ray, ys, top_wall, wall_height, lum)
            if lamp:
                colors = colors | _LAMP_BITS
            frame._column(column, np.trunc(ys), colors)
        if math.isnan(top) or math.isnan(bottom) or top < 0 or bottom < 0:
            return
        ceiling_rows = min(math.ceil(top), frame.height) if math.isfinite(top) else frame.height
        frame._column(column, np.arange(ceiling_rows), ceiling_color)
        floor_rows = np.arange(int(bottom), HEIGHT)
        frame._column(column, floor_rows, floor_colors[floor_rows])

    def _texture_rows(self, ys, top_wall, wall_height):
        return (ys - top_wall) * _div(TILE_SIZE, wall_height)

    def _wall_colors(self, ray, ys, top_wall, wall_height, lum):
        texture = self.walls[wall_direction(ray)]
        column = scale_offset(texture, offset_x(ray), "x")
        rows = scale_offset(texture, self._texture_rows(ys, top_wall, wall_height), "y")
        colors = np.asarray(texture.pixel(column, rows, lum), dtype=np.int64)
        if ray.vertical_hit:
            colors = _darken(colors, _VERTICAL_SHADE)
        return colors

    def _door_colors(self, ray, ys, top_wall, wall_height, lum):
        rows = self._texture_rows(ys, top_wall, wall_height)
        return np.asarray(self.door.pixel(offset_x(ray), rows, lum), dtype=np.int64)


def _minimap_color(cell):
    if cell == "1":
        return MINIMAP_WALL
    if cell == "D":
        return MINIMAP_DOOR
    return MINIMAP_FLOOR


def _minimap_tiles(base, limit):
    coords = np.arange(MINIMAP_SIZE) * MINIMAP_SCALE + (int(base) - MINIMAP_CENTER * MINIMAP_SCALE)
    tiles = np.sign(coords) * (np.abs(coords) // TILE_SIZE)
    return np.clip(tiles, 0, limit - 1)


def render_minimap(frame, grid, player):
    """Draw a map window around the player in the top-left corner, with a marker."""
    if grid:
        width = max(len(row) for row in grid)
        if width:
            lookup = np.array(
                [[_minimap_color(row[x] if x < len(row) else " ") for x in range(width)]
                 for row in grid],
                dtype=np.uint32,
            )
            cols = _minimap_tiles(player.x, width)
            rows = _minimap_tiles(player.y, len(grid))
            block = lookup[rows[:, None], cols[None, :]]
            h = min(MINIMAP_SIZE, frame.height)
            w = min(MINIMAP_SIZE, frame.width)
            frame.pixels[:h, :w] = block[:h, :w]
    _draw_marker(frame, player.angle)


def _draw_marker(frame, angle):
    radius = MARKER_RADIUS
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if dx * dx + dy * dy <= radius * radius:
                frame.put(MINIMAP_CENTER + dx, MINIMAP_CENTER + dy, MARKER_COLOR)
    for step in range(2 * radius + 1):
        x = int(MINIMAP_CENTER + step * math.cos(angle))
        y = int(MINIMAP_CENTER + step * math.sin(angle))
        if x >= 0 and y >= 0:
            frame.put(x, y, MARKER_COLOR)