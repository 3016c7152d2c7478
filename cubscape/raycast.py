"""Casting rays from the player to the first wall or closed door."""

import math
from dataclasses import dataclass

from .player import FOV, N_RAYS, TILE_SIZE

_TWO_PI = 2 * math.pi


def fix_angle(angle):
    """Normalise an angle into [0, 2*pi]."""
    angle = math.remainder(angle, _TWO_PI)
    if angle < 0:
        angle += _TWO_PI
    return angle


@dataclass
class Ray:
    """What one ray saw: where it hit, on which grid line and what."""

    angle: float = 0.0
    distance: float = 0.0
    wall_hit_x: float = -1.0
    wall_hit_y: float = -1.0
    horizontal_hit: bool = False
    vertical_hit: bool = False
    facing_up: bool = False
    facing_down: bool = False
    facing_left: bool = False
    facing_right: bool = False
    element: str | None = None
    h_hit_x: float = 0.0
    h_hit_y: float = 0.0
    v_hit_x: float = 0.0
    v_hit_y: float = 0.0
    h_element: str | None = None
    v_element: str | None = None
    door_open: bool = False


@dataclass
class _Walk:
    hit: bool
    element: str | None
    tile_x: float
    tile_y: float
    x: float
    y: float
    door_open: bool


def _div(a, b):
    """Floating division following IEEE rules for a zero divisor."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _tile(value):
    return int(int(value) / TILE_SIZE)


def _cell(grid, col, row):
    if 0 <= row < len(grid) and 0 <= col < len(grid[row]):
        return grid[row][col]
    return " "


def _walk(grid, player, x, y, xstep, ystep, adjust):
    """Step along grid lines until a wall, a far door or the map edge."""
    limit_x = max((len(row) for row in grid), default=0) * TILE_SIZE
    limit_y = len(grid) * TILE_SIZE
    player_col, player_row = _tile(player.x), _tile(player.y)
    tile_x = tile_y = 0.0
    hit = False
    element = None
    door_open = False
    while 0 <= y < limit_y and 0 <= x < limit_x:
        tile_x, tile_y = adjust(x / TILE_SIZE, y / TILE_SIZE)
        cell = _cell(grid, int(tile_x), int(tile_y))
        if cell == "1":
            hit, element = True, "1"
            break
        if cell == "D":
            hit, element = True, "D"
            if (
                abs(int(tile_x) - player_col) < 2
                and abs(int(tile_y) - player_row) < 2
            ):
                door_open = True
            else:
                break
        x += xstep
        y += ystep
    return _Walk(hit, element, tile_x, tile_y, x, y, door_open)


def _distance(player, walk):
    if not walk.hit:
        return -1.0
    return math.hypot(player.x - walk.x, player.y - walk.y)


def _horizontal(grid, player, ray):
    tangent = math.tan(ray.angle)
    y = math.floor(player.y / TILE_SIZE) * TILE_SIZE
    if ray.facing_down:
        y += TILE_SIZE
    x = player.x + _div(y - player.y, tangent)
    ystep = -TILE_SIZE if ray.facing_up else TILE_SIZE
    xstep = _div(TILE_SIZE, tangent)
    if (ray.facing_left and xstep > 0) or (ray.facing_right and xstep < 0):
        xstep = -xstep

    def adjust(tile_x, tile_y):
        if ray.facing_up and tile_y > 0:
            tile_y -= 1
        return tile_x, tile_y

    walk = _walk(grid, player, x, y, xstep, ystep, adjust)
    ray.h_hit_x = walk.tile_x * TILE_SIZE
    ray.h_hit_y = walk.tile_y * TILE_SIZE + (TILE_SIZE if ray.facing_up else 0)
    if walk.hit:
        ray.h_element = walk.element
    ray.door_open = ray.door_open or walk.door_open
    return _distance(player, walk)


def _vertical(grid, player, ray):
    tangent = math.tan(ray.angle)
    x = math.floor(player.x / TILE_SIZE) * TILE_SIZE
    if ray.facing_right:
        x += TILE_SIZE
    y = player.y + (x - player.x) * tangent
    xstep = -TILE_SIZE if ray.facing_left else TILE_SIZE
    ystep = TILE_SIZE * tangent
    if (ray.facing_up and ystep > 0) or (ray.facing_down and ystep < 0):
        ystep = -ystep

    def adjust(tile_x, tile_y):
        if ray.facing_left and tile_x > 0:
            tile_x -= 1
        return tile_x, tile_y

    walk = _walk(grid, player, x, y, xstep, ystep, adjust)
    ray.v_hit_x = walk.tile_x * TILE_SIZE + (TILE_SIZE if ray.facing_left else 0)
    ray.v_hit_y = walk.tile_y * TILE_SIZE
    if walk.hit:
        ray.v_element = walk.element
    ray.door_open = ray.door_open or walk.door_open
    return _distance(player, walk)


def _choose(ray, h_dst, v_dst):
    """Keep the nearer of the horizontal and vertical hits (-1 means none)."""
    if (0 < h_dst < v_dst) or v_dst < 0:
        ray.distance = h_dst
        if h_dst >= 0:
            ray.wall_hit_x, ray.wall_hit_y = ray.h_hit_x, ray.h_hit_y
            ray.horizontal_hit = True
            ray.element = ray.h_element
    else:
        ray.distance = v_dst
        if v_dst >= 0:
            ray.wall_hit_x, ray.wall_hit_y = ray.v_hit_x, ray.v_hit_y
            ray.vertical_hit = True
            ray.element = ray.v_element


def cast_ray(grid, player, angle):
    """Cast one ray from the player's position at ``angle`` and return it."""
    angle = fix_angle(angle)
    down = 0 <= angle <= math.pi
    right = angle <= math.pi / 2 or 3 * math.pi / 2 <= angle <= _TWO_PI
    ray = Ray(
        angle=angle,
        facing_down=down,
        facing_up=not down,
        facing_right=right,
        facing_left=not right,
    )
    h_dst = _horizontal(grid, player, ray)
    v_dst = _vertical(grid, player, ray)
    _choose(ray, h_dst, v_dst)
    return ray


def cast_all(grid, player):
    """Cast one ray per screen column across the field of view, left to right."""
    angle = player.angle - (FOV // 2) * (math.pi / 180.0)
    step = (FOV / N_RAYS) * (math.pi / 180.0)
    rays = []
    for _ in range(N_RAYS):
        rays.append(cast_ray(grid, player, angle))
        angle += step
    return rays