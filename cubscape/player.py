"""Player position, heading and movement through the map."""

import math
from dataclasses import dataclass
from enum import IntEnum

from .mapcheck import find_player

TILE_SIZE = 64
HEIGHT = 720
WIDTH = 1280
FOV = 60
N_RAYS = WIDTH

_START_ANGLES = {
    "N": 3 * math.pi / 2,
    "S": math.pi / 2,
    "E": 0.0,
    "W": math.pi,
}
_COLLISION_RADIUS = 5
_COLLISION_STEP = 0.1 * math.pi


class Move(IntEnum):
    """Actions the player can take in one step."""

    FORWARD = 1
    BACKWARD = 2
    RIGHT = 3
    LEFT = 4
    TURN_RIGHT = 5
    TURN_LEFT = 6


_TRANSLATIONS = {
    Move.FORWARD: (0.0, 1.0),
    Move.BACKWARD: (0.0, -1.0),
    Move.RIGHT: (math.pi / 2, 1.0),
    Move.LEFT: (-math.pi / 2, 1.0),
}


def _tile(value):
    """Map a world coordinate to a tile index, truncating toward zero."""
    return int(int(value) / TILE_SIZE)


def initial_angle(grid):
    """Heading given by the player symbol in the grid (the last one found wins)."""
    angle = 0.0
    for row in grid:
        for cell in row:
            if cell in _START_ANGLES:
                angle = _START_ANGLES[cell]
    return angle


def no_wall(grid, x, y):
    """True if no wall lies within the collision radius of world point (x, y).

    Negative coordinates and cells outside the grid block movement.
    """
    if x < 0 or y < 0:
        return False
    angle = 0.0
    while angle < 2 * math.pi:
        cx = x + math.cos(angle) * _COLLISION_RADIUS
        cy = y + math.sin(angle) * _COLLISION_RADIUS
        row, col = _tile(cy), _tile(cx)
        if row < 0 or row >= len(grid) or col < 0 or col >= len(grid[row]):
            return False
        if grid[row][col] == "1":
            return False
        angle += _COLLISION_STEP
    return True


@dataclass
class Player:
    """The viewer: world position in pixels, heading in radians and speeds."""

    x: float
    y: float
    angle: float = 0.0
    step_size: float = 5.0
    turn_speed: float = 0.03

    @classmethod
    def from_grid(cls, grid):
        """Place a player at the centre of the start cell, facing its symbol."""
        start = find_player(grid)
        if start is None:
            raise ValueError("the grid holds no player")
        col, row = start
        return cls(
            x=col * TILE_SIZE + TILE_SIZE / 2,
            y=row * TILE_SIZE + TILE_SIZE / 2,
            angle=initial_angle(grid),
        )

    def candidate(self, move):
        """Position a translating move would reach; (-1, -1) for turns."""
        move = Move(move)
        if move not in _TRANSLATIONS:
            return -1.0, -1.0
        offset, sign = _TRANSLATIONS[move]
        heading = self.angle + offset
        return (
            self.x + sign * math.cos(heading) * self.step_size,
            self.y + sign * math.sin(heading) * self.step_size,
        )

    def apply(self, move):
        """Carry out a move without checking for walls."""
        move = Move(move)
        if move is Move.TURN_RIGHT:
            self.angle += math.pi * self.turn_speed
        elif move is Move.TURN_LEFT:
            self.angle -= math.pi * self.turn_speed
        else:
            self.x, self.y = self.candidate(move)

    def move(self, grid, move):
        """Carry out a move unless it runs into a wall; True if it happened."""
        move = Move(move)
        if move in _TRANSLATIONS and not no_wall(grid, *self.candidate(move)):
            return False
        self.apply(move)
        return True