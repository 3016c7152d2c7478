"""Wall and door textures and how ray hits map onto them."""

import math
from dataclasses import dataclass

import numpy as np
from PIL import Image

from .player import TILE_SIZE

NORTH, SOUTH, EAST, WEST = range(4)


def _index(value, limit):
    """Truncate coordinates to ints; anything outside [0, limit) becomes 0."""
    coords = np.asarray(value, dtype=np.float64)
    coords = np.where(np.isfinite(coords), coords, -1.0)
    idx = np.clip(np.trunc(coords), -1, limit).astype(np.int64)
    return np.where((idx >= limit) | (idx < 0), 0, idx)


def _scale(channel, lum):
    product = channel * lum
    quotient = np.sign(product) * (np.abs(product) // 100)
    return quotient & 0xFF


@dataclass
class Texture:
    """An RGBA image held as a (height, width, 4) array of bytes."""

    pixels: np.ndarray

    def __post_init__(self):
        pixels = np.asarray(self.pixels, dtype=np.uint8)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError("texture pixels must have shape (height, width, 4)")
        self.pixels = pixels

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def height(self):
        return self.pixels.shape[0]

    @classmethod
    def load(cls, path):
        """Read an image file as an RGBA texture."""
        with Image.open(path) as image:
            return cls(np.array(image.convert("RGBA")))

    def pixel(self, x, y, lum):
        """Packed RGBA colour at (x, y), RGB scaled by ``lum`` percent.

        Coordinates are truncated; out-of-range ones fall back to 0. ``x`` and
        ``y`` may be numbers or numpy arrays, which are broadcast together.
        """
        xs = _index(x, self.width)
        ys = _index(y, self.height)
        channels = self.pixels[ys, xs].astype(np.int64)
        lum = int(lum)
        r = _scale(channels[..., 0], lum)
        g = _scale(channels[..., 1], lum)
        b = _scale(channels[..., 2], lum)
        a = channels[..., 3]
        packed = (r << 24) | (g << 16) | (b << 8) | a
        if packed.ndim == 0:
            return int(packed)
        return packed.astype(np.uint32)


def wall_direction(ray):
    """Index of the wall texture a ray's hit faces: north, south, east, west."""
    direction = NORTH
    if ray.horizontal_hit and ray.facing_up:
        direction = NORTH
    if ray.horizontal_hit and ray.facing_down:
        direction = SOUTH
    if ray.vertical_hit and ray.facing_right:
        direction = EAST
    if ray.vertical_hit and ray.facing_left:
        direction = WEST
    return direction


def _tile_remainder(value):
    return int(math.fmod(int(value), TILE_SIZE))


def offset_x(ray):
    """Column within the tile where the ray struck, from 0 to TILE_SIZE - 1."""
    offset = 0
    if ray.horizontal_hit:
        offset = _tile_remainder(ray.wall_hit_x)
    if ray.vertical_hit:
        offset = _tile_remainder(ray.wall_hit_y)
    return offset


def scale_offset(texture, offset, axis):
    """Scale a tile offset to texture pixels along ``axis`` ('x' or 'y').

    The result is clamped to the texture; any other axis gives -1.
    """
    if axis == "x":
        size = texture.width
    elif axis == "y":
        size = texture.height
    else:
        return -1.0
    scaled = np.asarray(offset, dtype=np.float64) * (size // TILE_SIZE)
    result = np.fmin(np.fmax(0.0, scaled), size - 1)
    if result.ndim == 0:
        return float(result)
    return result