"""Reading a scene file: texture and colour header followed by the map."""

import os
from dataclasses import dataclass, field
from itertools import chain

from .colors import count_separators, parse_component
from .errors import ErrorCode, ParseError
from .mapcheck import find_player, validate_map

_TEXTURE_KEYS = (("NO", "north"), ("SO", "south"), ("WE", "west"), ("EA", "east"))
_COLOR_KEYS = (("F", "floor"), ("C", "ceiling"))
_HEADER_ENTRIES = 6
_EXTENSION = "cub"


def _strip_newline(line):
    """Cut a line at its first newline, as the reader hands it over."""
    return line.split("\n", 1)[0]


def check_path(path):
    """Return ``path`` if it names a scene file, else raise ParseError(PATH).

    The part after the first dot must start with ``cub``, and the path may
    not start with a dot.
    """
    if not path or path.startswith("."):
        raise ParseError(ErrorCode.PATH)
    _, dot, suffix = path.partition(".")
    if not dot or not suffix or not suffix.startswith(_EXTENSION):
        raise ParseError(ErrorCode.PATH)
    return path


def split_fields(text, separator):
    """Split ``text`` on ``separator``, dropping empty fields."""
    if text is None:
        return []
    return [part for part in text.split(separator) if part]


def texture_value(text):
    """The texture path in ``text``: up to the newline, trailing spaces removed."""
    return _strip_newline(text).rstrip(" ")


def _readable(path):
    try:
        fd = os.open(path, os.O_RDONLY)
    except (OSError, ValueError):
        return False
    os.close(fd)
    return True


@dataclass
class Header:
    """The six identifier lines that precede the map."""

    north: str | None = None
    south: str | None = None
    west: str | None = None
    east: str | None = None
    floor: tuple | None = None
    ceiling: tuple | None = None
    count: int = 0

    def apply(self, line):
        """Record one header line; blank lines are ignored.

        Raises ParseError for unknown identifiers, unreadable or repeated
        textures and malformed colours.
        """
        text = _strip_newline(line)
        if not text:
            return
        self.count += 1
        body = text.lstrip(" ")
        for key, attr in _TEXTURE_KEYS:
            if body.startswith(key + " "):
                self._set_texture(attr, body[len(key):].lstrip(" "))
                return
        for key, attr in _COLOR_KEYS:
            if body.startswith(key + " "):
                self._set_color(attr, body[len(key):].lstrip(" "))
                return
        raise ParseError(ErrorCode.INVALID_LINE)

    def complete(self):
        """True once all six header entries have been read."""
        return self.count >= _HEADER_ENTRIES

    def _set_texture(self, attr, text):
        path = texture_value(text)
        if not _readable(path):
            raise ParseError(ErrorCode.TEXTURE)
        if getattr(self, attr) is not None:
            raise ParseError(ErrorCode.REPEATED)
        setattr(self, attr, path)

    def _set_color(self, attr, text):
        if count_separators(text, ",") != 2:
            raise ParseError(ErrorCode.COLOR)
        fields = split_fields(text, ",")
        if len(fields) < 3:
            raise ParseError(ErrorCode.COLOR)
        rgb = tuple(parse_component(part) for part in fields[:3])
        if getattr(self, attr) is not None:
            raise ParseError(ErrorCode.REPEATED)
        setattr(self, attr, rgb)


@dataclass
class Scene:
    """A validated scene: wall textures, floor and ceiling colours, and map."""

    north: str
    south: str
    west: str
    east: str
    floor: tuple
    ceiling: tuple
    grid: list = field(default_factory=list)

    @property
    def height(self):
        return len(self.grid)

    @property
    def width(self):
        return len(self.grid[0]) if self.grid else 0

    @property
    def player(self):
        """(x, y) of the player's starting cell."""
        return find_player(self.grid)


def read_map(lines):
    """Collect map lines, skipping blank lines before the first map row.

    Raises ParseError(ALLOCATION) when the input ends before any map row.
    """
    it = iter(lines)
    for line in it:
        if _strip_newline(line):
            return [_strip_newline(row) for row in chain([line], it)]
    raise ParseError(ErrorCode.ALLOCATION)


def parse_lines(lines):
    """Parse the lines of a scene file into a Scene, raising ParseError."""
    header = Header()
    it = iter(lines)
    for line in it:
        if header.complete():
            map_lines = read_map(chain([line], it))
            break
        header.apply(line)
    else:
        raise ParseError(ErrorCode.ALLOCATION)
    grid = validate_map(map_lines)
    return Scene(
        north=header.north,
        south=header.south,
        west=header.west,
        east=header.east,
        floor=header.floor,
        ceiling=header.ceiling,
        grid=grid,
    )


def load_scene(path):
    """Check the path, read the file and return its Scene."""
    check_path(path)
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="\n") as handle:
            lines = list(handle)
    except OSError as exc:
        raise ParseError(ErrorCode.FILE_MISSING) from exc
    return parse_lines(lines)