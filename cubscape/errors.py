"""Error codes reported when a scene file is rejected."""

from enum import IntEnum


class ErrorCode(IntEnum):
    """Reasons a scene can be refused, numbered as the game reports them."""

    UNKNOWN = -1
    USAGE = 0
    PATH = 1
    FILE_MISSING = 2
    TEXTURE = 3
    COLOR = 4
    INVALID_LINE = 5
    MAP = 6
    REPEATED = 7
    PLAYERS = 8
    DOORS = 9
    ALLOCATION = 99


_MESSAGES = {
    ErrorCode.USAGE: "usage: cubscape file.cub",
    ErrorCode.PATH: "the path should be in form: file.cub",
    ErrorCode.FILE_MISSING: "the file does not exist",
    ErrorCode.TEXTURE: "texture path invalid",
    ErrorCode.COLOR: "color input invalid",
    ErrorCode.INVALID_LINE: "there is an invalid line in the file",
    ErrorCode.MAP: "map error\nmake sure the map is respect the rules.",
    ErrorCode.REPEATED: "there is a repete data in the file",
    ErrorCode.PLAYERS: "there is many player",
    ErrorCode.DOORS: "doors should be between walls",
    ErrorCode.ALLOCATION: "allocation failed",
}


def message(code):
    """Return the human-readable text for an error code, or "" if it has none."""
    try:
        return _MESSAGES.get(ErrorCode(code), "")
    except ValueError:
        return ""


class ParseError(Exception):
    """Raised when a scene file or its map breaks the rules."""

    def __init__(self, code):
        self.code = ErrorCode(code)
        super().__init__(message(self.code))