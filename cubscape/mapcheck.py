"""Validation of the map grid of a scene."""

from .errors import ErrorCode, ParseError

PLAYER_SYMBOLS = frozenset("NSEW")
MAP_SYMBOLS = frozenset("10 NSEWD")
_FILLABLE = frozenset("01NSEWDd")
_FILLED = "F"


def pad_map(lines):
    """Right-pad every line with spaces to the width of the longest one."""
    width = max((len(line) for line in lines), default=0)
    return [line.ljust(width) for line in lines]


def find_player(grid):
    """Return (x, y) of the first player symbol, or None if there is none."""
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell in PLAYER_SYMBOLS:
                return x, y
    return None


def line_start(line):
    """Index of the first non-space character (len(line) if there is none)."""
    return len(line) - len(line.lstrip(" "))


def line_end(line):
    """Index of the last non-space character (-1 if there is none)."""
    return len(line.rstrip(" ")) - 1


def elements_valid(grid):
    """True if every cell holds a known map symbol."""
    return all(cell in MAP_SYMBOLS for row in grid for cell in row)


def is_walled(line):
    """True if the line holds only walls and spaces."""
    return set(line) <= {"1", " "}


def check_lateral(grid):
    """True if every row begins and ends, ignoring spaces, with a wall."""
    for line in grid:
        start, end = line_start(line), line_end(line)
        if end < start or line[start] != "1" or line[end] != "1":
            return False
    return True


def _space_neighbours(grid, x, y):
    row = grid[y]
    if x < len(row) - 1:
        yield row[x + 1]
    if x > 0:
        yield row[x - 1]
    if y > 0 and x < len(grid[y - 1]):
        yield grid[y - 1][x]
    if y < len(grid) - 1 and x < len(grid[y + 1]):
        yield grid[y + 1][x]


def stray_spaces(grid):
    """Positions (x, y) of spaces that touch anything other than walls or spaces."""
    return [
        (x, y)
        for y, row in enumerate(grid)
        for x, cell in enumerate(row)
        if cell == " "
        and any(n not in ("1", " ") for n in _space_neighbours(grid, x, y))
    ]


def flood_fill(grid):
    """Mark with 'F' every non-space cell reachable from the player."""
    cells = [list(row) for row in grid]
    start = find_player(grid)
    if start is None:
        return ["".join(row) for row in cells]
    stack = [start]
    while stack:
        x, y = stack.pop()
        if y < 0 or y >= len(cells) or x < 0 or x >= len(cells[y]):
            continue
        if cells[y][x] not in _FILLABLE:
            continue
        cells[y][x] = _FILLED
        stack.extend(((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)))
    return ["".join(row) for row in cells]


def walls_enclosed(grid):
    """True if every non-space cell is connected to the player."""
    return all(cell in (_FILLED, " ") for row in flood_fill(grid) for cell in row)


def count_players(grid):
    """Number of player symbols in the grid."""
    return sum(cell in PLAYER_SYMBOLS for row in grid for cell in row)


def _cell(grid, x, y):
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    return " "


def door_valid(grid, x, y):
    """True if the door at (x, y) sits between exactly one pair of walls."""
    left, right = _cell(grid, x - 1, y), _cell(grid, x + 1, y)
    up, down = _cell(grid, x, y - 1), _cell(grid, x, y + 1)
    valid = True
    walled_axes = 0
    if left == "1" and right == "1":
        if up == "1" or down == "1":
            valid = False
        walled_axes += 1
    if up == "1" and down == "1":
        if left == "1" or right == "1":
            valid = False
        walled_axes += 1
    if "D" in (left, right, up, down):
        valid = False
    return valid and walled_axes == 1


def validate_doors(grid):
    """Raise ParseError if any door is not properly framed by walls."""
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell == "D" and not door_valid(grid, x, y):
                raise ParseError(ErrorCode.DOORS)


def validate_map(lines):
    """Pad and check a map, returning the padded grid or raising ParseError."""
    if not lines:
        raise ParseError(ErrorCode.MAP)
    grid = pad_map(list(lines))
    if not elements_valid(grid):
        raise ParseError(ErrorCode.MAP)
    if not is_walled(grid[0]) or not is_walled(grid[-1]):
        raise ParseError(ErrorCode.MAP)
    if not check_lateral(grid):
        raise ParseError(ErrorCode.MAP)
    if stray_spaces(grid):
        raise ParseError(ErrorCode.MAP)
    if not walls_enclosed(grid):
        raise ParseError(ErrorCode.MAP)
    if count_players(grid) != 1:
        raise ParseError(ErrorCode.PLAYERS)
    validate_doors(grid)
    return grid