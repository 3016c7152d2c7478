import io
import math

import numpy as np
import pytest
from PIL import Image

from cubscape.errors import ErrorCode, ParseError, message
from cubscape.game import Game, GameState, Key, main, report_error
from cubscape.player import Move, Player
from cubscape.scene import Scene

OPEN_GRID = [
    "11111",
    "10001",
    "10N01",
    "10001",
    "11111",
]

TIGHT_GRID = [
    "111",
    "1N1",
    "111",
]


def make_state(grid=OPEN_GRID):
    return GameState(grid, Player.from_grid(grid))


def test_escape_stops_the_game():
    state = make_state()
    assert state.handle_key(Key.ESCAPE) is False
    assert state.running is False


def test_space_toggles_lamp_and_asks_for_redraw():
    state = make_state()
    assert state.handle_key(Key.SPACE) is True
    assert state.hold_lamp == 1
    state.handle_key(Key.SPACE)
    assert state.hold_lamp == 2


def test_up_raises_step_size_until_limit():
    state = make_state()
    for _ in range(40):
        state.handle_key(Key.UP)
    assert state.player.step_size == 20


def test_down_does_not_lower_small_step_size():
    state = make_state()
    before = state.player.step_size
    state.handle_key(Key.DOWN)
    assert state.player.step_size == before


def test_mouse_look_needs_toggle():
    state = make_state()
    angle = state.player.angle
    assert state.step(set(), mouse_x=1000) == []
    assert state.player.angle == angle
    state.handle_key(Key.M)
    assert state.mouse_move == 1
    assert state.step(set(), mouse_x=1000) == [Move.TURN_RIGHT]
    assert state.player.angle == pytest.approx(angle + math.pi * state.player.turn_speed)


def test_mouse_left_turns_left_and_centre_does_nothing():
    state = make_state()
    state.handle_key(Key.M)
    angle = state.player.angle
    assert state.step(set(), mouse_x=0) == [Move.TURN_LEFT]
    assert state.player.angle < angle
    assert state.step(set(), mouse_x=640) == []


def test_forward_moves_player_in_open_room():
    state = make_state()
    x, y = state.player.x, state.player.y
    assert state.step({Key.W}) == [Move.FORWARD]
    assert state.player.y < y
    assert state.player.x == pytest.approx(x)


def test_move_into_wall_is_blocked_but_reported():
    state = make_state(TIGHT_GRID)
    state.player.step_size = 30
    x, y = state.player.x, state.player.y
    assert state.step({Key.W}) == [Move.FORWARD]
    assert (state.player.x, state.player.y) == (x, y)


def test_forward_then_backward_returns_home():
    state = make_state()
    x, y = state.player.x, state.player.y
    state.step({Key.W})
    state.step({Key.S})
    assert state.player.x == pytest.approx(x)
    assert state.player.y == pytest.approx(y)


def test_report_parse_error_includes_message():
    stream = io.StringIO()
    report_error(ParseError(ErrorCode.PATH), stream)
    text = stream.getvalue()
    assert text.startswith("ERROR\n")
    assert message(ErrorCode.PATH) in text


def test_report_unknown_error_prints_only_header():
    stream = io.StringIO()
    report_error(ParseError(ErrorCode.UNKNOWN), stream)
    assert stream.getvalue() == "ERROR\n"


def test_report_other_error_prints_text():
    stream = io.StringIO()
    report_error(OSError("invalid texture"), stream)
    assert stream.getvalue() == "invalid texture\n"


def test_main_without_arguments(capsys):
    assert main([]) == 1
    assert capsys.readouterr().err == "ERROR\n"


def test_main_rejects_bad_extension(capsys):
    assert main(["map.txt"]) == 1
    assert message(ErrorCode.PATH) in capsys.readouterr().err


def test_main_reports_missing_file(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["missing.cub"]) == 1
    assert message(ErrorCode.FILE_MISSING) in capsys.readouterr().err


def _png(path, color):
    Image.fromarray(np.full((64, 64, 4), color, dtype=np.uint8), "RGBA").save(path)
    return str(path)


def _scene(tmp_path):
    paths = [
        _png(tmp_path / f"{name}.png", (i * 40, 10, 20, 255))
        for i, name in enumerate(("north", "south", "west", "east"))
    ]
    return Scene(
        north=paths[0],
        south=paths[1],
        west=paths[2],
        east=paths[3],
        floor=(10, 20, 30),
        ceiling=(40, 50, 60),
        grid=OPEN_GRID,
    )


def test_game_loads_textures_and_places_player(tmp_path):
    scene = _scene(tmp_path)
    door = _png(tmp_path / "door.png", (1, 2, 3, 255))
    torch_dir = tmp_path / "torch"
    torch_dir.mkdir()
    for index in range(6):
        _png(torch_dir / f"{index}Torch_Sheet.png", (255, 200, 0, 255))
    game = Game(scene, door_path=door, torch_dir=str(torch_dir))
    assert len(game.walls) == 4
    assert game.walls[0].width == 64
    assert (game.state.player.x, game.state.player.y) == (160, 160)
    assert len(game.torch_paths) == 6


def test_game_missing_torch_frame_raises(tmp_path):
    scene = _scene(tmp_path)
    door = _png(tmp_path / "door.png", (1, 2, 3, 255))
    with pytest.raises(FileNotFoundError):
        Game(scene, door_path=door, torch_dir=str(tmp_path / "nowhere"))


def test_game_missing_door_raises(tmp_path):
    scene = _scene(tmp_path)
    with pytest.raises(FileNotFoundError):
        Game(scene, door_path=str(tmp_path / "door.png"), torch_dir=str(tmp_path))