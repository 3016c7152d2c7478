import numpy as np
import pytest

from cubscape.colors import shade
from cubscape.player import HEIGHT, N_RAYS, Player
from cubscape.raycast import Ray
from cubscape.render import (
    MARKER_COLOR,
    MINIMAP_DOOR,
    MINIMAP_FLOOR,
    MINIMAP_WALL,
    Frame,
    Renderer,
    ceiling_lum,
    floor_lum,
    project,
    render_minimap,
    wall_lum,
)
from cubscape.textures import Texture

GRID = [
    "1111111",
    "1000001",
    "1000001",
    "1000001",
    "1000001",
    "100N001",
    "1111111",
]

FLOOR = (100, 60, 20)
CEILING = (20, 80, 200)


def uniform(rgba):
    return Texture(np.tile(np.array(rgba, dtype=np.uint8), (64, 64, 1)))


@pytest.fixture
def renderer():
    walls = [uniform((10, 20, 30, 255)) for _ in range(4)]
    return Renderer(GRID, walls, uniform((5, 5, 5, 255)), FLOOR, CEILING)


def test_frame_put_get_round_trip():
    frame = Frame(10, 10)
    frame.put(3, 4, 0x11223344)
    assert frame.get(3, 4) == 0x11223344


def test_frame_ignores_out_of_bounds():
    frame = Frame(10, 10)
    frame.put(-1, 0, 0xFFFFFFFF)
    frame.put(0, 10, 0xFFFFFFFF)
    assert not frame.pixels.any()


def test_frame_get_out_of_bounds_raises():
    with pytest.raises(IndexError):
        Frame(4, 4).get(4, 0)


def test_frame_rejects_empty_size():
    with pytest.raises(ValueError):
        Frame(0, 5)


def test_lamp_levels():
    assert ceiling_lum(1) == 40
    assert ceiling_lum(0) == 60
    assert floor_lum(1, HEIGHT) == 100
    assert floor_lum(0, HEIGHT) == 80
    assert floor_lum(1, 0) == 0


def test_floor_lum_grows_downwards():
    values = [floor_lum(0, y) for y in range(HEIGHT)]
    assert values == sorted(values)


def test_wall_lum_bounds():
    assert wall_lum(0, 0) == 100
    assert wall_lum(0, 10_000) == 0
    for distance in (10, 200, 900):
        assert wall_lum(0, distance) <= wall_lum(1, distance)


def test_project_is_centred():
    distance, height, top, bottom = project(Ray(angle=1.0, distance=128.0), 1.0)
    assert distance == pytest.approx(128.0)
    assert top + bottom == pytest.approx(HEIGHT)
    assert bottom - top == pytest.approx(height)


def test_project_height_inverse_to_distance():
    near = project(Ray(angle=0.0, distance=64.0), 0.0)[1]
    far = project(Ray(angle=0.0, distance=128.0), 0.0)[1]
    assert near == pytest.approx(2 * far)


def test_render_fills_ceiling_wall_floor(renderer):
    frame = Frame()
    player = Player.from_grid(GRID)
    rays = renderer.render(frame, player, 0)
    assert len(rays) == N_RAYS
    ceiling = shade(CEILING, ceiling_lum(0))
    assert frame.get(640, 0) == ceiling
    assert frame.get(640, HEIGHT - 1) == shade(FLOOR, floor_lum(0, HEIGHT - 1))
    wall = frame.get(640, HEIGHT // 2)
    assert wall & 0xFF == 255
    assert (wall >> 8) & 0xFF <= 30
    assert wall != ceiling


def test_render_with_lamp_marks_walls(renderer):
    frame = Frame()
    renderer.render(frame, Player.from_grid(GRID), 1)
    assert (frame.get(640, HEIGHT // 2) >> 24) & 5 == 5


def test_minimap_marker_and_palette():
    grid = ["11111", "1N0D1", "11111"]
    frame = Frame()
    render_minimap(frame, grid, Player.from_grid(grid))
    assert frame.get(125, 125) == MARKER_COLOR
    assert frame.get(0, 0) in {MINIMAP_WALL, MINIMAP_DOOR, MINIMAP_FLOOR}
    assert np.any(frame.pixels == MINIMAP_DOOR)
    assert np.any(frame.pixels == MINIMAP_WALL)
    assert frame.get(400, 400) == 0