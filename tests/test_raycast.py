import math

import pytest

from cubscape.player import N_RAYS, TILE_SIZE, Player
from cubscape.raycast import Ray, cast_all, cast_ray, fix_angle

ROOM = [
    "111111",
    "100001",
    "100N01",
    "100001",
    "111111",
]

NEAR_DOOR = [
    "11111",
    "10001",
    "11D11",
    "10N01",
    "11111",
]

FAR_DOOR = [
    "11111",
    "10001",
    "11D11",
    "10001",
    "10001",
    "10N01",
    "11111",
]


@pytest.mark.parametrize(
    "angle, expected",
    [
        (-math.pi / 2, 3 * math.pi / 2),
        (5 * math.pi / 2, math.pi / 2),
        (math.pi / 4, math.pi / 4),
    ],
)
def test_fix_angle_normalises(angle, expected):
    assert fix_angle(angle) == pytest.approx(expected)


@pytest.mark.parametrize("angle", [-20.0, -3.0, -0.5, 0.0, 1.0, 6.0, 13.7, 100.0])
def test_fix_angle_range_and_direction(angle):
    fixed = fix_angle(angle)
    assert 0 <= fixed <= 2 * math.pi
    assert math.cos(fixed) == pytest.approx(math.cos(angle))
    assert math.sin(fixed) == pytest.approx(math.sin(angle), abs=1e-9)


def test_east_ray_hits_vertical_wall():
    player = Player.from_grid(ROOM)
    ray = cast_ray(ROOM, player, 0.0)
    assert ray.facing_right and ray.facing_down
    assert ray.vertical_hit is True
    assert ray.horizontal_hit is False
    assert ray.element == "1"
    assert ray.wall_hit_x == 5 * TILE_SIZE
    assert ray.distance == pytest.approx(5 * TILE_SIZE - player.x)


def test_north_ray_hits_horizontal_wall():
    player = Player.from_grid(ROOM)
    ray = cast_ray(ROOM, player, player.angle)
    assert ray.facing_up
    assert ray.horizontal_hit is True
    assert ray.element == "1"
    assert ray.wall_hit_y == TILE_SIZE
    assert ray.distance == pytest.approx(player.y - TILE_SIZE)


def test_ray_sees_through_adjacent_door():
    player = Player.from_grid(NEAR_DOOR)
    ray = cast_ray(NEAR_DOOR, player, player.angle)
    assert ray.door_open is True
    assert ray.element == "1"
    assert ray.distance == pytest.approx(player.y - TILE_SIZE)


def test_ray_stops_at_distant_door():
    player = Player.from_grid(FAR_DOOR)
    ray = cast_ray(FAR_DOOR, player, player.angle)
    assert ray.door_open is False
    assert ray.element == "D"
    assert ray.horizontal_hit is True
    assert ray.distance == pytest.approx(player.y - 3 * TILE_SIZE)


def test_ray_without_hit_reports_sentinels():
    grid = ["000", "000"]
    player = Player(x=96.0, y=64.0, angle=0.0)
    ray = cast_ray(grid, player, 0.0)
    assert ray.distance == -1
    assert ray.wall_hit_x == -1 and ray.wall_hit_y == -1
    assert not ray.horizontal_hit and not ray.vertical_hit
    assert ray.element is None


def test_cast_all_covers_field_of_view():
    player = Player.from_grid(ROOM)
    rays = cast_all(ROOM, player)
    assert len(rays) == N_RAYS
    assert all(isinstance(ray, Ray) for ray in rays)
    assert all(ray.distance > 0 for ray in rays)
    assert all(ray.element == "1" for ray in rays)
    assert all(0 <= ray.angle <= 2 * math.pi for ray in rays)
    assert all(ray.horizontal_hit != ray.vertical_hit for ray in rays)


def test_cast_all_is_symmetric_about_heading():
    player = Player.from_grid(ROOM)
    rays = cast_all(ROOM, player)
    first = math.remainder(rays[0].angle - player.angle, 2 * math.pi)
    last = math.remainder(rays[-1].angle - player.angle, 2 * math.pi)
    assert first == pytest.approx(-math.pi / 6)
    assert last < math.pi / 6
    assert last == pytest.approx(math.pi / 6, abs=1e-3)


def test_every_hit_lies_on_a_grid_line():
    player = Player.from_grid(ROOM)
    for ray in cast_all(ROOM, player)[::64]:
        if ray.horizontal_hit:
            assert ray.wall_hit_y % TILE_SIZE == pytest.approx(0)
        else:
            assert ray.wall_hit_x % TILE_SIZE == pytest.approx(0)