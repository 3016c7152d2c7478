"""The game window: input handling, the main loop and the command entry point."""

import os
import sys
import time
from dataclasses import dataclass
from enum import Enum

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from .errors import ErrorCode, ParseError, message  # noqa: E402
from .player import HEIGHT, WIDTH, Move, Player  # noqa: E402
from .render import Frame, Renderer  # noqa: E402
from .scene import load_scene  # noqa: E402
from .textures import Texture  # noqa: E402
from .torch import TORCH_DIR, TorchAnimator, frame_paths  # noqa: E402

DOOR_PATH = "./textures/door.png"
TITLE = "Cub3D"
MAX_STEP_SIZE = 20
TORCH_SIZE = (700, 700)
TORCH_POSITION = (550, 150)
_RED = "\033[0;31m"
_RESET = "\033[0m"


class Key(Enum):
    """Keys the game reacts to."""

    ESCAPE = "escape"
    M = "m"
    SPACE = "space"
    UP = "up"
    DOWN = "down"
    W = "w"
    S = "s"
    A = "a"
    D = "d"
    LEFT = "left"
    RIGHT = "right"


_HELD_MOVES = (
    (Key.W, Move.FORWARD),
    (Key.S, Move.BACKWARD),
    (Key.D, Move.RIGHT),
    (Key.A, Move.LEFT),
    (Key.RIGHT, Move.TURN_RIGHT),
    (Key.LEFT, Move.TURN_LEFT),
)

_PYGAME_KEYS = {
    pygame.K_ESCAPE: Key.ESCAPE,
    pygame.K_m: Key.M,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_UP: Key.UP,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_w: Key.W,
    pygame.K_s: Key.S,
    pygame.K_a: Key.A,
    pygame.K_d: Key.D,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
}


@dataclass
class GameState:
    """Everything input changes: the player, the mouse-look toggle and the lamp."""

    grid: list
    player: Player
    mouse_move: int = 0
    hold_lamp: int = 0
    running: bool = True

    def handle_key(self, key):
        """React to a key press; True when the view must be redrawn."""
        key = Key(key)
        if key is Key.ESCAPE:
            self.running = False
            return False
        if key is Key.M:
            self.mouse_move += 1
        elif key is Key.SPACE:
            self.hold_lamp += 1
            return True
        elif key is Key.UP:
            if self.player.step_size < MAX_STEP_SIZE:
                self.player.step_size += 1
        elif key is Key.DOWN:
            if self.player.step_size > MAX_STEP_SIZE:
                self.player.step_size -= 1
        return False

    def step(self, held, mouse_x=None):
        """Apply one tick of held keys and mouse look; return the moves tried.

        Every move tried asks for a redraw, even when a wall blocked it.
        """
        held = {Key(key) for key in held}
        moves = []
        if mouse_x is not None and self.mouse_move % 2 != 0:
            if mouse_x > WIDTH // 2:
                moves.append(Move.TURN_RIGHT)
            elif mouse_x < WIDTH // 2:
                moves.append(Move.TURN_LEFT)
        moves.extend(move for key, move in _HELD_MOVES if key in held)
        for move in moves:
            self.player.move(self.grid, move)
        return moves


def _to_surface(frame):
    packed = frame.pixels
    rgb = np.stack(
        [(packed >> 24) & 0xFF, (packed >> 16) & 0xFF, (packed >> 8) & 0xFF],
        axis=-1,
    ).astype(np.uint8)
    return pygame.surfarray.make_surface(rgb.transpose(1, 0, 2))


class Game:
    """A scene ready to be played: textures loaded and the player placed."""

    def __init__(self, scene, door_path=DOOR_PATH, torch_dir=TORCH_DIR):
        self.scene = scene
        self.walls = [
            Texture.load(path)
            for path in (scene.north, scene.south, scene.east, scene.west)
        ]
        self.door = Texture.load(door_path)
        self.torch_paths = frame_paths(torch_dir)
        for path in self.torch_paths:
            if not os.path.isfile(path):
                raise FileNotFoundError("invalid texture")
        self.state = GameState(scene.grid, Player.from_grid(scene.grid))
        self.renderer = Renderer(
            grid=scene.grid,
            walls=self.walls,
            door=self.door,
            floor=scene.floor,
            ceiling=scene.ceiling,
        )

    def run(self):
        """Open the window and play until Escape or the window is closed."""
        pygame.init()
        try:
            screen = pygame.display.set_mode((WIDTH, HEIGHT))
            pygame.display.set_caption(TITLE)
            torch_images = [
                pygame.transform.scale(pygame.image.load(path).convert_alpha(), TORCH_SIZE)
                for path in self.torch_paths
            ]
            frame = Frame()
            state = self.state
            animator = TorchAnimator()
            torch_index = 0
            view = self._draw(frame)
            clock = pygame.time.Clock()
            start = time.monotonic()
            while state.running:
                redraw = False
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        state.running = False
                    elif event.type == pygame.KEYDOWN and event.key in _PYGAME_KEYS:
                        redraw = state.handle_key(_PYGAME_KEYS[event.key]) or redraw
                if not state.running:
                    break
                pressed = pygame.key.get_pressed()
                held = {key for code, key in _PYGAME_KEYS.items() if pressed[code]}
                mouse_x = pygame.mouse.get_pos()[0]
                if state.step(held, mouse_x):
                    redraw = True
                if redraw:
                    view = self._draw(frame)
                advanced = animator.tick(time.monotonic() - start, state.hold_lamp)
                if advanced is not None:
                    torch_index = advanced
                screen.blit(view, (0, 0))
                screen.blit(torch_images[torch_index], TORCH_POSITION)
                pygame.mouse.set_pos((WIDTH // 2, HEIGHT // 2))
                pygame.mouse.set_visible(False)
                pygame.display.flip()
                clock.tick(60)
        finally:
            pygame.quit()

    def _draw(self, frame):
        self.renderer.render(frame, self.state.player, self.state.hold_lamp)
        return _to_surface(frame)


def report_error(error, stream=None):
    """Write an error the way the game reports it."""
    stream = sys.stderr if stream is None else stream
    if isinstance(error, ParseError):
        stream.write("ERROR\n")
        text = message(error.code)
        if text:
            stream.write(f"{_RED}{text}\n{_RESET}")
    else:
        stream.write(f"{error}\n")
    stream.flush()


def main(argv=None):
    """Load the scene named on the command line and play it; return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        report_error(ParseError(ErrorCode.UNKNOWN))
        return 1
    try:
        scene = load_scene(args[0])
    except ParseError as error:
        report_error(error)
        return 1
    try:
        game = Game(scene)
        game.run()
    except (OSError, ValueError, pygame.error) as error:
        report_error(error)
        return 1
    return 0