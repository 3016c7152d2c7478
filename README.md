# cubscape

A small first-person maze explorer. It reads a `.cub` scene file, checks it,
and opens a window in which you walk through the map: textured walls, floor
and ceiling shaded by distance and height, doors that let you through when
you stand next to them, a minimap in the top-left corner and an animated torch
you can raise and lower.

## Installing

    pip install .

This installs the `cubscape` command together with its dependencies: numpy,
Pillow and pygame.

## Running

    cubscape maps/level.cub

The command takes exactly one argument. The path may not start with a dot
(so write `maps/level.cub`, not `./maps/level.cub`), and the text after its
first dot must start with `cub`.

When the scene is rejected, `ERROR` is printed on standard error, followed by
a short reason in red, and the command exits with status 1. A wrong number of
arguments prints `ERROR` alone. If a texture, the door image or a torch frame
cannot be loaded, or the window cannot be opened, the reason is printed and
the exit status is also 1. Quitting normally exits with status 0.

## Scene files

A scene starts with six header lines, in any order, with blank lines allowed
between them and spaces allowed before each identifier:

    NO textures/north.png
    SO textures/south.png
    WE textures/west.png
    EA textures/east.png
    F 120,90,60
    C 200,220,255

- Texture paths are taken up to the end of the line, trailing spaces removed,
  and must name files that can be opened for reading.
- Each identifier may appear only once.
- A colour is three whole numbers from 0 to 255, separated by exactly two
  commas; spaces around each number are allowed.
- Any other non-blank line in the header is refused.

After the sixth header entry, blank lines are skipped and every remaining
line belongs to the map. Shorter rows are padded with spaces to the width of
the longest. The map must satisfy all of these:

- It holds only `1` (wall), `0` (floor), `D` (door), spaces, and the player
  start `N`, `S`, `E` or `W`, which also sets the direction the player faces.
- The first and last rows hold only walls and spaces.
- Every row, ignoring spaces, begins and ends with a wall.
- A space touches only walls and other spaces.
- Every non-space tile can be reached from the player start.
- There is exactly one player start.
- A door stands between two walls on exactly one axis (left and right, or
  above and below) and has no other door beside it.

The game also reads `./textures/door.png` and the torch frames
`./torch/0Torch_Sheet.png` to `./torch/5Torch_Sheet.png`, relative to the
working directory. These images are not shipped with the package; you supply
them, as you do the wall textures.

## Controls

| Key            | Action                                              |
|----------------|-----------------------------------------------------|
| W / S          | walk forward / back                                 |
| A / D          | step left / right                                   |
| Left / Right   | turn                                                |
| M              | switch turning with the mouse on or off             |
| Space          | raise or lower the torch                            |
| Up             | walk faster, up to a step of 20                     |
| Down           | walk slower, only while the step is above 20        |
| Esc            | quit (closing the window quits as well)             |

Moves that would bring the player within 5 pixels of a wall are refused.
Raising the torch brightens distant walls and the floor and dims the ceiling.

## Using the parts

The modules can be used on their own:

- `cubscape.scene.load_scene(path)` checks the path, reads the file and
  returns a `Scene` with the texture paths, the `floor` and `ceiling`
  colours and the padded `grid`; `parse_lines(lines)` does the same for lines
  already in memory.
- `cubscape.mapcheck.validate_map(lines)` checks a map given as a list of
  strings and returns the padded grid.
- `cubscape.player.Player.from_grid(grid)` places the player at the start
  tile; `Player.move(grid, move)` takes a `Move` and returns whether it
  happened.
- `cubscape.raycast.cast_all(grid, player)` casts one `Ray` per screen
  column; `cast_ray(grid, player, angle)` casts a single one.
- `cubscape.textures.Texture.load(path)` reads an image as RGBA pixels.
- `cubscape.render.Renderer` draws the view and minimap into a `Frame`, a
  1280×720 array of packed RGBA values.
- `cubscape.game.GameState` applies key presses and held keys without a
  window; `cubscape.game.Game` opens the window and runs the loop.

Rejected input raises `cubscape.errors.ParseError`, whose `code` is an
`ErrorCode`; `cubscape.errors.message(code)` gives its text.

## What it does not do

There are no enemies, weapons, sprites or sound, and no saving of progress:
the game is exploration of a single scene, ended with Esc. No sample scenes,
textures or torch frames come with the package.