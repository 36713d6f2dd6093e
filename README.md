# cubcaster

A small first-person raycasting explorer. It reads a `.cub` scene file that
names four XPM wall textures, floor and ceiling colours and a map, then lets
you walk around the map in a 1280×720 window titled `cub3d`, with textured
walls drawn by casting one ray per screen column.

## Installing

```
pip install .
```

This installs pygame, which draws the window.

## Running

```
cubcaster path/to/level.cub
```

Exactly one argument is expected. If there is not exactly one, or the scene
or one of its textures cannot be used, the program prints
`Error cub3d: <message>` to standard error and exits with status 1.

### Controls

| Key           | Action              |
|---------------|---------------------|
| W / S         | move forward / back |
| A / D         | strafe left / right |
| Left / Right  | turn by 3 degrees   |
| Esc           | quit                |

Closing the window also quits. Each step moves 0.1 of a cell, one axis at a
time; a step along an axis is taken only if it lands on a floor cell (`0`).

## Scene file format

The file name is checked by its last extension: everything from the last dot
on must be `.cub` or a leading part of it. The file holds, in this order:

1. Four texture lines, in exactly this order, then one empty line:

   ```
   NO ./textures/north.xpm
   SO ./textures/south.xpm
   WE ./textures/west.xpm
   EA ./textures/east.xpm

   ```

   Every path must name a file that can be opened for reading.

2. Colour lines, `F` for the floor and `C` for the ceiling, as `R,G,B` with
   each part a plain decimal number from 0 to 255. At most three lines are
   read; an empty line ends the block. A colour that is not given stays black.

   ```
   F 220,100,0
   C 225,30,0

   ```

3. The map, every remaining line up to the end of the file. It is made of `1`
   (wall), `0` (floor), spaces (nothing) and exactly one of `N`, `S`, `E`, `W`
   giving the player's start and facing. Rows are padded with spaces to the
   widest row. Starting from every floor cell, the open cells reached are
   checked: an open cell next to a space is an error.

   ```
   111111
   100101
   1010N1
   111111
   ```

### Textures

Textures are XPM images. Comments are removed, colours may be given as
`#RRGGBB` or as X11 colour names (matched without regard to case), and `None`
marks a transparent pixel. Each image must be at least 64×64; its top-left
64×64 pixels are scaled up to a 128×128 texture.

## Using it as a library

```python
from cubcaster.scene import load_scene
from cubcaster.player import Player

scene = load_scene("level.cub")
player = Player.from_scene(scene)
player.move_forward(scene.grid)
player.rotate_right()
```

- `cubcaster.scene` parses and validates scenes (`load_scene`, `parse_scene`)
  and raises `CubError` on bad input. A `Scene` holds the padded `grid`, the
  `TexturePaths`, `floor_color`, `ceiling_color`, `player_pos` and
  `player_direction` (a `Direction`).
- `cubcaster.player` holds `Player` and `Vector`, with movement and rotation.
- `cubcaster.xpm` reads XPM images (`load_xpm`, `parse_xpm`) into an
  `XpmImage`, raising `XpmError` when they cannot be read.
- `cubcaster.colornames` resolves colour names (`lookup_color`,
  `text_to_rgb`).
- `cubcaster.raycast` casts rays (`cast_ray`) and renders a view (`render`)
  into a `Frame` of `0xAARRGGBB` pixels; `build_texture` turns an `XpmImage`
  into a texture.
- `cubcaster.app` has `load_textures`, the `Game` state with `handle_key`
  and `redraw`, `run` to open the window on a scene, and `main` behind the
  `cubcaster` command.

Rendering without a window:

```python
from cubcaster.app import Game, load_textures
from cubcaster.scene import load_scene

scene = load_scene("level.cub")
game = Game(scene, load_textures(scene.textures))
frame = game.redraw()
print(hex(frame.pixels[0]))
```

## What it does not do

There is no mouse control, no sprites, doors or minimap, and no sound. Only
XPM textures are read.

## Tests

```
pip install ".[test]"
pytest
```