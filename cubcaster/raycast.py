"""Ray casting of the wall view into a frame of packed pixels.

Textures are indexed as follows: ``0`` for walls hit by rays going east
(+x), ``1`` for rays going west, ``2`` for rays going south (+y) and
``3`` for rays going north.
"""

from __future__ import annotations

import math
from array import array
from dataclasses import dataclass, field
from typing import Sequence

from .player import Player, Vector
from .scene import WALL
from .xpm import XpmImage

WIN_WIDTH = 16 * 80
WIN_HEIGHT = 9 * 80
TEX_SIZE = 128
SIDE_X = 0
SIDE_Y = 1

_SOURCE_SIZE = TEX_SIZE // 2

Texture = Sequence[Sequence[int]]


@dataclass(frozen=True)
class Ray:
    """A ray after it reached a wall cell."""

    raydir_x: float
    raydir_y: float
    map_x: int
    map_y: int
    step_x: int
    step_y: int
    side: int


@dataclass(frozen=True)
class WallSlice:
    """The vertical span one wall column covers on screen."""

    wall_height: int
    draw_start: int
    draw_end: int
    perp_wall_dist: float


@dataclass
class Frame:
    """A width by height buffer of ``0xAARRGGBB`` pixels, row by row."""

    width: int = WIN_WIDTH
    height: int = WIN_HEIGHT
    pixels: array = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid frame size {self.width}x{self.height}")
        self.pixels = array("I", [0]) * (self.width * self.height)

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set one pixel; points outside the frame are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y * self.width + x] = color & 0xFFFFFFFF

    def _fill_row(self, y: int, color: int) -> None:
        start = y * self.width
        self.pixels[start:start + self.width] = array("I", [color & 0xFFFFFFFF]) * self.width


def ray_direction(player: Player, column: int, width: int) -> Vector:
    """Direction of the ray through screen *column* of a *width*-wide view."""
    camera_x = 2 * column / width - 1
    return Vector(
        player.direction.x + player.plane.x * camera_x,
        player.direction.y + player.plane.y * camera_x,
    )


def _axis_start(position: float, cell: int, raydir: float) -> tuple[int, float, float]:
    if raydir == 0:
        return (-1 if raydir < 0 else 1), math.inf, math.inf
    delta = abs(1 / raydir)
    if raydir < 0:
        return -1, (position - cell) * delta, delta
    return 1, (cell + 1.0 - position) * delta, delta


def cast_ray(player: Player, grid: Sequence[str], column: int, width: int) -> Ray:
    """Step cell by cell from the player until a wall is reached."""
    raydir = ray_direction(player, column, width)
    map_x = int(player.pos.x)
    map_y = int(player.pos.y)
    step_x, side_dist_x, delta_x = _axis_start(player.pos.x, map_x, raydir.x)
    step_y, side_dist_y, delta_y = _axis_start(player.pos.y, map_y, raydir.y)
    side = SIDE_X
    while True:
        if not (0 <= map_y < len(grid) and 0 <= map_x < len(grid[map_y])):
            raise ValueError(f"ray for column {column} left the map")
        if grid[map_y][map_x] == WALL:
            break
        if side_dist_x < side_dist_y:
            side_dist_x += delta_x
            map_x += step_x
            side = SIDE_X
        else:
            side_dist_y += delta_y
            map_y += step_y
            side = SIDE_Y
    return Ray(
        raydir_x=raydir.x,
        raydir_y=raydir.y,
        map_x=map_x,
        map_y=map_y,
        step_x=step_x,
        step_y=step_y,
        side=side,
    )


def _perp_distance(ray: Ray, player: Player) -> float:
    if ray.side == SIDE_X:
        return (ray.map_x - player.pos.x + (1 - ray.step_x) // 2) / ray.raydir_x
    return (ray.map_y - player.pos.y + (1 - ray.step_y) // 2) / ray.raydir_y


def wall_slice(ray: Ray, player: Player, height: int) -> WallSlice:
    """Height and clipped vertical extent of the wall hit by *ray*."""
    distance = _perp_distance(ray, player)
    wall_height = int(height / distance)
    half = height // 2
    return WallSlice(
        wall_height=wall_height,
        draw_start=max(0, -(wall_height // 2) + half),
        draw_end=min(height - 1, wall_height // 2 + half),
        perp_wall_dist=distance,
    )


def texture_index(ray: Ray) -> int:
    """Which of the four textures the wall face hit by *ray* uses."""
    if ray.side == SIDE_X:
        return 0 if ray.raydir_x > 0 else 1
    return 2 if ray.raydir_y > 0 else 3


def texture_column(ray: Ray, player: Player) -> int:
    """Column of the texture at the point where *ray* meets the wall."""
    distance = _perp_distance(ray, player)
    if ray.side == SIDE_X:
        wall_x = player.pos.y + distance * ray.raydir_y
    else:
        wall_x = player.pos.x + distance * ray.raydir_x
    wall_x -= math.floor(wall_x)
    tex_x = int(wall_x * TEX_SIZE)
    if (ray.side == SIDE_X and ray.raydir_x > 0) or (ray.side == SIDE_Y and ray.raydir_y < 0):
        tex_x = TEX_SIZE - tex_x - 1
    return tex_x


def build_texture(image: XpmImage) -> tuple[tuple[int, ...], ...]:
    """Scale the top-left 64x64 of *image* up to a 128x128 texture."""
    if image.width < _SOURCE_SIZE or image.height < _SOURCE_SIZE:
        raise ValueError(
            f"texture image must be at least {_SOURCE_SIZE}x{_SOURCE_SIZE}, "
            f"got {image.width}x{image.height}"
        )
    return tuple(
        tuple(image.pixel(x // 2, y // 2) for x in range(TEX_SIZE))
        for y in range(TEX_SIZE)
    )


def draw_background(frame: Frame, ceiling_color: int, floor_color: int) -> None:
    """Paint the upper half with the ceiling and the rest with the floor."""
    half = frame.height // 2
    for y in range(frame.height):
        frame._fill_row(y, ceiling_color if y < half else floor_color)


def _draw_column(frame: Frame, column: int, texture: Texture, tex_x: int, span: WallSlice) -> None:
    step = TEX_SIZE / span.wall_height
    tex_pos = (span.draw_start - frame.height // 2 + span.wall_height // 2) * step
    for y in range(span.draw_start, span.draw_end + 1):
        tex_y = int(tex_pos) & (TEX_SIZE - 1)
        tex_pos += step
        frame.put_pixel(column, y, texture[tex_y][tex_x])


def draw_walls(frame: Frame, player: Player, grid: Sequence[str], textures: Sequence[Texture]) -> None:
    """Cast one ray per column and draw the textured wall it hits."""
    for column in range(frame.width):
        ray = cast_ray(player, grid, column, frame.width)
        span = wall_slice(ray, player, frame.height)
        if span.wall_height <= 0:
            continue
        texture = textures[texture_index(ray)]
        _draw_column(frame, column, texture, texture_column(ray, player), span)


def render(
    frame: Frame,
    player: Player,
    grid: Sequence[str],
    textures: Sequence[Texture],
    ceiling_color: int,
    floor_color: int,
) -> Frame:
    """Draw background and walls into *frame* and return it."""
    draw_background(frame, ceiling_color, floor_color)
    draw_walls(frame, player, grid, textures)
    return frame