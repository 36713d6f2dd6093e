"""Reading and validating ``.cub`` scene descriptions.

A scene file holds, in this order: four texture lines (``NO``, ``SO``,
``WE``, ``EA``) closed by a blank line, up to three colour lines (``F``
and ``C``) closed by a blank line, and the map itself up to the end of
the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator

WALL = "1"
FLOOR = "0"
VOID = " "

_MAP_CHARS = frozenset("10 NSEW")
_PLAYER_CHARS = frozenset("NSEW")
_WALKABLE = frozenset("0NSEW")
_DIGITS = frozenset("0123456789")
_STEPS = ((-1, 0), (1, 0), (0, -1), (0, 1))
_TEXTURE_KEYS = (("NO ", "north"), ("SO ", "south"), ("WE ", "west"), ("EA ", "east"))

_INVALID_DATA = "Invalid map data."
_INVALID_COMPONENTS = "The map components are invalid."
_INVALID_STRUCTURE = "The map structure is invalid."
_INVALID_IMAGE_PATH = "Invalid image path."


class CubError(Exception):
    """A scene file that cannot be used."""


class Direction(IntEnum):
    """Facing of the player in degrees; y grows downwards."""

    EAST = 0
    SOUTH = 90
    WEST = 180
    NORTH = 270


_DIRECTIONS = {
    "E": Direction.EAST,
    "S": Direction.SOUTH,
    "W": Direction.WEST,
    "N": Direction.NORTH,
}


@dataclass
class TexturePaths:
    """Paths of the four wall textures."""

    north: str | None = None
    south: str | None = None
    east: str | None = None
    west: str | None = None


@dataclass
class Scene:
    """A fully parsed and validated scene."""

    grid: list[str]
    textures: TexturePaths
    floor_color: int
    ceiling_color: int
    player_pos: tuple[int, int]
    player_direction: Direction


def check_extension(filename: str | os.PathLike) -> str:
    """Return the extension of *filename*, raising unless it fits ``.cub``.

    Everything from the last dot on counts as the extension, and any
    leading part of ``.cub`` is accepted.
    """
    name = os.fspath(filename)
    dot = name.rfind(".")
    if dot >= 0:
        extension = name[dot:]
        if ".cub".startswith(extension):
            return extension
    raise CubError("Invalid file extension.")


def parse_rgb(text: str) -> int:
    """Turn ``"R,G,B"`` into a packed ``0xRRGGBB`` integer."""
    pieces = [piece for piece in text.strip(" \n").split(",") if piece]
    channels = []
    for index, piece in enumerate(pieces):
        if index > 2:
            raise CubError(_INVALID_DATA)
        if not set(piece) <= _DIGITS:
            raise CubError(_INVALID_DATA)
        value = int(piece)
        if value > 255:
            raise CubError(_INVALID_DATA)
        channels.append(value)
    if len(channels) != 3:
        raise CubError(_INVALID_DATA)
    red, green, blue = channels
    return (red << 16) | (green << 8) | blue


def _next_line(lines: Iterator[str]) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise CubError("Unexpected end of file.") from None


def read_textures(lines: Iterable[str]) -> TexturePaths:
    """Read the texture block, including the blank line that ends it."""
    lines = iter(lines)
    paths = TexturePaths()
    for index in range(len(_TEXTURE_KEYS) + 1):
        line = _next_line(lines)
        if index < len(_TEXTURE_KEYS) and line.startswith(_TEXTURE_KEYS[index][0]):
            setattr(paths, _TEXTURE_KEYS[index][1], line[3:].strip(" \n"))
        elif line.startswith("\n"):
            break
        else:
            raise CubError(_INVALID_DATA)
    return paths


def check_texture_paths(paths: TexturePaths) -> None:
    """Raise unless every texture path can be opened for reading."""
    for path in (paths.north, paths.south, paths.west, paths.east):
        if path is None:
            raise CubError(_INVALID_IMAGE_PATH)
        try:
            descriptor = os.open(path, os.O_RDONLY)
        except (OSError, ValueError):
            raise CubError(_INVALID_IMAGE_PATH) from None
        os.close(descriptor)


def read_colors(lines: Iterable[str]) -> tuple[int, int]:
    """Read up to three colour lines; return ``(floor, ceiling)``.

    A blank line ends the block early. Colours not given stay black.
    """
    lines = iter(lines)
    floor = ceiling = 0
    for _ in range(3):
        line = _next_line(lines)
        if line.startswith("F "):
            floor = parse_rgb(line[2:])
        elif line.startswith("C "):
            ceiling = parse_rgb(line[2:])
        elif line.startswith("\n"):
            break
        else:
            raise CubError(_INVALID_DATA)
    return floor, ceiling


def validate_components(rows: Iterable[str]) -> None:
    """Raise unless the map uses only known cells and has one player."""
    players = 0
    for row in rows:
        for char in row:
            if char not in _MAP_CHARS:
                raise CubError(_INVALID_COMPONENTS)
            if char in _PLAYER_CHARS:
                players += 1
    if players != 1:
        raise CubError(_INVALID_COMPONENTS)


def pad_map(rows: Iterable[str]) -> list[str]:
    """Pad every row with spaces to the width of the widest one."""
    rows = list(rows)
    width = max((len(row) for row in rows), default=0)
    return [row.ljust(width, VOID) for row in rows]


def find_player(grid: list[str]) -> tuple[tuple[int, int], Direction]:
    """Return the position and facing of the first player cell."""
    for y, row in enumerate(grid):
        for x, char in enumerate(row):
            if char in _PLAYER_CHARS:
                return (x, y), _DIRECTIONS[char]
    raise CubError(_INVALID_COMPONENTS)


def _cell(grid: list[str], x: int, y: int) -> str | None:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    return None


def _flood(grid: list[str], start: tuple[int, int], visited: set[tuple[int, int]]) -> None:
    stack = [start]
    while stack:
        x, y = stack.pop()
        if (x, y) in visited or _cell(grid, x, y) not in _WALKABLE:
            continue
        visited.add((x, y))
        for dx, dy in _STEPS:
            neighbour = _cell(grid, x + dx, y + dy)
            if neighbour is None:
                continue
            if neighbour == VOID:
                raise CubError(_INVALID_STRUCTURE)
            stack.append((x + dx, y + dy))


def validate_enclosure(grid: list[str]) -> frozenset[tuple[int, int]]:
    """Raise if an open cell reachable from a floor cell touches a space.

    Returns the set of ``(x, y)`` cells that were explored.
    """
    visited: set[tuple[int, int]] = set()
    for y, row in enumerate(grid):
        for x, char in enumerate(row):
            if char == FLOOR and (x, y) not in visited:
                _flood(grid, (x, y), visited)
    return frozenset(visited)


def parse_scene(lines: Iterable[str]) -> Scene:
    """Parse a whole scene from an iterable of lines with their newlines."""
    lines = iter(lines)
    textures = read_textures(lines)
    check_texture_paths(textures)
    floor, ceiling = read_colors(lines)
    rows = [line.strip("\n") for line in lines]
    validate_components(rows)
    grid = pad_map(rows)
    (x, y), direction = find_player(grid)
    validate_enclosure(grid)
    grid[y] = grid[y][:x] + FLOOR + grid[y][x + 1:]
    return Scene(
        grid=grid,
        textures=textures,
        floor_color=floor,
        ceiling_color=ceiling,
        player_pos=(x, y),
        player_direction=direction,
    )


def load_scene(filename: str | os.PathLike) -> Scene:
    """Check, open and parse a ``.cub`` file."""
    check_extension(filename)
    try:
        handle = open(filename, encoding="utf-8", errors="surrogateescape", newline="\n")
    except OSError as exc:
        raise CubError("Error opening file") from exc
    with handle:
        return parse_scene(handle)