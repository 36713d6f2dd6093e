"""The player: position, facing and camera plane, with movement."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from .scene import FLOOR

if TYPE_CHECKING:
    from .scene import Scene

P_SPEED = 0.1
P_ANGULAR_SPEED = 3.0
PLANE_SCALE = 0.66


@dataclass(frozen=True)
class Vector:
    """A 2D vector."""

    x: float
    y: float


def degree_to_vector(degree: float) -> Vector:
    """Unit vector pointing *degree* degrees from east (y downwards)."""
    radians = degree * math.pi / 180
    return Vector(math.cos(radians), math.sin(radians))


def dir_to_plane(direction: Vector) -> Vector:
    """Camera plane perpendicular to *direction*."""
    return Vector(-direction.y * PLANE_SCALE, direction.x * PLANE_SCALE)


@dataclass
class Player:
    """Where the player stands and where it looks."""

    pos: Vector
    direction: Vector
    plane: Vector
    degree: float

    @classmethod
    def from_scene(cls, scene: Scene) -> Player:
        """Place the player at the centre of its start cell."""
        degree = float(scene.player_direction)
        direction = degree_to_vector(degree)
        x, y = scene.player_pos
        return cls(
            pos=Vector(x + 0.5, y + 0.5),
            direction=direction,
            plane=dir_to_plane(direction),
            degree=degree,
        )

    def _walk(self, grid: Sequence[str], dx: float, dy: float) -> None:
        x = self.pos.x + dx * P_SPEED
        if grid[int(self.pos.y)][int(x)] == FLOOR:
            self.pos = Vector(x, self.pos.y)
        y = self.pos.y + dy * P_SPEED
        if grid[int(y)][int(self.pos.x)] == FLOOR:
            self.pos = Vector(self.pos.x, y)

    def move_forward(self, grid: Sequence[str]) -> None:
        """Step along the facing, axis by axis, unless blocked."""
        self._walk(grid, self.direction.x, self.direction.y)

    def move_backward(self, grid: Sequence[str]) -> None:
        """Step against the facing."""
        self._walk(grid, -self.direction.x, -self.direction.y)

    def move_left(self, grid: Sequence[str]) -> None:
        """Strafe to the left of the facing."""
        self._walk(grid, self.direction.y, -self.direction.x)

    def move_right(self, grid: Sequence[str]) -> None:
        """Strafe to the right of the facing."""
        self._walk(grid, -self.direction.y, self.direction.x)

    def _face(self, degree: float) -> None:
        self.degree = degree
        self.direction = degree_to_vector(degree)
        self.plane = dir_to_plane(self.direction)

    def rotate_left(self) -> None:
        """Turn anticlockwise on screen, keeping the angle in (0, 360]."""
        degree = self.degree - P_ANGULAR_SPEED
        if degree <= 0:
            degree += 360
        self._face(degree)

    def rotate_right(self) -> None:
        """Turn clockwise on screen, keeping the angle in [0, 360)."""
        degree = self.degree + P_ANGULAR_SPEED
        if degree >= 360:
            degree -= 360
        self._face(degree)