"""The game window: loading textures, handling keys and drawing frames."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Sequence

from .player import Player
from .raycast import Frame, Texture, build_texture, render
from .scene import CubError, Scene, TexturePaths, load_scene
from .xpm import XpmError, load_xpm

WINDOW_TITLE = "cub3d"


class Key(IntEnum):
    """Key codes the game reacts to."""

    ESC = 53
    W = 13
    A = 0
    S = 1
    D = 2
    LEFT = 123
    RIGHT = 124


def load_textures(paths: TexturePaths) -> list[Texture]:
    """Load the wall textures in the order east, north, west, south."""
    textures: list[Texture] = []
    for path in (paths.east, paths.north, paths.west, paths.south):
        if path is None:
            raise CubError("xpm file to image failed")
        try:
            textures.append(build_texture(load_xpm(path)))
        except (XpmError, ValueError) as exc:
            raise CubError("xpm file to image failed") from exc
    return textures


class Game:
    """The state of a running game: map, player, textures and frame."""

    def __init__(
        self,
        scene: Scene,
        textures: Sequence[Texture],
        frame: Frame | None = None,
    ) -> None:
        self.scene = scene
        self.grid = scene.grid
        self.player = Player.from_scene(scene)
        self.textures = list(textures)
        self.frame = frame if frame is not None else Frame()

    def redraw(self) -> Frame:
        """Render the current view into the frame and return it."""
        return render(
            self.frame,
            self.player,
            self.grid,
            self.textures,
            self.scene.ceiling_color,
            self.scene.floor_color,
        )

    def handle_key(self, key: int | None) -> bool:
        """React to a key press; return ``False`` when the game should end.

        Any key other than escape leads to a redraw, known or not.
        """
        if key == Key.ESC:
            return False
        actions = {
            Key.W: lambda: self.player.move_forward(self.grid),
            Key.S: lambda: self.player.move_backward(self.grid),
            Key.A: lambda: self.player.move_left(self.grid),
            Key.D: lambda: self.player.move_right(self.grid),
            Key.LEFT: self.player.rotate_left,
            Key.RIGHT: self.player.rotate_right,
        }
        action = actions.get(key) if key is not None else None
        if action is not None:
            action()
        self.redraw()
        return True


def _frame_to_rgb(frame: Frame) -> bytes:
    pixels = frame.pixels[:]
    if sys.byteorder == "little":
        pixels.byteswap()
    packed = pixels.tobytes()
    rgb = bytearray(len(packed) // 4 * 3)
    rgb[0::3] = packed[1::4]
    rgb[1::3] = packed[2::4]
    rgb[2::3] = packed[3::4]
    return bytes(rgb)


def run(scene: Scene) -> None:
    """Open a window on *scene* and play until it is closed."""
    textures = load_textures(scene.textures)
    game = Game(scene, textures)

    import pygame

    keymap = {
        pygame.K_ESCAPE: Key.ESC,
        pygame.K_w: Key.W,
        pygame.K_a: Key.A,
        pygame.K_s: Key.S,
        pygame.K_d: Key.D,
        pygame.K_LEFT: Key.LEFT,
        pygame.K_RIGHT: Key.RIGHT,
    }
    size = (game.frame.width, game.frame.height)

    pygame.init()
    try:
        screen = pygame.display.set_mode(size)
        pygame.display.set_caption(WINDOW_TITLE)

        def show() -> None:
            surface = pygame.image.frombuffer(_frame_to_rgb(game.frame), size, "RGB")
            screen.blit(surface, (0, 0))
            pygame.display.flip()

        game.redraw()
        show()
        while True:
            event = pygame.event.wait()
            if event.type == pygame.QUIT:
                break
            if event.type == pygame.KEYDOWN:
                if not game.handle_key(keymap.get(event.key)):
                    break
                show()
    finally:
        pygame.quit()


def _report(message: str) -> None:
    print(f"Error cub3d: {message}", file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game on the scene file named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        _report("Argument error.")
        return 1
    try:
        scene = load_scene(args[0])
        run(scene)
    except CubError as exc:
        _report(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())