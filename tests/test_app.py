import pytest

from cubcaster.app import Game, Key, load_textures, main
from cubcaster.raycast import TEX_SIZE, Frame
from cubcaster.scene import CubError, Direction, Scene, TexturePaths

EAST_COLOR = 0x00AA0000
NORTH_COLOR = 0x0000BB00
WEST_COLOR = 0x000000CC
SOUTH_COLOR = 0x00DDDDDD
CEILING = 0x112233
FLOOR_COLOR = 0x445566


def _solid(color):
    return tuple(tuple(color for _ in range(TEX_SIZE)) for _ in range(TEX_SIZE))


def _scene(direction=Direction.EAST):
    grid = [
        "11111",
        "10001",
        "10001",
        "10001",
        "11111",
    ]
    return Scene(
        grid=grid,
        textures=TexturePaths(),
        floor_color=FLOOR_COLOR,
        ceiling_color=CEILING,
        player_pos=(2, 2),
        player_direction=direction,
    )


def _game(direction=Direction.EAST):
    textures = [_solid(EAST_COLOR), _solid(NORTH_COLOR), _solid(WEST_COLOR), _solid(SOUTH_COLOR)]
    return Game(_scene(direction), textures, Frame())


def _write_xpm(path, size, color_hex):
    rows = ",\n".join(f'"{"." * size}"' for _ in range(size))
    path.write_text(
        "/* XPM */\nstatic char *img[] = {\n"
        f'"{size} {size} 1 1",\n'
        f'". c #{color_hex}",\n'
        f"{rows}\n}};\n"
    )
    return str(path)


def test_redraw_paints_ceiling_floor_and_wall():
    game = _game()
    frame = game.redraw()
    assert frame.pixels[0] == CEILING
    assert frame.pixels[(frame.height - 1) * frame.width] == FLOOR_COLOR
    center = (frame.height // 2) * frame.width + frame.width // 2
    assert frame.pixels[center] == EAST_COLOR


def test_forward_key_moves_player_and_keeps_running():
    game = _game()
    start_x = game.player.pos.x
    assert game.handle_key(Key.W) is True
    assert game.player.pos.x == pytest.approx(start_x + 0.1)
    assert game.player.pos.y == pytest.approx(2.5)


def test_backward_key_moves_player_back():
    game = _game()
    start_x = game.player.pos.x
    assert game.handle_key(Key.S) is True
    assert game.player.pos.x == pytest.approx(start_x - 0.1)


def test_escape_ends_game_without_moving():
    game = _game()
    before = game.player.pos
    assert game.handle_key(Key.ESC) is False
    assert game.player.pos == before


def test_rotate_keys_change_degree():
    game = _game()
    game.handle_key(Key.LEFT)
    assert game.player.degree == pytest.approx(357.0)
    game.handle_key(Key.RIGHT)
    game.handle_key(Key.RIGHT)
    assert game.player.degree == pytest.approx(3.0)


def test_unknown_key_redraws_without_moving():
    game = _game()
    before = game.player.pos
    assert game.handle_key(None) is True
    assert game.player.pos == before
    assert game.frame.pixels[0] == CEILING


def test_load_textures_orders_east_north_west_south(tmp_path):
    paths = TexturePaths(
        north=_write_xpm(tmp_path / "n.xpm", 64, "00BB00"),
        south=_write_xpm(tmp_path / "s.xpm", 64, "DDDDDD"),
        east=_write_xpm(tmp_path / "e.xpm", 64, "AA0000"),
        west=_write_xpm(tmp_path / "w.xpm", 64, "0000CC"),
    )
    textures = load_textures(paths)
    assert [t[0][0] for t in textures] == [EAST_COLOR, NORTH_COLOR, WEST_COLOR, SOUTH_COLOR]
    assert all(len(t) == TEX_SIZE and len(t[TEX_SIZE - 1]) == TEX_SIZE for t in textures)


def test_load_textures_missing_file_raises(tmp_path):
    good = _write_xpm(tmp_path / "ok.xpm", 64, "FFFFFF")
    paths = TexturePaths(north=good, south=good, east=str(tmp_path / "absent.xpm"), west=good)
    with pytest.raises(CubError):
        load_textures(paths)


def test_load_textures_too_small_raises(tmp_path):
    small = _write_xpm(tmp_path / "small.xpm", 8, "FFFFFF")
    paths = TexturePaths(north=small, south=small, east=small, west=small)
    with pytest.raises(CubError):
        load_textures(paths)


def test_main_without_argument_reports_error(capsys):
    assert main([]) == 1
    assert "Argument error." in capsys.readouterr().err


def test_main_rejects_wrong_extension(capsys):
    assert main(["scene.txt"]) == 1
    assert "Invalid file extension." in capsys.readouterr().err


def test_main_reports_unopenable_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.cub")]) == 1
    assert "Error opening file" in capsys.readouterr().err


def test_main_reports_invalid_scene(tmp_path, capsys):
    scene = tmp_path / "bad.cub"
    scene.write_text("XX nothing\n")
    assert main([str(scene)]) == 1
    assert "Invalid map data." in capsys.readouterr().err