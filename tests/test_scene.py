import pytest

from cubcaster.scene import (
    CubError,
    Direction,
    Scene,
    TexturePaths,
    check_extension,
    check_texture_paths,
    find_player,
    load_scene,
    pad_map,
    parse_rgb,
    parse_scene,
    read_colors,
    read_textures,
    validate_components,
    validate_enclosure,
)


def _texture_files(tmp_path):
    paths = {}
    for name in ("north", "south", "west", "east"):
        path = tmp_path / f"{name}.xpm"
        path.write_text("texture")
        paths[name] = str(path)
    return paths


def _header(paths):
    return [
        f"NO {paths['north']}\n",
        f"SO {paths['south']}\n",
        f"WE {paths['west']}\n",
        f"EA {paths['east']}\n",
        "\n",
        "F 220,100,0\n",
        "C 225,30,0\n",
        "\n",
    ]


@pytest.mark.parametrize("name", ["map.cub", "maps/level.cub", "a.b.cub"])
def test_check_extension_accepts_cub(name):
    assert check_extension(name) == ".cub"


def test_check_extension_accepts_prefix_of_cub():
    assert check_extension("map.cu") == ".cu"


@pytest.mark.parametrize("name", ["map.txt", "map", "map.cubx", "map.cub.bak"])
def test_check_extension_rejects(name):
    with pytest.raises(CubError) as excinfo:
        check_extension(name)
    assert "Invalid file extension." in str(excinfo.value)


@pytest.mark.parametrize("rgb", [(0, 0, 0), (255, 255, 255), (12, 34, 56)])
def test_parse_rgb_channels_round_trip(rgb):
    value = parse_rgb("{},{},{}".format(*rgb))
    assert ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF) == rgb
    assert value <= 0xFFFFFF


def test_parse_rgb_trims_spaces_and_newlines():
    assert parse_rgb("  1,2,3 \n") == parse_rgb("1,2,3")


def test_parse_rgb_ignores_empty_pieces():
    assert parse_rgb("7,,8,9") == parse_rgb("7,8,9")


@pytest.mark.parametrize(
    "text", ["256,0,0", "1,2,3,4", "1,-2,3", "a,b,c", "1, 2,3", "1,2", ""]
)
def test_parse_rgb_rejects(text):
    with pytest.raises(CubError) as excinfo:
        parse_rgb(text)
    assert "Invalid map data." in str(excinfo.value)


def test_read_textures_reads_block_and_blank_line():
    lines = iter(["NO ./n.xpm\n", "SO  ./s.xpm \n", "WE ./w.xpm\n", "EA ./e.xpm\n", "\n", "rest"])
    paths = read_textures(lines)
    assert paths == TexturePaths(north="./n.xpm", south="./s.xpm", east="./e.xpm", west="./w.xpm")
    assert next(lines) == "rest"


def test_read_textures_stops_at_early_blank_line():
    lines = iter(["NO ./n.xpm\n", "\n", "rest"])
    paths = read_textures(lines)
    assert paths.north == "./n.xpm"
    assert paths.south is None
    assert next(lines) == "rest"


@pytest.mark.parametrize(
    "lines",
    [
        ["SO ./s.xpm\n", "NO ./n.xpm\n"],
        ["NO a\n", "SO b\n", "WE c\n", "EA d\n", "F 1,2,3\n"],
        ["NO a\n", "XX b\n"],
    ],
)
def test_read_textures_rejects_bad_order(lines):
    with pytest.raises(CubError) as excinfo:
        read_textures(lines)
    assert "Invalid map data." in str(excinfo.value)


def test_read_textures_rejects_end_of_file():
    with pytest.raises(CubError) as excinfo:
        read_textures(["NO a\n"])
    assert str(excinfo.value)


def test_check_texture_paths_rejects_missing_file(tmp_path):
    paths = _texture_files(tmp_path)
    textures = TexturePaths(
        north=paths["north"],
        south=paths["south"],
        east=str(tmp_path / "absent.xpm"),
        west=paths["west"],
    )
    with pytest.raises(CubError) as excinfo:
        check_texture_paths(textures)
    assert "Invalid image path." in str(excinfo.value)


def test_check_texture_paths_rejects_unset_path(tmp_path):
    paths = _texture_files(tmp_path)
    with pytest.raises(CubError) as excinfo:
        check_texture_paths(TexturePaths(north=paths["north"]))
    assert "Invalid image path." in str(excinfo.value)


def test_read_colors_in_any_order():
    lines = iter(["C 1,2,3\n", "F 4,5,6\n", "\n", "rest"])
    floor, ceiling = read_colors(lines)
    assert floor == parse_rgb("4,5,6")
    assert ceiling == parse_rgb("1,2,3")
    assert next(lines) == "rest"


def test_read_colors_takes_three_lines_without_blank():
    lines = iter(["F 1,2,3\n", "C 1,2,3\n", "F 9,9,9\n", "rest"])
    floor, ceiling = read_colors(lines)
    assert floor == parse_rgb("9,9,9")
    assert ceiling == parse_rgb("1,2,3")
    assert next(lines) == "rest"


def test_read_colors_rejects_unknown_line():
    with pytest.raises(CubError) as excinfo:
        read_colors(["X 1,2,3\n"])
    assert "Invalid map data." in str(excinfo.value)


@pytest.mark.parametrize(
    "rows",
    [["111", "101", "111"], ["1N1", "1S1"], ["1N1", "1x1"], []],
)
def test_validate_components_rejects(rows):
    with pytest.raises(CubError) as excinfo:
        validate_components(rows)
    assert "The map components are invalid." in str(excinfo.value)


def test_pad_map_gives_equal_widths():
    rows = ["1", "111", "11", ""]
    padded = pad_map(rows)
    assert {len(row) for row in padded} == {max(len(row) for row in rows)}
    assert [row.rstrip(" ") for row in padded] == rows


def test_find_player_returns_first_player():
    grid = ["1111", "10W1", "1111"]
    position, direction = find_player(grid)
    assert grid[position[1]][position[0]] == "W"
    assert direction is Direction.WEST


@pytest.mark.parametrize(
    "char, degrees",
    [("N", 270), ("S", 90), ("E", 0), ("W", 180)],
)
def test_find_player_direction_degrees(char, degrees):
    position, direction = find_player(["1" + char + "1"])
    assert position == (1, 0)
    assert direction.value == degrees


def test_validate_enclosure_visits_all_open_cells():
    grid = ["11111", "100N1", "10101", "11111"]
    visited = validate_enclosure(grid)
    walkable = {
        (x, y) for y, row in enumerate(grid) for x, char in enumerate(row) if char in "0N"
    }
    assert visited == walkable


def test_validate_enclosure_rejects_space_next_to_floor():
    with pytest.raises(CubError) as excinfo:
        validate_enclosure(pad_map(["1111", "10N", "1111"]))
    assert "The map structure is invalid." in str(excinfo.value)


def test_validate_enclosure_ignores_grid_edges():
    visited = validate_enclosure(["N0"])
    assert len(visited) == 2


def test_parse_scene_full(tmp_path):
    paths = _texture_files(tmp_path)
    lines = _header(paths) + ["1111\n", "10N1\n", "1111"]
    scene = parse_scene(lines)
    assert isinstance(scene, Scene)
    assert scene.grid == ["1111", "1001", "1111"]
    assert scene.player_pos == (2, 1)
    assert scene.player_direction is Direction.NORTH
    assert scene.floor_color == parse_rgb("220,100,0")
    assert scene.ceiling_color == parse_rgb("225,30,0")
    assert scene.textures.east == paths["east"]


def test_parse_scene_checks_textures_before_colors(tmp_path):
    paths = _texture_files(tmp_path)
    paths["south"] = str(tmp_path / "absent.xpm")
    lines = _header(paths)[:5] + ["garbage\n"]
    with pytest.raises(CubError) as excinfo:
        parse_scene(lines)
    assert "Invalid image path." in str(excinfo.value)


def test_parse_scene_rejects_open_map(tmp_path):
    lines = _header(_texture_files(tmp_path)) + ["1111\n", "10N1\n", "1 11\n"]
    with pytest.raises(CubError) as excinfo:
        parse_scene(lines)
    assert "The map structure is invalid." in str(excinfo.value)


def test_load_scene_reads_file(tmp_path):
    paths = _texture_files(tmp_path)
    cub = tmp_path / "level.cub"
    cub.write_text("".join(_header(paths) + ["111\n", "1E1\n", "111\n"]))
    scene = load_scene(cub)
    assert scene.player_direction is Direction.EAST
    assert scene.grid[1] == "101"


def test_load_scene_keeps_carriage_returns(tmp_path):
    paths = _texture_files(tmp_path)
    cub = tmp_path / "level.cub"
    cub.write_bytes("".join(_header(paths) + ["111\r\n", "1E1\r\n", "111\r\n"]).encode())
    with pytest.raises(CubError) as excinfo:
        load_scene(cub)
    assert "The map components are invalid." in str(excinfo.value)


def test_load_scene_missing_file(tmp_path):
    with pytest.raises(CubError) as excinfo:
        load_scene(tmp_path / "missing.cub")
    assert "Error opening file" in str(excinfo.value)


def test_load_scene_bad_extension(tmp_path):
    with pytest.raises(CubError) as excinfo:
        load_scene(tmp_path / "level.map")
    assert "Invalid file extension." in str(excinfo.value)