import pytest

from cubcaster.colornames import lookup_color, text_to_rgb


@pytest.mark.parametrize(
    "name, expected",
    [
        ("red", 0xFF0000),
        ("snow", 0xFFFAFA),
        ("navy", 0x80),
        ("gray50", 0x7F7F7F),
        ("lightgreen", 0x90EE90),
    ],
)
def test_lookup_known_names(name, expected):
    assert lookup_color(name) == expected


def test_lookup_ignores_case():
    assert lookup_color("ReD") == lookup_color("red")
    assert lookup_color("GHOST WHITE") == 0xF8F8FF


def test_lookup_duplicate_name_uses_first_entry():
    assert lookup_color("dark slate") == 0x2F4F4F
    assert lookup_color("light slate") == 0x778899
    assert lookup_color("light goldenrod") == 0xFAFAD2


def test_lookup_none_is_transparent_marker():
    assert lookup_color("none") == -1


def test_lookup_unknown_returns_none():
    assert lookup_color("not a colour") is None
    assert lookup_color("") is None


def test_text_hash_is_hexadecimal():
    assert text_to_rgb("#ff8000") == 0xFF8000
    assert text_to_rgb("#00FF00", "ignored") == 0x00FF00


def test_text_hash_without_digits_is_zero():
    assert text_to_rgb("#") == 0
    assert text_to_rgb("#zz") == 0


def test_text_hash_stops_at_first_non_hex_digit():
    assert text_to_rgb("#abcxyz") == 0xABC


def test_text_hash_wraps_to_signed_32_bits():
    assert text_to_rgb("#FF000000") == 0xFF000000 - (1 << 32)


def test_text_joins_suffix_with_space():
    assert text_to_rgb("light", "blue") == 0xADD8E6
    assert text_to_rgb("navy", "blue") == lookup_color("navy blue")


def test_text_unknown_name_gives_black():
    assert text_to_rgb("no such colour") == 0
    assert text_to_rgb("light", "nothing") == 0


def test_text_matches_lookup_for_known_names():
    for name in ("white", "Black", "Dodger Blue", "grey100", "none"):
        assert text_to_rgb(name) == lookup_color(name)


def test_text_truncates_long_combined_name():
    long_name = "x" * 70
    assert text_to_rgb(long_name, "red") == 0
    assert text_to_rgb("red", "") == 0