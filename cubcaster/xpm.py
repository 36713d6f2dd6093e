"""Loading of XPM images used as wall textures."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from .colornames import text_to_rgb

TRANSPARENT = -1
TRANSPARENT_PIXEL = 0xFF000000

_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_QUOTED = re.compile(r'"([^"]*)"')


class XpmError(ValueError):
    """An XPM image that cannot be read."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded image: rows of ``0xAARRGGBB`` pixel values."""

    width: int
    height: int
    rows: tuple[tuple[int, ...], ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the pixel at column *x*, row *y*."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.rows[y][x]


def _blank_comments(text: str, opener: str, closer: str) -> str:
    pieces: list[str] = []
    quoted = False
    start = 0
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char == '"':
            quoted = not quoted
        if not quoted and text.startswith(opener, index):
            end = text.find(closer, index + len(opener))
            if end == -1:
                end = index + 1
            stop = min(end + len(closer), length)
            pieces.append(text[start:index])
            pieces.append(" " * (stop - index))
            index = start = stop
            continue
        index += 1
    pieces.append(text[start:])
    return "".join(pieces)


def strip_comments(text: str) -> str:
    """Replace ``/* */`` and ``//`` comments outside strings by spaces.

    The text keeps its length; a line comment takes its newline with it.
    """
    text = _blank_comments(text, "/*", "*/")
    return _blank_comments(text, "//", "\n")


def split_words(line: str) -> list[str]:
    """Split *line* on runs of spaces and tabs."""
    return [word for word in line.replace("\t", " ").split(" ") if word]


def extract_strings(text: str) -> list[str]:
    """Return the contents of the double-quoted strings in *text*, in order."""
    return _QUOTED.findall(text)


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _next(lines: Iterator[str]) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise XpmError("unexpected end of XPM data") from None


def _store(color: int) -> int:
    if color == TRANSPARENT:
        return TRANSPARENT_PIXEL
    return color & 0xFFFFFFFF


def parse_xpm(lines: Iterable[str]) -> XpmImage:
    """Decode an image from the strings of an XPM file."""
    lines = iter(lines)
    header = split_words(_next(lines))
    if len(header) < 4:
        raise XpmError("incomplete XPM header")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError("invalid XPM header")

    colors: dict[str, int] = {}
    for _ in range(ncolors):
        line = _next(lines)
        words = split_words(line[cpp:])
        try:
            index = words.index("c") + 1
        except ValueError:
            raise XpmError("colour definition without 'c' key") from None
        if index >= len(words):
            raise XpmError("colour definition without a value")
        suffix = words[index + 1] if index + 1 < len(words) else None
        color = text_to_rgb(words[index], suffix)
        key = line[:cpp]
        if cpp <= 2:
            colors[key] = color
        else:
            colors.setdefault(key, color)

    rows = []
    for _ in range(height):
        line = _next(lines)
        rows.append(
            tuple(
                _store(colors.get(line[x * cpp:(x + 1) * cpp], 0))
                for x in range(width)
            )
        )
    return XpmImage(width=width, height=height, rows=tuple(rows))


def load_xpm(path: str | os.PathLike) -> XpmImage:
    """Read and decode the XPM file at *path*."""
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read {os.fspath(path)!r}") from exc
    text = strip_comments(data.decode("latin-1"))
    return parse_xpm(extract_strings(text))