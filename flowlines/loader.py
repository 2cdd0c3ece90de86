import json
import logging
from collections import namedtuple

import numpy as np

from flowlines.grid import Grid, EMPTY, DOT, NO_COLOR, pack


logger = logging.getLogger(__name__)


class InvalidPuzzle(ValueError):
    """Raised when a puzzle description is malformed or contradictory."""


# endpoints are (row, col) tuples; color is the palette name
ColorPair = namedtuple("ColorPair", ["color", "index", "endpoints"])


def _as_int(value, what):
    # bool is an int subclass but never a valid coordinate or size
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidPuzzle(f"{what} must be an integer, got {value!r}")
    return int(value)


def _read_point(entry, key, what):
    point = entry.get(key)
    if not isinstance(point, (list, tuple)) or len(point) != 2:
        raise InvalidPuzzle(f"{what} must be an (x, y) pair, got {point!r}")
    return _as_int(point[0], f"{what} x"), _as_int(point[1], f"{what} y")


def _endpoints_xy(entry, color):
    """Pull the two (x, y) endpoints out of either description format."""
    if "start" in entry or "end" in entry:
        start = _read_point(entry, "start", f"{color} start")
        end = _read_point(entry, "end", f"{color} end")
        return start, end

    missing = [k for k in ("start_x", "start_y", "end_x", "end_y") if k not in entry]
    if missing:
        raise InvalidPuzzle(f"color {color!r} is missing {', '.join(missing)}")
    start = (_as_int(entry["start_x"], f"{color} start_x"), _as_int(entry["start_y"], f"{color} start_y"))
    end = (_as_int(entry["end_x"], f"{color} end_x"), _as_int(entry["end_y"], f"{color} end_y"))
    return start, end


def parse_description(description):
    """
    Normalize a puzzle description into `(size, pairs)`.

    The description uses screen axes, `(x, y)` = `(col, row)`. This is the
    one place the axes are swapped: every ColorPair endpoint comes out as
    `(row, col)`.
    """
    if isinstance(description, (str, bytes)):
        try:
            description = json.loads(description)
        except json.JSONDecodeError as e:
            raise InvalidPuzzle(f"puzzle description is not valid JSON: {e}") from e

    if not isinstance(description, dict):
        raise InvalidPuzzle(f"puzzle description must be a mapping, got {type(description).__name__}")
    if "size" not in description:
        raise InvalidPuzzle("puzzle description has no size")
    size = _as_int(description["size"], "size")
    if size <= 0:
        raise InvalidPuzzle(f"size must be positive, got {size}")

    entries = description.get("colors")
    if not isinstance(entries, (list, tuple)) or not entries:
        raise InvalidPuzzle("puzzle description needs a non-empty colors list")

    pairs = []
    owners = {}
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidPuzzle(f"colors[{idx}] must be a mapping")
        color = entry.get("color")
        if not isinstance(color, str) or not color:
            raise InvalidPuzzle(f"colors[{idx}] has no color name")
        if any(p.color == color for p in pairs):
            raise InvalidPuzzle(f"color {color!r} is listed twice")

        endpoints = []
        for x, y in _endpoints_xy(entry, color):
            row, col = y, x
            if not (0 <= row < size and 0 <= col < size):
                raise InvalidPuzzle(f"{color} endpoint (x={x}, y={y}) is outside a {size}x{size} grid")
            endpoints.append((row, col))

        if endpoints[0] == endpoints[1]:
            raise InvalidPuzzle(f"{color} endpoints coincide at {endpoints[0]}")
        for row, col in endpoints:
            key = pack(row, col, size)
            if key in owners:
                raise InvalidPuzzle(f"{color} and {owners[key]} share the endpoint {(row, col)}")
            owners[key] = color

        pairs.append(ColorPair(color, idx, tuple(endpoints)))

    return size, tuple(pairs)


def build_grid(size, pairs):
    kinds = np.full((size, size), EMPTY, dtype=np.int8)
    colors = np.full((size, size), NO_COLOR, dtype=np.int16)
    for pair in pairs:
        for row, col in pair.endpoints:
            kinds[row, col] = DOT
            colors[row, col] = pair.index
    return Grid(kinds, colors, [p.color for p in pairs])


def load_grid(description):
    """Return the initial Grid and the ColorPair tuple for a description."""
    size, pairs = parse_description(description)
    grid = build_grid(size, pairs)
    logger.info(f"Loaded {size}x{size} puzzle with {len(pairs)} color pairs")
    return grid, pairs
