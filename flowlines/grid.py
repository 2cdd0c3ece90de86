import numpy as np
from collections import namedtuple


EMPTY, DOT, PATH = 0, 1, 2
NO_COLOR = -1

# color is the palette name, or None for an empty cell
Cell = namedtuple("Cell", ["kind", "color"])


def pack(row, col, size):
    return row * size + col


def unpack(key, size):
    return divmod(key, size)


def is_adjacent(a, b):
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


class Grid:
    """
    Square board of cells, stored as two numpy matrices.

    `kinds[r, c]` is one of EMPTY / DOT / PATH and `colors[r, c]` indexes
    into `palette` (NO_COLOR for empty cells). A Grid never changes after
    construction: the arrays are flagged read-only, and every edit returns
    a new Grid sharing the palette.
    """

    def __init__(self, kinds, colors, palette):
        kinds = np.array(kinds, dtype=np.int8)
        colors = np.array(colors, dtype=np.int16)
        if kinds.ndim != 2 or kinds.shape[0] != kinds.shape[1]:
            raise ValueError(f"grid must be square, got shape {kinds.shape}")
        if kinds.shape != colors.shape:
            raise ValueError(f"kinds {kinds.shape} and colors {colors.shape} differ in shape")
        kinds.flags.writeable = False
        colors.flags.writeable = False
        self.kinds = kinds
        self.colors = colors
        self.palette = tuple(palette)

    @classmethod
    def blank(cls, size, palette=()):
        kinds = np.full((size, size), EMPTY, dtype=np.int8)
        colors = np.full((size, size), NO_COLOR, dtype=np.int16)
        return cls(kinds, colors, palette)

    @property
    def size(self):
        return self.kinds.shape[0]

    def in_bounds(self, row, col):
        return 0 <= row < self.size and 0 <= col < self.size

    def kind_at(self, row, col):
        return int(self.kinds[row, col])

    def color_at(self, row, col):
        return int(self.colors[row, col])

    def cell(self, row, col):
        kind = self.kind_at(row, col)
        if kind == EMPTY:
            return Cell(EMPTY, None)
        return Cell(kind, self.palette[self.color_at(row, col)])

    def neighbors(self, row, col):
        for dr, dc in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
            nr, nc = row + dr, col + dc
            if 0 <= nr < self.size and 0 <= nc < self.size:
                yield nr, nc

    # --- Derived snapshots ---

    def with_cells(self, updates):
        """Return a new Grid with `{(row, col): (kind, color_idx)}` applied."""
        kinds = self.kinds.copy()
        colors = self.colors.copy()
        for (row, col), (kind, color_idx) in updates.items():
            kinds[row, col] = kind
            colors[row, col] = NO_COLOR if kind == EMPTY else color_idx
        return Grid(kinds, colors, self.palette)

    def without_paths(self, color_indices):
        """Return a new Grid with every PATH cell of the given colors emptied."""
        mask = (self.kinds == PATH) & np.isin(self.colors, list(color_indices))
        if not mask.any():
            return self
        kinds = self.kinds.copy()
        colors = self.colors.copy()
        kinds[mask] = EMPTY
        colors[mask] = NO_COLOR
        return Grid(kinds, colors, self.palette)

    # --- Queries ---

    def path_cells(self, color_idx):
        rows, cols = np.nonzero((self.kinds == PATH) & (self.colors == color_idx))
        return list(zip(rows.tolist(), cols.tolist()))

    def count_empty(self):
        return int(np.count_nonzero(self.kinds == EMPTY))

    def count_filled(self):
        return self.size * self.size - self.count_empty()

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.palette == other.palette
                and np.array_equal(self.kinds, other.kinds)
                and np.array_equal(self.colors, other.colors))

    def __hash__(self):
        return hash((self.palette, self.kinds.tobytes(), self.colors.tobytes()))

    def __repr__(self):
        return f"Grid(size={self.size}, colors={len(self.palette)})"

    def render_text(self):
        """Rows of characters: '.' empty, uppercase initial for dots, lowercase for paths."""
        lines = []
        for row in range(self.size):
            chars = []
            for col in range(self.size):
                kind = self.kind_at(row, col)
                if kind == EMPTY:
                    chars.append(".")
                else:
                    letter = self.palette[self.color_at(row, col)][:1] or "?"
                    chars.append(letter.upper() if kind == DOT else letter.lower())
            lines.append("".join(chars))
        return "\n".join(lines)
