from flowlines.connectivity import is_pair_connected


def is_full(grid):
    return grid.count_empty() == 0


def connected_pairs(grid, pairs):
    return sum(1 for pair in pairs if is_pair_connected(grid, pair))


def fill_percent(grid):
    # halves round up: 2 of 16 cells is 13%
    total = grid.size * grid.size
    return (200 * grid.count_filled() + total) // (2 * total)


def evaluate(grid, pairs):
    """
    A puzzle is solved only when every pair is connected AND no cell is
    left empty. Connecting the dots through short paths is not enough.
    """
    if not is_full(grid):
        return False
    return all(is_pair_connected(grid, pair) for pair in pairs)
