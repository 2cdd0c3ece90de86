from collections import deque

import numpy as np

from flowlines.grid import DOT, PATH, pack, unpack


def is_connected(grid, start, goal, color_idx):
    """
    Breadth-first search from `start` to `goal` over cells of one color.

    Only DOT and PATH cells carrying `color_idx` are traversed; empty cells
    and any other color stop the search. Each cell is visited at most once,
    keyed by its packed `row * size + col` index.
    """
    size = grid.size
    passable = ((grid.kinds == DOT) | (grid.kinds == PATH)) & (grid.colors == color_idx)
    passable = passable.ravel()

    start_key = pack(start[0], start[1], size)
    goal_key = pack(goal[0], goal[1], size)
    if not passable[start_key] or not passable[goal_key]:
        return False

    visited = np.zeros(size * size, dtype=bool)
    visited[start_key] = True
    q = deque([start_key])

    while q:
        key = q.popleft()
        if key == goal_key:
            return True

        row, col = unpack(key, size)
        for nr, nc in grid.neighbors(row, col):
            nkey = pack(nr, nc, size)
            if not visited[nkey] and passable[nkey]:
                visited[nkey] = True
                q.append(nkey)

    return False


def is_pair_connected(grid, pair):
    first, second = pair.endpoints
    return is_connected(grid, first, second, pair.index)


def connected_colors(grid, pairs):
    return {pair.index for pair in pairs if is_pair_connected(grid, pair)}
